"""
dynastysim/entity_factory.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Constructors for new world entities with randomized attributes.

None of these functions register what they build; the caller owns
insertion into the ``GameState`` tables.
"""

from __future__ import annotations

import logging
import random

from dynastysim.models import (
    Character,
    CoatOfArms,
    CultureId,
    Dynasty,
    Holding,
    PortraitData,
    Sex,
    Skills,
    SuccessionLaw,
    Title,
    TitleRank,
    TraitId,
)
from dynastysim.world_data import (
    CULTURES,
    DEFAULT_MOTTO,
    HERALDRY_PRIMARY_COLORS,
    HERALDRY_SECONDARY_COLORS,
    HERALDRY_SYMBOL_COUNT,
    TRAITS,
)
from utils.utils import generate_id

logger = logging.getLogger(__name__)

FALLBACK_NAMES = {Sex.MALE: "John", Sex.FEMALE: "Mary"}


# ------------------------------------------------------------------
#  Random attribute helpers
# ------------------------------------------------------------------

def generate_name(culture: CultureId, sex: Sex, rng=None) -> str:
    """Return a random given name from the culture's pool for ``sex``."""
    rng = rng or random
    culture_data = CULTURES.get(culture)
    if culture_data is None:
        logger.warning("Unknown culture '%s'. Using fallback name.", culture)
        return FALLBACK_NAMES[sex]
    return rng.choice(culture_data.names_for(sex))


def generate_dynasty_name(culture: CultureId, rng=None) -> str:
    rng = rng or random
    return rng.choice(CULTURES[culture].dynasty_names)


def generate_random_traits(count: int = 2, rng=None) -> list[TraitId]:
    """Draw ``count`` distinct traits from the full catalog."""
    rng = rng or random
    available = list(TRAITS)
    return rng.sample(available, min(count, len(available)))


def generate_portrait(seed: int | None = None, rng=None) -> PortraitData:
    rng = rng or random
    if seed is None:
        seed = rng.randrange(1_000_000)
    return PortraitData(
        seed=seed,
        head_shape=rng.randrange(3),
        eye_style=rng.randrange(3),
        hair_style=rng.randrange(4),
        hair_color=rng.randrange(8),
        skin_tone=rng.randrange(5),
        beard_style=rng.randrange(4),
        clothing_style=rng.randrange(3),
    )


def _random_skill(rng) -> int:
    # Uniform over [3, 18)
    return rng.randint(3, 17)


# ------------------------------------------------------------------
#  Entity constructors
# ------------------------------------------------------------------

def create_character(
    name: str,
    sex: Sex,
    culture: CultureId,
    dynasty_id: str | None,
    birth_week: int,
    mother_id: str | None = None,
    father_id: str | None = None,
    court_id: str | None = None,
    rng=None,
) -> Character:
    """Build a new living character with randomized skills, vitals and traits.

    Health is drawn from [80, 120); values above 100 are clamped by
    consumers at read time, not here.
    """
    rng = rng or random
    return Character(
        id=generate_id(),
        name=name,
        sex=sex,
        culture=culture,
        dynasty_id=dynasty_id,
        birth_week=birth_week,
        mother_id=mother_id,
        father_id=father_id,
        traits=generate_random_traits(2, rng),
        skills=Skills(
            diplomacy=_random_skill(rng),
            martial=_random_skill(rng),
            stewardship=_random_skill(rng),
            intrigue=_random_skill(rng),
            learning=_random_skill(rng),
        ),
        health=rng.randint(80, 119),
        fertility=rng.randint(60, 99),
        portrait=generate_portrait(rng=rng),
        at_court=court_id,
    )


def create_dynasty(
    name: str,
    founder_id: str,
    culture: CultureId,
    motto: str = DEFAULT_MOTTO,
    rng=None,
) -> Dynasty:
    rng = rng or random
    return Dynasty(
        id=generate_id(),
        name=name,
        founder_id=founder_id,
        culture=culture,
        prestige=100,
        motto=motto,
        coat_of_arms=CoatOfArms(
            primary_color=rng.choice(HERALDRY_PRIMARY_COLORS),
            secondary_color=rng.choice(HERALDRY_SECONDARY_COLORS),
            symbol=rng.randrange(HERALDRY_SYMBOL_COUNT),
        ),
    )


def create_title(
    name: str,
    rank: TitleRank,
    holder_id: str | None = None,
    succession_law: SuccessionLaw = SuccessionLaw.PRIMOGENITURE,
) -> Title:
    return Title(
        id=generate_id(),
        name=name,
        rank=rank,
        holder_id=holder_id,
        succession_law=succession_law,
    )


def create_holding(name: str, title_id: str, rng=None) -> Holding:
    rng = rng or random
    return Holding(
        id=generate_id(),
        name=name,
        title_id=title_id,
        income=rng.randint(10, 29),
        levies=rng.randint(100, 299),
        development=rng.randint(1, 5),
    )
