"""
dynastysim/genesis.py
~~~~~~~~~~~~~~~~~~~~~
Builds the opening world from the player's menu choices.

The player house starts with a ruler, a spouse and two young children
holding a single county. Rival houses are spread over a three-tier de-jure
tree: the first realms rule kingdoms, the next duchies, and the rest
counties, with each county sworn to a duchy and each duchy to a kingdom.
"""

from __future__ import annotations

import logging
import random

from dynastysim.config_loader import SimulationConfig
from dynastysim.entity_factory import (
    create_character,
    create_dynasty,
    create_holding,
    create_title,
    generate_dynasty_name,
    generate_name,
)
from dynastysim.models import Character, CultureId, GameState, Sex, Title, TitleRank
from dynastysim.world_data import MOTTOS, TITLE_NAME_PREFIX, WEEKS_PER_YEAR

logger = logging.getLogger(__name__)


def _years(n: int) -> int:
    return n * WEEKS_PER_YEAR


def realm_tiers(count: int) -> list[TitleRank]:
    """Rank of each rival realm's top title, kingdoms first."""
    if count <= 0:
        return []
    kingdoms = max(1, count // 8)
    duchies = min(max(kingdoms, count // 3), count - kingdoms)
    counties = count - kingdoms - duchies
    return [TitleRank.KINGDOM] * kingdoms + [TitleRank.DUCHY] * duchies + [TitleRank.COUNTY] * counties


def link_vassal(liege: Title, vassal: Title) -> None:
    vassal.de_jure_liege_id = liege.id
    if vassal.id not in liege.vassal_title_ids:
        liege.vassal_title_ids.append(vassal.id)


def _link_tiers(titles: list[Title]) -> None:
    """Attach counties to duchies and duchies to kingdoms, round robin."""
    kingdoms = [t for t in titles if t.rank == TitleRank.KINGDOM]
    duchies = [t for t in titles if t.rank == TitleRank.DUCHY]
    counties = [t for t in titles if t.rank == TitleRank.COUNTY]

    for i, duchy in enumerate(duchies):
        if kingdoms:
            link_vassal(kingdoms[i % len(kingdoms)], duchy)

    county_lieges = duchies or kingdoms
    for i, county in enumerate(counties):
        if county_lieges:
            link_vassal(county_lieges[i % len(county_lieges)], county)


def _add_rival_realm(
    state: GameState,
    culture: CultureId,
    rank: TitleRank,
    config: SimulationConfig,
    rng,
) -> Title:
    ruler_sex = Sex.MALE if rng.random() > 0.5 else Sex.FEMALE
    ruler = create_character(
        generate_name(culture, ruler_sex, rng),
        ruler_sex,
        culture,
        None,
        -_years(18 + rng.randrange(30)),
        rng=rng,
    )
    dynasty = create_dynasty(generate_dynasty_name(culture, rng), ruler.id, culture, rng.choice(MOTTOS), rng)
    ruler.dynasty_id = dynasty.id
    ruler.is_ruler = True

    title = create_title(
        f"{TITLE_NAME_PREFIX[rank]} of {dynasty.name}",
        rank,
        ruler.id,
        config.default_succession_law,
    )
    ruler.primary_title_id = title.id
    holding = create_holding(f"Castle {dynasty.name}", title.id, rng)

    spouse_sex = ruler_sex.opposite
    spouse = create_character(
        generate_name(culture, spouse_sex, rng),
        spouse_sex,
        culture,
        None,
        -_years(16 + rng.randrange(25)),
        court_id=ruler.id,
        rng=rng,
    )
    ruler.spouse_ids.append(spouse.id)
    spouse.spouse_ids.append(ruler.id)

    mother, father = (spouse, ruler) if spouse_sex is Sex.FEMALE else (ruler, spouse)
    children: list[Character] = []
    for _ in range(rng.randrange(4)):
        child_sex = Sex.MALE if rng.random() > 0.5 else Sex.FEMALE
        child = create_character(
            generate_name(culture, child_sex, rng),
            child_sex,
            culture,
            dynasty.id,
            -_years(rng.randrange(15)),
            mother_id=mother.id,
            father_id=father.id,
            court_id=ruler.id,
            rng=rng,
        )
        ruler.children_ids.append(child.id)
        spouse.children_ids.append(child.id)
        children.append(child)

    for character in (ruler, spouse, *children):
        state.characters[character.id] = character
    state.dynasties[dynasty.id] = dynasty
    state.titles[title.id] = title
    state.holdings[holding.id] = holding
    return title


def start_new_game(
    dynasty_name: str,
    ruler_name: str,
    culture: CultureId,
    sex: Sex,
    config: SimulationConfig | None = None,
    rng=None,
) -> GameState:
    """Create the opening ``GameState`` for a new playthrough."""
    if not dynasty_name.strip() or not ruler_name.strip():
        raise ValueError("Dynasty name and ruler name must be non-empty.")
    config = config or SimulationConfig()
    rng = rng or random

    ruler = create_character(ruler_name, sex, culture, None, -_years(20), rng=rng)
    ruler.is_ruler = True
    dynasty = create_dynasty(dynasty_name, ruler.id, culture, rng=rng)
    ruler.dynasty_id = dynasty.id

    capital = create_title(f"County of {dynasty_name}", TitleRank.COUNTY, ruler.id, config.default_succession_law)
    ruler.primary_title_id = capital.id
    capital_holding = create_holding(f"Castle {dynasty_name}", capital.id, rng)

    spouse_sex = sex.opposite
    spouse = create_character(
        generate_name(culture, spouse_sex, rng),
        spouse_sex,
        culture,
        None,
        -_years(18),
        court_id=ruler.id,
        rng=rng,
    )
    ruler.spouse_ids.append(spouse.id)
    spouse.spouse_ids.append(ruler.id)

    mother, father = (ruler, spouse) if sex is Sex.FEMALE else (spouse, ruler)
    son = create_character(
        generate_name(culture, Sex.MALE, rng), Sex.MALE, culture, dynasty.id, -_years(3),
        mother_id=mother.id, father_id=father.id, court_id=ruler.id, rng=rng,
    )
    daughter = create_character(
        generate_name(culture, Sex.FEMALE, rng), Sex.FEMALE, culture, dynasty.id, -_years(1),
        mother_id=mother.id, father_id=father.id, court_id=ruler.id, rng=rng,
    )
    for parent in (ruler, spouse):
        parent.children_ids.extend([son.id, daughter.id])

    state = GameState(
        player_dynasty_id=dynasty.id,
        player_character_id=ruler.id,
        characters={c.id: c for c in (ruler, spouse, son, daughter)},
        dynasties={dynasty.id: dynasty},
        titles={capital.id: capital},
        holdings={capital_holding.id: capital_holding},
    )

    other_cultures = [c for c in CultureId if c != culture]
    rival_titles = []
    for i, rank in enumerate(realm_tiers(config.rival_realm_count)):
        rival_culture = other_cultures[i % len(other_cultures)]
        rival_titles.append(_add_rival_realm(state, rival_culture, rank, config, rng))

    _link_tiers(rival_titles)
    for title in rival_titles:
        if title.rank == TitleRank.DUCHY:
            link_vassal(title, capital)
            break

    logger.info(
        "New game: house %s with %d rival realms and %d characters.",
        dynasty_name, len(rival_titles), len(state.characters),
    )
    return state
