"""
dynastysim/events.py
~~~~~~~~~~~~~~~~~~~~
The catalog of weighted life-event templates and the generator that draws
one for a character.

Templates are filtered by the character's state first; the weighted draw
only runs over the eligible subset.
"""

from __future__ import annotations

import logging
import random

from pydantic import Field

from dynastysim.models import (
    Character,
    EffectType,
    EventChoice,
    EventEffect,
    EventType,
    GameEvent,
    Skill,
    TraitId,
    WorldModel,
)
from dynastysim.world_data import get_character_age
from utils.utils import generate_id

logger = logging.getLogger(__name__)


class EventTemplate(WorldModel):
    type: EventType
    title: str
    description: str
    weight: int = Field(gt=0)
    min_age: int | None = None
    max_age: int | None = None
    requires_spouse: bool = False
    requires_children: bool = False
    requires_trait: TraitId | None = None
    choices: list[EventChoice]

    def is_eligible(self, character: Character, current_week: int) -> bool:
        """Check age bounds, marriage, children and trait against the template.

        ``requires_spouse`` only looks at ``spouse_ids``; a widow still counts
        as married because the character table is not available here.
        """
        age = get_character_age(character, current_week)
        if self.min_age is not None and age < self.min_age:
            return False
        if self.max_age is not None and age > self.max_age:
            return False
        if self.requires_spouse and not character.spouse_ids:
            return False
        if self.requires_children and not character.children_ids:
            return False
        if self.requires_trait is not None and self.requires_trait not in character.traits:
            return False
        return True


# ---------------------------------------------------------------------------
#  Effect shorthands
# ---------------------------------------------------------------------------

def _prestige(value: int) -> EventEffect:
    return EventEffect(type=EffectType.PRESTIGE, value=value)


def _health(value: int) -> EventEffect:
    return EventEffect(type=EffectType.HEALTH, value=value)


def _skill(skill: Skill, value: int) -> EventEffect:
    return EventEffect(type=EffectType.SKILL, skill=skill, value=value)


def _trait(trait: TraitId) -> EventEffect:
    return EventEffect(type=EffectType.TRAIT, trait=trait)


def _choice(text: str, *effects: EventEffect) -> EventChoice:
    return EventChoice(text=text, effects=list(effects))


# ---------------------------------------------------------------------------
#  Catalog
# ---------------------------------------------------------------------------

EVENT_TEMPLATES: list[EventTemplate] = [
    EventTemplate(
        type=EventType.FEAST,
        title="A Grand Feast",
        description=(
            "Your court is hosting a grand feast to celebrate the harvest. Nobles from "
            "across the realm have gathered. How do you wish to proceed?"
        ),
        weight=10,
        choices=[
            _choice("Spare no expense - this will be remembered!", _prestige(25)),
            _choice("Keep it modest and save our treasury", _skill(Skill.STEWARDSHIP, 1)),
            _choice("Use this opportunity to forge alliances", _skill(Skill.DIPLOMACY, 2)),
        ],
    ),
    EventTemplate(
        type=EventType.ILLNESS,
        title="A Fever Takes Hold",
        description=(
            "You have fallen ill with a burning fever. Your physicians are concerned "
            "and suggest various treatments."
        ),
        weight=8,
        choices=[
            _choice("Rest and pray for recovery", _health(-15)),
            _choice("Consult the court physician", _health(5), _skill(Skill.LEARNING, 1)),
            _choice("Ignore it and continue ruling", _health(-25), _prestige(10)),
        ],
    ),
    EventTemplate(
        type=EventType.INTRIGUE,
        title="Whispers at Court",
        description=(
            "Your spymaster brings disturbing news - there are whispers of a conspiracy "
            "against you. Some nobles may be plotting in secret."
        ),
        weight=7,
        choices=[
            _choice("Launch a thorough investigation", _skill(Skill.INTRIGUE, 2)),
            _choice("Increase the guard and stay vigilant", _skill(Skill.MARTIAL, 1), _health(5)),
            _choice("Ignore the rumors - they are beneath you", _skill(Skill.DIPLOMACY, 1)),
        ],
    ),
    EventTemplate(
        type=EventType.TOURNAMENT,
        title="A Grand Tournament",
        description=(
            "Knights from across the realm have gathered for a tournament in your honor. "
            "Will you participate or merely observe?"
        ),
        weight=6,
        min_age=16,
        max_age=50,
        choices=[
            _choice("Join the joust yourself!", _skill(Skill.MARTIAL, 2), _health(-10), _prestige(15)),
            _choice("Observe and reward the champions", _prestige(10), _skill(Skill.DIPLOMACY, 1)),
            _choice("Use this to scout for capable warriors", _skill(Skill.MARTIAL, 1)),
        ],
    ),
    EventTemplate(
        type=EventType.BIRTH_COMPLICATION,
        title="A Difficult Birth",
        description=(
            "Your spouse is in labor, but the midwife reports complications. "
            "Difficult decisions may need to be made."
        ),
        weight=5,
        requires_spouse=True,
        choices=[
            _choice("Pray for mother and child", _skill(Skill.LEARNING, 1)),
            _choice("Summon the best physicians in the realm", _prestige(-5), _health(10)),
        ],
    ),
    EventTemplate(
        type=EventType.HEIR_EDUCATION,
        title="Educating the Heir",
        description="Your heir has come of age for formal education. How shall they be trained?",
        weight=6,
        requires_children=True,
        choices=[
            _choice("Focus on martial training", _skill(Skill.MARTIAL, 1)),
            _choice("Emphasize diplomacy and courtly manners", _skill(Skill.DIPLOMACY, 1)),
            _choice("Train them in the art of intrigue", _skill(Skill.INTRIGUE, 1)),
            _choice("Let the scholars educate them", _skill(Skill.LEARNING, 2)),
        ],
    ),
    EventTemplate(
        type=EventType.PLAGUE,
        title="Plague Spreads",
        description=(
            "A terrible plague has struck the realm. People are dying in the streets, "
            "and fear grips the land."
        ),
        weight=3,
        choices=[
            _choice("Quarantine the affected areas", _health(-5), _skill(Skill.STEWARDSHIP, 2)),
            _choice("Flee to the countryside", _health(10), _prestige(-20)),
            _choice("Stay and care for your people", _health(-20), _prestige(30), _trait(TraitId.KIND)),
        ],
    ),
    EventTemplate(
        type=EventType.ASSASSINATION_ATTEMPT,
        title="Assassin in the Night!",
        description=(
            "An assassin was caught trying to sneak into your chambers! "
            "Thankfully, your guards intervened in time."
        ),
        weight=4,
        choices=[
            _choice("Execute the assassin publicly", _prestige(10), _trait(TraitId.CRUEL)),
            _choice("Interrogate them for information", _skill(Skill.INTRIGUE, 3)),
            _choice("Show mercy and imprison them", _skill(Skill.DIPLOMACY, 1), _trait(TraitId.KIND)),
        ],
    ),
    EventTemplate(
        type=EventType.SCHOLAR_VISIT,
        title="A Learned Scholar Arrives",
        description=(
            "A renowned scholar from distant lands has arrived at your court, seeking "
            "patronage. They offer to share their knowledge."
        ),
        weight=5,
        choices=[
            _choice("Become their patron", _skill(Skill.LEARNING, 3), _prestige(5)),
            _choice("Listen but do not commit", _skill(Skill.LEARNING, 1)),
            _choice("Ask them to train your administrators", _skill(Skill.STEWARDSHIP, 2)),
        ],
    ),
    EventTemplate(
        type=EventType.AMBITIOUS_VASSAL,
        title="Ambitious Vassal",
        description=(
            "One of your vassals has been making bold moves, seeking to expand their "
            "influence. Some see them as a threat to your authority."
        ),
        weight=5,
        choices=[
            _choice("Remind them of their place", _skill(Skill.MARTIAL, 1), _trait(TraitId.PROUD)),
            _choice("Befriend them and keep enemies closer", _skill(Skill.DIPLOMACY, 2)),
            _choice("Watch them carefully", _skill(Skill.INTRIGUE, 2)),
        ],
    ),
    EventTemplate(
        type=EventType.RELIGIOUS_FESTIVAL,
        title="Holy Day Celebrations",
        description=(
            "A major religious festival approaches. The clergy expects your "
            "participation and generous donations."
        ),
        weight=6,
        choices=[
            _choice("Make a grand offering", _prestige(15), _skill(Skill.DIPLOMACY, 1)),
            _choice("Participate modestly", _skill(Skill.LEARNING, 1)),
            _choice("Focus on the feast instead", _health(5)),
        ],
    ),
    EventTemplate(
        type=EventType.HUNTING_ACCIDENT,
        title="Hunting Mishap",
        description=(
            "During a hunt, you had a close call with a wild boar. Your quick reflexes "
            "saved you, but it was a narrow escape."
        ),
        weight=4,
        min_age=16,
        max_age=55,
        choices=[
            _choice("Continue the hunt more carefully", _skill(Skill.MARTIAL, 1), _health(-5)),
            _choice("Return to the castle - hunting is too dangerous", _health(5)),
            _choice(
                "Track down that boar personally",
                _skill(Skill.MARTIAL, 2), _health(-10), _trait(TraitId.BRAVE),
            ),
        ],
    ),
]


# ---------------------------------------------------------------------------
#  Generator
# ---------------------------------------------------------------------------

def eligible_templates(
    character: Character,
    current_week: int,
    templates: list[EventTemplate] | None = None,
) -> list[EventTemplate]:
    templates = EVENT_TEMPLATES if templates is None else templates
    return [t for t in templates if t.is_eligible(character, current_week)]


def generate_event(
    character: Character,
    current_week: int,
    rng=None,
    templates: list[EventTemplate] | None = None,
) -> GameEvent | None:
    """Draw a weighted-random eligible event for ``character``, or None."""
    rng = rng or random
    eligible = eligible_templates(character, current_week, templates)
    if not eligible:
        return None

    total_weight = sum(t.weight for t in eligible)
    roll = rng.random() * total_weight

    chosen = eligible[-1]
    for template in eligible:
        roll -= template.weight
        if roll <= 0:
            chosen = template
            break

    logger.debug("Drew event '%s' for %s.", chosen.type.value, character.id)
    return GameEvent(
        id=generate_id(),
        type=chosen.type,
        title=chosen.title,
        description=chosen.description,
        week=current_week,
        character_id=character.id,
        choices=[choice.model_copy(deep=True) for choice in chosen.choices],
        resolved=False,
    )
