"""
dynastysim/models.py
~~~~~~~~~~~~~~~~~~~~
Pydantic models for the simulated world.

Entities reference each other purely by ID string; every table in
``GameState`` is a dict keyed by ID. Nothing holds a direct object link to
another entity, so a snapshot serializes without cycles.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WorldModel(BaseModel):
    """Base model: camelCase aliases, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
#  Enums
# ---------------------------------------------------------------------------

class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @property
    def opposite(self) -> Sex:
        return Sex.FEMALE if self is Sex.MALE else Sex.MALE


class CultureId(str, Enum):
    ANGLO = "anglo"
    FRANKISH = "frankish"
    NORSE = "norse"
    IBERIAN = "iberian"


class TraitId(str, Enum):
    BRAVE = "brave"
    CRAVEN = "craven"
    AMBITIOUS = "ambitious"
    CONTENT = "content"
    CRUEL = "cruel"
    KIND = "kind"
    GREEDY = "greedy"
    GENEROUS = "generous"
    LUSTFUL = "lustful"
    CHASTE = "chaste"
    WRATHFUL = "wrathful"
    PATIENT = "patient"
    DECEITFUL = "deceitful"
    HONEST = "honest"
    PROUD = "proud"
    HUMBLE = "humble"
    GENIUS = "genius"
    IMBECILE = "imbecile"
    STRONG = "strong"
    WEAK = "weak"
    BEAUTIFUL = "beautiful"
    UGLY = "ugly"
    FERTILE = "fertile"
    BARREN = "barren"


class TitleRank(str, Enum):
    """Title ranks, declared lowest first."""
    BARONY = "barony"
    COUNTY = "county"
    DUCHY = "duchy"
    KINGDOM = "kingdom"
    EMPIRE = "empire"


class SuccessionLaw(str, Enum):
    PRIMOGENITURE = "primogeniture"
    ULTIMOGENITURE = "ultimogeniture"
    GAVELKIND = "gavelkind"
    ELECTIVE = "elective"


class Skill(str, Enum):
    DIPLOMACY = "diplomacy"
    MARTIAL = "martial"
    STEWARDSHIP = "stewardship"
    INTRIGUE = "intrigue"
    LEARNING = "learning"


class EventType(str, Enum):
    """Every kind of entry that can appear in the pending queue or the log."""
    # Narrative log entries written by the engine and handlers
    BIRTH = "birth"
    DEATH = "death"
    CHILDBIRTH_DEATH = "childbirth_death"
    INHERITANCE = "inheritance"
    HEIR = "heir"
    MARRIAGE = "marriage"
    GAME_OVER = "game_over"
    # Interactive events drawn from the template catalog
    FEAST = "feast"
    ILLNESS = "illness"
    INTRIGUE = "intrigue"
    TOURNAMENT = "tournament"
    BIRTH_COMPLICATION = "birth_complication"
    HEIR_EDUCATION = "heir_education"
    PLAGUE = "plague"
    ASSASSINATION_ATTEMPT = "assassination_attempt"
    SCHOLAR_VISIT = "scholar_visit"
    AMBITIOUS_VASSAL = "ambitious_vassal"
    RELIGIOUS_FESTIVAL = "religious_festival"
    HUNTING_ACCIDENT = "hunting_accident"


class EffectType(str, Enum):
    HEALTH = "health"
    FERTILITY = "fertility"
    SKILL = "skill"
    TRAIT = "trait"
    DEATH = "death"
    PRESTIGE = "prestige"


# ---------------------------------------------------------------------------
#  Entities
# ---------------------------------------------------------------------------

class Skills(WorldModel):
    diplomacy: int = 0
    martial: int = 0
    stewardship: int = 0
    intrigue: int = 0
    learning: int = 0

    def get(self, skill: Skill) -> int:
        return getattr(self, skill.value)

    def set(self, skill: Skill, value: int) -> None:
        setattr(self, skill.value, value)


class PortraitData(WorldModel):
    """Seed data for the portrait renderer. Opaque to the engine."""

    seed: int
    head_shape: int
    eye_style: int
    hair_style: int
    hair_color: int
    skin_tone: int
    beard_style: int
    clothing_style: int


class Character(WorldModel):
    id: str
    name: str
    sex: Sex
    culture: CultureId
    dynasty_id: str | None = None
    birth_week: int
    death_week: int | None = None
    alive: bool = True
    mother_id: str | None = None
    father_id: str | None = None
    spouse_ids: list[str] = Field(default_factory=list)
    children_ids: list[str] = Field(default_factory=list)
    traits: list[TraitId] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)
    health: int = 100
    fertility: int = 80
    opinions: dict[str, int] = Field(default_factory=dict)
    portrait: PortraitData | None = None
    # Co-parent of the unborn child. May name a co-parent who has since died.
    pregnant_with: str | None = None
    pregnancy_weeks_remaining: int = 0
    is_ruler: bool = False
    primary_title_id: str | None = None
    at_court: str | None = None
    matrilineal_marriage: bool = False

    def die(self, week: int) -> None:
        """Mark the character dead at ``week``. Any pregnancy ends with them."""
        self.alive = False
        self.death_week = week
        self.pregnant_with = None
        self.pregnancy_weeks_remaining = 0

    def __repr__(self) -> str:
        return f"<Character {self.name} ({self.id})>"


class CoatOfArms(WorldModel):
    primary_color: str
    secondary_color: str
    symbol: int


class Dynasty(WorldModel):
    id: str
    name: str
    founder_id: str
    culture: CultureId
    prestige: int = 100
    motto: str = ""
    coat_of_arms: CoatOfArms | None = None


class Title(WorldModel):
    id: str
    name: str
    rank: TitleRank
    holder_id: str | None = None
    succession_law: SuccessionLaw = SuccessionLaw.PRIMOGENITURE
    claimant_ids: list[str] = Field(default_factory=list)
    de_jure_liege_id: str | None = None
    vassal_title_ids: list[str] = Field(default_factory=list)


class Holding(WorldModel):
    id: str
    name: str
    title_id: str
    income: int
    levies: int
    development: int = Field(ge=1, le=6)


# ---------------------------------------------------------------------------
#  Events
# ---------------------------------------------------------------------------

class EventEffect(WorldModel):
    """A single mutation applied when an event choice is taken.

    ``target`` defaults to the event's subject character.
    """

    type: EffectType
    target: str | None = None
    skill: Skill | None = None
    trait: TraitId | None = None
    value: int = 0


class EventChoice(WorldModel):
    text: str
    effects: list[EventEffect] = Field(default_factory=list)


class GameEvent(WorldModel):
    id: str
    type: EventType
    title: str
    description: str
    week: int
    character_id: str
    choices: list[EventChoice] | None = None
    resolved: bool = False
    chosen_index: int | None = None


# ---------------------------------------------------------------------------
#  Aggregate root
# ---------------------------------------------------------------------------

# Paused, 1x, 2x, 4x, 8x
VALID_SPEEDS: tuple[int, ...] = (0, 1, 2, 4, 8)


class GameState(WorldModel):
    current_week: int = 0
    speed: int = Field(default=0)
    player_dynasty_id: str
    player_character_id: str
    characters: dict[str, Character] = Field(default_factory=dict)
    dynasties: dict[str, Dynasty] = Field(default_factory=dict)
    titles: dict[str, Title] = Field(default_factory=dict)
    holdings: dict[str, Holding] = Field(default_factory=dict)
    events: list[GameEvent] = Field(default_factory=list)
    event_log: list[GameEvent] = Field(default_factory=list)
    last_autosave_week: int = 0
    game_over: bool = False
    game_over_reason: str | None = None

    @field_validator("speed")
    @classmethod
    def speed_is_supported(cls, value: int) -> int:
        if value not in VALID_SPEEDS:
            raise ValueError(f"speed must be one of {VALID_SPEEDS} (got {value!r}).")
        return value
