"""
dynastysim/world_data.py
~~~~~~~~~~~~~~~~~~~~~~~~
Static reference tables: cultures and their name pools, the trait catalog,
title-rank ordering and naming, heraldry and motto pools.

Also hosts the two derivations every other module leans on: a character's
age at a given week and the calendar label for a week.
"""

from __future__ import annotations

from dynastysim.models import Character, CultureId, Sex, Skill, Skills, TitleRank, TraitId

# Week 0 of the simulation falls at the start of this year.
START_YEAR = 867
WEEKS_PER_YEAR = 52

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


# ---------------------------------------------------------------------------
#  Cultures
# ---------------------------------------------------------------------------

class Culture:
    """Display name and name pools for one culture."""

    def __init__(
        self,
        culture_id: CultureId,
        name: str,
        male_names: list[str],
        female_names: list[str],
        dynasty_names: list[str],
    ) -> None:
        self.id = culture_id
        self.name = name
        self.male_names = male_names
        self.female_names = female_names
        self.dynasty_names = dynasty_names

    def names_for(self, sex: Sex) -> list[str]:
        return self.male_names if sex is Sex.MALE else self.female_names

    def __repr__(self) -> str:
        return f"<Culture {self.name}>"


CULTURES: dict[CultureId, Culture] = {
    CultureId.ANGLO: Culture(
        CultureId.ANGLO,
        "Anglo-Saxon",
        male_names=[
            "Alfred", "Edward", "Harold", "Edgar", "Athelstan", "Edmund", "Oswald", "Leofric",
            "Godwin", "Wulfstan", "Aelfric", "Dunstan", "Cuthbert", "Aldhelm", "Beorhtric",
        ],
        female_names=[
            "Aethelflaed", "Edith", "Gytha", "Eadgyth", "Wulfhild", "Aelfgifu", "Godgifu",
            "Leofwynn", "Hild", "Mildred", "Aethelthryth", "Cwenburh", "Ealdgyth", "Cyneburga",
        ],
        dynasty_names=[
            "Godwinson", "Leofricson", "Aethelredson", "Eadricson", "Oswaldson",
            "Wulfricson", "Dunstanson", "Cuthbertson", "Aldhelming", "Beorhtricson",
        ],
    ),
    CultureId.FRANKISH: Culture(
        CultureId.FRANKISH,
        "Frankish",
        male_names=[
            "Charles", "Louis", "Robert", "Hugh", "Odo", "Pepin", "Lothair", "Godfrey",
            "Baldwin", "Philip", "Henry", "Raoul", "Eudes", "Arnulf", "Gilbert",
        ],
        female_names=[
            "Adelaide", "Bertha", "Gertrude", "Matilda", "Beatrice", "Hildegard", "Ermengarde",
            "Constance", "Adela", "Blanche", "Isabelle", "Judith", "Richardis", "Rothrud",
        ],
        dynasty_names=[
            "de Valois", "de Bourbon", "de Lorraine", "de Champagne", "de Normandie",
            "de Anjou", "de Blois", "de Vermandois", "de Flandres", "de Burgundy",
        ],
    ),
    CultureId.NORSE: Culture(
        CultureId.NORSE,
        "Norse",
        male_names=[
            "Ragnar", "Bjorn", "Ivar", "Harald", "Erik", "Olaf", "Sigurd", "Knut",
            "Leif", "Thorvald", "Gunnar", "Ulf", "Sven", "Hakon", "Rollo",
        ],
        female_names=[
            "Astrid", "Freya", "Ingrid", "Sigrid", "Helga", "Thora", "Ragnhild",
            "Gudrun", "Aslaug", "Lagertha", "Thyra", "Gyda", "Brynhild", "Jorunn",
        ],
        dynasty_names=[
            "Ragnarsson", "Lothbrok", "Ironside", "Fairhair", "Bloodaxe",
            "Bluetooth", "Forkbeard", "Hardrada", "Magnusson", "Haraldson",
        ],
    ),
    CultureId.IBERIAN: Culture(
        CultureId.IBERIAN,
        "Iberian",
        male_names=[
            "Alfonso", "Sancho", "Fernando", "Rodrigo", "Garcia", "Ramon", "Pedro", "Gonzalo",
            "Diego", "Jimeno", "Ordono", "Bermudo", "Pelayo", "Munio", "Fruela",
        ],
        female_names=[
            "Urraca", "Elvira", "Jimena", "Sancha", "Teresa", "Berenguela", "Constanza",
            "Mayor", "Toda", "Munia", "Ximena", "Oneca", "Andregoto", "Ermesinda",
        ],
        dynasty_names=[
            "de Leon", "de Castilla", "de Aragon", "de Navarra", "de Portugal",
            "de Barcelona", "de Galicia", "de Asturias", "de Toledo", "de Burgos",
        ],
    ),
}


# ---------------------------------------------------------------------------
#  Traits
# ---------------------------------------------------------------------------

class Trait:
    """A trait with its display text and numeric effects.

    Effects are keyed by skill name, ``"health"`` or ``"fertility"``.
    """

    def __init__(self, trait_id: TraitId, name: str, description: str, effects: dict[str, int]) -> None:
        self.id = trait_id
        self.name = name
        self.description = description
        self.effects = effects

    def __repr__(self) -> str:
        return f"<Trait {self.name}>"


TRAITS: dict[TraitId, Trait] = {
    trait.id: trait
    for trait in (
        Trait(TraitId.BRAVE, "Brave", "Courageous in battle", {"martial": 2}),
        Trait(TraitId.CRAVEN, "Craven", "Cowardly and fearful", {"martial": -2}),
        Trait(TraitId.AMBITIOUS, "Ambitious", "Desires power and glory", {"diplomacy": 1, "intrigue": 1}),
        Trait(TraitId.CONTENT, "Content", "Satisfied with their lot", {"stewardship": 1}),
        Trait(TraitId.CRUEL, "Cruel", "Takes pleasure in suffering", {"intrigue": 1, "diplomacy": -1}),
        Trait(TraitId.KIND, "Kind", "Compassionate and caring", {"diplomacy": 2}),
        Trait(TraitId.GREEDY, "Greedy", "Obsessed with wealth", {"stewardship": 1, "diplomacy": -1}),
        Trait(TraitId.GENEROUS, "Generous", "Freely gives to others", {"diplomacy": 1, "stewardship": -1}),
        Trait(TraitId.LUSTFUL, "Lustful", "Driven by desire", {"fertility": 20, "intrigue": -1}),
        Trait(TraitId.CHASTE, "Chaste", "Abstains from carnal pleasure", {"fertility": -15, "learning": 1}),
        Trait(TraitId.WRATHFUL, "Wrathful", "Quick to anger", {"martial": 2, "diplomacy": -1}),
        Trait(TraitId.PATIENT, "Patient", "Calm and measured", {"learning": 1, "intrigue": 1}),
        Trait(TraitId.DECEITFUL, "Deceitful", "A master of lies", {"intrigue": 3, "diplomacy": -2}),
        Trait(TraitId.HONEST, "Honest", "Always speaks the truth", {"diplomacy": 2, "intrigue": -2}),
        Trait(TraitId.PROUD, "Proud", "Arrogant and haughty", {"martial": 1, "diplomacy": -1}),
        Trait(TraitId.HUMBLE, "Humble", "Modest and unassuming", {"learning": 1}),
        Trait(
            TraitId.GENIUS, "Genius", "Brilliant mind",
            {"diplomacy": 3, "martial": 3, "stewardship": 3, "intrigue": 3, "learning": 5},
        ),
        Trait(
            TraitId.IMBECILE, "Imbecile", "Dull-witted",
            {"diplomacy": -3, "martial": -3, "stewardship": -3, "intrigue": -3, "learning": -5},
        ),
        Trait(TraitId.STRONG, "Strong", "Physically powerful", {"martial": 2, "health": 10, "fertility": 10}),
        Trait(TraitId.WEAK, "Weak", "Frail and sickly", {"martial": -2, "health": -10, "fertility": -5}),
        Trait(TraitId.BEAUTIFUL, "Beautiful", "Strikingly attractive", {"diplomacy": 2, "fertility": 15}),
        Trait(TraitId.UGLY, "Ugly", "Unpleasant to look upon", {"diplomacy": -1, "fertility": -10}),
        Trait(TraitId.FERTILE, "Fertile", "Blessed with fecundity", {"fertility": 30}),
        Trait(TraitId.BARREN, "Barren", "Unable to bear children", {"fertility": -50}),
    )
}


# ---------------------------------------------------------------------------
#  Titles
# ---------------------------------------------------------------------------

TITLE_RANK_ORDER: list[TitleRank] = list(TitleRank)

TITLE_RANK_NAMES: dict[TitleRank, dict[Sex, str]] = {
    TitleRank.BARONY: {Sex.MALE: "Baron", Sex.FEMALE: "Baroness"},
    TitleRank.COUNTY: {Sex.MALE: "Count", Sex.FEMALE: "Countess"},
    TitleRank.DUCHY: {Sex.MALE: "Duke", Sex.FEMALE: "Duchess"},
    TitleRank.KINGDOM: {Sex.MALE: "King", Sex.FEMALE: "Queen"},
    TitleRank.EMPIRE: {Sex.MALE: "Emperor", Sex.FEMALE: "Empress"},
}

TITLE_NAME_PREFIX: dict[TitleRank, str] = {
    TitleRank.BARONY: "Barony",
    TitleRank.COUNTY: "County",
    TitleRank.DUCHY: "Duchy",
    TitleRank.KINGDOM: "Kingdom",
    TitleRank.EMPIRE: "Empire",
}


def rank_index(rank: TitleRank) -> int:
    """Position of ``rank`` in the ordering, barony = 0."""
    return TITLE_RANK_ORDER.index(rank)


# ---------------------------------------------------------------------------
#  Dynasty flavour
# ---------------------------------------------------------------------------

DEFAULT_MOTTO = "Glory through the ages"

MOTTOS = [
    DEFAULT_MOTTO,
    "By blood and by right",
    "Steadfast in all things",
    "We endure",
    "Faith and the sword",
    "From the ashes, a crown",
]

HERALDRY_PRIMARY_COLORS = [
    "#1E3A5F", "#4A0E4E", "#2F4F4F", "#8B0000", "#1B4D3E", "#4B0082", "#800020", "#003366",
]
HERALDRY_SECONDARY_COLORS = ["#FFD700", "#C0C0C0", "#B8860B", "#CD853F"]
HERALDRY_SYMBOL_COUNT = 10


# ---------------------------------------------------------------------------
#  Derivations
# ---------------------------------------------------------------------------

def get_character_age(character: Character, current_week: int) -> int:
    """Whole years lived; frozen at the death week for the dead."""
    if character.alive or character.death_week is None:
        end_week = current_week
    else:
        end_week = character.death_week
    return (end_week - character.birth_week) // WEEKS_PER_YEAR


def format_week_as_date(week: int) -> str:
    """Render a simulation week as ``"<Month> <Year>"``."""
    year = START_YEAR + week // WEEKS_PER_YEAR
    week_of_year = week % WEEKS_PER_YEAR
    month = min(int(week_of_year / (WEEKS_PER_YEAR / 12)), 11)
    return f"{MONTHS[month]} {year}"


def effective_skills(character: Character) -> Skills:
    """Base skills with every trait's skill modifiers applied (display only)."""
    totals = {skill.value: character.skills.get(skill) for skill in Skill}
    for trait_id in character.traits:
        trait = TRAITS.get(trait_id)
        if trait is None:
            continue
        for key, delta in trait.effects.items():
            if key in totals:
                totals[key] += delta
    return Skills(**totals)
