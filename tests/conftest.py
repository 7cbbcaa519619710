# tests/conftest.py
from __future__ import annotations

import random

import pytest

from dynastysim.config_loader import SimulationConfig
from dynastysim.models import Character, CultureId, Dynasty, GameState, Sex, Skills, Title, TitleRank

PLAYER_DYNASTY = "dyn_player"
RIVAL_DYNASTY = "dyn_rival"


class FixedRandom(random.Random):
    """``random()`` always returns ``value``; integer draws stay seeded.

    Lets a test force every probability roll to succeed (0.0) or fail (0.99)
    while names, traits and skills are still drawn normally.
    """

    def __init__(self, value: float, seed: int = 0) -> None:
        self._bits = random.Random(seed)
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value

    def getrandbits(self, k: int) -> int:
        return self._bits.getrandbits(k)


def years(n: int) -> int:
    return n * 52


def add_character(state: GameState, char_id: str, **overrides) -> Character:
    """Insert a plain character into ``state`` and return it."""
    fields = dict(
        id=char_id,
        name=char_id.title(),
        sex=Sex.MALE,
        culture=CultureId.ANGLO,
        dynasty_id=PLAYER_DYNASTY,
        birth_week=state.current_week - years(25),
        health=100,
        fertility=80,
        skills=Skills(diplomacy=10, martial=10, stewardship=10, intrigue=10, learning=10),
    )
    fields.update(overrides)
    character = Character(**fields)
    state.characters[char_id] = character
    return character


def add_title(state: GameState, title_id: str, holder_id: str | None, rank: TitleRank = TitleRank.COUNTY, **overrides) -> Title:
    title = Title(id=title_id, name=f"County of {title_id}", rank=rank, holder_id=holder_id, **overrides)
    state.titles[title_id] = title
    return title


def link_child(parent_a: Character, parent_b: Character | None, child: Character) -> None:
    for parent in (parent_a, parent_b):
        if parent is None:
            continue
        parent.children_ids.append(child.id)
        if parent.sex is Sex.FEMALE:
            child.mother_id = parent.id
        else:
            child.father_id = parent.id


def wed(a: Character, b: Character) -> None:
    a.spouse_ids.append(b.id)
    b.spouse_ids.append(a.id)


@pytest.fixture
def config() -> SimulationConfig:
    return SimulationConfig()


@pytest.fixture
def state() -> GameState:
    """A small world: the player ruler of the player dynasty, nobody else."""
    gs = GameState(player_dynasty_id=PLAYER_DYNASTY, player_character_id="player", current_week=10)
    gs.dynasties[PLAYER_DYNASTY] = Dynasty(
        id=PLAYER_DYNASTY, name="Godwinson", founder_id="player", culture=CultureId.ANGLO, prestige=100
    )
    gs.dynasties[RIVAL_DYNASTY] = Dynasty(
        id=RIVAL_DYNASTY, name="Lothbrok", founder_id="rival", culture=CultureId.NORSE, prestige=250
    )
    add_character(gs, "player", is_ruler=True)
    return gs


@pytest.fixture
def always():
    """An rng whose every probability roll succeeds."""
    return FixedRandom(0.0)


@pytest.fixture
def never():
    """An rng whose every probability roll fails."""
    return FixedRandom(0.99)
