"""
dynastysim/queries.py
~~~~~~~~~~~~~~~~~~~~~
Read-only views over a ``GameState`` for the presentation layer.

Nothing here mutates state. Dangling IDs are silently dropped from
results.
"""

from __future__ import annotations

from dynastysim.config_loader import SimulationConfig
from dynastysim.models import Character, Dynasty, GameState, Holding, Title
from dynastysim.world_data import TITLE_RANK_NAMES, get_character_age, rank_index


def _resolve(state: GameState, ids: list[str]) -> list[Character]:
    return [state.characters[i] for i in ids if i in state.characters]


def get_player_character(state: GameState) -> Character | None:
    return state.characters.get(state.player_character_id)


def get_player_dynasty(state: GameState) -> Dynasty | None:
    return state.dynasties.get(state.player_dynasty_id)


def get_dynasty_members(state: GameState, dynasty_id: str, living_only: bool = False) -> list[Character]:
    return [
        c for c in state.characters.values()
        if c.dynasty_id == dynasty_id and (c.alive or not living_only)
    ]


def get_court_members(state: GameState) -> list[Character]:
    """Living characters at the player's court, the player excluded."""
    player_id = state.player_character_id
    return [
        c for c in state.characters.values()
        if c.alive and c.at_court == player_id and c.id != player_id
    ]


def get_non_dynastic_characters(state: GameState) -> list[Character]:
    return [
        c for c in state.characters.values()
        if c.alive and c.dynasty_id != state.player_dynasty_id
    ]


def get_children(state: GameState, character_id: str) -> list[Character]:
    character = state.characters.get(character_id)
    return _resolve(state, character.children_ids) if character else []


def get_spouses(state: GameState, character_id: str) -> list[Character]:
    character = state.characters.get(character_id)
    return _resolve(state, character.spouse_ids) if character else []


def get_parents(state: GameState, character_id: str) -> tuple[Character | None, Character | None]:
    """Return ``(mother, father)``."""
    character = state.characters.get(character_id)
    if character is None:
        return None, None
    mother = state.characters.get(character.mother_id) if character.mother_id else None
    father = state.characters.get(character.father_id) if character.father_id else None
    return mother, father


def get_titles_held(state: GameState, character_id: str) -> list[Title]:
    """Titles held by the character, highest rank first."""
    held = [t for t in state.titles.values() if t.holder_id == character_id]
    return sorted(held, key=lambda t: rank_index(t.rank), reverse=True)


def get_holdings(state: GameState, character_id: str) -> list[Holding]:
    title_ids = {t.id for t in get_titles_held(state, character_id)}
    return [h for h in state.holdings.values() if h.title_id in title_ids]


def get_vassals(state: GameState) -> list[Character]:
    """Court members who hold at least one title."""
    holders = {t.holder_id for t in state.titles.values() if t.holder_id}
    return [c for c in get_court_members(state) if c.id in holders]


def get_character_title(character: Character, titles: dict[str, Title]) -> str | None:
    """Rank name for the character's primary title, e.g. ``"Countess"``."""
    if not character.primary_title_id:
        return None
    title = titles.get(character.primary_title_id)
    if title is None:
        return None
    return TITLE_RANK_NAMES[title.rank][character.sex]


def _are_close_kin(a: Character, b: Character) -> bool:
    if a.mother_id and a.mother_id == b.mother_id:
        return True
    if a.father_id and a.father_id == b.father_id:
        return True
    return a.id in (b.mother_id, b.father_id) or b.id in (a.mother_id, a.father_id)


def eligible_marriage_partners(
    state: GameState,
    character_id: str,
    config: SimulationConfig | None = None,
) -> list[Character]:
    """Candidates ``character_id`` could wed, most prestigious house first.

    Siblings, half-siblings, parents and children are excluded.
    """
    config = config or SimulationConfig()
    character = state.characters.get(character_id)
    week = state.current_week
    if character is None or not character.alive or character.spouse_ids:
        return []
    if get_character_age(character, week) < config.marriage_min_age:
        return []

    def prestige(c: Character) -> int:
        dynasty = state.dynasties.get(c.dynasty_id) if c.dynasty_id else None
        return dynasty.prestige if dynasty else 0

    candidates = [
        c for c in state.characters.values()
        if c.id != character.id
        and c.alive
        and not c.spouse_ids
        and c.sex != character.sex
        and get_character_age(c, week) >= config.marriage_min_age
        and not _are_close_kin(character, c)
    ]
    return sorted(candidates, key=prestige, reverse=True)
