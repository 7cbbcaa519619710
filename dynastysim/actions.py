"""
dynastysim/actions.py
~~~~~~~~~~~~~~~~~~~~~
Player actions applied outside the weekly tick.

Every handler validates all of its preconditions before touching the state
and returns ``False`` with the state untouched when any of them fails. On
success the given state is mutated in place and ``True`` is returned;
``GameSession`` runs handlers on a private copy and swaps it in, so readers
never see an in-progress action.
"""

from __future__ import annotations

import logging
import random

from dynastysim.config_loader import SimulationConfig
from dynastysim.models import Character, EffectType, EventEffect, EventType, GameEvent, GameState, Sex
from dynastysim.simulation import log_entry, transfer_titles
from dynastysim.world_data import get_character_age, rank_index
from utils.utils import clamp

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Marriage
# ---------------------------------------------------------------------------

def can_marry(
    state: GameState,
    a_id: str,
    b_id: str,
    config: SimulationConfig | None = None,
) -> bool:
    config = config or SimulationConfig()
    a = state.characters.get(a_id)
    b = state.characters.get(b_id)
    if a is None or b is None or a.id == b.id:
        return False
    if not a.alive or not b.alive:
        return False
    if a.spouse_ids or b.spouse_ids:
        return False
    week = state.current_week
    if get_character_age(a, week) < config.marriage_min_age or get_character_age(b, week) < config.marriage_min_age:
        return False
    return a.sex != b.sex


def arrange_marriage(
    state: GameState,
    a_id: str,
    b_id: str,
    matrilineal: bool = False,
    config: SimulationConfig | None = None,
) -> bool:
    """Wed two unmarried adults of opposite sex.

    The wife joins the husband's court unless she rules a title herself, in
    which case the husband joins hers.
    """
    if not can_marry(state, a_id, b_id, config):
        logger.debug("Marriage of %s and %s rejected.", a_id, b_id)
        return False

    a = state.characters[a_id]
    b = state.characters[b_id]
    husband, wife = (a, b) if a.sex is Sex.MALE else (b, a)

    if wife.is_ruler:
        husband.at_court = wife.id
    else:
        wife.at_court = husband.id if husband.is_ruler else husband.at_court

    a.spouse_ids.append(b.id)
    b.spouse_ids.append(a.id)
    a.matrilineal_marriage = matrilineal
    b.matrilineal_marriage = matrilineal

    kind = "matrilineal marriage" if matrilineal else "marriage"
    log_entry(
        state, EventType.MARRIAGE, "Marriage",
        f"{a.name} and {b.name} have been wed in a {kind}.",
        a.id,
    )
    logger.info("%s and %s married (matrilineal=%s).", a.id, b.id, matrilineal)
    return True


# ---------------------------------------------------------------------------
#  Court
# ---------------------------------------------------------------------------

def invite_acceptance_chance(state: GameState, config: SimulationConfig | None = None) -> float:
    """Chance that a character accepts the player's invitation to court."""
    config = config or SimulationConfig()
    player = state.characters.get(state.player_character_id)
    dynasty = state.dynasties.get(state.player_dynasty_id)

    prestige_bonus = 0.0
    if dynasty is not None:
        prestige_bonus = min(dynasty.prestige / config.invite_prestige_divisor, config.invite_prestige_bonus_cap)
    diplomacy_bonus = player.skills.diplomacy / 100 if player is not None else 0.0
    return min(config.invite_base_chance + prestige_bonus + diplomacy_bonus, config.invite_max_chance)


def invite_to_court(
    state: GameState,
    character_id: str,
    config: SimulationConfig | None = None,
    rng=None,
) -> bool:
    """Invite a foreign character to the player's court. May be declined."""
    rng = rng or random
    character = state.characters.get(character_id)
    player = state.characters.get(state.player_character_id)
    if character is None or player is None:
        return False
    if not character.alive:
        return False
    if character.dynasty_id == state.player_dynasty_id:
        return False
    if character.at_court == state.player_character_id:
        return False

    if rng.random() > invite_acceptance_chance(state, config):
        logger.debug("%s declined the invitation to court.", character_id)
        return False

    character.at_court = state.player_character_id
    logger.info("%s joined the court of %s.", character_id, state.player_character_id)
    return True


def banish_from_court(state: GameState, character_id: str) -> bool:
    character = state.characters.get(character_id)
    if character is None:
        return False
    if character.at_court != state.player_character_id:
        return False

    character.at_court = None
    logger.info("%s was banished from court.", character_id)
    return True


# ---------------------------------------------------------------------------
#  Titles
# ---------------------------------------------------------------------------

def grant_title(state: GameState, character_id: str, title_id: str) -> bool:
    """Give one of the player's titles to another living character."""
    character = state.characters.get(character_id)
    title = state.titles.get(title_id)
    player = state.characters.get(state.player_character_id)
    if character is None or title is None or player is None:
        return False
    if not character.alive or character.id == player.id:
        return False
    if title.holder_id != player.id:
        return False

    title.holder_id = character.id
    if character.primary_title_id is None:
        character.primary_title_id = title.id
    character.is_ruler = True

    if player.primary_title_id in (title.id, None):
        remaining = [t for t in state.titles.values() if t.holder_id == player.id]
        remaining.sort(key=lambda t: rank_index(t.rank), reverse=True)
        player.primary_title_id = remaining[0].id if remaining else None

    logger.info("%s granted %s to %s.", player.id, title.name, character.id)
    return True


# ---------------------------------------------------------------------------
#  Events
# ---------------------------------------------------------------------------

def apply_effect(state: GameState, event: GameEvent, effect: EventEffect) -> Character | None:
    """Apply one effect; return the character who died from it, if any."""
    target_id = effect.target or event.character_id
    target = state.characters.get(target_id)
    if target is None:
        logger.warning("Effect target %s of event %s is missing. Skipping.", target_id, event.id)
        return None

    if effect.type == EffectType.HEALTH:
        target.health = clamp(target.health + effect.value, 0, 100)
    elif effect.type == EffectType.FERTILITY:
        target.fertility = clamp(target.fertility + effect.value, 0, 100)
    elif effect.type == EffectType.SKILL:
        if effect.skill is not None:
            target.skills.set(effect.skill, max(0, target.skills.get(effect.skill) + effect.value))
    elif effect.type == EffectType.TRAIT:
        if effect.trait is not None and effect.trait not in target.traits:
            target.traits.append(effect.trait)
    elif effect.type == EffectType.DEATH:
        if target.alive:
            target.die(state.current_week)
            log_entry(
                state, EventType.DEATH, "Death",
                f"{target.name} has died.",
                target.id,
            )
            return target
    elif effect.type == EffectType.PRESTIGE:
        dynasty = state.dynasties.get(target.dynasty_id) if target.dynasty_id else None
        if dynasty is not None:
            dynasty.prestige += effect.value
    else:
        raise ValueError(f"Unhandled effect type: {effect.type!r}")
    return None


def resolve_event(
    state: GameState,
    event_id: str,
    choice_index: int,
    config: SimulationConfig | None = None,
) -> bool:
    """Apply the chosen option of a pending event and move it to the log.

    An event without choices is acknowledged with index 0. Deaths caused
    here leave titles in place for the next tick to pass on, unless the
    config asks for succession to run immediately.
    """
    config = config or SimulationConfig()
    event = next((e for e in state.events if e.id == event_id), None)
    if event is None:
        return False

    if event.choices:
        if not 0 <= choice_index < len(event.choices):
            return False
        effects = event.choices[choice_index].effects
    elif choice_index == 0:
        effects = []
    else:
        return False

    died = []
    for effect in effects:
        casualty = apply_effect(state, event, effect)
        if casualty is not None:
            died.append(casualty.id)

    if config.resolve_succession_on_event_death:
        for deceased_id in died:
            transfer_titles(state, deceased_id)

    state.events = [e for e in state.events if e.id != event_id]
    event.resolved = True
    event.chosen_index = choice_index
    state.event_log.append(event)
    logger.debug("Resolved event %s with choice %d.", event_id, choice_index)
    return True
