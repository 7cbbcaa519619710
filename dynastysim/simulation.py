"""
dynastysim/simulation.py
~~~~~~~~~~~~~~~~~~~~~~~~
The weekly state-transition function.

``Simulation.advance_week`` takes a ``GameState`` snapshot and returns a new,
independent snapshot one week later. The input is never mutated, so readers
holding the old value never observe a half-applied week.

Phases run in a fixed order within a week:

  1. aging and mortality
  2. pregnancy advancement and births
  3. new pregnancies
  4. title succession for everyone who died
  5. player continuity (heir takeover or game over)
  6. random narrative event for the player
  7. autosave marker
"""

from __future__ import annotations

import logging
import random

from pydantic import BaseModel

from dynastysim.config_loader import NARRATIVE_LOGGING, SimulationConfig
from dynastysim.entity_factory import create_character, generate_name
from dynastysim.events import generate_event
from dynastysim.models import Character, EventType, GameEvent, GameState, Sex, SuccessionLaw
from dynastysim.succession import calculate_succession_line, find_heir
from dynastysim.world_data import get_character_age, rank_index
from utils.utils import clamp, generate_id

logger = logging.getLogger(__name__)


def _narrate(msg: str, *args) -> None:
    if NARRATIVE_LOGGING:
        logger.info(msg, *args)
    else:
        logger.debug(msg, *args)


class TickResult(BaseModel):
    """Outcome of one simulated week."""

    state: GameState
    autosave_requested: bool = False
    died: list[str] = []
    born: list[str] = []


def log_entry(
    state: GameState,
    event_type: EventType,
    title: str,
    description: str,
    character_id: str,
) -> GameEvent:
    """Append an already-resolved narrative entry to the state's event log."""
    entry = GameEvent(
        id=generate_id(),
        type=event_type,
        title=title,
        description=description,
        week=state.current_week,
        character_id=character_id,
        resolved=True,
    )
    state.event_log.append(entry)
    return entry


class Simulation:
    def __init__(self, config: SimulationConfig | None = None, rng=None):
        self.config = config or SimulationConfig()
        self.rng = rng or random

    # ------------------------------------------------------------------
    #  Public API
    # ------------------------------------------------------------------

    def advance_week(self, state: GameState) -> TickResult:
        """Compute the world one week after ``state``.

        Once the game is over this is a no-op: the same state is returned
        and nothing ages.
        """
        if state.game_over:
            return TickResult(state=state)

        new_state = state.model_copy(deep=True)
        new_state.current_week += 1

        died: list[str] = []
        born: list[str] = []

        self.process_mortality(new_state, died)
        self.process_pregnancies(new_state, died, born)
        self.process_conceptions(new_state)
        self.process_succession(new_state, died)
        self.ensure_player_continuity(new_state)
        if not new_state.game_over:
            self.roll_narrative_event(new_state)
        autosave = self.check_autosave(new_state)

        return TickResult(state=new_state, autosave_requested=autosave, died=died, born=born)

    # ------------------------------------------------------------------
    #  1. Aging & mortality
    # ------------------------------------------------------------------

    def death_chance(self, character: Character, age: int) -> float:
        """Old-age mortality per week. Zero at or below the threshold."""
        cfg = self.config
        if age <= cfg.old_age_threshold:
            return 0.0
        health = clamp(character.health, 0, 100)
        return (
            (age - cfg.old_age_threshold) * cfg.old_age_mortality_per_year
            + (100 - health) * cfg.frailty_mortality_per_point
        )

    def process_mortality(self, state: GameState, died: list[str]) -> None:
        week = state.current_week
        for character in list(state.characters.values()):
            if not character.alive:
                continue

            age = get_character_age(character, week)

            if age > self.config.old_age_threshold:
                if self.rng.random() < self.death_chance(character, age):
                    character.die(week)
                    died.append(character.id)
                    log_entry(
                        state, EventType.DEATH, "Death",
                        f"{character.name} has died at the age of {age}.",
                        character.id,
                    )
                    _narrate("%s (%s) died at age %d.", character.name, character.id, age)
                    continue

            if age < self.config.child_mortality_max_age and week % 52 == 0:
                if self.rng.random() < self.config.child_mortality_chance:
                    character.die(week)
                    died.append(character.id)
                    log_entry(
                        state, EventType.DEATH, "Death",
                        f"{character.name} has died in childhood at the age of {age}.",
                        character.id,
                    )
                    _narrate("%s (%s) died in childhood.", character.name, character.id)
                    continue

    # ------------------------------------------------------------------
    #  2. Pregnancy advancement & births
    # ------------------------------------------------------------------

    def process_pregnancies(self, state: GameState, died: list[str], born: list[str]) -> None:
        for mother in list(state.characters.values()):
            if not mother.alive or mother.pregnant_with is None:
                continue
            if mother.pregnancy_weeks_remaining > 0:
                mother.pregnancy_weeks_remaining -= 1
            if mother.pregnancy_weeks_remaining > 0:
                continue

            father = state.characters.get(mother.pregnant_with)
            mother.pregnant_with = None
            mother.pregnancy_weeks_remaining = 0

            if father is None:
                logger.warning(
                    "Pregnancy of %s references missing co-parent. No birth.", mother.id
                )
                continue

            child = self.deliver_child(state, mother, father)
            born.append(child.id)

            if self.rng.random() < self.config.maternal_mortality_chance:
                mother.die(state.current_week)
                died.append(mother.id)
                log_entry(
                    state, EventType.CHILDBIRTH_DEATH, "Death in Childbirth",
                    f"{mother.name} has died giving birth to {child.name}.",
                    mother.id,
                )
                _narrate("%s (%s) died in childbirth.", mother.name, mother.id)

    def deliver_child(self, state: GameState, mother: Character, father: Character) -> Character:
        """Create the newborn, link it to both parents and log the birth."""
        child_sex = Sex.MALE if self.rng.random() < 0.5 else Sex.FEMALE

        matrilineal = mother.matrilineal_marriage or father.matrilineal_marriage
        lineage_parent, other_parent = (mother, father) if matrilineal else (father, mother)
        dynasty_id = lineage_parent.dynasty_id or other_parent.dynasty_id

        if lineage_parent.is_ruler:
            court_id = lineage_parent.id
        elif other_parent.is_ruler:
            court_id = other_parent.id
        else:
            court_id = lineage_parent.at_court or other_parent.at_court

        culture = lineage_parent.culture
        child = create_character(
            generate_name(culture, child_sex, self.rng),
            child_sex,
            culture,
            dynasty_id,
            state.current_week,
            mother_id=mother.id,
            father_id=father.id,
            court_id=court_id,
            rng=self.rng,
        )
        state.characters[child.id] = child
        mother.children_ids.append(child.id)
        father.children_ids.append(child.id)

        noun = "son" if child_sex is Sex.MALE else "daughter"
        log_entry(
            state, EventType.BIRTH, "A Child is Born",
            f"{mother.name} has given birth to a {noun} named {child.name}.",
            mother.id,
        )
        _narrate("%s (%s) was born to %s and %s.", child.name, child.id, mother.id, father.id)
        return child

    # ------------------------------------------------------------------
    #  3. New pregnancies
    # ------------------------------------------------------------------

    def shared_children_count(self, a: Character, b: Character) -> int:
        return len(set(a.children_ids) & set(b.children_ids))

    def process_conceptions(self, state: GameState) -> None:
        cfg = self.config
        week = state.current_week
        for woman in list(state.characters.values()):
            if not woman.alive or woman.sex is not Sex.FEMALE:
                continue
            if len(woman.spouse_ids) != 1 or woman.pregnant_with is not None:
                continue
            age = get_character_age(woman, week)
            if not cfg.fertile_min_age <= age <= cfg.fertile_max_age:
                continue

            spouse = state.characters.get(woman.spouse_ids[0])
            if spouse is None:
                logger.warning("Dangling spouse id %s on %s. Skipping.", woman.spouse_ids[0], woman.id)
                continue
            if not spouse.alive:
                continue
            if self.shared_children_count(woman, spouse) >= cfg.max_shared_children:
                continue

            chance = (woman.fertility / 100) * (spouse.fertility / 100) * cfg.conception_base_chance
            if self.rng.random() < chance:
                woman.pregnant_with = spouse.id
                woman.pregnancy_weeks_remaining = cfg.pregnancy_weeks
                _narrate("%s (%s) is expecting a child.", woman.name, woman.id)

    # ------------------------------------------------------------------
    #  4. Title succession
    # ------------------------------------------------------------------

    def process_succession(self, state: GameState, died: list[str]) -> None:
        """Pass every title held by a dead character to its heir.

        Covers the deaths of this week and any title still held by someone
        who died outside the tick, such as through an event choice.
        """
        dead_holders = list(died)
        for title in state.titles.values():
            holder = state.characters.get(title.holder_id) if title.holder_id else None
            if holder is not None and not holder.alive and holder.id not in dead_holders:
                dead_holders.append(holder.id)

        for deceased_id in dead_holders:
            transfer_titles(state, deceased_id)

    # ------------------------------------------------------------------
    #  5. Player continuity
    # ------------------------------------------------------------------

    def ensure_player_continuity(self, state: GameState) -> None:
        player = state.characters.get(state.player_character_id)
        if player is not None and player.alive:
            return

        dynasty_id = state.player_dynasty_id
        living = [
            c for c in state.characters.values()
            if c.alive and c.dynasty_id == dynasty_id
        ]

        if not living:
            dynasty = state.dynasties.get(dynasty_id)
            name = dynasty.name if dynasty else "dynasty"
            state.game_over = True
            state.game_over_reason = f"The {name} dynasty has ended. No living heirs remain."
            log_entry(
                state, EventType.GAME_OVER, "The End of a Dynasty",
                state.game_over_reason, state.player_character_id,
            )
            logger.info("Game over at week %d: %s", state.current_week, state.game_over_reason)
            return

        heir_id = find_heir(
            state.player_character_id, state.characters, SuccessionLaw.PRIMOGENITURE, dynasty_id
        )
        if heir_id is None:
            rulers = [c for c in living if c.is_ruler]
            heir_id = (rulers or living)[0].id

        heir = state.characters[heir_id]
        state.player_character_id = heir_id
        log_entry(
            state, EventType.HEIR, "A New Head of House",
            f"You are now playing as {heir.name}.",
            heir_id,
        )
        logger.info("Player control passed to %s (%s).", heir.name, heir_id)

    # ------------------------------------------------------------------
    #  6. Narrative events
    # ------------------------------------------------------------------

    def roll_narrative_event(self, state: GameState) -> None:
        if self.rng.random() >= self.config.event_chance_per_week:
            return
        player = state.characters.get(state.player_character_id)
        if player is None or not player.alive:
            return
        event = generate_event(player, state.current_week, self.rng)
        if event is not None:
            state.events.append(event)

    # ------------------------------------------------------------------
    #  7. Autosave marker
    # ------------------------------------------------------------------

    def check_autosave(self, state: GameState) -> bool:
        if state.current_week - state.last_autosave_week >= self.config.autosave_interval_weeks:
            state.last_autosave_week = state.current_week
            logger.debug("Autosave requested at week %d.", state.current_week)
            return True
        return False


def transfer_titles(state: GameState, deceased_id: str) -> None:
    """Hand every title held by ``deceased_id`` to the head of its succession line.

    Titles are processed highest rank first so an heir with no primary
    title takes the most senior one as primary. Titles with no eligible
    heir fall vacant.
    """
    held = [t for t in state.titles.values() if t.holder_id == deceased_id]
    held.sort(key=lambda t: rank_index(t.rank), reverse=True)

    deceased = state.characters.get(deceased_id)
    deceased_name = deceased.name if deceased else deceased_id

    for title in held:
        line = calculate_succession_line(deceased_id, state.characters, title.succession_law)
        if not line:
            title.holder_id = None
            logger.info("%s has fallen vacant after the death of %s.", title.name, deceased_name)
            continue

        heir = state.characters[line[0]]
        title.holder_id = heir.id
        if heir.primary_title_id is None:
            heir.primary_title_id = title.id
            heir.is_ruler = True
        log_entry(
            state, EventType.INHERITANCE, "Inheritance",
            f"{heir.name} has inherited the {title.name} from {deceased_name}.",
            heir.id,
        )
        _narrate("%s inherited %s.", heir.id, title.id)
