# tests/test_actions.py
import pytest

from conftest import PLAYER_DYNASTY, RIVAL_DYNASTY, FixedRandom, add_character, add_title, link_child, years
from dynastysim import actions
from dynastysim.config_loader import SimulationConfig
from dynastysim.models import (
    EffectType,
    EventChoice,
    EventEffect,
    EventType,
    GameEvent,
    Sex,
    Skill,
    Skills,
    TitleRank,
    TraitId,
)


# ---------------------------------------------------------------------------
#  Marriage
# ---------------------------------------------------------------------------

def test_marriage_links_spouses_and_moves_wife_to_court(state):
    add_character(state, "bride", sex=Sex.FEMALE, dynasty_id=RIVAL_DYNASTY)

    assert actions.arrange_marriage(state, "player", "bride")

    player, bride = state.characters["player"], state.characters["bride"]
    assert player.spouse_ids == ["bride"]
    assert bride.spouse_ids == ["player"]
    assert bride.at_court == "player"
    assert not player.matrilineal_marriage and not bride.matrilineal_marriage
    assert state.event_log[-1].type == EventType.MARRIAGE


def test_ruling_wife_keeps_husband_at_her_court(state):
    add_character(state, "queen", sex=Sex.FEMALE, dynasty_id=RIVAL_DYNASTY, is_ruler=True)
    add_character(state, "squire")

    assert actions.arrange_marriage(state, "squire", "queen", matrilineal=True)

    assert state.characters["squire"].at_court == "queen"
    assert state.characters["queen"].at_court is None
    assert state.characters["squire"].matrilineal_marriage
    assert state.characters["queen"].matrilineal_marriage


@pytest.mark.parametrize(
    "bride_overrides",
    [
        {"sex": Sex.MALE},
        {"alive": False},
        {"spouse_ids": ["someone"]},
        {"birth_week": 10 - years(15)},
    ],
)
def test_invalid_marriages_are_rejected(state, bride_overrides):
    fields = {"sex": Sex.FEMALE, "dynasty_id": RIVAL_DYNASTY}
    fields.update(bride_overrides)
    add_character(state, "bride", **fields)
    before = state.model_copy(deep=True)

    assert not actions.arrange_marriage(state, "player", "bride")
    assert state == before


def test_cannot_marry_self_or_missing(state):
    assert not actions.arrange_marriage(state, "player", "player")
    assert not actions.arrange_marriage(state, "player", "ghost")


# ---------------------------------------------------------------------------
#  Court
# ---------------------------------------------------------------------------

def test_acceptance_chance_formula(state, config):
    # 0.5 + min(100 / 500, 0.3) + 10 / 100
    assert actions.invite_acceptance_chance(state, config) == pytest.approx(0.8)

    state.dynasties[PLAYER_DYNASTY].prestige = 1000
    state.characters["player"].skills = Skills(diplomacy=30)
    assert actions.invite_acceptance_chance(state, config) == pytest.approx(0.95)


def test_invite_accepted_and_declined(state, config):
    add_character(state, "knight", dynasty_id=RIVAL_DYNASTY)

    assert not actions.invite_to_court(state, "knight", config, FixedRandom(0.9))
    assert state.characters["knight"].at_court is None

    assert actions.invite_to_court(state, "knight", config, FixedRandom(0.5))
    assert state.characters["knight"].at_court == "player"


def test_invite_rejects_own_dynasty_dead_and_present(state, config, always):
    add_character(state, "cousin")
    add_character(state, "corpse", dynasty_id=RIVAL_DYNASTY, alive=False)
    add_character(state, "guest", dynasty_id=RIVAL_DYNASTY, at_court="player")

    for char_id in ("cousin", "corpse", "guest", "ghost"):
        assert not actions.invite_to_court(state, char_id, config, always)


def test_banish(state):
    add_character(state, "guest", dynasty_id=RIVAL_DYNASTY, at_court="player")
    add_character(state, "stranger", dynasty_id=RIVAL_DYNASTY)

    assert actions.banish_from_court(state, "guest")
    assert state.characters["guest"].at_court is None
    assert not actions.banish_from_court(state, "guest")
    assert not actions.banish_from_court(state, "stranger")


# ---------------------------------------------------------------------------
#  Titles
# ---------------------------------------------------------------------------

def test_grant_title_makes_a_vassal(state):
    add_title(state, "kent", "player", TitleRank.COUNTY)
    add_title(state, "wessex", "player", TitleRank.DUCHY)
    state.characters["player"].primary_title_id = "wessex"
    add_character(state, "knight", dynasty_id=RIVAL_DYNASTY, at_court="player")

    assert actions.grant_title(state, "knight", "kent")

    knight = state.characters["knight"]
    assert state.titles["kent"].holder_id == "knight"
    assert knight.is_ruler
    assert knight.primary_title_id == "kent"
    assert state.characters["player"].primary_title_id == "wessex"


def test_granting_primary_title_promotes_next_highest(state):
    add_title(state, "kent", "player", TitleRank.COUNTY)
    add_title(state, "wessex", "player", TitleRank.DUCHY)
    state.characters["player"].primary_title_id = "wessex"
    add_character(state, "knight")

    assert actions.grant_title(state, "knight", "wessex")
    assert state.characters["player"].primary_title_id == "kent"

    assert actions.grant_title(state, "knight", "kent")
    assert state.characters["player"].primary_title_id is None
    assert state.characters["knight"].primary_title_id == "wessex"


def test_grant_title_rejections(state):
    add_title(state, "kent", "player")
    add_title(state, "york", "rival")
    add_character(state, "knight")
    add_character(state, "corpse", alive=False)

    assert not actions.grant_title(state, "knight", "york")
    assert not actions.grant_title(state, "corpse", "kent")
    assert not actions.grant_title(state, "player", "kent")
    assert not actions.grant_title(state, "knight", "nowhere")
    assert state.titles["kent"].holder_id == "player"


# ---------------------------------------------------------------------------
#  Events
# ---------------------------------------------------------------------------

def _pending(state, *choices, character_id="player"):
    event = GameEvent(
        id="evt",
        type=EventType.FEAST,
        title="A Grand Feast",
        description="",
        week=state.current_week,
        character_id=character_id,
        choices=list(choices) or None,
    )
    state.events.append(event)
    return event


def test_resolve_applies_chosen_effects(state, config):
    _pending(
        state,
        EventChoice(text="a", effects=[EventEffect(type=EffectType.PRESTIGE, value=25)]),
        EventChoice(text="b", effects=[
            EventEffect(type=EffectType.SKILL, skill=Skill.DIPLOMACY, value=2),
            EventEffect(type=EffectType.TRAIT, trait=TraitId.KIND),
            EventEffect(type=EffectType.HEALTH, value=-30),
        ]),
    )

    assert actions.resolve_event(state, "evt", 1, config)

    player = state.characters["player"]
    assert player.skills.diplomacy == 12
    assert player.traits == [TraitId.KIND]
    assert player.health == 70
    assert state.dynasties[PLAYER_DYNASTY].prestige == 100
    assert state.events == []
    logged = state.event_log[-1]
    assert logged.id == "evt"
    assert logged.resolved
    assert logged.chosen_index == 1


def test_effects_are_clamped_and_deduplicated(state, config):
    player = state.characters["player"]
    player.traits = [TraitId.KIND]
    player.skills = Skills(learning=1)
    _pending(state, EventChoice(text="a", effects=[
        EventEffect(type=EffectType.HEALTH, value=50),
        EventEffect(type=EffectType.FERTILITY, value=-500),
        EventEffect(type=EffectType.SKILL, skill=Skill.LEARNING, value=-5),
        EventEffect(type=EffectType.TRAIT, trait=TraitId.KIND),
    ]))

    assert actions.resolve_event(state, "evt", 0, config)

    assert player.health == 100
    assert player.fertility == 0
    assert player.skills.learning == 0
    assert player.traits == [TraitId.KIND]


def test_effect_target_overrides_subject(state, config):
    add_character(state, "rival", dynasty_id=RIVAL_DYNASTY)
    _pending(state, EventChoice(text="a", effects=[
        EventEffect(type=EffectType.PRESTIGE, target="rival", value=-50),
    ]))

    assert actions.resolve_event(state, "evt", 0, config)
    assert state.dynasties[RIVAL_DYNASTY].prestige == 200
    assert state.dynasties[PLAYER_DYNASTY].prestige == 100


def test_invalid_choice_leaves_event_pending(state, config):
    _pending(state, EventChoice(text="a"))
    assert not actions.resolve_event(state, "evt", 3, config)
    assert not actions.resolve_event(state, "evt", -1, config)
    assert not actions.resolve_event(state, "missing", 0, config)
    assert len(state.events) == 1
    assert state.event_log == []


def test_choiceless_event_is_acknowledged_with_index_zero(state, config):
    _pending(state)
    assert not actions.resolve_event(state, "evt", 1, config)
    assert actions.resolve_event(state, "evt", 0, config)
    assert state.event_log[-1].chosen_index == 0


def test_death_effect_leaves_titles_for_next_tick(state, config):
    add_title(state, "kent", "player")
    _pending(state, EventChoice(text="a", effects=[EventEffect(type=EffectType.DEATH)]))

    assert actions.resolve_event(state, "evt", 0, config)

    player = state.characters["player"]
    assert not player.alive
    assert player.death_week == state.current_week
    assert state.titles["kent"].holder_id == "player"
    assert EventType.DEATH in [e.type for e in state.event_log]


def test_death_effect_can_resolve_succession_immediately(state):
    config = SimulationConfig(resolve_succession_on_event_death=True)
    player = state.characters["player"]
    son = add_character(state, "son", birth_week=state.current_week - years(5))
    link_child(player, None, son)
    add_title(state, "kent", "player")
    _pending(state, EventChoice(text="a", effects=[EventEffect(type=EffectType.DEATH)]))

    assert actions.resolve_event(state, "evt", 0, config)
    assert state.titles["kent"].holder_id == "son"


def test_grant_title_gives_player_without_primary_their_best_remaining(state):
    add_title(state, "kent", "player", TitleRank.COUNTY)
    add_title(state, "wessex", "player", TitleRank.DUCHY)
    add_character(state, "knight")
    assert state.characters["player"].primary_title_id is None

    assert actions.grant_title(state, "knight", "kent")
    assert state.characters["player"].primary_title_id == "wessex"
