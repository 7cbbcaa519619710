# tests/test_persistence.py
import json
import random

import pytest

from dynastysim.genesis import start_new_game
from dynastysim.models import CultureId, Sex
from dynastysim.persistence import SaveStore, deserialize_state, serialize_state
from dynastysim.simulation import Simulation


@pytest.fixture
def game():
    rng = random.Random(5)
    state = start_new_game("Capet", "Hugues", CultureId.FRANKISH, Sex.MALE, rng=rng)
    sim = Simulation(rng=rng)
    for _ in range(60):
        state = sim.advance_week(state).state
    return state


@pytest.fixture
def store(tmp_path):
    return SaveStore(tmp_path / "saves")


def test_snapshot_uses_camel_case_keys(game):
    payload = json.loads(serialize_state(game))
    assert "currentWeek" in payload
    assert "playerCharacterId" in payload
    character = next(iter(payload["characters"].values()))
    assert "birthWeek" in character
    assert "spouseIds" in character


def test_snapshot_restores_an_equal_state(game):
    assert deserialize_state(serialize_state(game)) == game


def test_corrupt_payload_is_no_save():
    assert deserialize_state("{not json") is None
    assert deserialize_state(json.dumps({"currentWeek": 3})) is None


def test_store_save_load_delete(store, game):
    assert not store.has_save()
    assert store.load() is None

    store.save(game)
    assert store.has_save()
    assert store.path.name == "house_eternal_save.json"
    assert store.load() == game

    store.delete()
    assert not store.has_save()
    store.delete()


def test_store_overwrites_single_slot(store, game):
    store.save(game)
    later = Simulation(rng=random.Random(9)).advance_week(game).state
    store.save(later)
    assert store.load().current_week == game.current_week + 1
    assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]


def test_store_treats_garbage_file_as_no_save(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("garbage", encoding="utf-8")
    assert store.has_save()
    assert store.load() is None
