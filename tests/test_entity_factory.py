# tests/test_entity_factory.py
import random

from dynastysim.entity_factory import (
    create_character,
    create_dynasty,
    create_holding,
    create_title,
    generate_name,
    generate_random_traits,
)
from dynastysim.models import CultureId, Sex, SuccessionLaw, TitleRank
from dynastysim.world_data import CULTURES, DEFAULT_MOTTO


def test_generate_name_draws_from_culture_pool():
    rng = random.Random(3)
    for culture in CultureId:
        assert generate_name(culture, Sex.MALE, rng) in CULTURES[culture].male_names
        assert generate_name(culture, Sex.FEMALE, rng) in CULTURES[culture].female_names


def test_random_traits_are_distinct():
    rng = random.Random(1)
    for _ in range(50):
        traits = generate_random_traits(2, rng)
        assert len(traits) == 2
        assert traits[0] != traits[1]


def test_create_character_ranges():
    rng = random.Random(7)
    for _ in range(100):
        c = create_character("Alfred", Sex.MALE, CultureId.ANGLO, "dyn", -520, rng=rng)
        assert c.alive
        assert c.death_week is None
        assert 80 <= c.health < 120
        assert 60 <= c.fertility < 100
        for value in c.skills.model_dump().values():
            assert 3 <= value < 18
        assert c.spouse_ids == [] and c.children_ids == []
        assert not c.is_ruler
        assert c.primary_title_id is None
        assert c.portrait is not None


def test_create_character_links_parents_and_court():
    c = create_character(
        "Emma", Sex.FEMALE, CultureId.FRANKISH, None, 0,
        mother_id="m", father_id="f", court_id="lord", rng=random.Random(0),
    )
    assert (c.mother_id, c.father_id, c.at_court) == ("m", "f", "lord")
    assert c.dynasty_id is None


def test_ids_are_unique():
    rng = random.Random(0)
    ids = {create_character("A", Sex.MALE, CultureId.NORSE, None, 0, rng=rng).id for _ in range(200)}
    assert len(ids) == 200


def test_create_dynasty_defaults():
    d = create_dynasty("Godwinson", "founder", CultureId.ANGLO, rng=random.Random(0))
    assert d.prestige == 100
    assert d.motto == DEFAULT_MOTTO
    assert d.founder_id == "founder"
    assert d.coat_of_arms is not None


def test_create_title_and_holding():
    title = create_title("County of Kent", TitleRank.COUNTY, "holder")
    assert title.succession_law == SuccessionLaw.PRIMOGENITURE
    assert title.claimant_ids == []

    rng = random.Random(2)
    for _ in range(50):
        h = create_holding("Castle Kent", title.id, rng)
        assert h.title_id == title.id
        assert 10 <= h.income < 30
        assert 100 <= h.levies < 300
        assert 1 <= h.development <= 5
