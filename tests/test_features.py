"""
tests/test_features.py
End-to-end feature vector assembly.
"""

import pytest
from deck_signals import constants
from deck_signals.aggregator import DeckAggregator
from deck_signals.configuration import Settings
from deck_signals.features.engine import build_features, build_features_batch
from deck_signals.features.schema import FeatureSchemaError
from deck_signals.rules import ROLE_NAMES


def _numbers(value):
    if isinstance(value, bool):
        return
    if isinstance(value, (int, float)):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _numbers(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _numbers(item)


def test_cultivate_and_swords(cultivate_swords_deck):
    vector = build_features(cultivate_swords_deck)

    assert vector.counts["ramp"] == 1
    assert vector.counts["tutors"] == 1
    assert vector.counts["spot"] == 1
    assert vector.interaction.instant == 1
    assert vector.interaction_density == 1.0
    assert vector.curve["3"] == 1
    assert vector.curve["0-1"] == 1

    assert vector.meta.avg_mv == 2.0
    assert vector.meta.mainboard_count == 2
    assert vector.meta.land_count == 0
    assert vector.type_counts == {"Sorcery": 1, "Instant": 1}
    assert vector.coloured_mana_curve.G == 1
    assert vector.coloured_mana_curve.W == 1
    assert vector.signals[0].name == "Swords to Plowshares"
    assert vector.signals[0].tags == ("spot",)


def test_counts_cover_every_role(cultivate_swords_deck):
    vector = build_features(cultivate_swords_deck)
    assert list(vector.counts.keys()) == ROLE_NAMES
    assert vector.counts["wipes"] == 0


def test_schema_version(cultivate_swords_deck):
    assert build_features(cultivate_swords_deck).schema_version == constants.FEATURE_SCHEMA_VERSION


def test_deterministic(landfall_deck):
    first = build_features(landfall_deck).model_dump_json()
    second = build_features(landfall_deck).model_dump_json()
    assert first == second


def test_curve_sum_matches_nonland_count(landfall_deck):
    vector = build_features(landfall_deck)
    assert sum(vector.curve.values()) == vector.meta.mainboard_count == 4
    assert sum(vector.effective_curve.values()) == 4
    assert list(vector.curve.keys()) == constants.CURVE_BUCKETS


def test_non_negative(landfall_deck):
    payload = build_features(landfall_deck).model_dump()
    assert all(n >= 0 for n in _numbers(payload))


def test_landfall_deck_sources(landfall_deck):
    vector = build_features(landfall_deck)

    assert vector.meta.land_count == 33
    assert vector.mana_pool.R == 1
    assert vector.mana_pool.G == 1
    assert vector.c_pips.supply == 2
    # early green pips 3, green sources 2 (one land and Lotus Cobra)
    assert vector.color_tension_index.G == 1.5
    assert vector.meta.commander.name == "Omnath, Locus of Rage"
    assert vector.meta.commander.color_identity == ("R", "G")
    assert "landfall" in vector.keyword_histogram


def test_pip_symmetry(make_entry, make_deck):
    deck = make_deck(
        [make_entry(name="Hybrid", type="Creature", mana_value=3, mana_cost="{2}{W/U}", count=3)]
    )
    vector = build_features(deck)
    assert vector.coloured_mana_curve.W == 1.5
    assert vector.coloured_mana_curve.U == 1.5
    assert vector.c_pips.demand == 0


def test_effective_curve_floor(make_entry, make_deck):
    deck = make_deck(
        [make_entry(name="Delver", type="Sorcery", mana_value=1, mana_cost="{U}", text="Delve")]
    )
    vector = build_features(deck)
    assert vector.effective_curve["0-1"] == 1
    assert vector.curve["0-1"] == 1


def test_markers_deduplicated(make_entry, make_deck):
    deck = make_deck(
        [
            make_entry(name="A", type="Sorcery", text="Cascade"),
            make_entry(name="B", type="Sorcery", text="Cascade\nStorm"),
        ]
    )
    vector = build_features(deck)
    assert vector.stack_complexity_markers == ("cascade", "storm")
    assert vector.keyword_histogram == {"storm": 1, "cascade": 2}


def test_empty_deck(make_deck):
    vector = build_features(make_deck([]))
    assert vector.meta.avg_mv == 0.0
    assert vector.interaction_density == 0.0
    assert vector.signals == ()
    assert vector.meta.commander.name is None


def test_commander_text_clipped(make_card, make_deck):
    commander = make_card(name="Talky", text="x" * 1000)
    vector = build_features(make_deck([], commander=commander))
    assert len(vector.meta.commander.text) == 800

    vector = build_features(
        make_deck([], commander=commander), Settings(commander_text_limit=10)
    )
    assert vector.meta.commander.text == "x" * 10


def test_signal_limit_setting(make_entry, make_deck):
    deck = make_deck([make_entry(name=f"Bear {i}", type="Creature") for i in range(5)])
    assert len(build_features(deck, Settings(signal_card_limit=2)).signals) == 2


def test_vector_is_frozen(cultivate_swords_deck):
    vector = build_features(cultivate_swords_deck)
    with pytest.raises(Exception):
        vector.interaction_density = 5.0


def test_vector_sequences_are_tuples(cultivate_swords_deck):
    vector = build_features(cultivate_swords_deck)
    assert isinstance(vector.signals, tuple)
    assert isinstance(vector.stack_complexity_markers, tuple)
    assert isinstance(vector.signals[0].tags, tuple)
    with pytest.raises(AttributeError):
        vector.signals[0].tags.append("wipes")


def test_variable_minus_wipe_is_mass_interaction(make_entry, make_deck):
    deck = make_deck(
        [
            make_entry(
                name="Toxic Deluge",
                type="Sorcery",
                mana_value=3,
                mana_cost="{2}{B}",
                text="As an additional cost to cast this spell, pay X life.\n"
                "All creatures get -X/-X until end of turn.",
            )
        ]
    )
    vector = build_features(deck)
    assert vector.counts["wipes"] == 1
    assert vector.interaction.mass == 1


@pytest.mark.parametrize("mana_value", [float("inf"), "inf", float("nan")])
def test_non_finite_mana_value_does_not_raise(make_entry, make_deck, mana_value):
    deck = make_deck([make_entry(name="Broken", type="Creature", mana_value=mana_value)])
    vector = build_features(deck)
    assert vector.curve["0-1"] == 1
    assert vector.meta.avg_mv == 0.0


def test_schema_error_is_raised(monkeypatch, cultivate_swords_deck):
    monkeypatch.setattr(
        DeckAggregator,
        "color_tension",
        lambda self, sources: {c: -1.0 for c in constants.CARD_COLORS},
    )
    with pytest.raises(FeatureSchemaError):
        build_features(cultivate_swords_deck)


def test_batch_keeps_input_order(make_entry, make_deck):
    decks = [
        make_deck([make_entry(name="Bear", type="Creature", mana_value=2)], deck_id=str(i))
        for i in range(6)
    ]
    vectors = build_features_batch(decks, max_workers=3)
    assert [v.meta.deck_id for v in vectors] == [str(i) for i in range(6)]


def test_batch_empty():
    assert build_features_batch([]) == []


def test_batch_propagates_schema_errors(monkeypatch, cultivate_swords_deck):
    monkeypatch.setattr(
        DeckAggregator,
        "color_tension",
        lambda self, sources: {c: -1.0 for c in constants.CARD_COLORS},
    )
    with pytest.raises(FeatureSchemaError):
        build_features_batch([cultivate_swords_deck, cultivate_swords_deck])
