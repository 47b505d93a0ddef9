"""
tests/test_rules.py
Every role and complexity marker in the rule tables, checked independently.
"""

import pytest
from deck_signals.rules import (
    MARKER_RULES,
    ROLE_NAMES,
    ROLE_RULES,
    Rule,
    classify,
    distinct_activations,
    evaluate,
    is_broad_tutor,
    text_rule,
)

ROLE_TESTS = [
    ("ramp", "Sorcery", "Search your library for a basic land card, put it onto the battlefield tapped."),
    ("ramp", "Artifact", "{T}: Add {C}{C}."),
    ("rocks", "Artifact", "{T}: Add {C}{C}."),
    ("dorks", "Creature — Elf Druid", "{T}: Add {G}."),
    ("draw", "Sorcery", "Draw two cards."),
    ("draw", "Instant", "Investigate."),
    ("draw", "Creature — Human Rogue", "When this creature enters, it connives."),
    ("tutors", "Sorcery", "Search your library for a card, put that card into your hand, then shuffle."),
    ("wipes", "Sorcery", "Destroy all creatures. They can't be regenerated."),
    ("wipes", "Sorcery", "All creatures get -3/-3 until end of turn."),
    ("wipes", "Sorcery", "As an additional cost to cast this spell, pay X life. All creatures get -X/-X until end of turn."),
    ("mass_bounce", "Sorcery", "Return all nonland permanents to their owners' hands."),
    ("spot", "Instant", "Destroy target artifact or enchantment."),
    ("spot", "Instant", "Exile target creature."),
    ("spot", "Sorcery", "Target creature you control fights target creature you don't control."),
    ("counters", "Instant", "Counter target spell."),
    ("counters", "Instant", "Counter target noncreature spell unless its controller pays {3}."),
    ("recursion", "Sorcery", "Return target creature card from your graveyard to the battlefield."),
    ("gy_hate", "Instant", "Exile target player's graveyard."),
    ("gy_hate", "Artifact", "{T}: Exile up to one target card from a graveyard."),
    ("protection", "Instant", "Target creature you control gains hexproof and indestructible until end of turn."),
    ("stax", "Artifact", "Players can't cast more than one spell each turn."),
    ("stax", "Creature — Human", "Noncreature spells cost {1} more to cast."),
    ("extra_turns", "Sorcery", "Take an extra turn after this one."),
    ("extra_combat", "Sorcery", "After this main phase, there is an additional combat phase."),
    ("token", "Sorcery", "Create two 1/1 white Soldier creature tokens."),
    (
        "blink",
        "Instant",
        "Exile target creature you control, then return that card to the battlefield under its owner's control.",
    ),
    ("copy", "Instant", "Copy target instant or sorcery spell. You may choose new targets for the copy."),
    ("flash", "Creature — Faerie", "Flash\nFlying"),
]

MARKER_TESTS = [
    ("cascade", "Cascade"),
    ("storm", "Storm"),
    ("cast_trigger", "Whenever you cast an instant or sorcery spell, draw a card."),
    ("replacement", "If a creature would die, exile it instead."),
    ("choose_modes", "Choose one —\n• Destroy target artifact.\n• Draw a card."),
    ("multi_target", "Destroy two target creatures."),
    ("copy_effects", "Copy target spell."),
]


@pytest.mark.parametrize("role, type_line, text", ROLE_TESTS)
def test_role_rule_fires(make_entry, role, type_line, text):
    classified = classify(make_entry(type=type_line, text=text))
    assert role in classified.roles, f"{role} missed: {classified.roles}"


@pytest.mark.parametrize("marker, text", MARKER_TESTS)
def test_marker_rule_fires(make_entry, marker, text):
    classified = classify(make_entry(type="Sorcery", text=text))
    assert marker in classified.markers


def test_every_role_has_a_test_case():
    covered = {role for role, _, _ in ROLE_TESTS}
    assert covered == set(ROLE_NAMES)


def test_every_marker_has_a_test_case():
    covered = {marker for marker, _ in MARKER_TESTS}
    assert covered == {rule.name for rule in MARKER_RULES}


def test_vanilla_card_has_no_roles(make_entry):
    classified = classify(make_entry(name="Grizzly Bears", type="Creature — Bear"))
    assert classified.roles == ()
    assert classified.markers == ()


def test_roles_are_independent(make_entry):
    classified = classify(
        make_entry(type="Instant", text="Destroy target creature. Draw a card.")
    )
    assert "spot" in classified.roles
    assert "draw" in classified.roles


def test_graveyard_creature_cards_are_not_spot_removal(make_entry):
    classified = classify(
        make_entry(type="Sorcery", text="Exile target creature card from a graveyard.")
    )
    assert "spot" not in classified.roles


def test_rituals_are_not_rocks_or_dorks(make_entry):
    classified = classify(make_entry(type="Instant", text="Add {B}{B}{B}."))
    assert "rocks" not in classified.roles
    assert "dorks" not in classified.roles


def test_role_order_follows_table(make_entry):
    classified = classify(make_entry(type="Artifact", text="{T}: Add {C}.\n{2}, {T}: Draw a card."))
    assert list(classified.roles) == [r for r in ROLE_NAMES if r in classified.roles]
    assert classified.roles[:3] == ("ramp", "rocks", "draw")


def test_classified_card_proxies_entry(make_entry):
    entry = make_entry(name="Counterspell", count=3, type="Instant", text="Counter target spell.")
    classified = classify(entry)
    assert classified.card.name == "Counterspell"
    assert classified.count == 3
    assert classified.has("counters")
    assert not classified.has("wipes")


def test_evaluate_runs_every_rule():
    calls = []

    def tracking(name, result):
        def fn(text, type_line):
            calls.append(name)
            return result

        return Rule(name, fn)

    rules = (tracking("a", True), tracking("b", False), tracking("c", True))
    assert evaluate(rules, "anything") == ["a", "c"]
    assert calls == ["a", "b", "c"]


def test_text_rule_carries_weight_and_label():
    rule = text_rule("landfall", r"\blandfall\b", weight=2.5, label="land matters")
    assert rule.matches("landfall — whenever a land enters")
    assert not rule.matches("flying")
    assert rule.weight == 2.5
    assert rule.label == "land matters"


def test_rule_names_are_unique():
    assert len(ROLE_NAMES) == len(set(ROLE_NAMES))
    assert len(ROLE_NAMES) == len(ROLE_RULES)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("search your library for a card, put that card into your hand", True),
        ("search your library for up to two cards", True),
        ("search your library for a creature card", False),
        ("search your library for a card with mana value 3", False),
    ],
)
def test_is_broad_tutor(text, expected):
    assert is_broad_tutor(text) is expected


def test_distinct_activations():
    assert distinct_activations("{1}, {t}: draw a card.\n{2}, {t}: scry 2.") == 2
    assert distinct_activations("{t}: add {g}.\n{t}: add {g}.") == 1
    assert distinct_activations("flying") == 0
