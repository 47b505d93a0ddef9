"""
tests/conftest.py
Global pytest configuration and fixtures.
"""

import pytest
from deck_signals.deck import CardLite, DeckCard, DeckLite


@pytest.fixture
def make_card():
    """Builds a CardLite with sensible empty defaults."""

    def _make(name="Card", mana_value=0, mana_cost="", type="", text="", color_identity=()):
        return CardLite(
            name=name,
            mana_value=mana_value,
            mana_cost=mana_cost,
            type=type,
            text=text,
            color_identity=color_identity,
        )

    return _make


@pytest.fixture
def make_entry(make_card):
    """Builds a mainboard DeckCard; keyword arguments go to the card."""

    def _make(count=1, board_section="mainboard", **card_fields):
        return DeckCard(count=count, board_section=board_section, card=make_card(**card_fields))

    return _make


@pytest.fixture
def make_deck():
    def _make(entries, commander=None, deck_id="deck-1"):
        return DeckLite(id=deck_id, commander=commander, deck_cards=tuple(entries))

    return _make


@pytest.fixture
def cultivate_swords_deck(make_entry, make_deck):
    return make_deck(
        [
            make_entry(
                name="Cultivate",
                type="Sorcery",
                mana_value=3,
                mana_cost="{2}{G}",
                text="Search your library for up to two basic land cards... ramp",
            ),
            make_entry(
                name="Swords to Plowshares",
                type="Instant",
                mana_value=1,
                mana_cost="{W}",
                text="Exile target creature",
            ),
        ]
    )


@pytest.fixture
def landfall_deck(make_card, make_entry, make_deck):
    """A green landfall shell with fetches, utility lands and basics."""
    commander = make_card(
        name="Omnath, Locus of Rage",
        type="Legendary Creature — Elemental",
        mana_value=5,
        mana_cost="{3}{R}{G}",
        text="Landfall — Whenever a land you control enters, create a 5/5 red and green Elemental creature token.",
        color_identity=["R", "G"],
    )
    entries = [
        make_entry(
            name="Lotus Cobra",
            type="Creature — Snake",
            mana_value=2,
            mana_cost="{1}{G}",
            text="Landfall — Whenever a land you control enters, add one mana of any color.",
        ),
        make_entry(
            name="Azusa, Lost but Seeking",
            type="Legendary Creature — Human Monk",
            mana_value=3,
            mana_cost="{2}{G}",
            text="You may play two additional lands on each of your turns.",
        ),
        make_entry(
            name="Sol Ring",
            type="Artifact",
            mana_value=1,
            mana_cost="{1}",
            text="{T}: Add {C}{C}.",
        ),
        make_entry(
            name="Beast Within",
            type="Instant",
            mana_value=3,
            mana_cost="{2}{G}",
            text="Destroy target permanent. Its controller creates a 3/3 green Beast creature token.",
        ),
        make_entry(
            name="Evolving Wilds",
            type="Land",
            text="{T}, Sacrifice Evolving Wilds: Search your library for a basic land card, "
            "put it onto the battlefield tapped, then shuffle.",
        ),
        make_entry(
            name="Field of the Dead",
            type="Land",
            text="Field of the Dead enters the battlefield tapped.\n{T}: Add {C}.",
        ),
        make_entry(
            name="Stomping Ground",
            type="Land — Mountain Forest",
            text="({T}: Add {R} or {G}.)\nAs Stomping Ground enters, you may pay 2 life. "
            "If you don't, it enters tapped.",
        ),
        make_entry(name="Forest", type="Basic Land — Forest", count=20),
        make_entry(name="Mountain", type="Basic Land — Mountain", count=10),
    ]
    return make_deck(entries, commander=commander, deck_id="landfall")
