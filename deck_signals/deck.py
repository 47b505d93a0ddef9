"""
deck_signals/deck.py
Card/Deck Normalizer.
Projects raw storage rows into read-only CardLite/DeckLite models and splits
the mainboard into lands and nonlands.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from deck_signals import constants
from deck_signals.logger import create_logger

logger = create_logger()

DECK_LINE_REGEX = re.compile(r"^\s*(\d+)x?\s+(.+)$", re.IGNORECASE)
DECK_TEXT_HEADERS = re.compile(
    r"^(sideboard|commander|decklist|cards|deck|main deck)$", re.IGNORECASE
)


class CardLite(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    mana_value: float = 0.0
    mana_cost: str = ""
    type: str = ""
    text: str = ""
    color_identity: Tuple[str, ...] = ()

    @field_validator("name", "mana_cost", "type", "text", mode="before")
    @classmethod
    def _coalesce_text(cls, value):
        return "" if value is None else str(value)

    @field_validator("mana_value", mode="before")
    @classmethod
    def _coalesce_mana_value(cls, value):
        try:
            mana_value = float(value) if value is not None else 0.0
        except (TypeError, ValueError):
            return 0.0
        # inf and nan are treated as missing
        if not math.isfinite(mana_value):
            return 0.0
        return max(0.0, mana_value)

    @field_validator("color_identity", mode="before")
    @classmethod
    def _coalesce_colors(cls, value):
        if not value:
            return ()
        # Keep WUBRG order and drop anything that is not a colour symbol
        symbols = {str(c).upper() for c in value}
        return tuple(c for c in constants.CARD_COLORS if c in symbols)

    @property
    def lower_text(self) -> str:
        return self.text.lower()

    @property
    def lower_type(self) -> str:
        return self.type.lower()

    @property
    def is_land(self) -> bool:
        return constants.CARD_TYPE_LAND.lower() in self.lower_type


class DeckCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: PositiveInt
    board_section: str = constants.BOARD_SECTION_MAINBOARD
    card: CardLite


class DeckLite(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    commander: Optional[CardLite] = None
    deck_cards: Tuple[DeckCard, ...] = Field(default_factory=tuple)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return "" if value is None else str(value)

    @property
    def commander_colors(self) -> Tuple[str, ...]:
        return self.commander.color_identity if self.commander else ()


@dataclass
class DeckLine:
    count: int
    name: str


def base_type(type_line: str) -> str:
    """Extracts e.g. "Creature" from "Legendary Creature — Elf Druid"."""
    for card_type in constants.BASE_TYPE_ORDER:
        if card_type in (type_line or ""):
            return card_type
    return constants.CARD_TYPE_OTHER


def deck_from_row(row: Dict[str, Any]) -> DeckLite:
    """
    Builds a DeckLite from a storage row.
    Entries without a card payload or with a count below one are dropped.
    """
    entries = []
    for index, entry in enumerate(row.get("deck_cards") or []):
        card = entry.get("card")
        try:
            count = int(entry.get("count") or 0)
        except (TypeError, ValueError):
            count = 0

        if not card or count < 1:
            logger.warning(
                f"Deck {row.get('id')}: skipping malformed entry #{index} (count={entry.get('count')})"
            )
            continue

        entries.append(
            DeckCard(
                count=count,
                board_section=entry.get("board_section") or "",
                card=CardLite.model_validate(card),
            )
        )

    commander = row.get("commander")
    return DeckLite(
        id=row.get("id"),
        commander=CardLite.model_validate(commander) if commander else None,
        deck_cards=tuple(entries),
    )


def mainboard(deck: DeckLite) -> List[DeckCard]:
    return [
        dc
        for dc in deck.deck_cards
        if dc.board_section == constants.BOARD_SECTION_MAINBOARD
    ]


def partition_mainboard(deck: DeckLite) -> Tuple[List[DeckCard], List[DeckCard]]:
    """Returns (lands, nonlands) from the mainboard, preserving deck order."""
    lands, nonlands = [], []
    for dc in mainboard(deck):
        if dc.card.is_land:
            lands.append(dc)
        else:
            nonlands.append(dc)
    return lands, nonlands


def parse_deck_text(deck_text: str) -> List[DeckLine]:
    """
    Parses a pasted decklist ("1 Sol Ring", "4x Forest").
    Headers, dividers and lines without a leading count are ignored.
    """
    lines = []
    for raw in (deck_text or "").splitlines():
        trimmed = raw.strip()
        if not trimmed or trimmed.startswith("---"):
            continue
        if DECK_TEXT_HEADERS.match(trimmed):
            continue

        match = DECK_LINE_REGEX.match(trimmed)
        if not match:
            continue

        count = int(match.group(1))
        if count < 1:
            continue
        lines.append(DeckLine(count=count, name=match.group(2).strip()))
    return lines
