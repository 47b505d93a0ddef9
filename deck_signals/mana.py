"""
deck_signals/mana.py
Mana & Curve Analyzer.
Pip counting over mana cost strings, curve bucketing, effective mana value
after alternative costs, and colour source detection from oracle text.
"""

import math
import re
from typing import Dict, Iterable, List
from deck_signals import constants
from deck_signals.deck import DeckCard

MANA_SYMBOL_REGEX = re.compile(r"\{([^}]+)\}")
PHYREXIAN_REGEX = re.compile(r"^([WUBRG])/P$")
TWOBRID_REGEX = re.compile(r"^2/([WUBRG])$")
HYBRID_REGEX = re.compile(r"^([WUBRG])/([WUBRG])(?:/P)?$")

# Activated ability: a cost segment holding at least one mana/tap symbol, then ":"
ACTIVATION_REGEX = re.compile(r"^([^:\n\"]*\{[^}]+\}[^:\n\"]*):", re.MULTILINE)
COLORLESS_SYMBOL = "{c}"

ANY_COLOR_REGEX = re.compile(r"add (?:one |two |three |x )?mana of any (?:one )?colou?r")
PRODUCES_COLORLESS_REGEX = re.compile(r"\{t\}[^:\n]*:\s*add\s*\{c\}")
ADD_CLAUSE_REGEX = re.compile(r"\badd ([^.\n]*)")
COLOR_SYMBOL_REGEX = re.compile(r"\{([wubrg])\}")
MANA_SYMBOL_IN_CLAUSE_REGEX = re.compile(r"\{[wubrgc]\}")

COST_REDUCTION_REGEX = re.compile(r"costs? \{?(\d+)\}? less to cast")
ALT_COST_REGEXES = {
    keyword: re.compile(rf"\b{keyword}\b")
    for keyword in constants.ALT_COST_DISCOUNTS
}


def empty_color_counts(value=0) -> Dict[str, float]:
    return {c: value for c in constants.CARD_COLORS}


def empty_curve() -> Dict[str, int]:
    return {bucket: 0 for bucket in constants.CURVE_BUCKETS}


def count_colored_pips(mana_cost: str) -> Dict[str, float]:
    """
    Parses a mana cost like "{2}{G}{U/P}{W/U}" into coloured pip counts.
    Hybrid symbols split one pip evenly between both colours; generic,
    colourless, X and unknown symbols contribute nothing.
    """
    pips = empty_color_counts(0.0)
    if not mana_cost:
        return pips

    for raw in MANA_SYMBOL_REGEX.findall(mana_cost):
        token = raw.strip().upper()

        if token in pips:
            pips[token] += 1
            continue

        match = PHYREXIAN_REGEX.match(token) or TWOBRID_REGEX.match(token)
        if match:
            pips[match.group(1)] += 1
            continue

        match = HYBRID_REGEX.match(token)
        if match:
            pips[match.group(1)] += 0.5
            pips[match.group(2)] += 0.5

    return pips


def activation_costs(text: str) -> List[str]:
    """Cost segments of activated abilities, e.g. ["{2}, {t}"] for "{2}, {T}: Draw a card."."""
    return [cost.strip() for cost in ACTIVATION_REGEX.findall((text or "").lower())]


def count_colorless_demand(mana_cost: str, text: str) -> int:
    """{C} symbols required by the casting cost plus any activated-ability costs."""
    demand = (mana_cost or "").upper().count("{C}")
    for cost in activation_costs(text):
        demand += cost.count(COLORLESS_SYMBOL)
    return demand


def mana_value_bucket(mana_value: float) -> str:
    """0-1, 2, 3, 4, 5 or 6+. Fractional values round up to the next bucket."""
    if not math.isfinite(mana_value) or mana_value <= 1:
        return constants.CURVE_BUCKET_LOW
    rounded = math.ceil(mana_value)
    if rounded >= 6:
        return constants.CURVE_BUCKET_HIGH
    return str(rounded)


def effective_mana_value(mana_value: float, text: str) -> float:
    """
    Coarse cost after alternative-cost mechanics.
    Discounts stack additively; the result never drops below zero.
    """
    t = (text or "").lower()
    effective = float(mana_value or 0)

    for keyword, discount in constants.ALT_COST_DISCOUNTS.items():
        if ALT_COST_REGEXES[keyword].search(t):
            effective -= discount

    match = COST_REDUCTION_REGEX.search(t)
    if match:
        reduction = int(match.group(1))
        effective -= max(0.0, min(reduction, effective - 1))

    return round(max(0.0, effective), 2)


def mana_sources_from_text(text: str, commander_colors: Iterable[str] = ()) -> Dict[str, int]:
    """
    Counts each coloured symbol a permanent can add as one source.
    "Any color" credits the commander's colours, or all five without a commander.
    """
    sources = empty_color_counts(0)
    if not text:
        return sources
    t = text.lower()

    if ANY_COLOR_REGEX.search(t):
        targets = [c for c in commander_colors if c in sources] or constants.CARD_COLORS
        for c in targets:
            sources[c] += 1

    for clause in ADD_CLAUSE_REGEX.findall(t):
        for symbol in COLOR_SYMBOL_REGEX.findall(clause):
            sources[symbol.upper()] += 1

    return sources


def produces_colorless(text: str) -> bool:
    return bool(PRODUCES_COLORLESS_REGEX.search((text or "").lower()))


def is_mana_source(text: str) -> bool:
    """True when the text adds coloured, colourless or any-colour mana."""
    t = (text or "").lower()
    if ANY_COLOR_REGEX.search(t):
        return True
    return any(
        MANA_SYMBOL_IN_CLAUSE_REGEX.search(clause)
        for clause in ADD_CLAUSE_REGEX.findall(t)
    )


class ManaSourceAnalyzer:
    """
    Tallies colour sources across a deck section.
    Lands feed land_sources; artifacts and creatures (rocks and dorks) feed
    nonland_sources. Instants and sorceries that add mana are rituals, not sources.
    """

    def __init__(self, entries: List[DeckCard], commander_colors: Iterable[str] = ()):
        self.commander_colors = tuple(commander_colors)
        self.land_sources = empty_color_counts(0)
        self.nonland_sources = empty_color_counts(0)
        self.colorless_supply = 0
        for entry in entries:
            self._evaluate(entry)

    def _evaluate(self, entry: DeckCard):
        card = entry.card
        type_line = card.lower_type

        if card.is_land:
            target = self.land_sources
        elif "artifact" in type_line or "creature" in type_line:
            target = self.nonland_sources
        else:
            return

        per_copy = mana_sources_from_text(card.text, self.commander_colors)
        for c in constants.CARD_COLORS:
            target[c] += per_copy[c] * entry.count

        if produces_colorless(card.text):
            self.colorless_supply += entry.count

    def colored_sources(self) -> Dict[str, int]:
        return {
            c: self.land_sources[c] + self.nonland_sources[c]
            for c in constants.CARD_COLORS
        }
