"""
deck_signals/features/engine.py
Feature Vector Assembler.
Runs the normalizer output through the mana analyzer, role classifier,
aggregator and signal ranker, and merges everything into one validated
DeckFeatureVector.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional
from pydantic import ValidationError
from deck_signals import constants
from deck_signals.aggregator import DeckAggregator
from deck_signals.configuration import Settings
from deck_signals.deck import DeckLite, base_type, partition_mainboard
from deck_signals.features.schema import DeckFeatureVector, FeatureSchemaError
from deck_signals.logger import create_logger
from deck_signals.mana import (
    ManaSourceAnalyzer,
    count_colored_pips,
    effective_mana_value,
    empty_color_counts,
    empty_curve,
    mana_value_bucket,
)
from deck_signals.rules import ROLE_NAMES, classify
from deck_signals.signals import SignalRanker

logger = create_logger()


def _commander_summary(deck: DeckLite, text_limit: int) -> Dict:
    commander = deck.commander
    if commander is None:
        return {"name": None, "color_identity": [], "text": ""}
    return {
        "name": commander.name or None,
        "color_identity": list(commander.color_identity),
        "text": commander.text[:text_limit],
    }


def build_features(deck: DeckLite, settings: Optional[Settings] = None) -> DeckFeatureVector:
    """
    Pure and deterministic: the same deck always yields the same vector.
    Raises FeatureSchemaError when the assembled vector fails validation.
    """
    settings = settings or Settings()
    lands, nonlands = partition_mainboard(deck)
    classified = [classify(entry) for entry in nonlands]

    counts = {role: 0 for role in ROLE_NAMES}
    curve = empty_curve()
    effective_curve = empty_curve()
    type_counts: Dict[str, int] = {}
    keyword_histogram: Dict[str, int] = {}
    coloured_mana_curve = empty_color_counts(0.0)
    markers: List[str] = []
    aggregator = DeckAggregator()

    total_mv = 0.0
    total_cards = 0

    for item in classified:
        card = item.card
        count = item.count
        text = card.lower_text

        total_mv += card.mana_value * count
        total_cards += count

        curve[mana_value_bucket(card.mana_value)] += count
        effective = effective_mana_value(card.mana_value, text)
        effective_curve[mana_value_bucket(effective)] += count

        card_type = base_type(card.type)
        type_counts[card_type] = type_counts.get(card_type, 0) + count

        for role in item.roles:
            counts[role] += count

        for marker in item.markers:
            if marker not in markers:
                markers.append(marker)

        for keyword in constants.KEYWORD_HISTOGRAM_TERMS:
            if keyword in text:
                keyword_histogram[keyword] = keyword_histogram.get(keyword, 0) + count

        pips = count_colored_pips(card.mana_cost)
        for c in constants.CARD_COLORS:
            coloured_mana_curve[c] += pips[c] * count

        aggregator.observe(item)

    sources = ManaSourceAnalyzer(lands + nonlands, deck.commander_colors)
    ranker = SignalRanker(deck.commander)

    payload = {
        "schema_version": constants.FEATURE_SCHEMA_VERSION,
        "meta": {
            "deck_id": deck.id,
            "commander": _commander_summary(deck, settings.commander_text_limit),
            "avg_mv": round(total_mv / total_cards, 3) if total_cards else 0.0,
            "mainboard_count": total_cards,
            "land_count": sum(entry.count for entry in lands),
        },
        "counts": counts,
        "curve": curve,
        "effective_curve": effective_curve,
        "type_counts": type_counts,
        "keyword_histogram": keyword_histogram,
        "interaction_density": aggregator.interaction_density,
        "stack_complexity_markers": markers,
        "signals": ranker.rank(classified, settings.signal_card_limit),
        "mana_pool": sources.land_sources,
        "coloured_mana_curve": {c: round(v, 2) for c, v in coloured_mana_curve.items()},
        "interaction": aggregator.interaction,
        "upkeep_load": aggregator.upkeep_load,
        "c_pips": {
            "demand": aggregator.colorless_demand,
            "supply": sources.colorless_supply,
        },
        "token_profile": aggregator.token_profile,
        "tutor_breadth": aggregator.tutor_breadth,
        "color_tension_index": aggregator.color_tension(sources.colored_sources()),
    }

    try:
        vector = DeckFeatureVector.model_validate(payload)
    except ValidationError as error:
        logger.error(f"Deck {deck.id}: feature vector failed validation: {error}")
        raise FeatureSchemaError(f"feature vector for deck {deck.id} is invalid") from error

    logger.debug(
        f"Deck {deck.id}: {total_cards} nonland cards, {len(lands)} land entries, "
        f"density {vector.interaction_density}, {len(vector.signals)} signals"
    )
    return vector


def build_features_batch(
    decks: Iterable[DeckLite],
    max_workers: int = 4,
    settings: Optional[Settings] = None,
) -> List[DeckFeatureVector]:
    """
    Builds vectors for many decks on a thread pool. Results keep input order.
    A FeatureSchemaError from any deck propagates to the caller.
    """
    decks = list(decks)
    if not decks:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda d: build_features(d, settings), decks))
