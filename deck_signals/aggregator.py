"""
deck_signals/aggregator.py
Interaction / Upkeep / Color-Tension Aggregator.
Rolls per-card classifier hits into deck-level buckets.
"""

from typing import Dict
from deck_signals import constants
from deck_signals.mana import count_colored_pips, count_colorless_demand, empty_color_counts
from deck_signals.rules import (
    ClassifiedCard,
    distinct_activations,
    has_mandatory_cost,
    has_recurring_trigger,
    is_broad_tutor,
    is_recurring_token_maker,
)


class DeckAggregator:
    """
    Accumulates interaction, upkeep, token, tutor and early colour demand
    counters. Feed every classified nonland through observe(), then read the
    profile properties.

    Buckets are independent and additive: an instant-speed spot removal
    spell is counted as both instant and spot interaction.
    """

    def __init__(self):
        self.total_nonland = 0
        self.interaction = {"instant": 0, "mass": 0, "spot": 0}
        self.upkeep_load = {
            "recurring_triggers": 0,
            "mandatory_costs": 0,
            "repeatable_activations": 0,
        }
        self.colorless_demand = 0
        self.token_profile = {"rate": 0, "bursts": 0}
        self.tutor_breadth = {"broad": 0, "narrow": 0}
        self.early_pips = empty_color_counts(0.0)

    def observe(self, classified: ClassifiedCard):
        card = classified.card
        count = classified.count
        text = card.lower_text

        self.total_nonland += count
        self._observe_interaction(classified, count)
        self._observe_upkeep(text, count)

        self.colorless_demand += count_colorless_demand(card.mana_cost, card.text) * count

        if classified.has("token"):
            if is_recurring_token_maker(text):
                self.token_profile["rate"] += count
            else:
                self.token_profile["bursts"] += count

        if classified.has("tutors"):
            if is_broad_tutor(text):
                self.tutor_breadth["broad"] += count
            else:
                self.tutor_breadth["narrow"] += count

        if card.mana_value <= constants.EARLY_GAME_MAX_MV:
            pips = count_colored_pips(card.mana_cost)
            for c in constants.CARD_COLORS:
                self.early_pips[c] += pips[c] * count

    def _observe_interaction(self, classified: ClassifiedCard, count: int):
        if classified.has("counters"):
            self.interaction["instant"] += count

        if classified.has("spot"):
            self.interaction["spot"] += count
            is_instant = constants.CARD_TYPE_INSTANT in classified.card.type
            if is_instant or classified.has("flash"):
                self.interaction["instant"] += count

        if classified.has("wipes") or classified.has("mass_bounce"):
            self.interaction["mass"] += count

    def _observe_upkeep(self, text: str, count: int):
        if has_recurring_trigger(text):
            self.upkeep_load["recurring_triggers"] += count
        if has_mandatory_cost(text):
            self.upkeep_load["mandatory_costs"] += count

        activations = distinct_activations(text)
        if activations >= 2:
            self.upkeep_load["repeatable_activations"] += 2 * count
        elif activations == 1:
            self.upkeep_load["repeatable_activations"] += count

    @property
    def interaction_density(self) -> float:
        if not self.total_nonland:
            return 0.0
        return round(sum(self.interaction.values()) / self.total_nonland, 3)

    def color_tension(self, colored_sources: Dict[str, int]) -> Dict[str, float]:
        """Early pips per colour over that colour's sources (at least one)."""
        return {
            c: round(self.early_pips[c] / max(1, colored_sources.get(c, 0)), 2)
            for c in constants.CARD_COLORS
        }
