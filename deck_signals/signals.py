"""
deck_signals/signals.py
Signal Card Ranker.
Scores nonland cards by tag density, curve position, commander synergy and
engine behaviour, then projects the top entries without their scores.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple
from deck_signals import constants
from deck_signals.deck import CardLite
from deck_signals.rules import (
    ROLE_RULES,
    ClassifiedCard,
    distinct_activations,
    evaluate,
    is_recurring_token_maker,
)


@dataclass(frozen=True)
class ScoredCard:
    classified: ClassifiedCard
    tags: Tuple[str, ...]
    score: float


def signal_tags(classified: ClassifiedCard) -> Tuple[str, ...]:
    """The card's hits restricted to the signal alphabet."""
    tags = []
    for tag in constants.SIGNAL_TAGS:
        source = constants.SIGNAL_TAG_SOURCES.get(tag, tag)
        if classified.has(source):
            tags.append(tag)
    return tuple(tags)


def commander_motifs(commander: Optional[CardLite]) -> Set[str]:
    """Motif keywords present in the commander's text, plus its blink/token roles."""
    if not commander or not commander.text:
        return set()

    text = commander.lower_text
    motifs = {kw for kw in constants.COMMANDER_MOTIF_KEYWORDS if kw in text}
    for role in evaluate(ROLE_RULES, text, commander.lower_type):
        if role in ("blink", "token", "copy"):
            motifs.add(role)
    return motifs


class SignalRanker:
    def __init__(self, commander: Optional[CardLite] = None):
        self.motifs = commander_motifs(commander)

    def score_cards(self, cards: List[ClassifiedCard]) -> List[ScoredCard]:
        """
        score = 2.5*|tags| + clamp(mv-2, 0, 3) + 2*synergy + 1.5*engine + ln(1+count)
        Sorted descending; ties keep deck order.
        """
        scored = []
        for classified in cards:
            tags = signal_tags(classified)
            curve_bonus = min(
                constants.SIGNAL_CURVE_CAP,
                max(0.0, classified.card.mana_value - constants.SIGNAL_CURVE_FLOOR),
            )
            score = (
                constants.SIGNAL_WEIGHT_PER_TAG * len(tags)
                + curve_bonus
                + constants.SIGNAL_WEIGHT_SYNERGY * self._synergy(classified, tags)
                + constants.SIGNAL_WEIGHT_ENGINE * self._engine(classified)
                + math.log1p(classified.count)
            )
            scored.append(ScoredCard(classified=classified, tags=tags, score=score))

        return sorted(scored, key=lambda s: s.score, reverse=True)

    def _synergy(self, classified: ClassifiedCard, tags: Tuple[str, ...]) -> int:
        if not self.motifs:
            return 0
        text = classified.card.lower_text
        for motif in self.motifs:
            if motif in tags or classified.has(motif) or motif in text:
                return 1
        return 0

    def _engine(self, classified: ClassifiedCard) -> int:
        text = classified.card.lower_text
        if classified.has("token") and is_recurring_token_maker(text):
            return 1
        if distinct_activations(text) > 0:
            return 1
        return 0

    @staticmethod
    def project(scored: List[ScoredCard], limit: int) -> List[Dict]:
        """Public shape: name, mv, type and tags only."""
        return [
            {
                "name": s.classified.card.name or "Card",
                "mv": s.classified.card.mana_value,
                "type": s.classified.card.type or None,
                "tags": list(s.tags),
            }
            for s in scored[:limit]
        ]

    def rank(self, cards: List[ClassifiedCard], limit: int = constants.SIGNAL_CARD_LIMIT) -> List[Dict]:
        return self.project(self.score_cards(cards), limit)
