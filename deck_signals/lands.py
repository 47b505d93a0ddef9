"""
deck_signals/lands.py
Land Signal Curator.
Tags and weights mainboard lands, elevates fetches in decks that care about
lands entering play, and returns a short, deduplicated list of signal lands
next to the land-only mana pool.
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from pydantic import ValidationError
from deck_signals import constants
from deck_signals.configuration import Settings
from deck_signals.deck import DeckCard, DeckLite, partition_mainboard
from deck_signals.features.schema import FeatureSchemaError, LandCompression
from deck_signals.logger import create_logger
from deck_signals.mana import ManaSourceAnalyzer
from deck_signals.rules import Rule, text_rule

logger = create_logger()

# --- LAND CONTEXT ---

LAND_CONTEXT_RULES: Tuple[Rule, ...] = (
    text_rule("landfall", r"\blandfall\b"),
    text_rule("extra_land_drops", r"play an additional land|play (?:two|three) additional lands"),
    text_rule("crucible_loop", r"play lands? from your graveyard|\bcrucible\b"),
    text_rule("land_tutors", r"search your library for [^.]*\blands?\b"),
    text_rule(
        "land_etb_matters",
        r"whenever (?:a|one or more) lands? (?:you control )?enters?|lands you control",
    ),
    text_rule(
        "tokens_from_lands",
        r"create [^.]*\btokens?\b[^\n]*whenever a land|whenever a land[^\n]*creates? [^.]*\btokens?\b",
    ),
)

# --- LAND TAGS ---

LAND_RULES: Tuple[Rule, ...] = tuple(
    text_rule(tag, pattern, constants.LAND_TAG_WEIGHTS[tag], constants.LAND_TAG_LABELS[tag])
    for tag, pattern in (
        (constants.LAND_TAG_DRAW, r"draws? (?:a|two|\d+) cards?|\bsurveil [1-9]|\bscry [2-9]"),
        (
            constants.LAND_TAG_REPEAT_DRAW,
            r"\{[^}]+\}[^:\n]*:[^\n]*draw a card|you may pay [^.]*\. if you do, draw a card",
        ),
        (
            constants.LAND_TAG_LAND_TUTOR,
            r"search your library for up to (?:two|three)\b[^.]*\blands?\b"
            r"|search your library for [^.]*\b(?:land|forest|plains|island|swamp|mountain) card and an? ",
        ),
        (
            constants.LAND_TAG_FETCH,
            r"sacrifice [^:\n]*: search your library for [^.]*\b(?:basic|plains|forest|island|swamp|mountain|gate|land)",
        ),
        (
            constants.LAND_TAG_GRAVE_HATE,
            r"exile (?:all cards from )?(?:target player's|each opponent's|target card from a|all) [^.]*graveyards?",
        ),
        (constants.LAND_TAG_RECURSION_TOP, r"from your graveyard on top of your library"),
        (
            constants.LAND_TAG_RECURSION_BATTLEFIELD,
            r"return target [^.]*from your graveyard to the battlefield",
        ),
        (constants.LAND_TAG_MANLAND, r"becomes? an? [^.]*\bcreature\b"),
        (
            constants.LAND_TAG_TOKEN_ENGINE,
            r"create [^\n]*\btokens?\b[^\n]*(?:activate|pay|tap|whenever)"
            r"|(?:whenever|\{t\}[^:\n]*:)[^\n]*create [^\n]*\btokens?\b",
        ),
        (
            constants.LAND_TAG_BLINK_PROTECT,
            r"phases? out|\bflicker|exile target [^.]*\. return (?:it|that card)|exile [^\n]*then return",
        ),
        (constants.LAND_TAG_ANTI_COUNTER, r"can't be countered"),
        (
            constants.LAND_TAG_EVASION,
            r"target creature can't be blocked|target creature [a-z ]*gains? (?:flying|menace|trample|shadow)",
        ),
        (
            constants.LAND_TAG_COLOR_SHIFT,
            r"(?:is|are) (?:also )?every basic land type"
            r"|each land is an? (?:forest|swamp|plains|island|mountain)"
            r"|lands (?:you control )?are (?:forests|swamps|plains|islands|mountains)",
        ),
        (
            constants.LAND_TAG_DEVOTION_BURST,
            r"add \{[wubrgc]\} for each|add an amount of",
        ),
        (constants.LAND_TAG_UNTAP_ENGINE, r"untap (?:target|all|up to \w+ target) lands?"),
        (constants.LAND_TAG_DAMAGE_REMOVAL, r"deals? \d+ damage to|destroy target"),
        (
            constants.LAND_TAG_COMMANDER_SUPPORT,
            r"put your commander into your hand from the command zone|commander tax",
        ),
        (constants.LAND_TAG_HAND_SIZE, r"maximum hand size"),
        (constants.LAND_TAG_BOARD_BOUNCE, r"return [^.]* to (?:its|their) owners?'?s? hands?"),
    )
)

# Well-known utility lands whose wording the patterns can miss
NAME_OVERRIDES: Tuple[Tuple[re.Pattern, Tuple[str, ...]], ...] = (
    (
        re.compile(r"gaea'?s cradle|serra'?s sanctum|nykthos|urza'?s saga|cabal coffers"),
        (constants.LAND_TAG_DEVOTION_BURST,),
    ),
    (
        re.compile(r"field of the dead"),
        (constants.LAND_TAG_DEVOTION_BURST, constants.LAND_TAG_TOKEN_ENGINE),
    ),
    (
        re.compile(r"yavimaya, cradle of growth|urborg, tomb of yawgmoth"),
        (constants.LAND_TAG_COLOR_SHIFT,),
    ),
    (
        re.compile(r"reliquary tower|war room|bonder'?s enclave|horizon canopy"),
        (constants.LAND_TAG_DRAW,),
    ),
    (re.compile(r"cavern of souls"), (constants.LAND_TAG_ANTI_COUNTER,)),
    (re.compile(r"command beacon"), (constants.LAND_TAG_COMMANDER_SUPPORT,)),
    (re.compile(r"bojuka bog|scavenger grounds"), (constants.LAND_TAG_GRAVE_HATE,)),
    (re.compile(r"mistveil plains|hall of heliod"), (constants.LAND_TAG_RECURSION_TOP,)),
    (re.compile(r"rogue'?s passage"), (constants.LAND_TAG_EVASION,)),
    (
        re.compile(r"krosan verge|myriad landscape|blighted woodland|thawing glaciers"),
        (constants.LAND_TAG_LAND_TUTOR,),
    ),
)

ETB_TAPPED_REGEX = re.compile(r"enters(?: the battlefield)? tapped")
SCRY_ONE_REGEX = re.compile(r"\bscry 1\b")
GAIN_ONE_REGEX = re.compile(r"you gain 1 life")


@dataclass(frozen=True)
class ScoredLand:
    name: str
    count: int
    score: float
    tags: Tuple[str, ...]


def land_context_score(nonlands: List[DeckCard]) -> float:
    """
    How much the deck cares about lands entering or leaving play.
    Each motif hit adds min(3, ln(2 + count)) so stacked copies taper off.
    """
    score = 0.0
    for entry in nonlands:
        text = entry.card.lower_text
        for rule in LAND_CONTEXT_RULES:
            if rule.matches(text):
                score += min(constants.LAND_CONTEXT_HIT_CAP, math.log(2 + entry.count))
    return round(score, 2)


def tag_land(name: str, text: str) -> List[str]:
    """Pattern tags in table order, then any tags forced by the land's name."""
    t = (text or "").lower()
    tags = [rule.name for rule in LAND_RULES if rule.matches(t)]

    lower_name = (name or "").lower()
    for pattern, forced in NAME_OVERRIDES:
        if pattern.search(lower_name):
            for tag in forced:
                if tag not in tags:
                    tags.append(tag)
    return tags


def score_land(name: str, text: str, count: int, context_score: float) -> ScoredLand:
    tags = tag_land(name, text)
    copies = min(count, constants.LAND_COPY_CAP)

    score = sum(constants.LAND_TAG_WEIGHTS[tag] for tag in tags) * (
        1 + constants.LAND_COPY_SCALE * math.log1p(copies)
    )

    if tags == [constants.LAND_TAG_FETCH]:
        score += min(
            constants.LAND_FETCH_CONTEXT_CAP,
            constants.LAND_FETCH_CONTEXT_SCALE * context_score,
        )

    if not tags:
        t = (text or "").lower()
        if ETB_TAPPED_REGEX.search(t):
            score -= constants.LAND_PENALTY_ETB_TAPPED
        if SCRY_ONE_REGEX.search(t):
            score -= constants.LAND_PENALTY_SCRY_ONE
        if GAIN_ONE_REGEX.search(t):
            score -= constants.LAND_PENALTY_GAIN_ONE

    if score < constants.LAND_SCORE_FLOOR:
        score = 0.0

    return ScoredLand(name=name, count=count, score=round(score, 2), tags=tuple(tags))


def merge_by_name(scored: List[ScoredLand]) -> List[ScoredLand]:
    """Sums counts, keeps the best score and unions tags for repeated names."""
    merged: Dict[str, ScoredLand] = {}
    for land in scored:
        previous = merged.get(land.name)
        if previous is None:
            merged[land.name] = land
            continue
        tags = previous.tags + tuple(t for t in land.tags if t not in previous.tags)
        merged[land.name] = ScoredLand(
            name=land.name,
            count=previous.count + land.count,
            score=max(previous.score, land.score),
            tags=tags,
        )
    return list(merged.values())


def land_threshold(context_score: float) -> float:
    if context_score >= constants.LAND_CONTEXT_STRONG:
        return constants.LAND_THRESHOLD_LAND_MATTERS
    return constants.LAND_THRESHOLD_DEFAULT


def shortlist(
    scored: List[ScoredLand],
    context_score: float,
    limit: int = constants.SIGNAL_LAND_LIMIT,
) -> List[ScoredLand]:
    threshold = land_threshold(context_score)
    kept = [
        land
        for land in merge_by_name(scored)
        if land.score >= threshold and land.tags
    ]
    kept.sort(key=lambda land: land.score, reverse=True)
    return kept[:limit]


def explain(tags: Tuple[str, ...]) -> str:
    return ", ".join(constants.LAND_TAG_LABELS[tag] for tag in tags)


def compress_lands(deck: DeckLite, settings: Optional[Settings] = None) -> LandCompression:
    """
    Returns the land-only mana pool and the signal land shortlist.
    Raises FeatureSchemaError if the result does not validate.
    """
    settings = settings or Settings()
    lands, nonlands = partition_mainboard(deck)

    # 1. Mana pool from lands only
    analyzer = ManaSourceAnalyzer(lands, deck.commander_colors)

    # 2. Score every land against the deck's land context
    context_score = land_context_score(nonlands)
    scored = [
        score_land(entry.card.name or "Land", entry.card.text, entry.count, context_score)
        for entry in lands
    ]

    # 3. Threshold, dedup, cap
    selected = shortlist(scored, context_score, settings.signal_land_limit)
    logger.debug(
        f"Deck {deck.id}: land context {context_score}, {len(selected)}/{len(lands)} signal lands"
    )

    payload = {
        "mana_pool": analyzer.land_sources,
        "signal_lands": [
            {
                "name": land.name,
                "count": land.count,
                "tags": list(land.tags),
                "why": explain(land.tags),
            }
            for land in selected
        ],
    }

    try:
        return LandCompression.model_validate(payload)
    except ValidationError as error:
        logger.error(f"Deck {deck.id}: land compression failed validation: {error}")
        raise FeatureSchemaError(f"land compression for deck {deck.id} is invalid") from error
