"""
deck_signals/rules.py
Pattern/Role Classifier.
An ordered, immutable table of named detectors evaluated once per nonland
card. Roles are independent of each other; a card can carry any number.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple
from deck_signals.deck import CardLite, DeckCard
from deck_signals.mana import activation_costs, is_mana_source

# Predicates receive lowercased oracle text and lowercased type line
RuleFn = Callable[[str, str], bool]


@dataclass(frozen=True)
class Rule:
    """A named detector. weight scales the rule where a scorer consumes it."""

    name: str
    fn: RuleFn
    weight: float = 1.0
    label: str = ""

    def matches(self, text: str, type_line: str = "") -> bool:
        return self.fn(text, type_line)


def text_rule(name: str, pattern: str, weight: float = 1.0, label: str = "") -> Rule:
    regex = re.compile(pattern)
    return Rule(name, lambda text, _type_line: bool(regex.search(text)), weight, label)


def _produces_mana_as(*card_types: str) -> RuleFn:
    def fn(text: str, type_line: str) -> bool:
        return any(t in type_line for t in card_types) and is_mana_source(text)

    return fn


RAMP_REGEX = re.compile(
    r"add [\dx ]*mana|search your library for [^.]*\blands?\b|untap [^.]*\blands?\b"
)


def _is_ramp(text: str, type_line: str) -> bool:
    return bool(RAMP_REGEX.search(text)) or _produces_mana_as("artifact", "creature")(
        text, type_line
    )


# --- SHARED TRIGGER PATTERNS ---

RECURRING_TRIGGER_REGEX = re.compile(
    r"at the beginning of (?:your|each)(?: player's| opponent's)? (?:upkeep|end step)"
)
MANDATORY_COST_REGEX = re.compile(
    r"at the beginning of your upkeep, (?:sacrifice|discard|pay|you lose)"
    r"|sacrifice [^.]* unless you (?:pay|discard)"
    r"|\bcumulative upkeep\b"
)
TOKEN_RATE_REGEX = re.compile(
    r"at the beginning of|whenever [^.]*\b(?:attacks?|cast|casts|enters)\b"
)
BROAD_TUTOR_REGEX = re.compile(
    r"search your library for (?:a|an|any|up to (?:one|two|three|x|\d+)) (?:permanent )?cards?\b(?! with)"
)


# --- ROLE TABLE ---

ROLE_RULES: Tuple[Rule, ...] = (
    Rule("ramp", _is_ramp),
    Rule("rocks", _produces_mana_as("artifact")),
    Rule("dorks", _produces_mana_as("creature")),
    text_rule(
        "draw",
        r"draws? (?:a|an|one|two|three|four|five|seven|x|\d+) (?:additional )?cards?"
        r"|\binvestigate\b|\bconniv"
        r"|exile the top [^.]*of your library[^.]*\. (?:until [^.]*, )?you may (?:play|cast)",
    ),
    text_rule(
        "tutors",
        r"search your library for [^.]*\b(?:card|permanent|creature|instant|sorcery|artifact|enchantment)",
    ),
    text_rule(
        "wipes",
        r"(?:destroy|exile) (?:all|each) [^.]*\b(?:creatures|permanents)\b"
        r"|(?:all|each) (?:other )?(?:creatures?|[a-z]+ creatures?)[^.]* gets? -(?:\d+|x)/-(?:\d+|x)"
        r"|deals \d+ damage to each creature|\bwrath\b",
    ),
    text_rule(
        "mass_bounce",
        r"return (?:all|each) [^.]*\b(?:creatures?|nonland permanents?)\b",
    ),
    text_rule(
        "spot",
        r"(?:destroy|exile) target (?:[a-z-]+ )*?(?:creature|permanent|artifact|enchantment|planeswalker)\b(?! cards?)"
        r"|return target (?:[a-z-]+ )*?(?:creature|permanent|artifact|enchantment)\b(?! cards?)[^.]* to its owner's hand"
        r"|\bfights? (?:target|another|up to)|\bbounce target",
    ),
    text_rule("counters", r"counter target (?:[a-z-]+ )*?spell"),
    text_rule(
        "recursion",
        r"return [^.]*from your graveyard|\breanimate\b|\bpersist\b|\bescape\b|\bunearth\b",
    ),
    text_rule(
        "gy_hate",
        r"exile (?:all|each|target player's|each opponent's|target card from a"
        r"|up to \w+ target cards? from (?:a|an opponent's)) [^.]*graveyards?"
        r"|cards? from graveyards",
    ),
    text_rule(
        "protection",
        r"\bhexproof\b|\bindestructible\b|protection from|phases? out|\bward\b",
    ),
    text_rule(
        "stax",
        r"players can't|opponents can't|spells [^.]*cost \{?\d+\}? more"
        r"|skip [^.]*untap|no more than one spell|can't cast more than one spell",
    ),
    text_rule("extra_turns", r"takes? an extra turn"),
    text_rule("extra_combat", r"additional combat phase|extra combat"),
    text_rule("token", r"create [^.]*\btokens?\b"),
    text_rule("blink", r"exile [^\n]*?return [^\n]*?(?:to the battlefield|under (?:its|your|their) owner)"),
    text_rule(
        "copy",
        r"copy target (?:[a-z-]+ )*?(?:spell|permanent)|copy (?:all|each) (?:[a-z-]+ )*?(?:spells|abilities)",
    ),
    text_rule("flash", r"\bflash\b"),
)

# --- COMPLEXITY MARKERS ---

MARKER_RULES: Tuple[Rule, ...] = (
    text_rule("cascade", r"\bcascade\b"),
    text_rule("storm", r"\bstorm\b"),
    text_rule("cast_trigger", r"when(?:ever)? you cast"),
    text_rule("replacement", r"\bif [^.]* would (?:die|be dealt|be put into|enter|draw)"),
    text_rule("choose_modes", r"choose (?:one|two|three|one or more|any number)"),
    text_rule("multi_target", r"(?:two|three|x|any number of) target"),
    text_rule("copy_effects", r"\bcopy\b|\bcopies\b"),
)

ROLE_NAMES = [rule.name for rule in ROLE_RULES]


@dataclass(frozen=True)
class ClassifiedCard:
    """A mainboard nonland entry with every role and marker it triggered."""

    entry: DeckCard
    roles: Tuple[str, ...]
    markers: Tuple[str, ...]

    @property
    def card(self) -> CardLite:
        return self.entry.card

    @property
    def count(self) -> int:
        return self.entry.count

    def has(self, name: str) -> bool:
        return name in self.roles or name in self.markers


def evaluate(rules: Tuple[Rule, ...], text: str, type_line: str = "") -> List[str]:
    """Names of every rule that fires, in table order. No short-circuiting."""
    return [rule.name for rule in rules if rule.matches(text, type_line)]


def classify(entry: DeckCard) -> ClassifiedCard:
    text = entry.card.lower_text
    type_line = entry.card.lower_type
    return ClassifiedCard(
        entry=entry,
        roles=tuple(evaluate(ROLE_RULES, text, type_line)),
        markers=tuple(evaluate(MARKER_RULES, text, type_line)),
    )


def has_recurring_trigger(text: str) -> bool:
    return bool(RECURRING_TRIGGER_REGEX.search(text))


def has_mandatory_cost(text: str) -> bool:
    return bool(MANDATORY_COST_REGEX.search(text))


def is_recurring_token_maker(text: str) -> bool:
    return bool(TOKEN_RATE_REGEX.search(text))


def is_broad_tutor(text: str) -> bool:
    return bool(BROAD_TUTOR_REGEX.search(text))


def distinct_activations(text: str) -> int:
    return len(set(activation_costs(text)))
