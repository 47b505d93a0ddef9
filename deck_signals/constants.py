"""
deck_signals/constants.py
Shared vocabulary and every tunable number used by the feature engine.
"""

FEATURE_SCHEMA_VERSION = "deck-features/4.5"

BOARD_SECTION_MAINBOARD = "mainboard"

CARD_COLOR_SYMBOL_WHITE = "W"
CARD_COLOR_SYMBOL_BLUE = "U"
CARD_COLOR_SYMBOL_BLACK = "B"
CARD_COLOR_SYMBOL_RED = "R"
CARD_COLOR_SYMBOL_GREEN = "G"
CARD_COLOR_SYMBOL_COLORLESS = "C"

CARD_COLORS = [
    CARD_COLOR_SYMBOL_WHITE,
    CARD_COLOR_SYMBOL_BLUE,
    CARD_COLOR_SYMBOL_BLACK,
    CARD_COLOR_SYMBOL_RED,
    CARD_COLOR_SYMBOL_GREEN,
]

CARD_TYPE_CREATURE = "Creature"
CARD_TYPE_ENCHANTMENT = "Enchantment"
CARD_TYPE_ARTIFACT = "Artifact"
CARD_TYPE_PLANESWALKER = "Planeswalker"
CARD_TYPE_INSTANT = "Instant"
CARD_TYPE_SORCERY = "Sorcery"
CARD_TYPE_LAND = "Land"
CARD_TYPE_OTHER = "Other"

# Checked in this order; the first hit names the card's base type
BASE_TYPE_ORDER = [
    CARD_TYPE_CREATURE,
    CARD_TYPE_ENCHANTMENT,
    CARD_TYPE_ARTIFACT,
    CARD_TYPE_PLANESWALKER,
    CARD_TYPE_INSTANT,
    CARD_TYPE_SORCERY,
    CARD_TYPE_LAND,
]

# --- MANA CURVE ---

CURVE_BUCKET_LOW = "0-1"
CURVE_BUCKET_HIGH = "6+"
CURVE_BUCKETS = [CURVE_BUCKET_LOW, "2", "3", "4", "5", CURVE_BUCKET_HIGH]

# Spells at or below this mana value feed the early colour demand
EARLY_GAME_MAX_MV = 3

# Flat reductions applied when the keyword appears in the oracle text.
# Delve/affinity/emerge usually shave at least two mana in a built deck,
# convoke/improvise depend on board state so they are credited less.
ALT_COST_DISCOUNTS = {
    "delve": 2.0,
    "affinity": 2.0,
    "emerge": 2.0,
    "convoke": 1.5,
    "improvise": 1.5,
}

# --- KEYWORDS ---

KEYWORD_HISTOGRAM_TERMS = [
    "annihilator",
    "proliferate",
    "landfall",
    "energy",
    "devoid",
    "emerge",
    "delirium",
    "venture",
    "storm",
    "cascade",
]

# --- SIGNAL CARD RANKER ---

SIGNAL_CARD_LIMIT = 12

# Tags a card can surface in the signal list; "copying" is fed by the copy role
SIGNAL_TAGS = [
    "spot",
    "counters",
    "wipes",
    "token",
    "copying",
    "cast_trigger",
    "choose_modes",
    "protection",
    "blink",
]
SIGNAL_TAG_SOURCES = {"copying": "copy"}

SIGNAL_WEIGHT_PER_TAG = 2.5  # tag density dominates the ranking
SIGNAL_CURVE_FLOOR = 2  # mana value above this earns a bonus
SIGNAL_CURVE_CAP = 3  # the curve bonus never exceeds this
SIGNAL_WEIGHT_SYNERGY = 2.0  # overlaps with a commander motif
SIGNAL_WEIGHT_ENGINE = 1.5  # repeatable value engines

# Words lifted from the commander's text and looked for in each card
COMMANDER_MOTIF_KEYWORDS = [
    "token",
    "sacrifice",
    "copy",
    "blink",
    "+1/+1 counter",
    "-1/-1 counter",
    "graveyard",
    "landfall",
    "artifact",
    "enchantment",
    "draw",
]

COMMANDER_TEXT_LIMIT = 800

# --- LAND SIGNAL CURATOR ---

SIGNAL_LAND_LIMIT = 12

LAND_TAG_DRAW = "draw"
LAND_TAG_REPEAT_DRAW = "repeat_draw"
LAND_TAG_LAND_TUTOR = "land_tutor"
LAND_TAG_FETCH = "fetch_self_sac"
LAND_TAG_GRAVE_HATE = "grave_hate"
LAND_TAG_RECURSION_TOP = "recursion_top"
LAND_TAG_RECURSION_BATTLEFIELD = "recursion_battlefield"
LAND_TAG_MANLAND = "manland"
LAND_TAG_TOKEN_ENGINE = "token_engine"
LAND_TAG_BLINK_PROTECT = "blink_protect"
LAND_TAG_ANTI_COUNTER = "anti_counter"
LAND_TAG_EVASION = "evasion"
LAND_TAG_COLOR_SHIFT = "color_shift"
LAND_TAG_DEVOTION_BURST = "devotion_burst"
LAND_TAG_UNTAP_ENGINE = "untap_engine"
LAND_TAG_DAMAGE_REMOVAL = "damage_removal"
LAND_TAG_COMMANDER_SUPPORT = "commander_support"
LAND_TAG_HAND_SIZE = "hand_size"
LAND_TAG_BOARD_BOUNCE = "board_bounce"

# Base weight per land tag. One solid utility tag clears the default
# threshold on its own; a lone fetch stays below it.
LAND_TAG_WEIGHTS = {
    LAND_TAG_DRAW: 3.0,
    LAND_TAG_REPEAT_DRAW: 3.5,
    LAND_TAG_LAND_TUTOR: 3.2,
    LAND_TAG_FETCH: 1.4,  # only matters once land context lifts it
    LAND_TAG_GRAVE_HATE: 3.0,
    LAND_TAG_RECURSION_TOP: 3.2,
    LAND_TAG_RECURSION_BATTLEFIELD: 3.6,
    LAND_TAG_MANLAND: 2.8,
    LAND_TAG_TOKEN_ENGINE: 3.8,  # Field of the Dead class, wins games alone
    LAND_TAG_BLINK_PROTECT: 2.4,
    LAND_TAG_ANTI_COUNTER: 2.8,
    LAND_TAG_EVASION: 2.5,
    LAND_TAG_COLOR_SHIFT: 3.2,
    LAND_TAG_DEVOTION_BURST: 4.0,  # Cradle/Nykthos class, highest impact
    LAND_TAG_UNTAP_ENGINE: 2.6,
    LAND_TAG_DAMAGE_REMOVAL: 2.2,
    LAND_TAG_COMMANDER_SUPPORT: 2.2,
    LAND_TAG_HAND_SIZE: 2.0,
    LAND_TAG_BOARD_BOUNCE: 2.2,
}

LAND_TAG_LABELS = {
    LAND_TAG_DRAW: "card draw",
    LAND_TAG_REPEAT_DRAW: "repeatable draw",
    LAND_TAG_LAND_TUTOR: "land tutor/ramp",
    LAND_TAG_FETCH: "fetch/fix (synergy)",
    LAND_TAG_GRAVE_HATE: "graveyard hate",
    LAND_TAG_RECURSION_TOP: "recursion to top",
    LAND_TAG_RECURSION_BATTLEFIELD: "recursion to battlefield",
    LAND_TAG_MANLAND: "becomes a creature",
    LAND_TAG_TOKEN_ENGINE: "token engine",
    LAND_TAG_BLINK_PROTECT: "protect/blink",
    LAND_TAG_ANTI_COUNTER: "anti-counter",
    LAND_TAG_EVASION: "evasion enabler",
    LAND_TAG_COLOR_SHIFT: "color-type shift",
    LAND_TAG_DEVOTION_BURST: "explosive mana",
    LAND_TAG_UNTAP_ENGINE: "untap synergy",
    LAND_TAG_DAMAGE_REMOVAL: "damage/removal",
    LAND_TAG_COMMANDER_SUPPORT: "commander support",
    LAND_TAG_HAND_SIZE: "hand size modifier",
    LAND_TAG_BOARD_BOUNCE: "bounce control",
}

LAND_COPY_CAP = 4  # extra copies stop adding value past this
LAND_COPY_SCALE = 0.35  # multiplier on ln(1 + copies)

LAND_FETCH_CONTEXT_SCALE = 0.9
LAND_FETCH_CONTEXT_CAP = 2.2

# Subtracted only from lands with no tags at all
LAND_PENALTY_ETB_TAPPED = 0.6
LAND_PENALTY_SCRY_ONE = 0.5
LAND_PENALTY_GAIN_ONE = 0.4

LAND_SCORE_FLOOR = 0.6  # anything lower is noise and becomes zero

LAND_CONTEXT_STRONG = 3.0  # context score at which the threshold relaxes
LAND_THRESHOLD_DEFAULT = 2.6  # roughly one substantial tag
LAND_THRESHOLD_LAND_MATTERS = 2.0

LAND_CONTEXT_HIT_CAP = 3.0  # per motif per card group
