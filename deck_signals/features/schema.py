"""
deck_signals/features/schema.py
Versioned output models for the feature vector and the land compression result.
"""

from typing import Dict, Optional, Tuple
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
    field_validator,
)
from deck_signals import constants


class FeatureSchemaError(Exception):
    """The assembled output does not match its schema. Deterministic; never retry."""


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ColorCounts(FrozenModel):
    W: NonNegativeFloat = 0.0
    U: NonNegativeFloat = 0.0
    B: NonNegativeFloat = 0.0
    R: NonNegativeFloat = 0.0
    G: NonNegativeFloat = 0.0


def _check_curve(curve: Dict[str, int]) -> Dict[str, int]:
    if list(curve.keys()) != constants.CURVE_BUCKETS:
        raise ValueError(f"curve buckets must be exactly {constants.CURVE_BUCKETS}")
    return curve


class CommanderSummary(FrozenModel):
    name: Optional[str] = None
    color_identity: Tuple[str, ...] = ()
    text: str = ""


class FeatureMeta(FrozenModel):
    deck_id: str
    commander: CommanderSummary
    avg_mv: NonNegativeFloat
    mainboard_count: NonNegativeInt
    land_count: NonNegativeInt = 0


class SignalCard(FrozenModel):
    name: str
    mv: Optional[NonNegativeFloat] = None
    type: Optional[str] = None
    tags: Tuple[str, ...] = ()


class InteractionProfile(FrozenModel):
    instant: NonNegativeInt = 0
    mass: NonNegativeInt = 0
    spot: NonNegativeInt = 0


class UpkeepLoad(FrozenModel):
    recurring_triggers: NonNegativeInt = 0
    mandatory_costs: NonNegativeInt = 0
    repeatable_activations: NonNegativeInt = 0


class ColorlessPips(FrozenModel):
    demand: NonNegativeInt = 0
    supply: NonNegativeInt = 0


class TokenProfile(FrozenModel):
    rate: NonNegativeInt = 0
    bursts: NonNegativeInt = 0


class TutorBreadth(FrozenModel):
    broad: NonNegativeInt = 0
    narrow: NonNegativeInt = 0


class DeckFeatureVector(FrozenModel):
    """
    Fields cannot be reassigned and sequences are tuples. The dict-valued
    maps (counts, curves, histograms) are plain dicts; treat them as read-only.
    """

    schema_version: str = constants.FEATURE_SCHEMA_VERSION
    meta: FeatureMeta
    counts: Dict[str, NonNegativeInt]
    curve: Dict[str, NonNegativeInt]
    effective_curve: Dict[str, NonNegativeInt]
    type_counts: Dict[str, NonNegativeInt]
    keyword_histogram: Dict[str, NonNegativeInt]
    interaction_density: NonNegativeFloat
    stack_complexity_markers: Tuple[str, ...]
    signals: Tuple[SignalCard, ...]
    mana_pool: ColorCounts
    coloured_mana_curve: ColorCounts
    # spot includes instant-speed spot removal, which is also counted in instant
    interaction: InteractionProfile
    upkeep_load: UpkeepLoad
    c_pips: ColorlessPips
    token_profile: TokenProfile
    tutor_breadth: TutorBreadth
    color_tension_index: ColorCounts

    @field_validator("curve", "effective_curve")
    @classmethod
    def _validate_curve(cls, value):
        return _check_curve(value)

    @field_validator("stack_complexity_markers")
    @classmethod
    def _validate_markers(cls, value):
        if len(set(value)) != len(value):
            raise ValueError("stack_complexity_markers must be deduplicated")
        return value


class SignalLand(FrozenModel):
    name: str
    count: PositiveInt
    tags: Tuple[str, ...] = Field(min_length=1)
    why: str


class LandCompression(FrozenModel):
    mana_pool: ColorCounts
    signal_lands: Tuple[SignalLand, ...]
