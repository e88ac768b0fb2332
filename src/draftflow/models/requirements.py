"""Requirement checks, toggles and recommendation weights."""

from enum import Enum
from numbers import Real
from typing import Mapping, Optional

from draftflow.errors import ValidationError
from draftflow.models.champion import BOOLEAN_TAGS

# Tag-backed checks that can be made required
REQUIRED_TAG_CHECKS: dict[str, str] = {
    "HasHardEngage": "HardEngage",
    "HasFrontline": "Frontline",
    "HasWaveclear": "Waveclear",
    "HasDisengage": "Disengage",
    "HasAntiTank": "AntiTank",
    "HasPrimaryCarry": "PrimaryCarry",
}

# Tag-backed checks that are only ever informational
OPTIONAL_TAG_CHECKS: dict[str, str] = {
    "HasSustainedDPS": "SustainedDPS",
    "HasTurretSiege": "TurretSiege",
    "HasSelfPeel": "SelfPeel",
    "HasUtilityCarry": "UtilityCarry",
}

DAMAGE_MIX_CHECK = "DamageMix"
TOP_THREAT_CHECK = "TopMustBeThreat"

REQUIREMENT_CHECKS: tuple[str, ...] = (
    *REQUIRED_TAG_CHECKS,
    DAMAGE_MIX_CHECK,
    TOP_THREAT_CHECK,
)

DEFAULT_REQUIREMENT_TOGGLES: dict[str, bool] = {
    "HasHardEngage": True,
    "HasFrontline": True,
    "HasWaveclear": True,
    "HasDisengage": False,
    "HasAntiTank": False,
    "HasPrimaryCarry": True,
    "DamageMix": True,
    "TopMustBeThreat": True,
}

# Older configuration files spell toggles as "requireX" flags
LEGACY_TOGGLE_KEYS: dict[str, str] = {
    "requireHardEngage": "HasHardEngage",
    "requireFrontline": "HasFrontline",
    "requireWaveclear": "HasWaveclear",
    "requireDisengage": "HasDisengage",
    "requireAntiTank": "HasAntiTank",
    "requirePrimaryCarry": "HasPrimaryCarry",
    "requireDamageMix": "DamageMix",
    "topMustBeThreat": "TopMustBeThreat",
}

DEFAULT_RECOMMENDATION_WEIGHTS: dict[str, float] = {
    "HardEngage": 10,
    "Frontline": 8,
    "Waveclear": 8,
    "Disengage": 6,
    "AntiTank": 5,
    "ZoneControl": 5,
    "PickThreat": 4,
    "DiveThreat": 4,
    "SideLaneThreat": 4,
    "Poke": 3,
    "FogThreat": 3,
    "FollowUpEngage": 3,
    "FrontToBackDPS": 3,
    "EarlyPriority": 2,
    "ObjectiveSecure": 0,
    "PrimaryCarry": 0,
    "SustainedDPS": 0,
    "TurretSiege": 0,
    "SelfPeel": 0,
    "UtilityCarry": 0,
}

DEFAULT_TREE_SETTINGS = {
    "max_depth": 4,
    "max_branch": 8,
    "min_candidate_score": 1,
    "relative_score_ratio": 0.25,
}


class RankGoal(str, Enum):
    """What the tree builder optimizes for when trimming to max_branch."""

    VALID_END_STATES = "valid_end_states"
    CANDIDATE_SCORE = "candidate_score"


def merge_requirement_toggles(overrides: Optional[Mapping[str, bool]] = None) -> dict[str, bool]:
    """Layer caller toggles over the defaults.

    Raises:
        ValidationError: If a key is not a toggleable check
    """
    toggles = dict(DEFAULT_REQUIREMENT_TOGGLES)
    for key, value in (overrides or {}).items():
        check_name = LEGACY_TOGGLE_KEYS.get(key, key)
        if check_name not in DEFAULT_REQUIREMENT_TOGGLES:
            raise ValidationError(f"Unknown requirement toggle '{key}'.", {"toggle": key})
        toggles[check_name] = bool(value)
    return toggles


def merge_recommendation_weights(overrides: Optional[Mapping[str, float]] = None) -> dict[str, float]:
    """Layer caller weights over the defaults.

    Raises:
        ValidationError: On unknown tags or negative / non-numeric weights
    """
    weights = dict(DEFAULT_RECOMMENDATION_WEIGHTS)
    for tag, value in (overrides or {}).items():
        if tag not in BOOLEAN_TAGS:
            raise ValidationError(f"Unknown recommendation weight '{tag}'.", {"tag": tag})
        if isinstance(value, bool) or not isinstance(value, Real) or not value >= 0:
            raise ValidationError(
                f"Weight for '{tag}' must be a number >= 0.", {"tag": tag, "value": value}
            )
        weights[tag] = value
    return weights
