"""Centralized slot normalization utility.

All slot handling in the codebase should use this module to ensure
consistency. The canonical format is the draft slot name: Top, Jungle, Mid,
ADC, Support.
"""

from enum import Enum
from typing import Iterable, Optional

from draftflow.errors import ValidationError


class Slot(str, Enum):
    """Role positions a composition assigns champions to."""

    TOP = "Top"
    JUNGLE = "Jungle"
    MID = "Mid"
    ADC = "ADC"
    SUPPORT = "Support"


# Natural slot order, used whenever no draft order is supplied
SLOTS: tuple[str, ...] = tuple(slot.value for slot in Slot)

# Mapping from any known role spelling (lowercased) to the canonical slot
SLOT_ALIASES: dict[str, str] = {
    # Top lane variations
    "top": "Top",
    "top laner": "Top",
    "toplane": "Top",

    # Jungle variations
    "jungle": "Jungle",
    "jungler": "Jungle",
    "jng": "Jungle",
    "jg": "Jungle",

    # Mid lane variations
    "mid": "Mid",
    "middle": "Mid",
    "midlane": "Mid",

    # Bot carry variations - all normalize to "ADC"
    "adc": "ADC",
    "bot": "ADC",
    "bottom": "ADC",
    "ad carry": "ADC",
    "marksman": "ADC",

    # Support variations
    "support": "Support",
    "sup": "Support",
    "supp": "Support",
}


def normalize_slot(role: Optional[str]) -> Optional[str]:
    """Normalize a role string to its canonical slot name.

    Args:
        role: Role string in any known format (e.g., "JNG", "jungle", "bot")

    Returns:
        Canonical slot name or None if invalid/None

    Examples:
        >>> normalize_slot("JNG")
        'Jungle'
        >>> normalize_slot("bot")
        'ADC'
        >>> normalize_slot(None)
    """
    if role is None:
        return None
    if isinstance(role, Slot):
        return role.value
    if not isinstance(role, str):
        return None

    stripped = role.strip()
    if stripped in SLOTS:
        return stripped
    return SLOT_ALIASES.get(stripped.lower())


def normalize_slot_strict(role: str) -> str:
    """Normalize a role string, raising ValidationError if unknown."""
    normalized = normalize_slot(role)
    if normalized is None:
        raise ValidationError(
            f"Unknown slot '{role}'. Expected one of {', '.join(SLOTS)}.",
            {"value": role},
        )
    return normalized


def is_valid_slot(role: Optional[str]) -> bool:
    """Check if a role string can be normalized to a slot."""
    return normalize_slot(role) is not None


def normalize_role_order(role_order: Optional[Iterable[str]] = None) -> tuple[str, ...]:
    """Resolve a caller-supplied draft order into a full slot sequence.

    Duplicates are dropped and slots the caller left out are appended in
    natural order, so the result always covers every slot exactly once.

    Raises:
        ValidationError: If any entry is not a known slot
    """
    if role_order is None:
        return SLOTS
    if isinstance(role_order, str):
        raise ValidationError("role_order must be a list of slot names.", {"value": role_order})

    order: list[str] = []
    for role in role_order:
        slot = normalize_slot_strict(role)
        if slot not in order:
            order.append(slot)

    for slot in SLOTS:
        if slot not in order:
            order.append(slot)
    return tuple(order)
