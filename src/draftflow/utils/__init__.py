"""Utility modules for draftflow."""

from draftflow.utils.role_normalizer import (
    SLOT_ALIASES,
    SLOTS,
    Slot,
    is_valid_slot,
    normalize_role_order,
    normalize_slot,
    normalize_slot_strict,
)

__all__ = [
    "SLOT_ALIASES",
    "SLOTS",
    "Slot",
    "is_valid_slot",
    "normalize_role_order",
    "normalize_slot",
    "normalize_slot_strict",
]
