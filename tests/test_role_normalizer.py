"""Tests for slot normalization."""
import pytest

from draftflow.errors import ValidationError
from draftflow.utils.role_normalizer import (
    SLOTS,
    Slot,
    is_valid_slot,
    normalize_role_order,
    normalize_slot,
    normalize_slot_strict,
)


def test_normalize_slot_aliases():
    """Known role spellings map onto canonical slots."""
    assert normalize_slot("Top") == "Top"
    assert normalize_slot("top") == "Top"
    assert normalize_slot("JNG") == "Jungle"
    assert normalize_slot("jg") == "Jungle"
    assert normalize_slot("middle") == "Mid"
    assert normalize_slot("bot") == "ADC"
    assert normalize_slot("adc") == "ADC"
    assert normalize_slot("SUP") == "Support"
    assert normalize_slot(Slot.MID) == "Mid"


def test_normalize_slot_unknown():
    assert normalize_slot("Bench") is None
    assert normalize_slot(None) is None
    assert normalize_slot(3) is None
    assert is_valid_slot("Bench") is False
    assert is_valid_slot("Support") is True


def test_normalize_slot_strict_raises():
    with pytest.raises(ValidationError):
        normalize_slot_strict("Bench")


def test_role_order_defaults_to_natural_order():
    assert normalize_role_order(None) == SLOTS
    assert SLOTS == ("Top", "Jungle", "Mid", "ADC", "Support")


def test_role_order_dedupes_and_completes():
    """Duplicates are dropped and missing slots appended in natural order."""
    order = normalize_role_order(["Support", "support", "mid"])
    assert order == ("Support", "Mid", "Top", "Jungle", "ADC")


def test_role_order_rejects_unknown_slot():
    with pytest.raises(ValidationError):
        normalize_role_order(["Top", "Roam"])


def test_role_order_rejects_plain_string():
    with pytest.raises(ValidationError):
        normalize_role_order("Top")
