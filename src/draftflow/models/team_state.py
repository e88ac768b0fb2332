"""Team state helpers: a total map from slot to champion name or None."""

from typing import Any, Iterable, Mapping, Optional

from draftflow.errors import ValidationError
from draftflow.utils.role_normalizer import SLOTS, normalize_slot_strict

TeamState = dict[str, Optional[str]]


def create_empty_team_state() -> TeamState:
    """Return a team state with every slot open."""
    return {slot: None for slot in SLOTS}


def normalize_team_state(raw: Optional[Mapping[str, Any]] = None) -> TeamState:
    """Coerce a partial slot map into a full, validated team state.

    Slot keys may use any known alias. Champion names are stripped and empty
    strings become None.

    Raises:
        ValidationError: On unknown slots, non-string picks, a slot given
            twice, or one champion placed in two slots
    """
    normalized = create_empty_team_state()
    if raw is None:
        return normalized
    if not isinstance(raw, Mapping):
        raise ValidationError("Team state must be a mapping of slot to champion.")

    seen_slots: set[str] = set()
    placed: dict[str, str] = {}
    for key, value in raw.items():
        slot = normalize_slot_strict(key)
        if slot in seen_slots:
            raise ValidationError(f"Slot '{slot}' given more than once.", {"slot": slot})
        seen_slots.add(slot)

        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(
                f"Pick for slot '{slot}' must be a champion name.",
                {"slot": slot, "value": value},
            )
        name = value.strip()
        if not name:
            continue
        if name in placed:
            raise ValidationError(
                f"Champion '{name}' appears in both {placed[name]} and {slot}.",
                {"champion": name, "slots": [placed[name], slot]},
            )
        placed[name] = slot
        normalized[slot] = name

    return normalized


def get_picked_champion_names(team_state: Mapping[str, Optional[str]]) -> set[str]:
    """Champion names currently placed in any slot."""
    return {team_state[slot] for slot in SLOTS if team_state.get(slot)}


def get_unfilled_slots(
    team_state: Mapping[str, Optional[str]],
    role_order: Iterable[str] = SLOTS,
) -> list[str]:
    """Open slots, in the given draft order."""
    return [slot for slot in role_order if not team_state.get(slot)]


def is_team_complete(team_state: Mapping[str, Optional[str]]) -> bool:
    return all(team_state.get(slot) for slot in SLOTS)
