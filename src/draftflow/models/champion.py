"""Champion catalog models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from draftflow.errors import ValidationError
from draftflow.utils.role_normalizer import normalize_slot_strict


class DamageType(str, Enum):
    """Damage profile of a champion."""

    AD = "AD"
    AP = "AP"
    MIXED = "Mixed"


class Scaling(str, Enum):
    """Game phase a champion peaks in."""

    EARLY = "Early"
    MID = "Mid"
    LATE = "Late"


# Universe of boolean composition tags
BOOLEAN_TAGS: tuple[str, ...] = (
    "HardEngage",
    "FollowUpEngage",
    "PickThreat",
    "Frontline",
    "Disengage",
    "Waveclear",
    "ZoneControl",
    "ObjectiveSecure",
    "AntiTank",
    "FrontToBackDPS",
    "DiveThreat",
    "SideLaneThreat",
    "Poke",
    "FogThreat",
    "EarlyPriority",
    "PrimaryCarry",
    "SustainedDPS",
    "TurretSiege",
    "SelfPeel",
    "UtilityCarry",
)

TOP_THREAT_TAGS = frozenset({"SideLaneThreat", "DiveThreat"})

DAMAGE_TYPES = tuple(d.value for d in DamageType)
SCALING_VALUES = tuple(s.value for s in Scaling)


@dataclass(frozen=True)
class ChampionRecord:
    """A champion as the engine sees it."""

    name: str
    roles: tuple[str, ...]
    damage_type: str  # "AD", "AP" or "Mixed"
    scaling: str = "Mid"  # "Early", "Mid" or "Late"
    tags: frozenset[str] = field(default_factory=frozenset)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @property
    def deals_ad(self) -> bool:
        return self.damage_type in (DamageType.AD.value, DamageType.MIXED.value)

    @property
    def deals_ap(self) -> bool:
        return self.damage_type in (DamageType.AP.value, DamageType.MIXED.value)

    @property
    def is_top_threat(self) -> bool:
        """Whether the champion can hold Top as a side-lane or dive threat."""
        return bool(self.tags & TOP_THREAT_TAGS)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        known_tags: Iterable[str] = BOOLEAN_TAGS,
    ) -> "ChampionRecord":
        """Build a record from a plain mapping.

        Tags may be a list of tag names or a ``{tag: bool}`` map. Roles may
        use any alias understood by the slot normalizer.

        Raises:
            ValidationError: On an empty name, unknown role, damage type,
                scaling or tag
        """
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("Champion name cannot be empty.")

        raw_roles = data.get("roles") or []
        if isinstance(raw_roles, str):
            raw_roles = [raw_roles]
        roles: list[str] = []
        for role in raw_roles:
            slot = normalize_slot_strict(role)
            if slot not in roles:
                roles.append(slot)
        if not roles:
            raise ValidationError(f"Champion '{name}' has no roles.", {"champion": name})

        damage_type = data.get("damage_type", data.get("damageType"))
        if isinstance(damage_type, DamageType):
            damage_type = damage_type.value
        if damage_type not in DAMAGE_TYPES:
            raise ValidationError(
                f"Invalid damage type '{damage_type}' for '{name}'. "
                f"Expected one of {', '.join(DAMAGE_TYPES)}.",
                {"champion": name, "value": damage_type},
            )

        scaling = data.get("scaling", Scaling.MID.value)
        if isinstance(scaling, Scaling):
            scaling = scaling.value
        if scaling not in SCALING_VALUES:
            raise ValidationError(
                f"Invalid scaling '{scaling}' for '{name}'. "
                f"Expected one of {', '.join(SCALING_VALUES)}.",
                {"champion": name, "value": scaling},
            )

        raw_tags = data.get("tags") or []
        if isinstance(raw_tags, Mapping):
            tag_names = [tag for tag, enabled in raw_tags.items() if enabled]
        else:
            tag_names = list(raw_tags)
        allowed = set(known_tags)
        unknown = sorted(tag for tag in tag_names if tag not in allowed)
        if unknown:
            raise ValidationError(
                f"Unknown tags for '{name}': {', '.join(unknown)}",
                {"champion": name, "tags": unknown},
            )

        return cls(
            name=name,
            roles=tuple(roles),
            damage_type=damage_type,
            scaling=scaling,
            tags=frozenset(tag_names),
        )


def build_champion_lookup(
    records: Iterable[ChampionRecord | Mapping[str, Any]],
) -> dict[str, ChampionRecord]:
    """Index champions by name, rejecting duplicates."""
    lookup: dict[str, ChampionRecord] = {}
    for record in records:
        champion = record if isinstance(record, ChampionRecord) else ChampionRecord.from_dict(record)
        if champion.name in lookup:
            raise ValidationError(
                f"Duplicate champion '{champion.name}'.", {"champion": champion.name}
            )
        lookup[champion.name] = champion
    return lookup
