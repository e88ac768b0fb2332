"""Eligible champion lookup per role."""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from draftflow.errors import ValidationError
from draftflow.models.champion import ChampionRecord
from draftflow.models.team_state import get_picked_champion_names
from draftflow.utils.role_normalizer import SLOTS, Slot, normalize_slot_strict

logger = logging.getLogger(__name__)


@dataclass
class CandidateBatch:
    """Champions that may fill a role, before any scoring."""

    role: str
    eligible: list[ChampionRecord] = field(default_factory=list)
    pool_size: int = 0
    excluded_count: int = 0
    used_count: int = 0
    filtered_top_threat_count: int = 0


class CandidateGenerator:
    """Resolves role pools and filters them down to eligible picks.

    With a ``team_id`` the team-scoped pools are used; otherwise every
    catalog champion listing the role is eligible. Pools are deduplicated and
    sorted by name so downstream ranking never depends on input order.
    """

    def __init__(
        self,
        champion_lookup: Mapping[str, ChampionRecord],
        team_pools: Optional[Mapping[str, Mapping[str, Iterable[str]]]] = None,
        team_id: Optional[str] = None,
    ):
        self.champion_lookup = champion_lookup
        self.team_id = team_id
        self._pools = self._resolve_pools(team_pools or {}, team_id)

    def _resolve_pools(
        self,
        team_pools: Mapping[str, Mapping[str, Iterable[str]]],
        team_id: Optional[str],
    ) -> dict[str, tuple[str, ...]]:
        """Build the per-slot pools once, validating team-scoped entries."""
        if team_id is None:
            return {
                slot: tuple(sorted(
                    name for name, champion in self.champion_lookup.items()
                    if slot in champion.roles
                ))
                for slot in SLOTS
            }

        if team_id not in team_pools:
            raise ValidationError(f"Unknown team '{team_id}' in team pools.", {"team_id": team_id})

        pools: dict[str, set[str]] = {slot: set() for slot in SLOTS}
        for raw_role, names in team_pools[team_id].items():
            slot = normalize_slot_strict(raw_role)
            for name in names:
                if name not in self.champion_lookup:
                    raise ValidationError(
                        f"Pool for team '{team_id}' role '{slot}' references unknown champion '{name}'.",
                        {"team_id": team_id, "role": slot, "champion": name},
                    )
                pools[slot].add(name)
        return {slot: tuple(sorted(names)) for slot, names in pools.items()}

    def pool_for_role(self, role: str) -> tuple[str, ...]:
        return self._pools.get(role, ())

    def available_for_role(
        self,
        team_state: Mapping[str, Optional[str]],
        role: str,
        excluded: frozenset[str] = frozenset(),
        top_threat_required: bool = False,
    ) -> list[ChampionRecord]:
        """Eligible champions only, without the bookkeeping counts."""
        return self.generate(team_state, role, excluded, top_threat_required).eligible

    def generate(
        self,
        team_state: Mapping[str, Optional[str]],
        role: str,
        excluded: frozenset[str] = frozenset(),
        top_threat_required: bool = False,
    ) -> CandidateBatch:
        """Pool for the role minus exclusions and champions already picked.

        Args:
            team_state: Current slots; its picks are never offered again
            role: Slot to fill
            excluded: Champions unavailable for the whole search
            top_threat_required: Drop non-threat champions when filling Top

        Returns:
            CandidateBatch with eligible champions in name order
        """
        pool = self.pool_for_role(role)
        picked = get_picked_champion_names(team_state)
        batch = CandidateBatch(role=role, pool_size=len(pool))

        for name in pool:
            if name in excluded:
                batch.excluded_count += 1
                continue
            if name in picked:
                batch.used_count += 1
                continue
            champion = self.champion_lookup[name]
            if role == Slot.TOP.value and top_threat_required and not champion.is_top_threat:
                batch.filtered_top_threat_count += 1
                continue
            batch.eligible.append(champion)

        if not batch.eligible:
            logger.debug(
                f"No eligible champions for {role}: pool={batch.pool_size} "
                f"excluded={batch.excluded_count} used={batch.used_count} "
                f"top_threat_filtered={batch.filtered_top_threat_count}"
            )
        return batch
