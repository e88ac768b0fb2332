"""Check evaluation results."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CheckResult:
    """Outcome of one requirement check for a team state."""

    name: str
    required: bool
    satisfied: bool
    reason: str
    applicable: bool = True  # False only for TopMustBeThreat while Top is empty
    requirement_type: str = "tag"  # "tag", "damage_mix" or "top_threat"
    requirement_tag: Optional[str] = None

    @property
    def status(self) -> str:
        return "good" if self.satisfied else "warn"


@dataclass
class MissingNeeds:
    """What the team still lacks among its required checks."""

    tags: list[str] = field(default_factory=list)
    needs_ad: bool = False
    needs_ap: bool = False
    needs_top_threat: bool = False


@dataclass
class RequiredSummary:
    required_total: int = 0
    required_passed: int = 0
    required_gaps: int = 0


@dataclass
class CheckEvaluation:
    """Every check for one team state plus the facts they were derived from."""

    toggles: dict[str, bool]
    checks: dict[str, CheckResult]
    missing_needs: MissingNeeds
    has_ad: bool = False
    has_ap: bool = False
    filled_tags: dict[str, int] = field(default_factory=dict)
    selected_count: int = 0

    @property
    def unmet_required(self) -> list[str]:
        """Names of required checks that are not satisfied, in check order."""
        return [
            name for name, result in self.checks.items()
            if result.required and not result.satisfied
        ]

    def required_summary(self) -> RequiredSummary:
        required = [result for result in self.checks.values() if result.required]
        passed = sum(1 for result in required if result.satisfied)
        return RequiredSummary(
            required_total=len(required),
            required_passed=passed,
            required_gaps=len(required) - passed,
        )
