"""REST endpoints for composition checks and possibility trees."""

import logging
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from draftflow.config import settings
from draftflow.errors import ValidationError
from draftflow.models.champion import BOOLEAN_TAGS, ChampionRecord, build_champion_lookup
from draftflow.models.requirements import (
    REQUIREMENT_CHECKS,
    RankGoal,
    merge_recommendation_weights,
    merge_requirement_toggles,
)
from draftflow.models.team_state import normalize_team_state
from draftflow.services.composition_checks import evaluate_composition_checks
from draftflow.services.possibility_tree import generate_possibility_tree
from draftflow.services.scorers import score_node_from_checks
from draftflow.utils.role_normalizer import SLOTS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/draft", tags=["draft"])


class ChampionPayload(BaseModel):
    name: str
    roles: list[str]
    damage_type: Literal["AD", "AP", "Mixed"]
    scaling: Literal["Early", "Mid", "Late"] = "Mid"
    tags: list[str] = Field(default_factory=list)


class CheckRequest(BaseModel):
    champions: list[ChampionPayload]
    team_state: dict[str, Optional[str]] = Field(default_factory=dict)
    toggles: dict[str, bool] = Field(default_factory=dict)
    weights: dict[str, float] = Field(default_factory=dict)


class TreeRequest(BaseModel):
    champions: list[ChampionPayload]
    team_state: dict[str, Optional[str]] = Field(default_factory=dict)
    team_id: Optional[str] = None
    team_pools: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    role_order: Optional[list[str]] = None
    next_role: Optional[str] = None
    toggles: dict[str, bool] = Field(default_factory=dict)
    excluded_champions: list[str] = Field(default_factory=list)
    weights: dict[str, float] = Field(default_factory=dict)
    max_depth: Optional[int] = None
    max_branch: Optional[int] = None
    min_candidate_score: Optional[float] = None
    prune_unreachable_required: bool = True
    rank_goal: Literal["valid_end_states", "candidate_score"] = "valid_end_states"
    allow_fallback: bool = True


def _champion_lookup(champions: list[ChampionPayload]) -> dict[str, ChampionRecord]:
    return build_champion_lookup(champion.model_dump() for champion in champions)


def _reject(error: ValidationError) -> HTTPException:
    logger.info(f"Rejected draft request: {error}")
    return HTTPException(status_code=422, detail={"message": str(error), **error.details})


@router.get("/defaults")
async def get_defaults():
    """Default toggles, weights and tree limits for a new session."""
    return {
        "slots": list(SLOTS),
        "tags": list(BOOLEAN_TAGS),
        "checks": list(REQUIREMENT_CHECKS),
        "rank_goals": [goal.value for goal in RankGoal],
        "toggles": merge_requirement_toggles(settings.default_requirement_toggles),
        "weights": merge_recommendation_weights(settings.default_weights),
        "tree": {
            "max_depth": settings.default_max_depth,
            "max_branch": settings.default_max_branch,
            "min_candidate_score": settings.default_min_candidate_score,
        },
    }


@router.post("/checks")
async def evaluate_checks(request: CheckRequest):
    """Evaluate the requirement checks for one team state."""
    try:
        lookup = _champion_lookup(request.champions)
        team_state = normalize_team_state(request.team_state)
        toggles = {**settings.default_requirement_toggles, **request.toggles}
        evaluation = evaluate_composition_checks(team_state, lookup, toggles)
        weights = merge_recommendation_weights({**settings.default_weights, **request.weights})
        score = score_node_from_checks(evaluation, weights)
    except ValidationError as e:
        raise _reject(e)

    return {
        "team_state": team_state,
        "checks": {
            name: {
                "required": result.required,
                "satisfied": result.satisfied,
                "applicable": result.applicable,
                "status": result.status,
                "reason": result.reason,
            }
            for name, result in evaluation.checks.items()
        },
        "missing_needs": {
            "tags": evaluation.missing_needs.tags,
            "needs_ad": evaluation.missing_needs.needs_ad,
            "needs_ap": evaluation.missing_needs.needs_ap,
            "needs_top_threat": evaluation.missing_needs.needs_top_threat,
        },
        "required_summary": asdict(evaluation.required_summary()),
        "score": score,
    }


@router.post("/tree")
async def build_tree(request: TreeRequest):
    """Generate the possibility tree for the remaining picks."""
    max_depth = request.max_depth if request.max_depth is not None else settings.default_max_depth
    max_branch = request.max_branch if request.max_branch is not None else settings.default_max_branch
    min_score = (
        request.min_candidate_score
        if request.min_candidate_score is not None
        else settings.default_min_candidate_score
    )

    # The engine has no time budget of its own; bound untrusted requests here.
    if max_branch > 0 and max_depth > 0:
        # Each node expands at most max_branch children, one level per open slot
        depth = min(max_depth, len(SLOTS))
        projected = sum(max_branch ** level for level in range(depth + 1))
        if projected > settings.max_tree_nodes_hint:
            raise HTTPException(
                status_code=422,
                detail={
                    "message": "Requested tree is too large.",
                    "projected_nodes": projected,
                    "limit": settings.max_tree_nodes_hint,
                },
            )

    try:
        tree = generate_possibility_tree(
            team_state=request.team_state,
            champion_lookup=_champion_lookup(request.champions),
            team_id=request.team_id,
            role_order=request.role_order,
            team_pools=request.team_pools,
            toggles={**settings.default_requirement_toggles, **request.toggles},
            excluded_champions=request.excluded_champions,
            weights={**settings.default_weights, **request.weights},
            max_depth=max_depth,
            max_branch=max_branch,
            min_candidate_score=min_score,
            prune_unreachable_required=request.prune_unreachable_required,
            rank_goal=request.rank_goal,
            next_role=request.next_role,
            allow_fallback=request.allow_fallback,
            relative_score_ratio=settings.relative_score_ratio,
        )
    except ValidationError as e:
        raise _reject(e)

    return tree.to_dict()
