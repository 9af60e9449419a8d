"""
API routes.

Endpoints:
- GET  `/api/health`: liveness probe.
- GET  `/api/options`: effective option string plus the option listing.
- POST `/api/score`: score a dataset and return it with weights written back.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from clusterweight.config.options import get_options, list_options
from clusterweight.config.overrides import apply_settings_overrides
from clusterweight.config.settings import get_settings
from clusterweight.core.errors import ClusteringFailure, NonFiniteWeight
from clusterweight.domain.models import Dataset, ScoringResult
from clusterweight.scoring.scorer import RelevanceScorer, apply_weights

router = APIRouter()


class ScoreRequest(BaseModel):
    dataset: Dataset
    settings_overrides: dict[str, Any] | None = None


class ScoreResponse(BaseModel):
    dataset: Dataset
    result: ScoringResult


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/options")
def get_options_listing() -> dict:
    """Return the configured option string and what each flag means."""
    settings = get_settings()
    return {
        "options": get_options(settings.relevance),
        "listing": [asdict(o) for o in list_options()],
    }


@router.post("/api/score", response_model=ScoreResponse)
def post_score(request: ScoreRequest) -> ScoreResponse:
    """Score a dataset with the configured (optionally overridden) settings."""
    try:
        settings = apply_settings_overrides(get_settings(), request.settings_overrides)
        dataset = request.dataset
        result = RelevanceScorer(settings).score(dataset)
        apply_weights(dataset, result)
        return ScoreResponse(dataset=dataset, result=result)
    except NonFiniteWeight as e:
        raise HTTPException(
            status_code=422,
            detail={"code": "NON_FINITE_WEIGHT", "message": str(e)},
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except ClusteringFailure as e:
        raise HTTPException(
            status_code=500,
            detail={"code": "CLUSTERING_FAILURE", "message": str(e)},
        ) from e
