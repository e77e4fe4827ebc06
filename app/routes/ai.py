"""Generation endpoints and per-user usage reporting."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.dependencies import Services, current_user_id, get_services
from app.errors import GenerationError, PlanAccessDenied
from app.schemas.ai import (
    GeneratePlanRequest,
    GeneratedPlan,
    GenerateTopicsRequest,
    RefinePlanRequest,
    TopicsResponse,
)
from app.schemas.usage import AuditRecord, UsageStats
from app.utils.constants import DEFAULT_HISTORY_LIMIT

logger = logging.getLogger("uvicorn.error")

router = APIRouter()


@router.post("/generate-topics", response_model=TopicsResponse)
def generate_topics(
    body: GenerateTopicsRequest,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    try:
        return services.orchestrator.generate_topics(body, user_id)
    except GenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate topics") from exc


@router.post("/generate-plan", response_model=GeneratedPlan, response_model_exclude_none=True)
def generate_plan(
    body: GeneratePlanRequest,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    try:
        return services.orchestrator.generate_plan(body, user_id)
    except GenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate plan") from exc


@router.post("/refine-plan", response_model=GeneratedPlan, response_model_exclude_none=True)
def refine_plan(
    body: RefinePlanRequest,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    try:
        return services.orchestrator.refine_plan(body, user_id)
    except PlanAccessDenied as exc:
        logger.info("Refine denied for user %s on plan %s", user_id, exc.plan_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Study plan not found") from exc
    except GenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to refine plan") from exc


@router.get("/requests", response_model=list[AuditRecord])
def request_history(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=200),
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    return services.usage.request_history(user_id, limit)


@router.get("/stats", response_model=UsageStats)
def request_stats(
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    return services.usage.request_stats(user_id)
