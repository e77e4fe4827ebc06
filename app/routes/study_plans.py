"""Read and delete endpoints for a user's stored plans."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.config import settings
from app.dependencies import Services, current_user_id, get_services
from app.schemas.plan import StudyPlan, StudyPlanPage

router = APIRouter()


def _owned_plan(plan_id: str, user_id: str, services: Services) -> StudyPlan:
    plan = services.plans.get_by_id(plan_id)
    if plan is None or plan.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Study plan not found")
    return plan


@router.get("", response_model=StudyPlanPage)
def list_study_plans(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=100),
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    return services.plans.list_by_owner(user_id, page, limit)


@router.get("/{plan_id}", response_model=StudyPlan)
def get_study_plan(
    plan_id: str,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    return _owned_plan(plan_id, user_id, services)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_study_plan(
    plan_id: str,
    user_id: str = Depends(current_user_id),
    services: Services = Depends(get_services),
):
    _owned_plan(plan_id, user_id, services)
    services.plans.delete(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
