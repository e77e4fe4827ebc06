"""Study plan persistence on top of the SQL repository."""

from __future__ import annotations

import math
import uuid
from typing import Any

from app.db import repository
from app.schemas.plan import ScheduleItem, StudyPlan, StudyPlanPage


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _to_plan(row: dict[str, Any]) -> StudyPlan:
    return StudyPlan.model_validate(
        {
            **row,
            "selected_topics": row.get("selected_topics") or [],
            "schedule": row.get("schedule") or [],
        }
    )


def _dump_schedule(schedule: list[ScheduleItem]) -> list[dict[str, Any]]:
    return [item.model_dump(by_alias=True) for item in schedule]


class PlanStore:
    """CRUD over ``study_plans``; the schedule is one JSON document per plan."""

    def __init__(self, repo=repository) -> None:
        self._repo = repo

    def create(
        self,
        *,
        title: str,
        description: str | None,
        prompt: str,
        level: str,
        selected_topics: list[str],
        schedule: list[ScheduleItem],
        user_id: str,
    ) -> StudyPlan:
        row = self._repo.insert_study_plan(
            title=title,
            description=description,
            prompt=prompt,
            level=level,
            selected_topics=list(selected_topics),
            schedule=_dump_schedule(schedule),
            user_id=user_id,
        )
        return _to_plan(row)

    def list_by_owner(self, user_id: str, page: int = 1, page_size: int = 9) -> StudyPlanPage:
        page = max(page, 1)
        page_size = max(page_size, 1)
        total = self._repo.count_study_plans(user_id)
        rows = self._repo.list_study_plans(user_id, page_size, (page - 1) * page_size)
        return StudyPlanPage(
            data=[_to_plan(row) for row in rows],
            total=total,
            page=page,
            total_pages=math.ceil(total / page_size),
        )

    def get_by_id(self, plan_id: str) -> StudyPlan | None:
        if not _is_uuid(plan_id):
            return None
        row = self._repo.get_study_plan(plan_id)
        return _to_plan(row) if row else None

    def update(self, plan_id: str, **fields: Any) -> StudyPlan | None:
        """Merge ``fields`` into the stored plan and return the updated plan."""
        if "schedule" in fields:
            fields["schedule"] = _dump_schedule(fields["schedule"])
        if "selected_topics" in fields:
            fields["selected_topics"] = list(fields["selected_topics"])
        row = self._repo.update_study_plan(plan_id, fields)
        return _to_plan(row) if row else None

    def delete(self, plan_id: str) -> None:
        if _is_uuid(plan_id):
            self._repo.delete_study_plan(plan_id)
