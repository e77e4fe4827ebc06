"""Request and response schemas for the /ai endpoints."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, StringConstraints

from app.schemas.plan import CamelModel, ScheduleItem, Topic

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class GenerateTopicsRequest(CamelModel):
    prompt: NonEmptyStr
    level: NonEmptyStr
    exclude_topics: list[str] | None = None


class GeneratePlanRequest(CamelModel):
    prompt: NonEmptyStr
    level: NonEmptyStr
    selected_topics: list[str] | None = None


class RefinePlanRequest(CamelModel):
    study_plan_id: NonEmptyStr
    additional_topics: list[NonEmptyStr] = Field(min_length=1)


class TopicsResponse(CamelModel):
    topics: list[Topic]
    tokens_used: int


class GeneratedPlan(CamelModel):
    """Plan content returned by the model, plus the storage id when it was saved."""

    title: str
    description: str
    schedule: list[ScheduleItem]
    tokens_used: int
    study_plan_id: str | None = None
