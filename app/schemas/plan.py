"""Schemas for topics, schedules and stored study plans."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Topic(CamelModel):
    name: str
    is_core: bool = False


class Lesson(CamelModel):
    title: str
    description: str


class PlanTopic(CamelModel):
    title: str
    lessons: list[Lesson] = Field(default_factory=list)


class ScheduleItem(CamelModel):
    period: str
    objective: str
    topics: list[PlanTopic] = Field(default_factory=list)


class TopicList(CamelModel):
    """Structured output requested from the model for topic generation."""

    topics: list[Topic]


class PlanOutline(CamelModel):
    """Structured output requested from the model for plan generation and refinement."""

    title: str
    description: str
    schedule: list[ScheduleItem] = Field(min_length=1)


class StudyPlan(CamelModel):
    """A persisted plan. ``schedule`` keeps its period order exactly as stored."""

    id: str
    title: str
    description: str | None = None
    prompt: str
    level: str
    selected_topics: list[str] = Field(default_factory=list)
    schedule: list[ScheduleItem]
    user_id: str
    created_at: datetime
    updated_at: datetime


class StudyPlanPage(CamelModel):
    data: list[StudyPlan]
    total: int
    page: int
    total_pages: int
