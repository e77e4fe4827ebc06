"""Audit log entries and token counter schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field

from app.schemas.plan import CamelModel

RequestType = Literal["generate_topics", "generate_plan", "refine_plan"]


class TopicsMetadata(CamelModel):
    topics_count: int


class PlanMetadata(CamelModel):
    selected_topics_count: int
    schedule_items_count: int


class RefineMetadata(CamelModel):
    additional_topics: list[str]
    additional_topics_count: int
    study_plan_id: str
    original_title: str


class _AuditBase(CamelModel):
    prompt: str
    level: str
    tokens_used: int
    user_id: str | None = None


class TopicsAudit(_AuditBase):
    request_type: Literal["generate_topics"] = "generate_topics"
    metadata: TopicsMetadata


class PlanAudit(_AuditBase):
    request_type: Literal["generate_plan"] = "generate_plan"
    metadata: PlanMetadata


class RefineAudit(_AuditBase):
    request_type: Literal["refine_plan"] = "refine_plan"
    metadata: RefineMetadata


AuditEntry = Annotated[
    Union[TopicsAudit, PlanAudit, RefineAudit],
    Field(discriminator="request_type"),
]


class AuditRecord(CamelModel):
    """A stored audit row as returned by the history endpoint."""

    id: str
    request_type: RequestType
    prompt: str
    level: str
    tokens_used: int
    user_id: str | None = None
    metadata: dict | None = None
    created_at: datetime


class TokenUsage(CamelModel):
    total_tokens_used: int
    daily_tokens_used: int


class UsageStats(CamelModel):
    total_requests: int
    total_tokens: int
    requests_by_type: dict[str, int] = Field(default_factory=dict)
