"""Request-scoped sequencing of generation, storage and usage bookkeeping."""

from __future__ import annotations

import logging

from app.errors import PlanAccessDenied
from app.llm.generation_client import GenerationClient
from app.schemas.ai import (
    GeneratePlanRequest,
    GeneratedPlan,
    GenerateTopicsRequest,
    RefinePlanRequest,
    TopicsResponse,
)
from app.schemas.usage import (
    PlanAudit,
    PlanMetadata,
    RefineAudit,
    RefineMetadata,
    TopicsAudit,
    TopicsMetadata,
)
from app.services.plan_store import PlanStore
from app.services.usage_tracker import UsageTracker

logger = logging.getLogger(__name__)


class StudyPlanOrchestrator:
    """Runs generate-topics, generate-plan and refine-plan.

    Only a failed generation call aborts a request. Counter updates, the
    plan insert after generate-plan, the plan update after refine-plan and
    audit writes are logged on failure and the generated content is still
    returned.
    """

    def __init__(self, generator: GenerationClient, plans: PlanStore, usage: UsageTracker) -> None:
        self.generator = generator
        self.plans = plans
        self.usage = usage

    def generate_topics(self, request: GenerateTopicsRequest, user_id: str | None) -> TopicsResponse:
        result = self.generator.generate_topics(request.prompt, request.level, request.exclude_topics)
        self._count_tokens(user_id, result.tokens_used)
        self.usage.record_audit(
            TopicsAudit(
                prompt=request.prompt,
                level=request.level,
                tokens_used=result.tokens_used,
                user_id=user_id,
                metadata=TopicsMetadata(topics_count=len(result.topics)),
            )
        )
        return result

    def generate_plan(self, request: GeneratePlanRequest, user_id: str | None) -> GeneratedPlan:
        selected = list(request.selected_topics or [])
        result = self.generator.generate_plan(request.prompt, request.level, selected)
        self._count_tokens(user_id, result.tokens_used)

        if user_id is not None:
            try:
                stored = self.plans.create(
                    title=result.title,
                    description=result.description,
                    prompt=request.prompt,
                    level=request.level,
                    selected_topics=selected,
                    schedule=result.schedule,
                    user_id=user_id,
                )
                result.study_plan_id = stored.id
            except Exception:
                logger.exception("Error saving study plan to database, returning unsaved plan")

        self.usage.record_audit(
            PlanAudit(
                prompt=request.prompt,
                level=request.level,
                tokens_used=result.tokens_used,
                user_id=user_id,
                metadata=PlanMetadata(
                    selected_topics_count=len(selected),
                    schedule_items_count=len(result.schedule),
                ),
            )
        )
        return result

    def refine_plan(self, request: RefinePlanRequest, user_id: str) -> GeneratedPlan:
        plan = self.plans.get_by_id(request.study_plan_id)
        if plan is None or plan.user_id != user_id:
            raise PlanAccessDenied(request.study_plan_id)

        additional = list(request.additional_topics)
        result = self.generator.refine_plan(plan, additional)
        self._count_tokens(user_id, result.tokens_used)

        try:
            self.plans.update(
                plan.id,
                title=result.title,
                description=result.description,
                schedule=result.schedule,
                selected_topics=[*plan.selected_topics, *additional],
            )
        except Exception:
            logger.exception("Error updating study plan %s after refinement", plan.id)
        result.study_plan_id = plan.id

        self.usage.record_audit(
            RefineAudit(
                prompt=plan.prompt,
                level=plan.level,
                tokens_used=result.tokens_used,
                user_id=user_id,
                metadata=RefineMetadata(
                    additional_topics=additional,
                    additional_topics_count=len(additional),
                    study_plan_id=plan.id,
                    original_title=plan.title,
                ),
            )
        )
        return result

    def _count_tokens(self, user_id: str | None, tokens: int) -> None:
        if user_id is None or tokens <= 0:
            return
        try:
            self.usage.increment(user_id, tokens)
        except Exception:
            logger.exception("Failed to update token counters for user %s", user_id)
