"""Generation client: topics, plans and plan refinement through the chat model."""

from __future__ import annotations

import json
import logging
from typing import Callable, Iterable, Type, TypeVar

from pydantic import BaseModel

from app.errors import GenerationError
from app.llm.ollama_client import get_chat_model
from app.llm.usage import tokens_used
from app.prompts.planner import (
    PLANNER_SYSTEM_PROMPT,
    PLANNER_USER_PROMPT,
    REFINE_SYSTEM_PROMPT,
    REFINE_USER_PROMPT,
    SELECTED_TOPICS_CLAUSE,
)
from app.prompts.topics import EXCLUDE_CLAUSE, TOPICS_SYSTEM_PROMPT, TOPICS_USER_PROMPT
from app.schemas.ai import GeneratedPlan, TopicsResponse
from app.schemas.plan import PlanOutline, StudyPlan, TopicList
from app.utils.constants import CORE_TOPICS_MAX, CORE_TOPICS_MIN, TOPIC_COUNT
from app.utils.llm_parse import parse_structured
from app.utils.topics import normalize_topics

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _clean(topics: Iterable[str] | None) -> list[str]:
    return [t.strip() for t in topics or () if t and t.strip()]


def build_topics_prompt(subject: str, level: str, exclude_topics: list[str] | None = None) -> str:
    excluded = _clean(exclude_topics)
    exclude_clause = ""
    if excluded:
        exclude_clause = EXCLUDE_CLAUSE.format(excluded="\n".join(f"- {t}" for t in excluded))
    system = TOPICS_SYSTEM_PROMPT.format(
        topic_count=TOPIC_COUNT,
        core_min=CORE_TOPICS_MIN,
        core_max=CORE_TOPICS_MAX,
    )
    return system + "\n\n" + TOPICS_USER_PROMPT.format(
        subject=subject,
        level=level,
        exclude_clause=exclude_clause,
    )


def build_plan_prompt(subject: str, level: str, selected_topics: list[str] | None = None) -> str:
    selected = _clean(selected_topics)
    topics_clause = SELECTED_TOPICS_CLAUSE.format(topics=", ".join(selected)) if selected else ""
    return PLANNER_SYSTEM_PROMPT + "\n\n" + PLANNER_USER_PROMPT.format(
        subject=subject,
        level=level,
        topics_clause=topics_clause,
    )


def build_refine_prompt(existing: StudyPlan, additional_topics: list[str]) -> str:
    existing_plan = json.dumps(
        {
            "title": existing.title,
            "description": existing.description or "",
            "schedule": [item.model_dump(by_alias=True) for item in existing.schedule],
        },
        ensure_ascii=False,
        indent=2,
    )
    return REFINE_SYSTEM_PROMPT + "\n\n" + REFINE_USER_PROMPT.format(
        subject=existing.prompt,
        level=existing.level,
        existing_plan=existing_plan,
        topics=", ".join(_clean(additional_topics)),
    )


class GenerationClient:
    """Single-round-trip calls to the chat model with a declared output schema.

    Every failure in a call (transport, timeout, unparsable or off-schema
    output) is raised as :class:`GenerationError`. Nothing is retried.
    """

    def __init__(self, model_factory: Callable[..., object] = get_chat_model) -> None:
        self._model_factory = model_factory

    def generate_topics(
        self,
        subject: str,
        level: str,
        exclude_topics: list[str] | None = None,
    ) -> TopicsResponse:
        prompt = build_topics_prompt(subject, level, exclude_topics)
        parsed, tokens = self._invoke("topics", prompt, TopicList)
        topics = normalize_topics(parsed.topics, exclude=exclude_topics)
        logger.info(
            "Generated %d topics (%d from model, %d core)",
            len(topics),
            len(parsed.topics),
            sum(1 for t in topics if t.is_core),
        )
        return TopicsResponse(topics=topics, tokens_used=tokens)

    def generate_plan(
        self,
        subject: str,
        level: str,
        selected_topics: list[str] | None = None,
    ) -> GeneratedPlan:
        prompt = build_plan_prompt(subject, level, selected_topics)
        outline, tokens = self._invoke("plan", prompt, PlanOutline)
        return GeneratedPlan(
            title=outline.title,
            description=outline.description,
            schedule=outline.schedule,
            tokens_used=tokens,
        )

    def refine_plan(self, existing: StudyPlan, additional_topics: list[str]) -> GeneratedPlan:
        prompt = build_refine_prompt(existing, additional_topics)
        outline, tokens = self._invoke("refine", prompt, PlanOutline)
        return GeneratedPlan(
            title=outline.title,
            description=outline.description,
            schedule=outline.schedule,
            tokens_used=tokens,
        )

    def _invoke(self, label: str, prompt: str, schema: Type[T]) -> tuple[T, int]:
        logger.info("%s LLM call started", label.capitalize())
        try:
            llm = self._model_factory(schema.model_json_schema())
            response = llm.invoke(prompt)
            content = getattr(response, "content", str(response))
            parsed = parse_structured(content, schema)
        except Exception as exc:
            logger.error("%s generation failed: %s", label.capitalize(), exc)
            raise GenerationError(f"Failed to generate {label}") from exc
        logger.info("%s LLM call finished", label.capitalize())
        return parsed, tokens_used(response, prompt, content)
