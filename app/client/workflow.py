"""Client-side step machines for creating and refining a study plan.

Creation runs ``input -> selection -> result``; an existing plan toggles
between ``viewing`` and ``refining``. A step only advances after its API call
succeeds, so a failed call leaves the machine where it was.
"""

from __future__ import annotations

import logging
from typing import Literal

from app.client.api import StudyPlanApi
from app.schemas.ai import GeneratedPlan
from app.schemas.plan import StudyPlan, Topic

logger = logging.getLogger(__name__)

CreationStep = Literal["input", "selection", "result"]
RefineMode = Literal["viewing", "refining"]


class WorkflowError(RuntimeError):
    """Action not allowed in the current step."""


class TopicSelection:
    """Selected topic names; core topics start selected and stay selected."""

    def __init__(self, topics: list[Topic]) -> None:
        self.topics = list(topics)
        self._core = {t.name for t in self.topics if t.is_core}
        self.selected: list[str] = [t.name for t in self.topics if t.is_core]

    def is_core(self, name: str) -> bool:
        return name in self._core

    def is_selected(self, name: str) -> bool:
        return name in self.selected

    def toggle(self, name: str) -> None:
        if name not in {t.name for t in self.topics}:
            raise WorkflowError(f"Unknown topic: {name}")
        if self.is_selected(name):
            if self.is_core(name):
                return
            self.selected.remove(name)
        else:
            self.selected.append(name)


class PlanCreationWorkflow:
    def __init__(self, api: StudyPlanApi) -> None:
        self.api = api
        self.reset()

    def reset(self) -> None:
        self.step: CreationStep = "input"
        self.prompt: str | None = None
        self.level: str | None = None
        self.selection: TopicSelection | None = None
        self.plan: GeneratedPlan | None = None

    @property
    def study_plan_id(self) -> str | None:
        return self.plan.study_plan_id if self.plan else None

    def submit_input(self, prompt: str, level: str) -> TopicSelection:
        self._require("input")
        if not prompt or not prompt.strip():
            raise WorkflowError("Enter a topic or goal first")
        prompt = prompt.strip()
        response = self.api.generate_topics(prompt, level)
        self.prompt, self.level = prompt, level
        self.selection = TopicSelection(response.topics)
        self.step = "selection"
        return self.selection

    def toggle_topic(self, name: str) -> None:
        self._require("selection")
        self.selection.toggle(name)

    def submit_selection(self) -> GeneratedPlan:
        self._require("selection")
        plan = self.api.generate_plan(self.prompt, self.level, list(self.selection.selected))
        self.plan = plan
        self.step = "result"
        if plan.study_plan_id is None:
            logger.warning("Plan was generated but not saved")
        return plan

    def _require(self, step: CreationStep) -> None:
        if self.step != step:
            raise WorkflowError(f"Not allowed in step {self.step!r}")


def included_topics(plan: StudyPlan) -> list[str]:
    """Selected topics plus schedule topic titles, case-insensitively unique."""
    seen: set[str] = set()
    names: list[str] = []
    candidates = list(plan.selected_topics)
    for item in plan.schedule:
        candidates.extend(topic.title for topic in item.topics)
    for name in candidates:
        key = name.strip().casefold()
        if key and key not in seen:
            seen.add(key)
            names.append(name.strip())
    return names


class PlanRefineWorkflow:
    def __init__(self, api: StudyPlanApi, plan: StudyPlan) -> None:
        self.api = api
        self.plan = plan
        self.mode: RefineMode = "viewing"
        self.selection: TopicSelection | None = None

    def start_refine(self) -> TopicSelection:
        """Switch to refining and fetch topics the plan does not cover yet."""
        if self.mode != "viewing":
            raise WorkflowError("Already refining")
        self.mode = "refining"
        try:
            response = self.api.generate_topics(
                self.plan.prompt,
                self.plan.level,
                exclude_topics=included_topics(self.plan),
            )
        except Exception:
            self.mode = "viewing"
            raise
        self.selection = TopicSelection(response.topics)
        return self.selection

    def toggle_topic(self, name: str) -> None:
        self._require_refining()
        self.selection.toggle(name)

    @property
    def can_submit(self) -> bool:
        return self.mode == "refining" and self.selection is not None and bool(self.selection.selected)

    def submit_refine(self) -> StudyPlan:
        self._require_refining()
        if not self.can_submit:
            raise WorkflowError("Select at least one topic")
        additional = list(self.selection.selected)
        refined = self.api.refine_plan(self.plan.id, additional)
        self.plan = self.plan.model_copy(
            update={
                "title": refined.title,
                "description": refined.description,
                "schedule": refined.schedule,
                "selected_topics": [*self.plan.selected_topics, *additional],
            }
        )
        self.mode = "viewing"
        self.selection = None
        return self.plan

    def cancel(self) -> None:
        self.mode = "viewing"
        self.selection = None

    def _require_refining(self) -> None:
        if self.mode != "refining" or self.selection is None:
            raise WorkflowError("Not refining")
