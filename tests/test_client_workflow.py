"""Tests for the client-side creation and refinement step machines."""

from datetime import datetime

import pytest

from app.client.api import ApiError, StudyPlanApi
from app.client.render import render_plan, render_topics
from app.client.workflow import (
    PlanCreationWorkflow,
    PlanRefineWorkflow,
    TopicSelection,
    WorkflowError,
    included_topics,
)
from app.schemas.ai import GeneratedPlan, TopicsResponse
from app.schemas.plan import StudyPlan, Topic
from conftest import StubGenerator, schedule_payload


def _topics(core=("Wedging", "Centering")) -> TopicsResponse:
    names = list(core) + ["Glazing", "Raku", "Trimming"]
    return TopicsResponse(topics=[Topic(name=n, is_core=n in core) for n in names], tokens_used=10)


def _generated(title="Pottery 101", plan_id="0b7c6f2e-1d1b-4c55-9b1e-5a8f2f0f6a10") -> GeneratedPlan:
    return GeneratedPlan(
        title=title,
        description="From clay to kiln",
        schedule=schedule_payload("Week 1", "Week 2"),
        tokens_used=50,
        study_plan_id=plan_id,
    )


class _FakeApi:
    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_next: Exception | None = None

    def _maybe_fail(self):
        if self.fail_next is not None:
            exc, self.fail_next = self.fail_next, None
            raise exc

    def generate_topics(self, prompt, level, exclude_topics=None):
        self.calls.append(("topics", prompt, level, exclude_topics))
        self._maybe_fail()
        return _topics()

    def generate_plan(self, prompt, level, selected_topics):
        self.calls.append(("plan", prompt, level, selected_topics))
        self._maybe_fail()
        return _generated()

    def refine_plan(self, study_plan_id, additional_topics):
        self.calls.append(("refine", study_plan_id, additional_topics))
        self._maybe_fail()
        return _generated(title="Pottery 102")


def _stored_plan() -> StudyPlan:
    return StudyPlan(
        id="0b7c6f2e-1d1b-4c55-9b1e-5a8f2f0f6a10",
        title="Pottery 101",
        description="From clay to kiln",
        prompt="Pottery",
        level="Beginner",
        selected_topics=["Wedging", "glazing"],
        schedule=schedule_payload("Week 1"),
        user_id="u1",
        created_at=datetime(2026, 3, 1),
        updated_at=datetime(2026, 3, 1),
    )


def test_core_topics_start_selected_and_cannot_be_deselected():
    selection = TopicSelection(_topics().topics)
    assert selection.selected == ["Wedging", "Centering"]

    selection.toggle("Wedging")
    selection.toggle("Raku")
    assert selection.selected == ["Wedging", "Centering", "Raku"]

    selection.toggle("Raku")
    assert selection.selected == ["Wedging", "Centering"]

    with pytest.raises(WorkflowError):
        selection.toggle("Basket weaving")


def test_creation_runs_input_selection_result():
    api = _FakeApi()
    flow = PlanCreationWorkflow(api)

    flow.submit_input("  Pottery ", "Beginner")
    assert flow.step == "selection"
    flow.toggle_topic("Glazing")
    plan = flow.submit_selection()

    assert flow.step == "result"
    assert plan.title == "Pottery 101"
    assert flow.study_plan_id == "0b7c6f2e-1d1b-4c55-9b1e-5a8f2f0f6a10"
    assert api.calls[-1] == ("plan", "Pottery", "Beginner", ["Wedging", "Centering", "Glazing"])

    flow.reset()
    assert flow.step == "input"
    assert flow.selection is None


def test_blank_input_is_rejected_without_a_call():
    api = _FakeApi()
    flow = PlanCreationWorkflow(api)
    with pytest.raises(WorkflowError):
        flow.submit_input("   ", "Beginner")
    assert api.calls == []


def test_failed_calls_leave_the_step_unchanged():
    api = _FakeApi()
    flow = PlanCreationWorkflow(api)

    api.fail_next = ApiError(502, "Failed to generate topics")
    with pytest.raises(ApiError):
        flow.submit_input("Pottery", "Beginner")
    assert flow.step == "input"

    flow.submit_input("Pottery", "Beginner")
    api.fail_next = ApiError(502, "Failed to generate plan")
    with pytest.raises(ApiError):
        flow.submit_selection()
    assert flow.step == "selection"
    assert flow.plan is None


def test_actions_out_of_order_are_rejected():
    flow = PlanCreationWorkflow(_FakeApi())
    with pytest.raises(WorkflowError):
        flow.submit_selection()
    with pytest.raises(WorkflowError):
        flow.toggle_topic("Glazing")


def test_included_topics_merges_selected_and_schedule_titles():
    assert included_topics(_stored_plan()) == ["Wedging", "glazing", "Week 1 topic"]


def test_refine_excludes_included_topics_and_merges_on_success():
    api = _FakeApi()
    flow = PlanRefineWorkflow(api, _stored_plan())

    flow.start_refine()
    assert api.calls[0][3] == ["Wedging", "glazing", "Week 1 topic"]
    assert flow.mode == "refining"
    assert flow.can_submit

    flow.toggle_topic("Raku")
    updated = flow.submit_refine()

    assert api.calls[-1] == ("refine", updated.id, ["Wedging", "Centering", "Raku"])
    assert updated.title == "Pottery 102"
    assert updated.selected_topics == ["Wedging", "glazing", "Wedging", "Centering", "Raku"]
    assert flow.mode == "viewing"
    assert flow.selection is None


def test_refine_cannot_submit_empty_selection():
    api = _FakeApi()
    api.generate_topics = lambda *a, **kw: TopicsResponse(
        topics=[Topic(name="Raku", is_core=False)], tokens_used=1
    )
    flow = PlanRefineWorkflow(api, _stored_plan())
    flow.start_refine()
    assert not flow.can_submit
    with pytest.raises(WorkflowError):
        flow.submit_refine()


def test_refine_topic_fetch_failure_returns_to_viewing():
    api = _FakeApi()
    api.fail_next = ApiError(502, "Failed to generate topics")
    flow = PlanRefineWorkflow(api, _stored_plan())
    with pytest.raises(ApiError):
        flow.start_refine()
    assert flow.mode == "viewing"


def test_refine_submit_failure_keeps_plan_and_mode():
    api = _FakeApi()
    flow = PlanRefineWorkflow(api, _stored_plan())
    flow.start_refine()
    api.fail_next = ApiError(404, "Study plan not found")
    with pytest.raises(ApiError):
        flow.submit_refine()
    assert flow.mode == "refining"
    assert flow.plan.title == "Pottery 101"

    flow.cancel()
    assert flow.mode == "viewing"


def test_render_helpers():
    selection = TopicSelection(_topics().topics)
    text = render_topics(selection)
    assert " 1. [x] Wedging (core)" in text
    assert " 3. [ ] Glazing" in text
    assert "1. Week 1: Objective for Week 1" in render_plan(_generated())


def test_api_client_against_the_app(make_client, user):
    generator = StubGenerator(topics=_topics(), plan=_generated(plan_id=None))
    api = StudyPlanApi(base_url="http://testserver", session=make_client(generator, user_id=user["id"]))

    flow = PlanCreationWorkflow(api)
    flow.submit_input("Pottery", "Beginner")
    flow.submit_selection()

    stored = api.get_plan(flow.study_plan_id)
    assert stored.selected_topics == ["Wedging", "Centering"]
    assert api.list_plans().total == 1

    with pytest.raises(ApiError) as exc_info:
        api.refine_plan("0b7c6f2e-1d1b-4c55-9b1e-5a8f2f0f6a10", ["Raku"])
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Study plan not found"
