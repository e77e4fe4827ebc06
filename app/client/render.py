"""Plain-text rendering of topic selections and plans for the terminal."""

from __future__ import annotations

from app.client.workflow import TopicSelection
from app.schemas.ai import GeneratedPlan
from app.schemas.plan import StudyPlan


def render_topics(selection: TopicSelection) -> str:
    lines = []
    for idx, topic in enumerate(selection.topics, start=1):
        mark = "x" if selection.is_selected(topic.name) else " "
        suffix = " (core)" if topic.is_core else ""
        lines.append(f"{idx:>2}. [{mark}] {topic.name}{suffix}")
    return "\n".join(lines)


def render_plan(plan: StudyPlan | GeneratedPlan) -> str:
    title = plan.title or "Study Plan"
    lines = [f"### {title}"]
    if plan.description:
        lines.append(plan.description)
    for idx, item in enumerate(plan.schedule, start=1):
        lines.append("")
        lines.append(f"{idx}. {item.period}: {item.objective}")
        for topic in item.topics:
            lines.append(f"   - {topic.title}")
            for lesson in topic.lessons:
                lines.append(f"     * {lesson.title}: {lesson.description}")
    return "\n".join(lines)
