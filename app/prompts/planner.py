"""Study plan generation and refinement prompt templates."""

PLAN_SHAPE = """\
{
  "title": "string (compelling plan title)",
  "description": "string (brief overview of the plan)",
  "schedule": [
    {
      "period": "string (e.g. Week 1, Module 1)",
      "objective": "string (learning objective for this period)",
      "topics": [
        {
          "title": "string (topic name)",
          "lessons": [
            {"title": "string", "description": "string (one or two sentences)"}
          ]
        }
      ]
    }
  ]
}"""

PLANNER_SYSTEM_PROMPT = (
    """\
You are a study-plan generator for a learning platform.

Return ONLY a JSON object with this exact shape:

"""
    + PLAN_SHAPE
    + """

Rules:
- The plan MUST include all essential and fundamental topics required to master the subject \
at the requested level.
- Structure the plan by timeline: consecutive weeks or modules, in learning order.
- For each period list the main topics; for each topic list lesson titles with a brief description.
- Do not generate full lesson content, just the structure.
- Output only JSON, no extra text.
"""
)

PLANNER_USER_PROMPT = """\
Subject: {subject}
Level: {level}
{topics_clause}"""

SELECTED_TOPICS_CLAUSE = """\
Make sure these learner-selected topics are integrated into the plan: {topics}
"""

REFINE_SYSTEM_PROMPT = (
    """\
You are refining an existing study plan for a learning platform.

Return ONLY a JSON object with this exact shape:

"""
    + PLAN_SHAPE
    + """

Rules:
- Keep every existing period, topic and lesson unless it must be expanded; never drop content.
- Integrate the new topics either by adding new periods or by expanding existing ones where \
they fit best.
- Preserve the timeline order of the existing periods; new periods go where they belong in the \
learning sequence.
- You may adjust the title and description to reflect the wider scope.
- Do not generate full lesson content, just the structure.
- Output only JSON, no extra text.
"""
)

REFINE_USER_PROMPT = """\
Subject: {subject}
Level: {level}

Existing plan:
{existing_plan}

New topics to integrate: {topics}
"""
