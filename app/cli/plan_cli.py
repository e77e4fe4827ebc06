"""Interactive CLI that walks through creating and refining a study plan."""

from __future__ import annotations

import argparse
import getpass

from app.client.api import ApiError, StudyPlanApi
from app.client.render import render_plan, render_topics
from app.client.workflow import PlanCreationWorkflow, PlanRefineWorkflow, TopicSelection
from app.utils.constants import LEVELS


def _ask(prompt: str) -> str | None:
    try:
        return input(prompt).strip()
    except EOFError:
        print()
        return None


def _pick_topics(selection: TopicSelection, toggle) -> bool:
    """Let the user toggle topics by number. Returns False when they quit."""
    while True:
        print(render_topics(selection))
        answer = _ask("Toggle numbers (e.g. 3 7), Enter to continue, q to quit: ")
        if answer is None or answer.lower() == "q":
            return False
        if not answer:
            return True
        for token in answer.replace(",", " ").split():
            if token.isdigit() and 1 <= int(token) <= len(selection.topics):
                toggle(selection.topics[int(token) - 1].name)


def _login(api: StudyPlanApi, email: str, signup: bool) -> None:
    password = getpass.getpass("Password: ")
    if signup:
        name = _ask("Name: ") or email
        user = api.signup(email, name, password)
    else:
        user = api.login(email, password)
    print(f"Signed in as {user.name} (tokens today: {user.daily_tokens_used})")


def _create(api: StudyPlanApi) -> str | None:
    workflow = PlanCreationWorkflow(api)
    prompt = _ask("What do you want to learn? ")
    if not prompt:
        return None
    level = _ask(f"Level {'/'.join(LEVELS)} [{LEVELS[0]}]: ") or LEVELS[0]
    print("Generating topics...")
    selection = workflow.submit_input(prompt, level)
    if not _pick_topics(selection, workflow.toggle_topic):
        return None
    print("Generating plan...")
    plan = workflow.submit_selection()
    print(render_plan(plan))
    return workflow.study_plan_id


def _refine(api: StudyPlanApi, plan_id: str) -> None:
    workflow = PlanRefineWorkflow(api, api.get_plan(plan_id))
    print("Fetching new topics...")
    selection = workflow.start_refine()
    if not _pick_topics(selection, workflow.toggle_topic) or not workflow.can_submit:
        workflow.cancel()
        return
    print("Refining plan...")
    print(render_plan(workflow.submit_refine()))


def main() -> int:
    parser = argparse.ArgumentParser(description="Interactive study plan CLI")
    parser.add_argument("--url", default="http://127.0.0.1:8000", help="API base URL")
    parser.add_argument("--timeout", type=int, default=90, help="Request timeout in seconds")
    parser.add_argument("--email", required=True, help="Account email")
    parser.add_argument("--signup", action="store_true", help="Create the account first")
    parser.add_argument("--refine", metavar="PLAN_ID", help="Refine an existing plan instead of creating one")
    args = parser.parse_args()

    api = StudyPlanApi(args.url, timeout=args.timeout)
    try:
        _login(api, args.email, args.signup)
        plan_id = args.refine or _create(api)
        if plan_id and not args.refine:
            again = _ask("Refine this plan with more topics? [y/N] ")
            if again and again.lower().startswith("y"):
                _refine(api, plan_id)
        elif args.refine:
            _refine(api, args.refine)
    except ApiError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
