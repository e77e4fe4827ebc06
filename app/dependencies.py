"""Service wiring and FastAPI dependencies."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from app.config import settings
from app.llm.generation_client import GenerationClient
from app.services.background import BackgroundWriter
from app.services.orchestrator import StudyPlanOrchestrator
from app.services.plan_store import PlanStore
from app.services.usage_tracker import UsageTracker
from app.services.users import UserService
from app.utils.auth import read_session_cookie


@dataclass
class Services:
    """The application's collaborator graph, built once at startup."""

    writer: BackgroundWriter
    plans: PlanStore
    usage: UsageTracker
    users: UserService
    orchestrator: StudyPlanOrchestrator


def build_services() -> Services:
    writer = BackgroundWriter(max_workers=settings.audit_writer_workers)
    plans = PlanStore()
    usage = UsageTracker(writer=writer)
    return Services(
        writer=writer,
        plans=plans,
        usage=usage,
        users=UserService(usage),
        orchestrator=StudyPlanOrchestrator(GenerationClient(), plans, usage),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_user_id(request: Request) -> str:
    """Return the session's user id or reject the request with 401."""
    user_id = read_session_cookie(
        request.cookies.get(settings.session_cookie_name),
        settings.session_secret,
    )
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user_id
