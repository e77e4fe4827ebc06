"""Shared fakes: an in-memory stand-in for app.db.repository and a stub generator."""

from __future__ import annotations

import copy
import json
import threading
import uuid
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.dependencies import Services
from app.main import create_app
from app.services.background import BackgroundWriter
from app.services.orchestrator import StudyPlanOrchestrator
from app.services.plan_store import PlanStore
from app.services.usage_tracker import UsageTracker
from app.services.users import UserService
from app.utils.auth import create_session_cookie

TODAY = date(2026, 3, 2)


class InMemoryRepo:
    """Implements the functions of app.db.repository over dicts."""

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.plans: dict[str, dict] = {}
        self.ai_requests: list[dict] = []
        self.fail_audit = False
        self.fail_plan_insert = False
        self.fail_plan_update = False
        self._lock = threading.Lock()
        self._clock = datetime(2026, 3, 2, 9, 0, 0)

    def _now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    # users
    def create_user(self, email, name, password_hash):
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "email": email,
            "name": name,
            "password_hash": password_hash,
            "total_tokens_used": 0,
            "daily_tokens_used": 0,
            "last_token_reset": None,
            "created_at": now,
            "updated_at": now,
        }
        self.users[row["id"]] = row
        return dict(row)

    def get_user_by_email(self, email):
        for row in self.users.values():
            if row["email"].lower() == email.lower():
                return dict(row)
        return None

    def get_user_by_id(self, user_id):
        row = self.users.get(user_id)
        return dict(row) if row else None

    def add_user_tokens(self, user_id, tokens, today):
        with self._lock:
            row = self.users.get(user_id)
            if row is None:
                return None
            if row["last_token_reset"] == today:
                row["daily_tokens_used"] += tokens
            else:
                row["daily_tokens_used"] = tokens
            row["total_tokens_used"] += tokens
            row["last_token_reset"] = today
            return {key: row[key] for key in ("total_tokens_used", "daily_tokens_used", "last_token_reset")}

    def reset_daily_tokens(self, user_id, today):
        with self._lock:
            row = self.users.get(user_id)
            if row is not None and row["last_token_reset"] != today:
                row.update(daily_tokens_used=0, last_token_reset=today)

    # study_plans
    def insert_study_plan(self, title, description, prompt, level, selected_topics, schedule, user_id):
        if self.fail_plan_insert:
            raise RuntimeError("database unavailable")
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "title": title,
            "description": description,
            "prompt": prompt,
            "level": level,
            # Round-trip through JSON like a jsonb column.
            "selected_topics": json.loads(json.dumps(selected_topics)),
            "schedule": json.loads(json.dumps(schedule)),
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
        }
        self.plans[row["id"]] = row
        return copy.deepcopy(row)

    def count_study_plans(self, user_id):
        return sum(1 for row in self.plans.values() if row["user_id"] == user_id)

    def list_study_plans(self, user_id, limit, offset):
        rows = [row for row in self.plans.values() if row["user_id"] == user_id]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return copy.deepcopy(rows[offset : offset + limit])

    def get_study_plan(self, plan_id):
        row = self.plans.get(plan_id)
        return copy.deepcopy(row) if row else None

    def update_study_plan(self, plan_id, fields):
        if self.fail_plan_update:
            raise RuntimeError("database unavailable")
        row = self.plans.get(plan_id)
        if row is None:
            return None
        row.update(json.loads(json.dumps(fields)))
        row["updated_at"] = self._now()
        return copy.deepcopy(row)

    def delete_study_plan(self, plan_id):
        self.plans.pop(plan_id, None)

    # ai_requests
    def insert_ai_request(self, request_type, prompt, level, tokens_used, user_id, metadata):
        if self.fail_audit:
            raise RuntimeError("audit table unavailable")
        self.ai_requests.append(
            {
                "id": str(uuid.uuid4()),
                "request_type": request_type,
                "prompt": prompt,
                "level": level,
                "tokens_used": tokens_used,
                "user_id": user_id,
                "metadata": metadata,
                "created_at": self._now(),
            }
        )

    def list_ai_requests(self, user_id, limit):
        rows = [row for row in self.ai_requests if row["user_id"] == user_id]
        return list(reversed(rows))[:limit]

    def ai_request_totals(self, user_id):
        totals: dict[str, dict] = {}
        for row in self.ai_requests:
            if row["user_id"] != user_id:
                continue
            entry = totals.setdefault(
                row["request_type"],
                {"request_type": row["request_type"], "requests": 0, "tokens": 0},
            )
            entry["requests"] += 1
            entry["tokens"] += row["tokens_used"]
        return list(totals.values())


class StubGenerator:
    """GenerationClient stand-in returning canned results."""

    def __init__(self, topics=None, plan=None, refined=None, error=None) -> None:
        self.topics = topics
        self.plan = plan
        self.refined = refined
        self.error = error
        self.calls: list[tuple] = []

    def generate_topics(self, subject, level, exclude_topics=None):
        self.calls.append(("topics", subject, level, exclude_topics))
        if self.error:
            raise self.error
        return self.topics.model_copy(deep=True)

    def generate_plan(self, subject, level, selected_topics=None):
        self.calls.append(("plan", subject, level, selected_topics))
        if self.error:
            raise self.error
        return self.plan.model_copy(deep=True)

    def refine_plan(self, existing, additional_topics):
        self.calls.append(("refine", existing.id, additional_topics))
        if self.error:
            raise self.error
        return self.refined.model_copy(deep=True)


def schedule_payload(*periods: str) -> list[dict]:
    return [
        {
            "period": period,
            "objective": f"Objective for {period}",
            "topics": [
                {
                    "title": f"{period} topic",
                    "lessons": [{"title": f"{period} lesson", "description": "Short description"}],
                }
            ],
        }
        for period in periods
    ]


@pytest.fixture
def repo() -> InMemoryRepo:
    return InMemoryRepo()


@pytest.fixture
def writer():
    bg = BackgroundWriter(max_workers=1)
    yield bg
    bg.shutdown()


@pytest.fixture
def usage(repo, writer) -> UsageTracker:
    return UsageTracker(repo=repo, writer=writer, today=lambda: TODAY)


@pytest.fixture
def plans(repo) -> PlanStore:
    return PlanStore(repo=repo)


@pytest.fixture
def user(repo) -> dict:
    return repo.create_user("ada@example.com", "Ada", "not-a-real-hash")


def build_test_services(repo, writer, usage, plans, generator) -> Services:
    return Services(
        writer=writer,
        plans=plans,
        usage=usage,
        users=UserService(usage, repo=repo),
        orchestrator=StudyPlanOrchestrator(generator, plans, usage),
    )


@pytest.fixture
def make_client(repo, writer, usage, plans):
    """Build a TestClient around the fakes; pass ``user_id`` to start signed in."""

    def _make(generator=None, user_id: str | None = None) -> TestClient:
        services = build_test_services(repo, writer, usage, plans, generator or StubGenerator())
        client = TestClient(create_app(services, init_db=False))
        if user_id is not None:
            client.cookies.set(
                settings.session_cookie_name,
                create_session_cookie(user_id, settings.session_secret, 60),
            )
        return client

    return _make


