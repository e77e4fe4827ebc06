"""HTTP client for the study plan API, carrying the session cookie."""

from __future__ import annotations

from typing import Any

import requests

from app.schemas.ai import GeneratedPlan, TopicsResponse
from app.schemas.auth import UserProfile
from app.schemas.plan import StudyPlan, StudyPlanPage


class ApiError(RuntimeError):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class StudyPlanApi:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        timeout: int = 90,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self.session.request(method, self.base_url + path, timeout=self.timeout, **kwargs)
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise ApiError(resp.status_code, str(detail))
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # --------------- auth ---------------

    def signup(self, email: str, name: str, password: str) -> UserProfile:
        data = self._request("POST", "/auth/signup", json={"email": email, "name": name, "password": password})
        return UserProfile.model_validate(data)

    def login(self, email: str, password: str) -> UserProfile:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return UserProfile.model_validate(data)

    def logout(self) -> None:
        self._request("POST", "/auth/logout")

    def me(self) -> UserProfile:
        return UserProfile.model_validate(self._request("GET", "/auth/me"))

    # --------------- generation ---------------

    def generate_topics(self, prompt: str, level: str, exclude_topics: list[str] | None = None) -> TopicsResponse:
        payload: dict[str, Any] = {"prompt": prompt, "level": level}
        if exclude_topics:
            payload["excludeTopics"] = exclude_topics
        return TopicsResponse.model_validate(self._request("POST", "/ai/generate-topics", json=payload))

    def generate_plan(self, prompt: str, level: str, selected_topics: list[str]) -> GeneratedPlan:
        payload = {"prompt": prompt, "level": level, "selectedTopics": selected_topics}
        return GeneratedPlan.model_validate(self._request("POST", "/ai/generate-plan", json=payload))

    def refine_plan(self, study_plan_id: str, additional_topics: list[str]) -> GeneratedPlan:
        payload = {"studyPlanId": study_plan_id, "additionalTopics": additional_topics}
        return GeneratedPlan.model_validate(self._request("POST", "/ai/refine-plan", json=payload))

    # --------------- study plans ---------------

    def list_plans(self, page: int = 1, limit: int = 9) -> StudyPlanPage:
        data = self._request("GET", "/study-plans", params={"page": page, "limit": limit})
        return StudyPlanPage.model_validate(data)

    def get_plan(self, plan_id: str) -> StudyPlan:
        return StudyPlan.model_validate(self._request("GET", f"/study-plans/{plan_id}"))
