"""Fake PagerDuty upstream and payload builders shared by the tests."""

import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx

FIXED_NOW = datetime(2024, 3, 31, 12, 0, tzinfo=UTC)
TOKEN = "Token token=test-token"


class FakePagerDuty:
    """httpx handler serving queued responses and recording requests."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Callable[[httpx.Request], httpx.Response]] = []

    def respond(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: bytes | None = None,
    ) -> "FakePagerDuty":
        def response(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status_code, content=content, request=request)
            return httpx.Response(status_code, json=json_body, request=request)

        self._responses.append(response)
        return self

    def fail(
        self, exc_factory: Callable[[httpx.Request], Exception]
    ) -> "FakePagerDuty":
        def response(request: httpx.Request) -> httpx.Response:
            raise exc_factory(request)

        self._responses.append(response)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        return self._responses.pop(0)(request)

    def params(self, index: int = 0) -> httpx.QueryParams:
        return self.requests[index].url.params

    def json_of(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)


def make_user(user_id: str, name: str) -> dict[str, Any]:
    return {
        "id": user_id,
        "name": name,
        "summary": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "avatar_url": f"https://example.pagerduty.com/avatars/{user_id}",
        "html_url": f"https://example.pagerduty.com/users/{user_id}",
    }


def make_oncall(user: dict[str, Any], level: int) -> dict[str, Any]:
    return {"user": user, "escalation_level": level}


def make_service(service_id: str, name: str | None = None) -> dict[str, Any]:
    return {
        "id": service_id,
        "name": name or f"Service {service_id}",
        "type": "service",
        "status": "active",
        "html_url": f"https://example.pagerduty.com/services/{service_id}",
        "escalation_policy": {"id": "EP1", "name": "Primary"},
        "integrations": [{"id": "INT1", "integration_key": "key-1"}],
        "teams": [{"id": "TEAM1", "summary": "SRE"}],
    }


def make_policy(policy_id: str, name: str | None = None) -> dict[str, Any]:
    return {
        "id": policy_id,
        "name": name or f"Policy {policy_id}",
        "type": "escalation_policy",
        "summary": name or f"Policy {policy_id}",
        "self": f"https://api.pagerduty.com/escalation_policies/{policy_id}",
        "html_url": f"https://example.pagerduty.com/escalation_policies/{policy_id}",
    }
