"""Global test configuration for pagerduty_backend tests."""

from collections.abc import Awaitable, Callable

import httpx
import pytest

from pagerduty_backend.pagerduty_api import PagerDutyApi

from .fixtures import FIXED_NOW, TOKEN, FakePagerDuty


@pytest.fixture
def pagerduty() -> FakePagerDuty:
    """Fake PagerDuty upstream, queue responses with respond()/fail()."""
    return FakePagerDuty()


@pytest.fixture
def token_provider() -> Callable[[], Awaitable[str]]:
    async def provide() -> str:
        return TOKEN

    return provide


@pytest.fixture
def api(
    pagerduty: FakePagerDuty, token_provider: Callable[[], Awaitable[str]]
) -> PagerDutyApi:
    """PagerDutyApi talking to the fake upstream with a fixed clock."""
    return PagerDutyApi(
        token_provider,
        api_url="https://pagerduty.test",
        instance_name="test-instance",
        clock=lambda: FIXED_NOW,
        client=httpx.AsyncClient(transport=httpx.MockTransport(pagerduty)),
    )
