"""Tests for pagerduty_backend.pagerduty_api.factory."""

from unittest.mock import MagicMock

import httpx
import pytest

from pagerduty_backend.config import PagerDutySettings, Settings
from pagerduty_backend.hooks import Hooks
from pagerduty_backend.pagerduty_api import TokenProvider, create_pagerduty_api

from .fixtures import FakePagerDuty, make_service


def test_create_pagerduty_api_from_settings(token_provider: TokenProvider) -> None:
    settings = Settings(
        pagerduty=PagerDutySettings(
            api_url="https://api.eu.pagerduty.com",
            instance_name="eu",
            page_size=25,
            change_events_limit=10,
            metrics_window_days=7,
        )
    )

    api = create_pagerduty_api(
        token_provider, settings=settings, client=MagicMock(spec=httpx.AsyncClient)
    )

    assert api.api_url == "https://api.eu.pagerduty.com"
    assert api.instance_name == "eu"
    assert api.page_size == 25
    assert api.change_events_limit == 10
    assert api.metrics_window_days == 7


def test_create_pagerduty_api_with_hooks(token_provider: TokenProvider) -> None:
    hook = MagicMock()

    api = create_pagerduty_api(
        token_provider,
        settings=Settings(),
        hooks=Hooks(post_hooks=[hook]),
        client=MagicMock(spec=httpx.AsyncClient),
    )

    assert api._hooks.post_hooks[-1] == hook


@pytest.mark.asyncio
async def test_create_pagerduty_api_uses_configured_url(
    token_provider: TokenProvider, pagerduty: FakePagerDuty
) -> None:
    settings = Settings(pagerduty=PagerDutySettings(api_url="https://api.eu.pagerduty.com"))
    api = create_pagerduty_api(
        token_provider,
        settings=settings,
        client=httpx.AsyncClient(transport=httpx.MockTransport(pagerduty)),
    )
    pagerduty.respond(json_body={"service": make_service("S1")})

    await api.get_service_by_id("S1")

    assert pagerduty.requests[0].url.host == "api.eu.pagerduty.com"
