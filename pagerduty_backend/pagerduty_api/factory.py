"""Factory for creating PagerDutyApi instances from settings."""

import httpx

from pagerduty_backend.config import Settings
from pagerduty_backend.config import settings as default_settings
from pagerduty_backend.hooks import Hooks
from pagerduty_backend.pagerduty_api.client import PagerDutyApi, TokenProvider


def create_pagerduty_api(
    token_provider: TokenProvider,
    settings: Settings | None = None,
    hooks: Hooks | None = None,
    client: httpx.AsyncClient | None = None,
) -> PagerDutyApi:
    """Create PagerDutyApi instance with config from settings.

    Args:
        token_provider: Coroutine function returning the Authorization header value
        settings: Application settings, defaults to the environment settings
        hooks: Optional custom hooks added after the built-in ones
        client: Optional externally owned httpx client

    Returns:
        PagerDutyApi instance
    """
    pagerduty = (settings or default_settings).pagerduty
    return PagerDutyApi(
        token_provider,
        api_url=pagerduty.api_url,
        instance_name=pagerduty.instance_name,
        timeout=pagerduty.api_timeout,
        page_size=pagerduty.page_size,
        change_events_limit=pagerduty.change_events_limit,
        metrics_window_days=pagerduty.metrics_window_days,
        client=client,
        hooks=hooks,
    )
