"""PagerDuty API client and models.

This package provides a stateless, asynchronous PagerDuty API client that
drains paginated listings, maps upstream status codes to typed errors and
reshapes responses into the objects a host application renders.

- PagerDutyApi: API client with hooks for metrics and logging
- Models: Pydantic models for services, escalation policies, users, ...
- Errors: PagerDutyError hierarchy with per-operation status tables

Example:
    >>> from pagerduty_backend.pagerduty_api import PagerDutyApi
    >>> async def token() -> str:
    ...     return "Token token=..."
    >>> async with PagerDutyApi(token) as api:
    ...     services = await api.get_all_services()
"""

from pagerduty_backend.pagerduty_api.client import (
    DEFAULT_API_URL,
    TIMEOUT,
    PagerDutyApi,
    PagerDutyApiCallContext,
    TokenProvider,
    metrics_time_window,
)
from pagerduty_backend.pagerduty_api.errors import (
    ErrorKind,
    ErrorTable,
    PagerDutyApiError,
    PagerDutyError,
    PagerDutyTransportError,
)
from pagerduty_backend.pagerduty_api.factory import create_pagerduty_api
from pagerduty_backend.pagerduty_api.models import (
    PagerDutyChangeEvent,
    PagerDutyEscalationPolicy,
    PagerDutyIncident,
    PagerDutyIntegration,
    PagerDutyOnCall,
    PagerDutyReference,
    PagerDutyService,
    PagerDutyServiceMetrics,
    PagerDutyServiceStandards,
    PagerDutyUser,
)

__all__ = [
    "DEFAULT_API_URL",
    "TIMEOUT",
    "ErrorKind",
    "ErrorTable",
    "PagerDutyApi",
    "PagerDutyApiCallContext",
    "PagerDutyApiError",
    "PagerDutyChangeEvent",
    "PagerDutyError",
    "PagerDutyEscalationPolicy",
    "PagerDutyIncident",
    "PagerDutyIntegration",
    "PagerDutyOnCall",
    "PagerDutyReference",
    "PagerDutyService",
    "PagerDutyServiceMetrics",
    "PagerDutyServiceStandards",
    "PagerDutyTransportError",
    "PagerDutyUser",
    "TokenProvider",
    "create_pagerduty_api",
    "metrics_time_window",
]
