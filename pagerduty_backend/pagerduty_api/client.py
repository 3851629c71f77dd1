"""Asynchronous PagerDuty REST API client with hook system.

The client is stateless apart from its httpx connection pool: no caching, no
token handling beyond awaiting the token provider before every request and no
retries. Each public coroutine is one operation; listings drain all pages
before returning and abort on the first failing page.
"""

import contextvars
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, TypeAlias, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from pagerduty_backend.hooks import Hooks, invoke_with_hooks, with_hooks
from pagerduty_backend.logger import get_logger
from pagerduty_backend.metrics import (
    pagerduty_request,
    pagerduty_request_duration,
    pagerduty_request_errors,
)
from pagerduty_backend.pagerduty_api import errors
from pagerduty_backend.pagerduty_api.errors import (
    ErrorTable,
    PagerDutyApiError,
    PagerDutyError,
)
from pagerduty_backend.pagerduty_api.models import (
    PagerDutyChangeEvent,
    PagerDutyEscalationPolicy,
    PagerDutyIncident,
    PagerDutyService,
    PagerDutyServiceMetrics,
    PagerDutyServiceStandards,
    PagerDutyUser,
    _AbilitiesResponse,
    _ChangeEventsResponse,
    _EscalationPoliciesResponse,
    _IncidentsResponse,
    _OnCallsResponse,
    _ServiceMetricsResponse,
    _ServiceResponse,
    _ServicesResponse,
)
from pagerduty_backend.pagerduty_api.pagination import (
    DEFAULT_PAGE_SIZE,
    Page,
    drain,
    more_flag,
    within_total,
)
from pagerduty_backend.pagerduty_api.shaping import (
    NOISE_REDUCTION_ABILITIES,
    OPEN_INCIDENT_STATUSES,
    first_service,
    has_abilities,
    oncall_users,
)

logger = get_logger(__name__)

# Local storage for latency tracking (tuple stack to support nested calls)
_latency_tracker: contextvars.ContextVar[tuple[float, ...]] = contextvars.ContextVar(
    f"{__name__}.latency_tracker", default=()
)

TIMEOUT = 30
DEFAULT_API_URL = "https://api.pagerduty.com"
PAGERDUTY_ACCEPT = "application/vnd.pagerduty+json;version=2"
CHANGE_EVENTS_LIMIT = 5
METRICS_WINDOW_DAYS = 30

M = TypeVar("M", bound=BaseModel)

TokenProvider: TypeAlias = Callable[[], Awaitable[str]]


@dataclass(frozen=True)
class PagerDutyApiCallContext:
    """Context information passed to API call hooks.

    Attributes:
        method: API method name (e.g., "services.get")
        verb: HTTP verb (e.g., "GET")
        id: PagerDuty instance name
    """

    method: str
    verb: str
    id: str


def _metrics_hook(context: PagerDutyApiCallContext) -> None:
    """Built-in Prometheus metrics hook."""
    pagerduty_request.labels(context.method, context.verb).inc()


def _error_metrics_hook(context: PagerDutyApiCallContext) -> None:
    pagerduty_request_errors.labels(context.method, context.verb).inc()


def _latency_start_hook(_context: PagerDutyApiCallContext) -> None:
    """Built-in hook to start latency measurement."""
    _latency_tracker.set((*_latency_tracker.get(), time.perf_counter()))


def _latency_end_hook(context: PagerDutyApiCallContext) -> None:
    """Built-in hook to record latency measurement."""
    stack = _latency_tracker.get()
    start_time = stack[-1]
    _latency_tracker.set(stack[:-1])
    duration = time.perf_counter() - start_time
    pagerduty_request_duration.labels(context.method, context.verb).observe(duration)


def _request_log_hook(context: PagerDutyApiCallContext) -> None:
    """Built-in hook for logging API requests."""
    logger.debug(
        "API request",
        extra={"method": context.method, "verb": context.verb, "instance": context.id},
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


def metrics_time_window(
    now: datetime, days: int = METRICS_WINDOW_DAYS
) -> tuple[str, str]:
    """Trailing window ending at ``now`` as UTC ISO-8601 strings.

    Naive datetimes are taken as UTC.

    Example:
        >>> metrics_time_window(datetime(2024, 3, 31, tzinfo=UTC))
        ('2024-03-01T00:00:00+00:00', '2024-03-31T00:00:00+00:00')
    """
    end = now.replace(tzinfo=UTC) if now.tzinfo is None else now.astimezone(UTC)
    start = end - timedelta(days=days)
    return start.isoformat(), end.isoformat()


def _path_id(value: str, name: str) -> str:
    if not value:
        raise ValueError(f"{name} must not be empty")
    return quote(value, safe="")


@with_hooks(
    hooks=Hooks(
        pre_hooks=[
            _metrics_hook,
            _request_log_hook,
            _latency_start_hook,
        ],
        post_hooks=[_latency_end_hook],
        error_hooks=[_error_metrics_hook],
    )
)
class PagerDutyApi:
    """Asynchronous PagerDuty API client with hook system.

    Hook System:
    - Always includes built-in hooks (metrics, logging, latency)
    - Supports additional custom hooks via hooks parameter
    - Hooks receive PagerDutyApiCallContext with method, verb, id

    Example:
        >>> async def token() -> str:
        ...     return "Token token=..."
        >>> async with PagerDutyApi(token) as api:
        ...     users = await api.get_oncall_users("PABC123")
    """

    # Set by @with_hooks decorator
    _hooks: Hooks

    def __init__(
        self,
        token_provider: TokenProvider,
        *,
        api_url: str = DEFAULT_API_URL,
        instance_name: str = "default",
        timeout: int = TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
        change_events_limit: int = CHANGE_EVENTS_LIMIT,
        metrics_window_days: int = METRICS_WINDOW_DAYS,
        clock: Callable[[], datetime] = _utcnow,
        client: httpx.AsyncClient | None = None,
        hooks: Hooks | None = None,  # noqa: ARG002 - Handled by @with_hooks decorator
    ) -> None:
        """Initialize PagerDuty API client.

        Args:
            token_provider: Coroutine function returning the Authorization
                header value; awaited before every request
            api_url: PagerDuty REST API base URL
            instance_name: Instance name used in logs and metrics
            timeout: API request timeout in seconds (default: 30)
            page_size: Page size for paginated listings (default: 50)
            change_events_limit: Number of change events per service (default: 5)
            metrics_window_days: Trailing window for service metrics (default: 30)
            clock: Returns the current time, used for the metrics window
            client: Externally owned httpx client, not closed by this client
            hooks: Optional custom hooks to merge with built-in hooks
        """
        self.api_url = api_url.rstrip("/")
        self.instance_name = instance_name
        self.page_size = page_size
        self.change_events_limit = change_events_limit
        self.metrics_window_days = metrics_window_days
        self._token_provider = token_provider
        self._clock = clock
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def _request(
        self,
        table: ErrorTable,
        verb: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Issue one request and classify its status.

        Raises:
            PagerDutyTransportError: No response was received
            PagerDutyApiError: Status listed in ``table`` or any other error status
        """
        headers = {
            "Authorization": await self._token_provider(),
            "Accept": PAGERDUTY_ACCEPT,
            "Content-Type": "application/json",
        }
        try:
            response = await self._client.request(
                verb,
                f"{self.api_url}{path}",
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.RequestError as e:
            raise table.transport_failure(e) from e

        logger.debug(
            "API response",
            extra={"path": path, "status_code": response.status_code},
        )
        if error := table.error_for(response.status_code):
            raise error
        return response

    @staticmethod
    def _decode(
        response: httpx.Response, model: type[M], table: ErrorTable
    ) -> M:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise table.parse_failure(e) from e

    async def _escalation_policies_page(
        self, offset: int, limit: int
    ) -> Page[PagerDutyEscalationPolicy]:
        table = errors.ESCALATION_POLICIES
        response = await self._request(
            table,
            "GET",
            "/escalation_policies",
            params={
                "total": "true",
                "sort_by": "name",
                "offset": offset,
                "limit": limit,
            },
        )
        result = self._decode(response, _EscalationPoliciesResponse, table)
        return Page(
            items=result.escalation_policies,
            offset=offset,
            limit=limit,
            more=result.more,
            total=result.total,
        )

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="escalation_policies.list", verb="GET", id=self.instance_name
        )
    )
    async def get_all_escalation_policies(self) -> list[PagerDutyEscalationPolicy]:
        """List all escalation policies sorted by name.

        Follows the ``more`` flag page after page; one failing page fails the
        whole listing.

        Returns:
            List of PagerDutyEscalationPolicy objects
        """
        return await drain(
            self._escalation_policies_page, has_more=more_flag, limit=self.page_size
        )

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="abilities.list", verb="GET", id=self.instance_name
        )
    )
    async def is_event_noise_reduction_enabled(self) -> bool:
        """Check whether the account can use intelligent and time based alert grouping.

        Errors are raised as plain PagerDutyError, the check is advisory.

        Returns:
            True if both abilities are present
        """
        table = errors.ABILITIES
        try:
            response = await self._request(table, "GET", "/abilities")
            result = self._decode(response, _AbilitiesResponse, table)
        except PagerDutyApiError as e:
            raise PagerDutyError(e.message) from e
        return has_abilities(result.abilities, NOISE_REDUCTION_ABILITIES)

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="oncalls.list", verb="GET", id=self.instance_name
        )
    )
    async def get_oncall_users(self, escalation_policy_id: str) -> list[PagerDutyUser]:
        """Get users currently on call for an escalation policy.

        Only users of the lowest escalation level with someone on call are
        returned, sorted by name and unique by id.

        Args:
            escalation_policy_id: PagerDuty escalation policy ID

        Returns:
            List of PagerDutyUser objects

        Example:
            >>> users = await api.get_oncall_users("PABC123")
            >>> print([u.name for u in users])
            ['Jane Doe', 'John Doe']
        """
        if not escalation_policy_id:
            raise ValueError("escalation_policy_id must not be empty")

        table = errors.ONCALLS
        response = await self._request(
            table,
            "GET",
            "/oncalls",
            params={
                "time_zone": "UTC",
                "include[]": "users",
                "escalation_policy_ids[]": escalation_policy_id,
            },
        )
        result = self._decode(response, _OnCallsResponse, table)
        return oncall_users(result.oncalls)

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="services.get", verb="GET", id=self.instance_name
        )
    )
    async def get_service_by_id(self, service_id: str) -> PagerDutyService:
        """Get a service with its integrations and escalation policy.

        Args:
            service_id: PagerDuty service ID
        """
        table = errors.SERVICE
        response = await self._request(
            table,
            "GET",
            f"/services/{_path_id(service_id, 'service_id')}",
            params={
                "time_zone": "UTC",
                "include[]": ["integrations", "escalation_policies"],
            },
        )
        return self._decode(response, _ServiceResponse, table).service

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="services.search", verb="GET", id=self.instance_name
        )
    )
    async def get_service_by_integration_key(
        self, integration_key: str
    ) -> PagerDutyService:
        """Get the first service matching an integration key.

        Args:
            integration_key: Integration (routing) key

        Raises:
            PagerDutyApiError: 404 if no service matches
        """
        if not integration_key:
            raise ValueError("integration_key must not be empty")

        table = errors.SERVICE
        response = await self._request(
            table,
            "GET",
            "/services",
            params={
                "query": integration_key,
                "time_zone": "UTC",
                "include[]": ["integrations", "escalation_policies"],
            },
        )
        result = self._decode(response, _ServicesResponse, table)
        if (service := first_service(result.services)) is None:
            raise table.not_found()
        return service

    async def _services_page(self, offset: int, limit: int) -> Page[PagerDutyService]:
        table = errors.SERVICES
        response = await self._request(
            table,
            "GET",
            "/services",
            params={
                "time_zone": "UTC",
                "include[]": ["integrations", "escalation_policies", "teams"],
                "total": "true",
                "offset": offset,
                "limit": limit,
            },
        )
        result = self._decode(response, _ServicesResponse, table)
        return Page(
            items=result.services,
            offset=offset,
            limit=limit,
            more=result.more,
            total=result.total,
        )

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="services.list", verb="GET", id=self.instance_name
        )
    )
    async def get_all_services(self) -> list[PagerDutyService]:
        """List all services with integrations, escalation policies and teams.

        Pages are fetched until the offset reaches the total reported by the
        first page.
        """
        return await drain(
            self._services_page, has_more=within_total, limit=self.page_size
        )

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="change_events.list", verb="GET", id=self.instance_name
        )
    )
    async def get_change_events(self, service_id: str) -> list[PagerDutyChangeEvent]:
        """Get the most recent change events of a service sorted by timestamp."""
        table = errors.CHANGE_EVENTS
        response = await self._request(
            table,
            "GET",
            f"/services/{_path_id(service_id, 'service_id')}/change_events",
            params={
                "limit": self.change_events_limit,
                "time_zone": "UTC",
                "sort_by": "timestamp",
            },
        )
        return self._decode(response, _ChangeEventsResponse, table).change_events

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="incidents.list", verb="GET", id=self.instance_name
        )
    )
    async def get_incidents(self, service_id: str) -> list[PagerDutyIncident]:
        """Get open (triggered or acknowledged) incidents of a service.

        Raises:
            PagerDutyApiError: 402 if the account lacks the required abilities
        """
        if not service_id:
            raise ValueError("service_id must not be empty")

        table = errors.INCIDENTS
        response = await self._request(
            table,
            "GET",
            "/incidents",
            params={
                "time_zone": "UTC",
                "sort_by": "created_at",
                "statuses[]": list(OPEN_INCIDENT_STATUSES),
                "service_ids[]": service_id,
            },
        )
        return self._decode(response, _IncidentsResponse, table).incidents

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="standards.scores.get", verb="GET", id=self.instance_name
        )
    )
    async def get_service_standards(
        self, service_id: str
    ) -> PagerDutyServiceStandards:
        table = errors.SERVICE_STANDARDS
        response = await self._request(
            table,
            "GET",
            f"/standards/scores/technical_services/{_path_id(service_id, 'service_id')}",
        )
        return self._decode(response, PagerDutyServiceStandards, table)

    @invoke_with_hooks(
        lambda self: PagerDutyApiCallContext(
            method="analytics.metrics.incidents.services",
            verb="POST",
            id=self.instance_name,
        )
    )
    async def get_service_metrics(
        self, service_id: str
    ) -> list[PagerDutyServiceMetrics]:
        """Get incident metrics of a service over the trailing window (30 days).

        Raises:
            PagerDutyApiError: 400 is not retryable, the arguments must change
        """
        if not service_id:
            raise ValueError("service_id must not be empty")

        start, end = metrics_time_window(self._clock(), self.metrics_window_days)
        table = errors.SERVICE_METRICS
        response = await self._request(
            table,
            "POST",
            "/analytics/metrics/incidents/services",
            json={
                "filters": {
                    "created_at_start": start,
                    "created_at_end": end,
                    "service_ids": [service_id],
                }
            },
        )
        return self._decode(response, _ServiceMetricsResponse, table).data

    async def aclose(self) -> None:
        """Close the underlying httpx client if it is owned by this client."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PagerDutyApi":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
