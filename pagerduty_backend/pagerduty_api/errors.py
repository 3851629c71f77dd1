"""PagerDuty API errors and per-operation status tables.

Every operation declares which upstream status codes it understands in an
``ErrorTable``. A response with one of those codes raises ``PagerDutyApiError``
with the operation's message; any other non-success code raises the
``UNEXPECTED_STATUS`` kind.

Error hierarchy:
    PagerDutyError
    ├── PagerDutyTransportError   no response received
    └── PagerDutyApiError         carries status_code and kind
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from http import HTTPStatus


class ErrorKind(StrEnum):
    INVALID_ARGUMENTS = "invalid_arguments"
    UNAUTHENTICATED = "unauthenticated"
    PAYMENT_REQUIRED = "payment_required"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    PARSE_FAILURE = "parse_failure"
    UNEXPECTED_STATUS = "unexpected_status"


INVALID_ARGUMENTS = "Caller provided invalid arguments."
INVALID_ARGUMENTS_NO_RETRY = (
    "Caller provided invalid arguments. Please review the response for error "
    "details. Retrying with the same arguments will not work."
)
UNAUTHENTICATED = (
    "Caller did not supply credentials or did not provide the correct credentials."
)
PAYMENT_REQUIRED = (
    "Account does not have the abilities to perform the action. "
    "Please review the response for the required abilities."
)
UNAUTHORIZED = "Caller is not authorized to view the requested resource."
NOT_FOUND = "The requested resource was not found."
RATE_LIMITED = "Rate limit exceeded."
TOO_MANY_REQUESTS = (
    "Too many requests have been made, the rate limit has been reached."
)


class PagerDutyError(Exception):
    """Base class for all PagerDuty client failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PagerDutyTransportError(PagerDutyError):
    """Request failed before any response was received (DNS, connection, timeout)."""


class PagerDutyApiError(PagerDutyError):
    """PagerDuty answered with an error status or an unreadable body."""

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        kind: ErrorKind = ErrorKind.PARSE_FAILURE,
    ) -> None:
        super().__init__(message)
        self.status_code = int(status_code)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        """Whether repeating the identical request later may succeed."""
        return self.kind == ErrorKind.RATE_LIMITED

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code}, kind={self.kind.value!r})"
        )


@dataclass(frozen=True)
class ErrorTable:
    """Status code to error mapping of one operation.

    Attributes:
        action: Message prefix, e.g. "Failed to get service"
        subject: What gets parsed, used in parse failure messages
        statuses: Status code -> (kind, detail sentence)
    """

    action: str
    subject: str
    statuses: Mapping[int, tuple[ErrorKind, str]] = field(default_factory=dict)

    def message(self, detail: str) -> str:
        return f"{self.action}. {detail}"

    def error_for(self, status_code: int) -> PagerDutyApiError | None:
        """Return the error for a response status, None for success."""
        if entry := self.statuses.get(status_code):
            kind, detail = entry
            return PagerDutyApiError(self.message(detail), status_code, kind)
        if status_code >= HTTPStatus.BAD_REQUEST:
            return PagerDutyApiError(
                self.message(f"Unexpected response status {status_code}."),
                status_code,
                ErrorKind.UNEXPECTED_STATUS,
            )
        return None

    def not_found(self) -> PagerDutyApiError:
        return PagerDutyApiError(
            self.message(NOT_FOUND), HTTPStatus.NOT_FOUND, ErrorKind.NOT_FOUND
        )

    def parse_failure(self, error: Exception) -> PagerDutyApiError:
        return PagerDutyApiError(
            f"Failed to parse {self.subject} information: {error}",
            HTTPStatus.INTERNAL_SERVER_ERROR,
            ErrorKind.PARSE_FAILURE,
        )

    def transport_failure(self, error: Exception) -> PagerDutyTransportError:
        return PagerDutyTransportError(f"{self.action}: {error}")


_400 = (ErrorKind.INVALID_ARGUMENTS, INVALID_ARGUMENTS)
_401 = (ErrorKind.UNAUTHENTICATED, UNAUTHENTICATED)
_402 = (ErrorKind.PAYMENT_REQUIRED, PAYMENT_REQUIRED)
_403 = (ErrorKind.UNAUTHORIZED, UNAUTHORIZED)
_404 = (ErrorKind.NOT_FOUND, NOT_FOUND)
_429 = (ErrorKind.RATE_LIMITED, RATE_LIMITED)
_429_TOO_MANY = (ErrorKind.RATE_LIMITED, TOO_MANY_REQUESTS)

ESCALATION_POLICIES = ErrorTable(
    action="Failed to list escalation policies",
    subject="escalation policy",
    statuses={400: _400, 401: _401, 403: _403, 429: _429},
)
ABILITIES = ErrorTable(
    action="Failed to read abilities",
    subject="abilities",
    statuses={401: _401, 403: _403, 429: _429},
)
ONCALLS = ErrorTable(
    action="Failed to list oncalls",
    subject="oncall",
    statuses={400: _400, 401: _401, 403: _403, 429: _429},
)
SERVICE = ErrorTable(
    action="Failed to get service",
    subject="service",
    statuses={400: _400, 401: _401, 403: _403, 404: _404},
)
SERVICES = ErrorTable(
    action="Failed to get services",
    subject="services",
    statuses={400: _400, 401: _401, 403: _403},
)
CHANGE_EVENTS = ErrorTable(
    action="Failed to get change events for service",
    subject="change events",
    statuses={400: _400, 401: _401, 403: _403, 404: _404},
)
INCIDENTS = ErrorTable(
    action="Failed to get incidents for service",
    subject="incidents",
    statuses={400: _400, 401: _401, 402: _402, 403: _403, 429: _429_TOO_MANY},
)
SERVICE_STANDARDS = ErrorTable(
    action="Failed to get service standards for service",
    subject="service standards",
    statuses={401: _401, 403: _403, 429: _429_TOO_MANY},
)
SERVICE_METRICS = ErrorTable(
    action="Failed to get service metrics for service",
    subject="service metrics",
    statuses={
        400: (ErrorKind.INVALID_ARGUMENTS, INVALID_ARGUMENTS_NO_RETRY),
        429: _429_TOO_MANY,
    },
)
