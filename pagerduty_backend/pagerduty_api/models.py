"""Pydantic models for PagerDuty API.

- All models use Pydantic BaseModel
- Immutable with frozen=True
- Unknown upstream fields are kept (extra="allow") so callers can render them
- Response envelopes are private to the client; callers get the unwrapped payload
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _PagerDutyModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class PagerDutyReference(_PagerDutyModel):
    """Reference to another PagerDuty object (``*_reference`` types)."""

    id: str
    type: str | None = None
    summary: str | None = None
    self_url: str | None = Field(None, alias="self")
    html_url: str | None = None


class PagerDutyUser(_PagerDutyModel):
    """PagerDuty user data.

    Attributes:
        id: PagerDuty user ID, the user identity
        name: User display name
        email: User email address
        avatar_url: Avatar image URL
        html_url: User profile URL
        summary: Short description, usually the name
    """

    id: str = Field(..., description="PagerDuty user ID")
    name: str = Field("", description="User full name")
    email: str = Field("", description="User email address")
    avatar_url: str | None = None
    html_url: str | None = None
    summary: str | None = None


class PagerDutyOnCall(_PagerDutyModel):
    """A user being on call at an escalation level."""

    user: PagerDutyUser
    escalation_level: int
    escalation_policy: PagerDutyReference | None = None


class PagerDutyEscalationPolicy(_PagerDutyModel):
    id: str
    name: str = ""
    type: str | None = None
    summary: str | None = None
    self_url: str | None = Field(None, alias="self")
    html_url: str | None = None


class PagerDutyIntegration(_PagerDutyModel):
    id: str
    type: str | None = None
    summary: str | None = None
    integration_key: str | None = None
    html_url: str | None = None


class PagerDutyService(_PagerDutyModel):
    """PagerDuty technical service.

    Attributes:
        id: Service ID
        name: Service name
        escalation_policy: Escalation policy assigned to the service
        integrations: Integrations (with keys when included)
        teams: Teams owning the service
    """

    id: str
    name: str = ""
    description: str | None = None
    status: str | None = None
    html_url: str | None = None
    escalation_policy: PagerDutyEscalationPolicy | None = None
    integrations: list[PagerDutyIntegration] = Field(default_factory=list)
    teams: list[PagerDutyReference] = Field(default_factory=list)


class PagerDutyIncident(_PagerDutyModel):
    id: str
    title: str | None = None
    status: str
    urgency: str | None = None
    html_url: str | None = None
    created_at: str | None = None
    service: PagerDutyReference | None = None
    assignments: list[dict[str, Any]] = Field(default_factory=list)


class PagerDutyChangeEvent(_PagerDutyModel):
    id: str
    summary: str | None = None
    source: str | None = None
    timestamp: str | None = None
    html_url: str | None = None
    services: list[PagerDutyReference] = Field(default_factory=list)
    integration: PagerDutyReference | None = None
    links: list[dict[str, Any]] = Field(default_factory=list)


class PagerDutyServiceStandards(_PagerDutyModel):
    """Standards score of a technical service, passed through as returned."""

    resource_id: str | None = None
    resource_type: str | None = None
    score: dict[str, Any] | None = None
    standards: list[dict[str, Any]] = Field(default_factory=list)


class PagerDutyServiceMetrics(_PagerDutyModel):
    """Aggregated incident metrics of a service, passed through as returned."""

    service_id: str | None = None
    mean_seconds_to_resolve: float | None = None
    mean_seconds_to_first_ack: float | None = None
    mean_seconds_to_engage: float | None = None
    mean_seconds_to_mobilize: float | None = None
    total_incident_count: int | None = None
    total_interruptions: int | None = None
    total_high_urgency_incidents: int | None = None
    total_major_incidents: int | None = None


# Response envelopes


class _EscalationPoliciesResponse(BaseModel):
    escalation_policies: list[PagerDutyEscalationPolicy]
    more: bool | None = None
    total: int | None = None


class _AbilitiesResponse(BaseModel):
    abilities: list[str]


class _OnCallsResponse(BaseModel):
    oncalls: list[PagerDutyOnCall]


class _ServiceResponse(BaseModel):
    service: PagerDutyService


class _ServicesResponse(BaseModel):
    services: list[PagerDutyService]
    more: bool | None = None
    total: int | None = None


class _ChangeEventsResponse(BaseModel):
    change_events: list[PagerDutyChangeEvent]


class _IncidentsResponse(BaseModel):
    incidents: list[PagerDutyIncident]


class _ServiceMetricsResponse(BaseModel):
    data: list[PagerDutyServiceMetrics]
