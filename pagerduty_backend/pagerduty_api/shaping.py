"""Post-processing of PagerDuty responses."""

from collections.abc import Iterable, Sequence

from pagerduty_backend.pagerduty_api.models import (
    PagerDutyOnCall,
    PagerDutyService,
    PagerDutyUser,
)

OPEN_INCIDENT_STATUSES = ("triggered", "acknowledged")

NOISE_REDUCTION_ABILITIES = (
    "preview_intelligent_alert_grouping",
    "time_based_alert_grouping",
)


def lowest_level_oncalls(oncalls: Sequence[PagerDutyOnCall]) -> list[PagerDutyOnCall]:
    """Keep the entries of the lowest escalation level, ordered by level first."""
    if not oncalls:
        return []
    ordered = sorted(oncalls, key=lambda oncall: oncall.escalation_level)
    lowest = ordered[0].escalation_level
    return [oncall for oncall in ordered if oncall.escalation_level == lowest]


def sort_users_by_name(users: Iterable[PagerDutyUser]) -> list[PagerDutyUser]:
    # plain string comparison, "Zoe" sorts before "adam"
    return sorted(users, key=lambda user: user.name)


def unique_users(users: Iterable[PagerDutyUser]) -> list[PagerDutyUser]:
    """Deduplicate users by id.

    Each id keeps the position of its first occurrence and the record of its
    last occurrence.
    """
    by_id: dict[str, PagerDutyUser] = {}
    for user in users:
        by_id[user.id] = user
    return list(by_id.values())


def oncall_users(oncalls: Sequence[PagerDutyOnCall]) -> list[PagerDutyUser]:
    """Users responsible first: lowest escalation level, sorted by name, unique."""
    return unique_users(
        sort_users_by_name(oncall.user for oncall in lowest_level_oncalls(oncalls))
    )


def has_abilities(abilities: Iterable[str], required: Iterable[str]) -> bool:
    return set(required) <= set(abilities)


def first_service(services: Sequence[PagerDutyService]) -> PagerDutyService | None:
    return services[0] if services else None
