"""
Top alerts per category for a single project.
"""

from typing import Iterable

from ..core.models import Alert, AlertType, AlertWithCount, Project, TopAlertEntry, TopAlerts

DEFAULT_TOP_ALERTS_LIMIT = 5


def occurrence_counts(alerts: Iterable[Alert]) -> list[AlertWithCount]:
    """
    Count occurrences of each (type, title) pair.

    Returns:
        One entry per alert kind, in first-seen order
    """
    counts: dict[tuple[str, str], int] = {}
    for alert in alerts:
        counts[alert.key] = counts.get(alert.key, 0) + 1

    return [
        AlertWithCount(alert_type=alert_type, title=title, count=count)
        for (alert_type, title), count in counts.items()
    ]


def top_alerts_by_type(
    occurrences: list[AlertWithCount],
    alert_type: AlertType,
    limit: int = DEFAULT_TOP_ALERTS_LIMIT,
) -> tuple[TopAlertEntry, ...]:
    """Most frequent alert kinds of one category, ties kept in first-seen order."""
    matching = [o for o in occurrences if o.alert_type == alert_type.value]
    ranked = sorted(matching, key=lambda o: o.count, reverse=True)[:limit]
    return tuple(TopAlertEntry(title=o.title, occurrence_label=o.occurrence_label) for o in ranked)


def reduce_top_alerts(project: Project, limit: int = DEFAULT_TOP_ALERTS_LIMIT) -> TopAlerts:
    """
    Compute the top alerts of a project for each category.

    Args:
        project: Already fetched project
        limit: Maximum entries per category

    Returns:
        Three independent ordered lists
    """
    if limit < 1:
        raise ValueError("limit must be >= 1")

    occurrences = occurrence_counts(project.alerts)
    return TopAlerts(
        dependency=top_alerts_by_type(occurrences, AlertType.DEPENDENCY, limit),
        code=top_alerts_by_type(occurrences, AlertType.CODE, limit),
        secret=top_alerts_by_type(occurrences, AlertType.SECRET, limit),
    )
