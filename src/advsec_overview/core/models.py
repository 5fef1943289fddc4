"""
Data models for the Advanced Security overview.

This module defines the dataclasses and enums used throughout the
pipeline for representing alerts, repositories, projects and the
snapshot produced by a pipeline run.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class AlertType(str, Enum):
    """Alert categories reported by Advanced Security."""

    DEPENDENCY = "dependency"
    CODE = "code"
    SECRET = "secret"


class PipelineStatus(str, Enum):
    """
    Status of a pipeline run.

    - IDLE: No run has been started yet
    - LOADING: A run is in flight
    - LOADED: The last run completed and holds projects
    - FAILED: The last run failed and holds an error message
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class Alert:
    """
    One active alert as returned by the alerts endpoint.

    Two alerts with the same type and title are the same alert kind
    but still count as separate occurrences.
    """

    alert_type: str
    title: str

    @property
    def key(self) -> tuple[str, str]:
        """Structural identity used for grouping."""
        return (self.alert_type, self.title)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Alert":
        """Map one raw API item into an Alert."""
        return cls(
            alert_type=str(data.get("alertType") or ""),
            title=str(data.get("title") or ""),
        )


@dataclass(frozen=True)
class AlertWithCount:
    """An alert kind together with its number of occurrences."""

    alert_type: str
    title: str
    count: int = 1

    @property
    def occurrence_label(self) -> str:
        return f"Occurrence: {self.count}"


@dataclass(frozen=True)
class Repository:
    """
    A repository and its active default-branch alerts.

    ``alert_counts`` is derived from ``alerts``; build instances through
    :meth:`from_alerts` or :meth:`empty` so the two never disagree.
    """

    name: str
    alerts: tuple[Alert, ...] = ()
    alert_counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_alerts(cls, name: str, alerts: list[Alert] | tuple[Alert, ...]) -> "Repository":
        """Create a repository and derive its per-type counts."""
        alerts = tuple(alerts)
        return cls(
            name=name,
            alerts=alerts,
            alert_counts=dict(Counter(alert.alert_type for alert in alerts)),
        )

    @classmethod
    def empty(cls, name: str) -> "Repository":
        """Result used when the alerts of a repository could not be fetched."""
        return cls(name=name, alerts=(), alert_counts={})

    @property
    def total_alerts(self) -> int:
        return sum(self.alert_counts.values())

    def count_for(self, alert_type: AlertType | str) -> int:
        """Number of alerts of the given type."""
        key = alert_type.value if isinstance(alert_type, AlertType) else alert_type
        return self.alert_counts.get(key, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "alerts": [{"alertType": a.alert_type, "title": a.title} for a in self.alerts],
            "alertCounts": dict(self.alert_counts),
        }


@dataclass(frozen=True)
class ProjectRef:
    """Identifier pair of a project or repository as listed by the API."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ProjectRef":
        return cls(id=str(data["id"]), name=str(data["name"]))


@dataclass(frozen=True)
class Project:
    """
    A project with all of its repositories.

    ``advanced_security_enabled_count`` is the number of repositories whose
    alert query succeeded, whether or not they have alerts.
    """

    id: str
    name: str
    repositories: tuple[Repository, ...] = ()
    advanced_security_enabled_count: int = 0

    @property
    def alerts(self) -> list[Alert]:
        """All alerts of all repositories, in repository order."""
        return [alert for repo in self.repositories for alert in repo.alerts]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "repositories": [repo.to_dict() for repo in self.repositories],
            "advancedSecurityEnabledCount": self.advanced_security_enabled_count,
        }


@dataclass(frozen=True)
class ProjectSummaryRow:
    """Per-project totals shown in the overview table."""

    project_id: str
    project_name: str
    number_of_repositories: int = 0
    number_of_enabled_advanced_security: int = 0
    total_active_alerts: int = 0
    dependency_alerts: int = 0
    code_alerts: int = 0
    secret_alerts: int = 0

    @classmethod
    def from_project(cls, project: Project) -> "ProjectSummaryRow":
        """Derive the row from a project."""
        repos = project.repositories
        return cls(
            project_id=project.id,
            project_name=project.name,
            number_of_repositories=len(repos),
            number_of_enabled_advanced_security=project.advanced_security_enabled_count,
            total_active_alerts=sum(r.total_alerts for r in repos),
            dependency_alerts=sum(r.count_for(AlertType.DEPENDENCY) for r in repos),
            code_alerts=sum(r.count_for(AlertType.CODE) for r in repos),
            secret_alerts=sum(r.count_for(AlertType.SECRET) for r in repos),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectId": self.project_id,
            "projectName": self.project_name,
            "numberOfRepositories": self.number_of_repositories,
            "numberOfEnabledAdvancedSecurity": self.number_of_enabled_advanced_security,
            "totalActiveAlerts": self.total_active_alerts,
            "dependencyAlerts": self.dependency_alerts,
            "codeAlerts": self.code_alerts,
            "secretAlerts": self.secret_alerts,
        }


@dataclass(frozen=True)
class TopAlertEntry:
    """One line of a top alerts card."""

    title: str
    occurrence_label: str


@dataclass(frozen=True)
class TopAlerts:
    """Most frequent alerts of a project, one list per category."""

    dependency: tuple[TopAlertEntry, ...] = ()
    code: tuple[TopAlertEntry, ...] = ()
    secret: tuple[TopAlertEntry, ...] = ()

    def for_type(self, alert_type: AlertType) -> tuple[TopAlertEntry, ...]:
        return getattr(self, alert_type.name.lower())

    @property
    def is_empty(self) -> bool:
        return not (self.dependency or self.code or self.secret)


@dataclass(frozen=True)
class PipelineSnapshot:
    """
    Immutable result of one pipeline run.

    Only the fields relevant to ``status`` are populated: projects when
    LOADED, an error message when FAILED, neither otherwise.
    """

    status: PipelineStatus = PipelineStatus.IDLE
    projects: tuple[Project, ...] = ()
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def rows(self) -> list[ProjectSummaryRow]:
        """Summary rows sorted by total active alerts, descending."""
        from ..aggregation.summary import build_summary_rows

        return build_summary_rows(self.projects)

    def find_project(self, key: str) -> Optional[Project]:
        """Look up a project by id, then by name."""
        for project in self.projects:
            if project.id == key:
                return project
        for project in self.projects:
            if project.name == key:
                return project
        return None

    @property
    def duration_seconds(self) -> float:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "error": self.error,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "finishedAt": self.finished_at.isoformat() if self.finished_at else None,
            "summary": [row.to_dict() for row in self.rows],
            "projects": [project.to_dict() for project in self.projects],
        }
