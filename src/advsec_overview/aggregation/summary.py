"""
Overview table rows.
"""

from typing import Iterable

from ..core.models import Project, ProjectSummaryRow


def sort_by_total_alerts(rows: Iterable[ProjectSummaryRow]) -> list[ProjectSummaryRow]:
    """Sort rows by total active alerts, descending. Ties keep their order."""
    return sorted(rows, key=lambda r: r.total_active_alerts, reverse=True)


def build_summary_rows(projects: Iterable[Project]) -> list[ProjectSummaryRow]:
    """Derive one row per project, ranked by total active alerts."""
    return sort_by_total_alerts(ProjectSummaryRow.from_project(p) for p in projects)


def summarize_totals(rows: Iterable[ProjectSummaryRow]) -> ProjectSummaryRow:
    """Organization-wide totals over all rows."""
    rows = list(rows)
    return ProjectSummaryRow(
        project_id="",
        project_name="Total",
        number_of_repositories=sum(r.number_of_repositories for r in rows),
        number_of_enabled_advanced_security=sum(r.number_of_enabled_advanced_security for r in rows),
        total_active_alerts=sum(r.total_active_alerts for r in rows),
        dependency_alerts=sum(r.dependency_alerts for r in rows),
        code_alerts=sum(r.code_alerts for r in rows),
        secret_alerts=sum(r.secret_alerts for r in rows),
    )
