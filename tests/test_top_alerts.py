"""Tests for top alerts reduction and summary rows."""

import pytest

from advsec_overview.aggregation.summary import build_summary_rows, summarize_totals
from advsec_overview.aggregation.top_alerts import occurrence_counts, reduce_top_alerts
from advsec_overview.core.models import Alert, Project, Repository, TopAlertEntry


def project_with(*repos: list[Alert], name: str = "P", enabled: int = 0) -> Project:
    return Project(
        id=name.lower(),
        name=name,
        repositories=tuple(Repository.from_alerts(f"repo-{i}", alerts) for i, alerts in enumerate(repos)),
        advanced_security_enabled_count=enabled,
    )


class TestTopAlerts:
    """Test reduce_top_alerts."""

    def test_ranking_by_occurrence(self):
        """Test A(4), B(2), C(1) ranking across repositories."""
        project = project_with(
            [Alert("dependency", "A"), Alert("dependency", "B"), Alert("dependency", "A")],
            [Alert("dependency", "C"), Alert("dependency", "A"), Alert("dependency", "B")],
            [Alert("dependency", "A")],
        )

        top = reduce_top_alerts(project)

        assert top.dependency == (
            TopAlertEntry("A", "Occurrence: 4"),
            TopAlertEntry("B", "Occurrence: 2"),
            TopAlertEntry("C", "Occurrence: 1"),
        )
        assert top.code == ()
        assert top.secret == ()

    def test_truncates_to_limit(self):
        """Test that at most five entries are kept per category."""
        alerts = [Alert("code", f"rule-{i}") for i in range(8) for _ in range(i + 1)]
        top = reduce_top_alerts(project_with(alerts))

        assert len(top.code) == 5
        assert [e.title for e in top.code] == ["rule-7", "rule-6", "rule-5", "rule-4", "rule-3"]

    def test_custom_limit(self):
        """Test configurable limit."""
        alerts = [Alert("secret", "x"), Alert("secret", "y"), Alert("secret", "y")]

        assert [e.title for e in reduce_top_alerts(project_with(alerts), limit=1).secret] == ["y"]
        with pytest.raises(ValueError):
            reduce_top_alerts(project_with(alerts), limit=0)

    def test_ties_keep_first_seen_order(self):
        """Test stable ordering of equal counts."""
        alerts = [Alert("code", "second"), Alert("code", "first"), Alert("code", "third")]

        assert [e.title for e in reduce_top_alerts(project_with(alerts)).code] == ["second", "first", "third"]

    def test_categories_independent(self):
        """Test that same titles in different categories are separate kinds."""
        alerts = [Alert("code", "X"), Alert("secret", "X"), Alert("secret", "X"), Alert("custom", "X")]
        top = reduce_top_alerts(project_with(alerts))

        assert top.code == (TopAlertEntry("X", "Occurrence: 1"),)
        assert top.secret == (TopAlertEntry("X", "Occurrence: 2"),)
        assert top.dependency == ()

    def test_empty_project(self):
        """Test a project without alerts."""
        top = reduce_top_alerts(project_with([], []))

        assert top.is_empty

    def test_idempotent(self, sample_project: Project):
        """Test that repeated reductions give identical output."""
        assert reduce_top_alerts(sample_project) == reduce_top_alerts(sample_project)

    def test_occurrence_counts_first_seen_order(self):
        """Test grouping by type and title."""
        counts = occurrence_counts([Alert("code", "b"), Alert("code", "a"), Alert("code", "b")])

        assert [(c.title, c.count) for c in counts] == [("b", 2), ("a", 1)]


class TestSummaryRows:
    """Test build_summary_rows."""

    def test_sorted_descending(self):
        """Test that rows are ranked by total active alerts."""
        projects = [
            project_with([Alert("code", "x")] * 5, name="Five"),
            project_with([Alert("code", "x")] * 20, name="Twenty"),
            project_with([Alert("code", "x")], name="One"),
        ]

        rows = build_summary_rows(projects)

        assert [r.total_active_alerts for r in rows] == [20, 5, 1]
        assert [r.project_name for r in rows] == ["Twenty", "Five", "One"]

    def test_ties_keep_fetch_order(self):
        """Test that the sort is stable."""
        projects = [project_with([], name=n) for n in ("B", "A", "C")]

        assert [r.project_name for r in build_summary_rows(projects)] == ["B", "A", "C"]

    def test_rows_recomputed(self, sample_project: Project):
        """Test that rows are derived from the projects on every call."""
        first = build_summary_rows([sample_project])
        second = build_summary_rows([sample_project])

        assert first == second
        assert first[0] is not second[0]

    def test_totals(self, sample_project: Project):
        """Test organization-wide totals."""
        other = project_with([Alert("secret", "PAT")], name="Other", enabled=1)
        totals = summarize_totals(build_summary_rows([sample_project, other]))

        assert totals.number_of_repositories == 4
        assert totals.number_of_enabled_advanced_security == 3
        assert totals.total_active_alerts == 7
        assert totals.secret_alerts == 2
