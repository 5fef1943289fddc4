"""
Console views for the overview table and the top alerts drill-down.
"""

from typing import Optional

from rich.columns import Columns
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from ..aggregation.summary import summarize_totals
from ..core.models import AlertType, PipelineSnapshot, PipelineStatus, Project, TopAlertEntry, TopAlerts


console = Console()


class SummaryTableView:
    """
    Overview of all projects.

    Shows exactly one of a loading indicator, an error message or the
    table, depending on the snapshot status.
    """

    COLUMNS = [
        ("Project Name", "left"),
        ("Nr. of Repositories", "right"),
        ("With Advanced Security", "right"),
        ("Total Active Alerts", "right"),
        ("Dependency Alerts", "right"),
        ("Code Alerts", "right"),
        ("Secret Alerts", "right"),
    ]

    def __init__(self, output: Optional[Console] = None):
        self.console = output or console

    def build(self, snapshot: PipelineSnapshot) -> RenderableType:
        """Build the renderable for a snapshot."""
        if snapshot.status in (PipelineStatus.IDLE, PipelineStatus.LOADING):
            return Spinner("dots", text="Loading...")

        if snapshot.status == PipelineStatus.FAILED:
            return Panel(
                Text(snapshot.error or "", style="red", justify="center"),
                title="[bold red]Error[/bold red]",
                border_style="red",
            )

        return self._build_table(snapshot)

    def _build_table(self, snapshot: PipelineSnapshot) -> Table:
        rows = snapshot.rows
        table = Table(
            title="Security Alerts",
            show_header=True,
            header_style="bold magenta",
            show_footer=bool(rows),
        )

        totals = summarize_totals(rows)
        footer = [
            totals.project_name,
            str(totals.number_of_repositories),
            str(totals.number_of_enabled_advanced_security),
            str(totals.total_active_alerts),
            str(totals.dependency_alerts),
            str(totals.code_alerts),
            str(totals.secret_alerts),
        ]
        for (name, justify), foot in zip(self.COLUMNS, footer):
            table.add_column(name, justify=justify, footer=foot)

        for row in rows:
            total_style = "red" if row.total_active_alerts else "green"
            table.add_row(
                row.project_name,
                str(row.number_of_repositories),
                str(row.number_of_enabled_advanced_security),
                f"[{total_style}]{row.total_active_alerts}[/{total_style}]",
                str(row.dependency_alerts),
                str(row.code_alerts),
                str(row.secret_alerts),
            )

        return table

    def render(self, snapshot: PipelineSnapshot) -> None:
        """Render the snapshot."""
        self.console.print(self.build(snapshot))


class TopAlertsView:
    """Top alerts of one project, one card per category."""

    def __init__(self, output: Optional[Console] = None):
        self.console = output or console

    def build(self, project: Project, top_alerts: TopAlerts, limit: int = 5) -> Panel:
        """Build the drill-down panel for a project."""
        cards = []
        for alert_type in AlertType:
            entries = top_alerts.for_type(alert_type)
            if entries:
                title = f"Top {limit} {alert_type.value.capitalize()} Alerts Details"
                cards.append(self._build_card(title, entries))

        body: RenderableType
        if cards:
            body = Columns(cards, expand=True)
        else:
            body = Text("No alerts found", style="dim")

        return Panel(
            Group(body),
            title=f"[bold]{project.name} - Top Alerts Details[/bold]",
            border_style="cyan",
        )

    @staticmethod
    def _build_card(title: str, entries: tuple[TopAlertEntry, ...]) -> Panel:
        lines = Text()
        for i, entry in enumerate(entries):
            if i:
                lines.append("\n")
            lines.append(entry.title, style="bold")
            lines.append("\n")
            lines.append(entry.occurrence_label, style="dim")
        return Panel(lines, title=title, border_style="blue")

    def render(self, project: Project, top_alerts: TopAlerts, limit: int = 5) -> None:
        """Render the drill-down panel."""
        self.console.print(self.build(project, top_alerts, limit))
