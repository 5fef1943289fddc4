"""Dashboard module for console output."""

from .views import SummaryTableView, TopAlertsView

__all__ = ["SummaryTableView", "TopAlertsView"]
