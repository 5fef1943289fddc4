"""Aggregations over fetched projects."""

from .summary import build_summary_rows, sort_by_total_alerts, summarize_totals
from .top_alerts import occurrence_counts, reduce_top_alerts, top_alerts_by_type

__all__ = [
    "build_summary_rows",
    "occurrence_counts",
    "reduce_top_alerts",
    "sort_by_total_alerts",
    "summarize_totals",
    "top_alerts_by_type",
]
