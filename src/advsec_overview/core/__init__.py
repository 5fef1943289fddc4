"""Core module containing the pipeline, configuration and data models."""

from .config import Settings, get_settings
from .models import (
    Alert,
    AlertType,
    AlertWithCount,
    PipelineSnapshot,
    PipelineStatus,
    Project,
    ProjectRef,
    ProjectSummaryRow,
    Repository,
    TopAlertEntry,
    TopAlerts,
)
from .selection import ProjectSelection

# PipelineOrchestrator is imported lazily to avoid circular imports
# Use: from advsec_overview.core.pipeline import PipelineOrchestrator


def __getattr__(name: str):
    """Lazy import for PipelineOrchestrator to avoid circular imports."""
    if name in ("PipelineOrchestrator", "PipelineBusyError"):
        from . import pipeline
        return getattr(pipeline, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Alert",
    "AlertType",
    "AlertWithCount",
    "PipelineBusyError",
    "PipelineOrchestrator",
    "PipelineSnapshot",
    "PipelineStatus",
    "Project",
    "ProjectRef",
    "ProjectSelection",
    "ProjectSummaryRow",
    "Repository",
    "Settings",
    "TopAlertEntry",
    "TopAlerts",
    "get_settings",
]
