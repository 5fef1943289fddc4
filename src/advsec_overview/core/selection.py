"""
Drill-down selection into the latest pipeline snapshot.
"""

from typing import TYPE_CHECKING, Callable, Optional

from .models import PipelineSnapshot, PipelineStatus, Project

if TYPE_CHECKING:
    from .pipeline import PipelineOrchestrator


class ProjectSelection:
    """
    The project currently drilled into.

    Holds the project id rather than the Project itself. The id is
    re-resolved against every LOADED snapshot and cleared when the project
    no longer exists or a run fails.
    """

    def __init__(self) -> None:
        self._key: Optional[str] = None
        self._project: Optional[Project] = None
        self._detach: Optional[Callable[[], None]] = None

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def project(self) -> Optional[Project]:
        """Selected project as resolved against the last seen snapshot."""
        return self._project

    def select(self, snapshot: PipelineSnapshot, name_or_id: str) -> Optional[Project]:
        """
        Select a project of a LOADED snapshot by id or name.

        Returns:
            The selected project, or None (selection unchanged) if not found
        """
        if snapshot.status != PipelineStatus.LOADED:
            return None
        project = snapshot.find_project(name_or_id)
        if project is not None:
            self._key = project.id
            self._project = project
        return project

    def resolve(self, snapshot: PipelineSnapshot) -> Optional[Project]:
        """
        Re-resolve the selection against a new snapshot.

        A LOADING snapshot only drops the resolved project and keeps the
        key for the run's outcome. A FAILED snapshot clears the selection.
        """
        if self._key is None:
            return None
        if snapshot.status == PipelineStatus.LOADING:
            self._project = None
            return None
        if snapshot.status != PipelineStatus.LOADED:
            self.clear()
            return None

        self._project = snapshot.find_project(self._key)
        if self._project is None:
            self._key = None
        return self._project

    def clear(self) -> None:
        self._key = None
        self._project = None

    def attach(self, orchestrator: "PipelineOrchestrator") -> None:
        """Follow every snapshot the orchestrator publishes."""
        self.detach()
        self._detach = orchestrator.subscribe(self.resolve)

    def detach(self) -> None:
        if self._detach is not None:
            self._detach()
            self._detach = None
