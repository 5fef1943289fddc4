"""
Pipeline orchestrator.

Fetches the project list, aggregates every project concurrently and
publishes the outcome as an immutable snapshot. A run either loads
every project or fails as a whole.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from ..devops.client import DevOpsClient
from ..devops.projects import ProjectAggregator, parse_refs
from ..utils.parallel import ParallelProcessor
from .config import Settings
from .models import PipelineSnapshot, PipelineStatus, Project

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], DevOpsClient]
SnapshotListener = Callable[[PipelineSnapshot], None]


class PipelineBusyError(RuntimeError):
    """Raised when a run is started while another one is in flight."""
    pass


def format_error(error: BaseException) -> str:
    """Human-readable message shown in place of the overview table."""
    detail = str(error) or error.__class__.__name__
    return f"An error occurred: {detail}. Please try again later."


class PipelineOrchestrator:
    """
    Runs the projects -> repositories -> alerts pipeline.

    State machine: IDLE -> LOADING -> LOADED | FAILED. Each run replaces
    the snapshot wholesale; starting a run while one is in flight raises
    :class:`PipelineBusyError`.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Configuration
            client_factory: Builds a client from a bearer token
        """
        self.settings = settings
        self._client_factory = client_factory or self._default_client
        self._snapshot = PipelineSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._running = False

    def _default_client(self, token: str) -> DevOpsClient:
        return DevOpsClient(
            self.settings.devops,
            token=token,
            alerts_page_size=self.settings.fetch.alerts_page_size,
        )

    @property
    def snapshot(self) -> PipelineSnapshot:
        return self._snapshot

    @property
    def status(self) -> PipelineStatus:
        return self._snapshot.status

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a callback invoked with every new snapshot.

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _publish(self, snapshot: PipelineSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener failed: {e}")

    async def run(self, token: Optional[str] = None) -> PipelineSnapshot:
        """
        Run the pipeline once.

        Args:
            token: Bearer token; falls back to the configured one

        Returns:
            LOADED or FAILED snapshot

        Raises:
            PipelineBusyError: If a run is already in flight
        """
        if self._running:
            raise PipelineBusyError("A pipeline run is already in progress")
        self._running = True

        started_at = datetime.now()
        try:
            self._publish(PipelineSnapshot(status=PipelineStatus.LOADING, started_at=started_at))
            token = token if token is not None else self.settings.devops.token
            projects = await self._load(token)
        except asyncio.CancelledError:
            self._publish(PipelineSnapshot(
                status=PipelineStatus.FAILED,
                error=format_error(RuntimeError("the run was cancelled")),
                started_at=started_at,
                finished_at=datetime.now(),
            ))
            raise
        except Exception as e:
            logger.error(f"Pipeline run failed: {e}")
            snapshot = PipelineSnapshot(
                status=PipelineStatus.FAILED,
                error=format_error(e),
                started_at=started_at,
                finished_at=datetime.now(),
            )
        else:
            snapshot = PipelineSnapshot(
                status=PipelineStatus.LOADED,
                projects=tuple(projects),
                started_at=started_at,
                finished_at=datetime.now(),
            )
            logger.info(f"Loaded {len(projects)} projects in {snapshot.duration_seconds:.1f}s")
        finally:
            self._running = False

        self._publish(snapshot)
        return snapshot

    async def _load(self, token: str) -> list[Project]:
        fetch = self.settings.fetch
        async with self._client_factory(token) as client:
            aggregator = ProjectAggregator(
                client,
                processor=ParallelProcessor(max_workers=fetch.max_concurrent_repositories),
            )
            projects = parse_refs(await client.fetch(client.projects_url()))
            logger.info(f"Found {len(projects)} projects in {self.settings.devops.organization}")

            processor = ParallelProcessor(
                max_workers=fetch.max_concurrent_projects,
                show_progress=fetch.show_progress,
            )
            return await processor.map_async(
                aggregator.aggregate, projects, description="Aggregating projects"
            )
