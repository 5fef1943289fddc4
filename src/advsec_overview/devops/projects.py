"""
Per-project aggregation.
"""

import logging
from typing import Any, Optional

from ..core.models import Project, ProjectRef
from ..utils.parallel import ParallelProcessor
from .alerts import EnabledCounter, RepositoryAlertsLoader
from .client import DevOpsClient

logger = logging.getLogger(__name__)


def parse_refs(data: Any) -> list[ProjectRef]:
    """
    Parse a ``{"value": [{"id", "name"}, ...]}`` list payload.

    Raises:
        ValueError: If the payload does not have that shape
    """
    try:
        return [ProjectRef.from_api(item) for item in data["value"]]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Unexpected list payload: {e!r}") from e


class ProjectAggregator:
    """
    Builds a Project from its repositories and their alerts.

    The repository list is required: if it cannot be fetched the error
    propagates. Individual repositories that fail are tolerated by the
    loader.
    """

    def __init__(
        self,
        client: DevOpsClient,
        loader: Optional[RepositoryAlertsLoader] = None,
        processor: Optional[ParallelProcessor] = None,
    ):
        self.client = client
        self.loader = loader or RepositoryAlertsLoader(client)
        self.processor = processor or ParallelProcessor()

    async def list_repositories(self, project: ProjectRef) -> list[ProjectRef]:
        """Fetch the repositories of a project."""
        data = await self.client.fetch(self.client.repositories_url(project.id))
        return parse_refs(data)

    async def aggregate(self, project: ProjectRef) -> Project:
        """
        Aggregate the alerts of every repository in a project.

        Args:
            project: Project id and name

        Returns:
            Populated Project

        Raises:
            FetchError: If the repository list cannot be fetched
        """
        repositories = await self.list_repositories(project)
        counter = EnabledCounter()

        async def load(repo: ProjectRef):
            return await self.loader.load(project.name, repo, counter)

        results = await self.processor.map_async(
            load, repositories, description=f"Alerts in {project.name}"
        )

        logger.info(
            f"Project {project.name}: {len(results)} repositories, "
            f"{counter.value} with Advanced Security"
        )
        return Project(
            id=project.id,
            name=project.name,
            repositories=tuple(results),
            advanced_security_enabled_count=counter.value,
        )
