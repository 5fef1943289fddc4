"""
Per-repository alert loading.

A repository whose alerts cannot be queried (Advanced Security disabled,
no permission, network failure) must not abort the aggregation of its
project, so the loader folds every failure into an empty result.
"""

import logging
import threading

from ..core.models import Alert, ProjectRef, Repository
from .client import DevOpsClient, FetchError

logger = logging.getLogger(__name__)


class EnabledCounter:
    """
    Number of repositories whose alert query succeeded.

    Incremented by each loader at the moment of its own success and read
    once all loaders of a project have settled.
    """

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> None:
        with self._lock:
            self._value += 1

    @property
    def value(self) -> int:
        return self._value


class RepositoryAlertsLoader:
    """Loads the active default-branch alerts of one repository."""

    def __init__(self, client: DevOpsClient):
        self.client = client

    async def load(
        self,
        project_name: str,
        repository: ProjectRef,
        counter: EnabledCounter,
    ) -> Repository:
        """
        Fetch and map the alerts of a repository.

        Args:
            project_name: Name of the owning project (alerts are project scoped)
            repository: Repository id and name
            counter: Shared counter incremented when the query succeeds

        Returns:
            Repository with its alerts, or an empty repository on failure
        """
        url = self.client.alerts_url(project_name, repository.id)
        try:
            data = await self.client.fetch(url)
            alerts = [Alert.from_api(item) for item in data["value"]]
        except (FetchError, KeyError, TypeError, AttributeError) as e:
            logger.debug(f"Alerts unavailable for {project_name}/{repository.name}: {e}")
            return Repository.empty(repository.name)

        counter.increment()
        return Repository.from_alerts(repository.name, alerts)
