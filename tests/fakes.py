"""Simulated Azure DevOps API for tests."""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

import httpx

from advsec_overview.core.config import Settings
from advsec_overview.devops.client import DevOpsClient


@dataclass
class FakeRepo:
    """A simulated repository: alerts served, or a failing status."""

    id: str
    name: str
    alerts: list[dict] = field(default_factory=list)
    status: int = 200
    network_error: bool = False


@dataclass
class FakeProject:
    """A simulated project and its repository list."""

    id: str
    name: str
    repos: list[FakeRepo] = field(default_factory=list)
    repos_status: int = 200


class FakeDevOpsApi:
    """Routes requests of a DevOpsClient to in-memory projects."""

    def __init__(
        self,
        projects: list[FakeProject],
        projects_status: int = 200,
        gate: Optional[asyncio.Event] = None,
    ):
        self.projects = projects
        self.projects_status = projects_status
        self.requests: list[httpx.Request] = []
        self.gate = gate

    async def handler(self, request: httpx.Request) -> httpx.Response:
        # Requests block until the gate opens, when one is set
        if self.gate is not None:
            await self.gate.wait()
        return self.route(request)

    def route(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")

        if request.url.host == "dev.azure.com":
            # /org/_apis/projects
            if parts[1:] == ["_apis", "projects"]:
                if self.projects_status != 200:
                    return httpx.Response(self.projects_status)
                return httpx.Response(200, json={
                    "count": len(self.projects),
                    "value": [{"id": p.id, "name": p.name} for p in self.projects],
                })
            # /org/{projectId}/_apis/git/repositories
            project = self._project(id=parts[1])
            if project is None or project.repos_status != 200:
                return httpx.Response(project.repos_status if project else 404)
            return httpx.Response(200, json={
                "value": [{"id": r.id, "name": r.name} for r in project.repos],
            })

        if request.url.host == "advsec.dev.azure.com":
            # /org/{projectName}/_apis/alert/repositories/{repoId}/alerts
            project = self._project(name=parts[1])
            repo = next((r for r in project.repos if r.id == parts[5]), None) if project else None
            if repo is None:
                return httpx.Response(404)
            if repo.network_error:
                raise httpx.ConnectError("connection refused", request=request)
            if repo.status != 200:
                return httpx.Response(repo.status)
            return httpx.Response(200, json={"count": len(repo.alerts), "value": repo.alerts})

        return httpx.Response(404)

    def _project(self, id: Optional[str] = None, name: Optional[str] = None) -> Optional[FakeProject]:
        for project in self.projects:
            if (id is not None and project.id == id) or (name is not None and project.name == name):
                return project
        return None

    def client_factory(self, settings: Settings):
        """Client factory for PipelineOrchestrator."""
        def factory(token: str) -> DevOpsClient:
            return DevOpsClient(
                settings.devops,
                token=token,
                alerts_page_size=settings.fetch.alerts_page_size,
                transport=httpx.MockTransport(self.handler),
            )
        return factory


def alert(alert_type: str, title: str) -> dict:
    """Raw API alert item."""
    return {"alertId": 1, "alertType": alert_type, "title": title, "severity": "high", "state": "active"}
