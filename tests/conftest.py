"""Pytest configuration and fixtures."""

import pytest

from advsec_overview.core.config import AzureDevOpsSettings, FetchSettings, Settings
from advsec_overview.core.models import Alert, Project, Repository


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        devops=AzureDevOpsSettings(organization="testorg", token="test-token"),
        fetch=FetchSettings(max_concurrent_projects=0, max_concurrent_repositories=0),
    )


@pytest.fixture
def sample_project() -> Project:
    """Create a sample project with mixed alerts."""
    return Project(
        id="p1",
        name="Payments",
        repositories=(
            Repository.from_alerts("api", [
                Alert("dependency", "CVE-A"),
                Alert("dependency", "CVE-A"),
                Alert("code", "SQL injection"),
            ]),
            Repository.from_alerts("web", [
                Alert("dependency", "CVE-A"),
                Alert("dependency", "CVE-B"),
                Alert("secret", "Azure DevOps PAT"),
            ]),
            Repository.empty("docs"),
        ),
        advanced_security_enabled_count=2,
    )
