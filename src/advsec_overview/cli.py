"""
Command-line interface for the Advanced Security overview.

Provides commands for loading the alert overview of an Azure DevOps
organization, drilling into one project, and managing configuration.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from rich.console import Console

from .aggregation.top_alerts import reduce_top_alerts
from .core.config import Settings, create_default_config, get_settings
from .core.models import PipelineStatus
from .core.pipeline import PipelineOrchestrator
from .core.selection import ProjectSelection
from .dashboard.views import SummaryTableView, TopAlertsView
from .utils.secure_logging import mask_dict_values, setup_secure_logging

app = typer.Typer(
    name="advsec-overview",
    help="Azure DevOps Advanced Security overview - active alerts across all projects",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"advsec-overview v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, help="Show version"),
    ] = None,
) -> None:
    """Azure DevOps Advanced Security overview."""
    pass


def _load_settings(
    config: Optional[Path],
    org: Optional[str],
    token: Optional[str],
) -> Settings:
    settings = get_settings(str(config) if config else None)

    if org:
        settings.devops.organization = org
    if token:
        settings.devops.token = token

    if not settings.devops.organization:
        console.print("[red]Error: organization is required. Use --org or set it in the config file[/red]")
        raise typer.Exit(1)
    if not settings.devops.token:
        console.print("[red]Error: token is required. Set AZURE_DEVOPS_TOKEN or use --token[/red]")
        raise typer.Exit(1)

    setup_secure_logging(settings.logging.level, log_file=settings.logging.file)
    return settings


@app.command()
def overview(
    org: Annotated[
        Optional[str],
        typer.Option("--org", "-o", help="Azure DevOps organization name"),
    ] = None,
    token: Annotated[
        Optional[str],
        typer.Option("--token", "-t", envvar="AZURE_DEVOPS_TOKEN", help="Bearer token"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to config file"),
    ] = None,
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", help="Show top alerts of this project (name or id)"),
    ] = None,
    max_projects: Annotated[
        Optional[int],
        typer.Option("--max-projects", min=0, help="Projects aggregated in parallel (0 = unbounded)"),
    ] = None,
    max_repos: Annotated[
        Optional[int],
        typer.Option("--max-repos", min=0, help="Repositories queried in parallel per project (0 = unbounded)"),
    ] = None,
    progress: Annotated[
        bool,
        typer.Option("--progress", help="Show a progress bar while aggregating"),
    ] = False,
    json_output: Annotated[
        Optional[Path],
        typer.Option("--json", help="Also write the result to this JSON file"),
    ] = None,
) -> None:
    """
    Show active Advanced Security alerts for every project.

    Example:
        advsec-overview overview --org myorg --project MyProject
    """
    settings = _load_settings(config, org, token)

    if max_projects is not None:
        settings.fetch.max_concurrent_projects = max_projects
    if max_repos is not None:
        settings.fetch.max_concurrent_repositories = max_repos
    if progress:
        settings.fetch.show_progress = True

    orchestrator = PipelineOrchestrator(settings)
    selection = ProjectSelection()
    selection.attach(orchestrator)

    if settings.fetch.show_progress:
        snapshot = asyncio.run(orchestrator.run())
    else:
        with console.status(f"Loading alerts for {settings.devops.organization}..."):
            snapshot = asyncio.run(orchestrator.run())

    SummaryTableView(console).render(snapshot)

    if json_output:
        json_output.parent.mkdir(parents=True, exist_ok=True)
        json_output.write_text(json.dumps(snapshot.to_dict(), indent=2), encoding="utf-8")
        console.print(f"[green]✓ Wrote {json_output}[/green]")

    if snapshot.status == PipelineStatus.FAILED:
        raise typer.Exit(1)

    if project:
        selected = selection.select(snapshot, project)
        if selected is None:
            console.print(f"[red]Error: project not found: {project}[/red]")
            raise typer.Exit(1)

        limit = settings.fetch.top_alerts_limit
        TopAlertsView(console).render(selected, reduce_top_alerts(selected, limit), limit)


@app.command("config")
def config_cmd(
    init: Annotated[bool, typer.Option("--init", help="Create default config file")] = False,
    show: Annotated[bool, typer.Option("--show", help="Show current configuration")] = False,
    validate: Annotated[bool, typer.Option("--validate", help="Validate configuration")] = False,
    path: Annotated[Path, typer.Option("--path", "-p")] = Path("advsec-overview.yaml"),
) -> None:
    """
    Manage configuration.

    Example:
        advsec-overview config --init
    """
    if init:
        if path.exists():
            if not typer.confirm(f"{path} already exists. Overwrite?"):
                raise typer.Exit(0)

        create_default_config(path)
        console.print(f"[green]✓ Created default config at {path}[/green]")

    elif show:
        settings = get_settings(str(path) if path.exists() else None)
        console.print(yaml.dump(mask_dict_values(settings.model_dump()), default_flow_style=False))

    elif validate:
        try:
            settings = get_settings(str(path))
            console.print("[green]✓ Configuration is valid[/green]")

            if not settings.devops.organization:
                console.print("[yellow]⚠ No organization configured[/yellow]")
            if not settings.devops.token and not os.environ.get("AZURE_DEVOPS_TOKEN"):
                console.print("[yellow]⚠ No token configured[/yellow]")

        except Exception as e:
            console.print(f"[red]✗ Configuration error: {e}[/red]")
            raise typer.Exit(1)
    else:
        console.print("Use --init, --show, or --validate")


if __name__ == "__main__":
    app()
