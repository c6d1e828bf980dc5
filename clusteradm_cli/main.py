"""Clusteradm CLI - initialize a cluster API management cluster."""

from __future__ import annotations

import logging
import sys

import click
from rich.table import Table

from .client import DEFAULT_BOOTSTRAP_PROVIDER
from .client import ClusteradmClient
from .client import ClusteradmConfig
from .client import ComponentResolutionError
from .client import parse_repository_overrides
from .console import console
from .discovery.errors import ResourceDiscoveryError
from .discovery.lookup import get_repository_url
from .logging_setup import init_json_logging
from .settings import ClusteradmSettings
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


def _split_values(values: tuple[str, ...]) -> list[str]:
    """Flatten repeated and comma separated option values."""
    result = []
    for value in values:
        result.extend(v.strip() for v in value.split(",") if v.strip())
    return result


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    envvar="CLUSTERADM_LOG_PATH",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSONL log file (default: ~/.clusteradm/clusteradm.log.jsonl)",
)
def cli(verbose: bool, log_file: str | None):
    """Clusteradm - manage cluster API management clusters."""
    init_json_logging(path=log_file, level="DEBUG" if verbose else None)


@cli.command("init")
@click.option("--providers", multiple=True, required=True, help="Infrastructure providers to initialize")
@click.option(
    "--bootstrap",
    is_flag=False,
    flag_value=DEFAULT_BOOTSTRAP_PROVIDER,
    default=None,
    help=f"Provider used to bootstrap (default when given without value: {DEFAULT_BOOTSTRAP_PROVIDER})",
)
@click.option(
    "--repositories",
    multiple=True,
    help="Repositories for cluster API components resources, as component=url",
)
@click.option(
    "--github-token",
    envvar="CLUSTERADM_GITHUB_TOKEN",
    default=None,
    help="Personal access token for using github api without rate limits",
)
def init_cmd(providers: tuple[str, ...], bootstrap: str | None, repositories: tuple[str, ...], github_token: str | None):
    """Initialize the management cluster."""
    settings = ClusteradmSettings()

    try:
        overrides = parse_repository_overrides(_split_values(repositories))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--repositories")

    config = ClusteradmConfig(
        providers=_split_values(providers),
        bootstrap=bootstrap or None,
        repositories={**settings.get_repositories(), **overrides},
        github_token=settings.resolve_github_token(github_token),
    )

    console.print("performing init...")
    client = ClusteradmClient()
    try:
        results = client.init(config)
    except (ComponentResolutionError, ResourceDiscoveryError) as e:
        logger.error(format_error_message(e, include_cause=True))
        console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
        sys.exit(1)

    table = Table(title="Component Resources", show_header=True, header_style="bold cyan")
    table.add_column("Component", style="green")
    table.add_column("Repository", style="magenta")
    table.add_column("Resources", justify="right")
    table.add_column("Apply", style="yellow")
    for component, component_resources in zip(config.components(), results, strict=True):
        table.add_row(
            escape_markup(component),
            escape_markup(get_repository_url(component, config.repositories)),
            str(len(component_resources.resources)),
            escape_markup(component_resources.apply or "-"),
        )
    console.print(table)
    console.print(f"applying {len(results)} component resources to the management cluster...")


def main():
    """Entry point for the clusteradm CLI."""
    cli()


if __name__ == "__main__":
    main()
