"""CLI entrypoint for remote-queries."""

from pathlib import Path

import rich_click as click

from remote_queries import __version__
from remote_queries.orchestrator.controllers import (
    AutoDownloadPlanCommand,
    ControllerResult,
    QueryShowCommand,
    RemoteQueriesCliController,
    ResultsMapCommand,
)

click.rich_click.USE_MARKDOWN = True
CONTROLLER = RemoteQueriesCliController()


@click.group()
@click.version_option(version=__version__, prog_name="remote-queries")
def remote_queries() -> None:
    """Remote query orchestration CLI."""


@remote_queries.group()
def query() -> None:
    """Inspect monitored queries."""


@query.command("show")
@click.option(
    "--storage-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Root directory of per-query storage.",
)
@click.option("--query-id", required=True, help="Query id (storage directory name).")
def query_show(storage_path: Path | None, query_id: str) -> None:
    """Show the stored descriptor and result state of one query."""

    _emit(CONTROLLER.show_query(QueryShowCommand(storage_path=storage_path, query_id=query_id)))


@remote_queries.group()
def results() -> None:
    """Result materialization commands."""


@results.command("map")
@click.option(
    "--storage-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Root directory of per-query storage.",
)
@click.option("--query-id", required=True, help="Query id (storage directory name).")
@click.option(
    "--index",
    "index_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    required=True,
    help="Result index JSON document.",
)
def results_map(storage_path: Path | None, query_id: str, index_path: Path) -> None:
    """Map a result index into the query's stored result summary."""

    _emit(
        CONTROLLER.map_results(
            ResultsMapCommand(
                storage_path=storage_path,
                query_id=query_id,
                index_path=index_path,
            ),
        ),
    )


@results.command("auto-download-plan")
@click.option(
    "--storage-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Root directory of per-query storage.",
)
@click.option("--query-id", required=True, help="Query id (storage directory name).")
@click.option(
    "--max-size",
    type=click.IntRange(min=1),
    default=None,
    help="Only analyses strictly smaller than this many bytes are auto-downloaded.",
)
@click.option(
    "--max-count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of analyses to auto-download.",
)
def results_auto_download_plan(
    storage_path: Path | None,
    query_id: str,
    max_size: int | None,
    max_count: int | None,
) -> None:
    """Show which analyses would be downloaded automatically."""

    _emit(
        CONTROLLER.auto_download_plan(
            AutoDownloadPlanCommand(
                storage_path=storage_path,
                query_id=query_id,
                max_size=max_size,
                max_count=max_count,
            ),
        ),
    )


def _emit(result: ControllerResult) -> None:
    if not result.success:
        raise click.ClickException("\n".join(result.lines) or "Command failed.")
    for line in result.lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    remote_queries()
