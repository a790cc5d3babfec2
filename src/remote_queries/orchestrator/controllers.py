"""Controllers for remote query CLI commands."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from remote_queries.clock import utc_now
from remote_queries.config import Settings
from remote_queries.orchestrator.auto_download import partition_analyses
from remote_queries.orchestrator.contracts import query_result_to_payload, read_result_index
from remote_queries.orchestrator.result_mapper import map_query_result
from remote_queries.orchestrator.storage import (
    QUERY_FILE_NAME,
    QUERY_RESULT_FILE_NAME,
    QueryStorage,
)


@dataclass(slots=True)
class ResultsMapCommand:
    """CLI input for mapping a stored result index."""

    storage_path: Path | None
    query_id: str
    index_path: Path


@dataclass(slots=True)
class AutoDownloadPlanCommand:
    """CLI input for previewing the auto-download selection."""

    storage_path: Path | None
    query_id: str
    max_size: int | None
    max_count: int | None


@dataclass(slots=True)
class QueryShowCommand:
    """CLI input for query inspection."""

    storage_path: Path | None
    query_id: str


@dataclass(slots=True)
class ControllerResult:
    lines: list[str]
    success: bool = True


class RemoteQueriesCliController:
    """Runs offline operations against per-query storage directories."""

    def map_results(self, command: ResultsMapCommand) -> ControllerResult:
        storage = self._storage(command.storage_path)
        query_dir = storage.query_dir(command.query_id)
        if not (query_dir / QUERY_FILE_NAME).exists():
            return ControllerResult(
                lines=[f"Query {command.query_id} not found under {storage.root_dir}"],
                success=False,
            )
        if (query_dir / QUERY_RESULT_FILE_NAME).exists():
            return ControllerResult(
                lines=[f"Query {command.query_id} already has {QUERY_RESULT_FILE_NAME}"],
                success=False,
            )

        try:
            result_index = read_result_index(command.index_path)
        except (TypeError, ValueError) as error:
            return ControllerResult(
                lines=[f"Invalid result index {command.index_path}: {error}"],
                success=False,
            )
        query_result = map_query_result(utc_now(), result_index, command.query_id)
        path = asyncio.run(
            storage.store_file(
                command.query_id,
                QUERY_RESULT_FILE_NAME,
                query_result_to_payload(query_result),
            ),
        )

        lines = [f"query_id={command.query_id} analyses={len(query_result.analysis_summaries)}"]
        lines.extend(
            f"{summary.nwo} results={summary.result_count} "
            f"size={summary.file_size_in_bytes} file={summary.download_link.inner_file_path}"
            for summary in query_result.analysis_summaries
        )
        lines.append(f"written={path}")
        return ControllerResult(lines=lines)

    def auto_download_plan(self, command: AutoDownloadPlanCommand) -> ControllerResult:
        settings = Settings.from_env(storage_path=command.storage_path)
        if command.max_size is not None:
            settings.auto_download.max_size_bytes = command.max_size
        if command.max_count is not None:
            settings.auto_download.max_count = command.max_count
        settings.validate()

        storage = QueryStorage(settings.storage_path)
        query_result = storage.load_query_result(command.query_id)
        if query_result is None:
            return ControllerResult(
                lines=[f"Query {command.query_id} has no stored results"],
                success=False,
            )

        automatic, on_demand = partition_analyses(
            query_result.analysis_summaries,
            max_size=settings.auto_download.max_size_bytes,
            max_count=settings.auto_download.max_count,
        )
        lines = [
            f"auto_download={len(automatic)} on_demand={len(on_demand)} "
            f"max_size={settings.auto_download.max_size_bytes} "
            f"max_count={settings.auto_download.max_count}",
        ]
        lines.extend(
            f"auto {summary.nwo} size={summary.file_size_in_bytes} results={summary.result_count}"
            for summary in automatic
        )
        lines.extend(
            f"on-demand {summary.nwo} size={summary.file_size_in_bytes} "
            f"results={summary.result_count}"
            for summary in on_demand
        )
        return ControllerResult(lines=lines)

    def show_query(self, command: QueryShowCommand) -> ControllerResult:
        storage = self._storage(command.storage_path)
        if not (storage.query_dir(command.query_id) / QUERY_FILE_NAME).exists():
            return ControllerResult(
                lines=[f"Query {command.query_id} not found under {storage.root_dir}"],
                success=False,
            )

        query = storage.load_query(command.query_id)
        query_result = storage.load_query_result(command.query_id)
        lines = [
            f"query_id={command.query_id}",
            f"name={query.query_name} language={query.language}",
            f"controller={query.controller_repository.nwo} "
            f"workflow_run_id={query.actions_workflow_run_id}",
            f"repositories={len(query.repositories)}",
            f"started_at={query.execution_start_time.isoformat()}",
            f"created_at_ms={storage.read_timestamp(command.query_id)}",
        ]
        if query_result is None:
            lines.append("results=none")
        else:
            total = sum(summary.result_count for summary in query_result.analysis_summaries)
            lines.append(
                f"results={total} analyses={len(query_result.analysis_summaries)} "
                f"finished_at={query_result.execution_end_time.isoformat()}",
            )
        return ControllerResult(lines=lines)

    @staticmethod
    def _storage(storage_path: Path | None) -> QueryStorage:
        return QueryStorage(Settings.from_env(storage_path=storage_path).storage_path)
