"""Protocols implemented by the services the manager delegates to."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from remote_queries.orchestrator.cancellation import CancellationToken
from remote_queries.orchestrator.models import (
    AnalysisResults,
    AnalysisToDownload,
    ProgressUpdate,
    QuerySubmissionResult,
    QueryWorkflowResult,
    RemoteQuery,
    RemoteQueryHistoryItem,
    RemoteQueryResult,
    ResultIndex,
)

ProgressCallback = Callable[[ProgressUpdate], None]
ResultsCallback = Callable[[Sequence[AnalysisResults]], Awaitable[None]]


class CredentialsProvider(Protocol):
    """Acquires platform credentials, prompting the user if needed."""

    async def initialize(self) -> Any:
        """Return an opaque credentials object."""


class QuerySubmitter(Protocol):
    """Validates and submits a query run to the remote platform."""

    async def submit(
        self,
        *,
        credentials: Any,
        uri: str | None,
        is_rerun: bool,
        progress: ProgressCallback,
        token: CancellationToken,
    ) -> QuerySubmissionResult | None:
        """Submit the query; ``None`` or an empty result means nothing ran."""


class QueryMonitor(Protocol):
    """Waits for a submitted run to reach a terminal state."""

    async def monitor_query(
        self,
        query: RemoteQuery,
        token: CancellationToken,
    ) -> QueryWorkflowResult:
        """Return a terminal workflow result."""


class WorkflowStatusClient(Protocol):
    """Looks up the current status of a workflow run once."""

    async def get_workflow_status(self, query: RemoteQuery) -> QueryWorkflowResult:
        """Return the run status as of now."""


class ResultIndexClient(Protocol):
    """Fetches the per-repository result index of a finished run."""

    async def get_remote_query_index(
        self,
        credentials: Any,
        query: RemoteQuery,
    ) -> ResultIndex | None:
        """Return the index, or ``None`` when it could not be retrieved."""


class QueryHistory(Protocol):
    """Tracks monitored queries for presentation."""

    def add_query(self, item: RemoteQueryHistoryItem) -> None:
        """Start tracking a query."""

    def refresh_tree_view(self) -> None:
        """Let observers pick up changed history items."""


class AnalysesResultsDownloader(Protocol):
    """Downloads analysis artifacts concurrently."""

    async def download_analyses_results(
        self,
        analyses: Sequence[AnalysisToDownload],
        token: CancellationToken,
        on_results_available: ResultsCallback,
    ) -> None:
        """Download the given analyses, reporting results as they arrive."""


class ResultsPresenter(Protocol):
    """Shows query results to the user."""

    async def show_results(self, query: RemoteQuery, query_result: RemoteQueryResult) -> None:
        """Open the results view for a query."""

    async def set_analysis_results(self, results: Sequence[AnalysisResults]) -> None:
        """Update the results view with downloaded analyses."""


class Notifier(Protocol):
    """Single channel for user-visible messages."""

    async def show_and_log_error_message(self, message: str) -> None:
        """Log an error and surface it to the user."""

    async def show_information_message_with_action(self, message: str, action: str) -> bool:
        """Show a message with one action; ``True`` when the user picked it."""
