"""End-to-end orchestration of remote query runs."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import assert_never

from remote_queries.clock import utc_now
from remote_queries.config import AutoDownloadSettings, Settings
from remote_queries.orchestrator.auto_download import select_analyses_to_download
from remote_queries.orchestrator.cancellation import CancellationToken
from remote_queries.orchestrator.collaborators import (
    AnalysesResultsDownloader,
    CredentialsProvider,
    Notifier,
    ProgressCallback,
    QueryHistory,
    QueryMonitor,
    QuerySubmitter,
    ResultIndexClient,
    ResultsPresenter,
    WorkflowStatusClient,
)
from remote_queries.orchestrator.contracts import query_result_to_payload, remote_query_to_payload
from remote_queries.orchestrator.history import InMemoryQueryHistory
from remote_queries.orchestrator.models import (
    Cancelled,
    CompletedSuccessfully,
    CompletedUnsuccessfully,
    InProgress,
    QueryStatus,
    RemoteQuery,
    RemoteQueryHistoryItem,
    RemoteQueryResult,
)
from remote_queries.orchestrator.monitor import PollingQueryMonitor
from remote_queries.orchestrator.notifications import LoggingNotifier
from remote_queries.orchestrator.result_mapper import map_query_result
from remote_queries.orchestrator.storage import (
    QUERY_FILE_NAME,
    QUERY_RESULT_FILE_NAME,
    QueryStorage,
)
from remote_queries.orchestrator.tasks import BackgroundTasks

logger = logging.getLogger(__name__)

CANCELLED_FAILURE_REASON = "Cancelled"


class RemoteQueriesManager:
    """Drives a query from submission to stored results and auto-download.

    Monitoring, auto-download and the "view results" prompt run as detached
    background tasks; their failures are reported through the notifier.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        storage: QueryStorage,
        credentials_provider: CredentialsProvider,
        submitter: QuerySubmitter,
        monitor: QueryMonitor,
        index_client: ResultIndexClient,
        history: QueryHistory,
        downloader: AnalysesResultsDownloader,
        presenter: ResultsPresenter,
        notifier: Notifier | None = None,
        auto_download: AutoDownloadSettings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.storage = storage
        self.credentials_provider = credentials_provider
        self.submitter = submitter
        self.monitor = monitor
        self.index_client = index_client
        self.history = history
        self.downloader = downloader
        self.presenter = presenter
        self.notifier = notifier or LoggingNotifier()
        self.auto_download = auto_download or AutoDownloadSettings()
        self.background = BackgroundTasks(self.notifier)
        self._clock = clock

    @classmethod
    def from_settings(  # noqa: PLR0913
        cls,
        settings: Settings,
        *,
        status_client: WorkflowStatusClient,
        credentials_provider: CredentialsProvider,
        submitter: QuerySubmitter,
        index_client: ResultIndexClient,
        downloader: AnalysesResultsDownloader,
        presenter: ResultsPresenter,
        history: QueryHistory | None = None,
        notifier: Notifier | None = None,
    ) -> RemoteQueriesManager:
        """Build a manager with polling monitor, storage and history taken from settings."""

        settings.validate()
        return cls(
            storage=QueryStorage(settings.storage_path),
            credentials_provider=credentials_provider,
            submitter=submitter,
            monitor=PollingQueryMonitor(
                status_client=status_client,
                poll_interval_seconds=settings.monitor.poll_interval_seconds,
                max_attempts=settings.monitor.max_attempts,
                max_consecutive_errors=settings.monitor.max_consecutive_errors,
            ),
            index_client=index_client,
            history=history if history is not None else InMemoryQueryHistory(),
            downloader=downloader,
            presenter=presenter,
            notifier=notifier,
            auto_download=settings.auto_download,
        )

    async def run_remote_query(
        self,
        uri: str | None,
        progress: ProgressCallback,
        token: CancellationToken,
    ) -> None:
        """Submit a query and start monitoring it without waiting for the run."""

        credentials = await self.credentials_provider.initialize()
        submission = await self.submitter.submit(
            credentials=credentials,
            uri=uri,
            is_rerun=False,
            progress=progress,
            token=token,
        )
        if submission is None or submission.query is None:
            logger.info("Query submission produced no run; nothing to monitor")
            return

        query = submission.query
        self.background.spawn(
            self.monitor_remote_query(query, token),
            name=f"Monitoring query {query.query_name}",
        )

    async def monitor_remote_query(self, query: RemoteQuery, token: CancellationToken) -> None:
        """Persist the query, wait for its run to finish and record the outcome."""

        query_id = self.storage.create_query_id(query.query_name)
        await self.storage.prepare_storage_directory(query_id)
        await self.storage.store_file(query_id, QUERY_FILE_NAME, remote_query_to_payload(query))

        history_item = RemoteQueryHistoryItem(
            query_name=query.query_name,
            query_id=query_id,
            storage_path=self.storage.root_dir,
        )
        self.history.add_query(history_item)
        logger.info(
            "Monitoring query %s as %s (workflow run %d, %d repositories)",
            query.query_name,
            query_id,
            query.actions_workflow_run_id,
            len(query.repositories),
        )

        try:
            credentials = await self.credentials_provider.initialize()
            workflow_result = await self.monitor.monitor_query(query, token)
            execution_end_time = self._clock()
            logger.info("Query %s finished with status %s", query_id, workflow_result.status)

            match workflow_result:
                case CompletedSuccessfully():
                    await self._complete_query(
                        query=query,
                        query_id=query_id,
                        history_item=history_item,
                        credentials=credentials,
                        execution_end_time=execution_end_time,
                        token=token,
                    )
                case CompletedUnsuccessfully(error=error):
                    history_item.failure_reason = error
                    history_item.status = QueryStatus.FAILED
                    await self.notifier.show_and_log_error_message(
                        f"Remote query execution failed. Error: {error}",
                    )
                case Cancelled():
                    history_item.failure_reason = CANCELLED_FAILURE_REASON
                    history_item.status = QueryStatus.FAILED
                    await self.notifier.show_and_log_error_message(
                        "Remote query monitoring was cancelled",
                    )
                case InProgress():
                    # A terminal poll must not come back in progress.
                    await self.notifier.show_and_log_error_message(
                        f"Unexpected status: {workflow_result.status}",
                    )
                case _:
                    assert_never(workflow_result)
        finally:
            self.history.refresh_tree_view()

    async def auto_download_remote_query_results(
        self,
        query_result: RemoteQueryResult,
        token: CancellationToken,
    ) -> None:
        """Download the analyses that fit the auto-download caps."""

        analyses_to_download = select_analyses_to_download(
            query_result.analysis_summaries,
            max_size=self.auto_download.max_size_bytes,
            max_count=self.auto_download.max_count,
        )
        logger.info(
            "Auto-downloading %d of %d analyses",
            len(analyses_to_download),
            len(query_result.analysis_summaries),
        )
        if token.is_cancellation_requested:
            logger.info("Auto-download cancelled before it started")
            return

        await self.downloader.download_analyses_results(
            analyses_to_download,
            token,
            self.presenter.set_analysis_results,
        )

    async def _complete_query(  # noqa: PLR0913
        self,
        *,
        query: RemoteQuery,
        query_id: str,
        history_item: RemoteQueryHistoryItem,
        credentials: object,
        execution_end_time: datetime,
        token: CancellationToken,
    ) -> None:
        result_index = await self.index_client.get_remote_query_index(credentials, query)
        if result_index is None:
            # Status stays in progress so the run can be inspected or retried.
            await self.notifier.show_and_log_error_message(
                f"There was an issue retrieving the result for the query {query.query_name}",
            )
            return

        history_item.completed = True
        history_item.status = QueryStatus.COMPLETED
        query_result = map_query_result(execution_end_time, result_index, query_id)
        await self.storage.store_file(
            query_id,
            QUERY_RESULT_FILE_NAME,
            query_result_to_payload(query_result),
        )
        logger.info(
            "Stored %d analysis summaries for query %s",
            len(query_result.analysis_summaries),
            query_id,
        )

        if self.auto_download.enabled:
            self.background.spawn(
                self.auto_download_remote_query_results(query_result, token),
                name=f"Downloading results of query {query.query_name}",
            )
        self.background.spawn(
            self._ask_to_open_results(query, query_result),
            name=f"Opening results of query {query.query_name}",
        )

    async def _ask_to_open_results(
        self,
        query: RemoteQuery,
        query_result: RemoteQueryResult,
    ) -> None:
        total_result_count = sum(
            summary.result_count for summary in query_result.analysis_summaries
        )
        message = (
            f'Query "{query.query_name}" run on {len(query.repositories)} repositories '
            f"and returned {total_result_count} results"
        )
        if await self.notifier.show_information_message_with_action(message, "View"):
            await self.presenter.show_results(query, query_result)
