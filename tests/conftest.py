"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fakes import (
    FIXED_END_TIME,
    FakeIndexClient,
    FakeSubmitter,
    ManagerHarness,
    RecordingDownloader,
    RecordingNotifier,
    RecordingPresenter,
    ScriptedMonitor,
    StaticCredentials,
)

from remote_queries.orchestrator.history import InMemoryQueryHistory
from remote_queries.orchestrator.manager import RemoteQueriesManager
from remote_queries.orchestrator.models import (
    CompletedSuccessfully,
    QuerySubmissionResult,
    QueryWorkflowResult,
    ResultIndex,
)
from remote_queries.orchestrator.storage import QueryStorage


@pytest.fixture()
def build_harness(tmp_path: Path):
    def _build(  # noqa: PLR0913
        *,
        workflow_result: QueryWorkflowResult | None = CompletedSuccessfully(),
        index: ResultIndex | None = None,
        submission: QuerySubmissionResult | None = None,
        notifier: RecordingNotifier | None = None,
        downloader: RecordingDownloader | None = None,
        **manager_kwargs: Any,
    ) -> ManagerHarness:
        storage = QueryStorage(tmp_path / "storage")
        history = InMemoryQueryHistory()
        monitor = ScriptedMonitor(workflow_result)
        monitor.history = history
        monitor.storage_root = storage.root_dir
        harness = ManagerHarness(
            manager=None,  # type: ignore[arg-type]
            storage=storage,
            history=history,
            notifier=notifier or RecordingNotifier(),
            submitter=FakeSubmitter(submission),
            monitor=monitor,
            index_client=FakeIndexClient(index),
            downloader=downloader or RecordingDownloader(),
            presenter=RecordingPresenter(),
            credentials=StaticCredentials(),
        )
        history.on_refresh(harness.refreshes.append)
        harness.manager = RemoteQueriesManager(
            storage=storage,
            credentials_provider=harness.credentials,
            submitter=harness.submitter,
            monitor=harness.monitor,
            index_client=harness.index_client,
            history=history,
            downloader=harness.downloader,
            presenter=harness.presenter,
            notifier=harness.notifier,
            clock=lambda: FIXED_END_TIME,
            **manager_kwargs,
        )
        return harness

    return _build
