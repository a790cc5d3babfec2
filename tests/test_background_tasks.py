from __future__ import annotations

import asyncio
import logging

import allure
import pytest
from fakes import RecordingNotifier

from remote_queries.orchestrator.cancellation import CancellationToken
from remote_queries.orchestrator.notifications import LoggingNotifier
from remote_queries.orchestrator.tasks import BackgroundTasks

pytestmark = [
    allure.epic("Remote Queries"),
    allure.feature("Query Orchestration"),
]


def test_failing_task_is_reported_and_siblings_finish() -> None:
    notifier = RecordingNotifier()
    completed: list[str] = []

    async def boom() -> None:
        raise RuntimeError("index service down")

    async def fine() -> None:
        await asyncio.sleep(0)
        completed.append("fine")

    async def scenario() -> None:
        tasks = BackgroundTasks(notifier)
        tasks.spawn(boom(), name="Fetching index")
        tasks.spawn(fine(), name="Sibling")
        await tasks.drain()
        assert tasks.pending == 0

    asyncio.run(scenario())

    assert notifier.errors == ["Fetching index failed: index service down"]
    assert completed == ["fine"]


def test_drain_waits_for_tasks_spawned_by_tasks() -> None:
    notifier = RecordingNotifier()
    order: list[str] = []

    async def scenario() -> None:
        tasks = BackgroundTasks(notifier)

        async def child() -> None:
            await asyncio.sleep(0)
            order.append("child")

        async def parent() -> None:
            order.append("parent")
            tasks.spawn(child(), name="child")

        tasks.spawn(parent(), name="parent")
        await tasks.drain()

    asyncio.run(scenario())

    assert order == ["parent", "child"]
    assert notifier.errors == []


def test_cancelled_task_is_not_reported_as_failure() -> None:
    notifier = RecordingNotifier()

    async def scenario() -> None:
        tasks = BackgroundTasks(notifier)
        task = tasks.spawn(CancellationToken().wait(), name="waiter")
        await asyncio.sleep(0)
        task.cancel()
        await tasks.drain()
        assert task.cancelled()

    asyncio.run(scenario())

    assert notifier.errors == []


def test_logging_notifier_logs_errors_and_answers_prompt(caplog: pytest.LogCaptureFixture) -> None:
    notifier = LoggingNotifier(open_results=True)

    async def scenario() -> bool:
        await notifier.show_and_log_error_message("Remote query monitoring was cancelled")
        return await notifier.show_information_message_with_action("Query done", "View")

    with caplog.at_level(logging.INFO):
        accepted = asyncio.run(scenario())

    assert accepted is True
    assert "Remote query monitoring was cancelled" in caplog.text
    assert any(record.levelno == logging.ERROR for record in caplog.records)
