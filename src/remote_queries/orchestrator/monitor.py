"""Polling monitor that waits for a workflow run to finish."""

from __future__ import annotations

import asyncio
import logging

from remote_queries.orchestrator.cancellation import CancellationToken
from remote_queries.orchestrator.collaborators import WorkflowStatusClient
from remote_queries.orchestrator.models import (
    Cancelled,
    CompletedUnsuccessfully,
    InProgress,
    QueryWorkflowResult,
    RemoteQuery,
)

logger = logging.getLogger(__name__)


class PollingQueryMonitor:
    """Polls run status at a fixed interval until it is terminal.

    Never returns ``InProgress``: cancellation maps to ``Cancelled`` even while
    a status call is outstanding, and running out of attempts or hitting too
    many consecutive status errors maps to ``CompletedUnsuccessfully``.
    """

    def __init__(
        self,
        *,
        status_client: WorkflowStatusClient,
        poll_interval_seconds: float = 5.0,
        max_attempts: int = 17_280,
        max_consecutive_errors: int = 3,
    ) -> None:
        self.status_client = status_client
        self.poll_interval_seconds = poll_interval_seconds
        self.max_attempts = max_attempts
        self.max_consecutive_errors = max_consecutive_errors

    async def monitor_query(
        self,
        query: RemoteQuery,
        token: CancellationToken,
    ) -> QueryWorkflowResult:
        consecutive_errors = 0
        for attempt in range(1, self.max_attempts + 1):
            if token.is_cancellation_requested:
                return Cancelled()

            try:
                result = await self._get_status(query, token)
            except Exception as error:  # noqa: BLE001
                consecutive_errors += 1
                logger.warning(
                    "Status check %d for workflow run %d failed (%d/%d): %s",
                    attempt,
                    query.actions_workflow_run_id,
                    consecutive_errors,
                    self.max_consecutive_errors,
                    error,
                )
                if consecutive_errors >= self.max_consecutive_errors:
                    return CompletedUnsuccessfully(error=f"Unable to get workflow status: {error}")
            else:
                if result is None:
                    return Cancelled()
                consecutive_errors = 0
                if not isinstance(result, InProgress):
                    logger.info(
                        "Workflow run %d reached %s after %d checks",
                        query.actions_workflow_run_id,
                        result.status,
                        attempt,
                    )
                    return result

            if attempt < self.max_attempts and await token.sleep(self.poll_interval_seconds):
                return Cancelled()

        return CompletedUnsuccessfully(
            error=f"Monitoring timed out after {self.max_attempts} status checks",
        )

    async def _get_status(
        self,
        query: RemoteQuery,
        token: CancellationToken,
    ) -> QueryWorkflowResult | None:
        """Fetch run status, or ``None`` when cancellation arrives first."""

        status_call = asyncio.ensure_future(self.status_client.get_workflow_status(query))
        cancellation = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({status_call, cancellation}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancellation.cancel()
            if not status_call.done():
                status_call.cancel()
        if not status_call.done() or status_call.cancelled():
            return None
        return status_call.result()
