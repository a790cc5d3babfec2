"""Remote query orchestration: submit, monitor, store results, auto-download.

The manager is the only stateful piece. Mapping a result index and choosing
which analyses to fetch automatically are pure functions, so they can be
re-run against stored documents (see the ``results`` CLI commands).
``RemoteQueriesManager.from_settings`` wires the polling monitor, storage and
in-memory history from ``Settings``.
"""

from remote_queries.orchestrator.cancellation import CancellationToken
from remote_queries.orchestrator.history import InMemoryQueryHistory
from remote_queries.orchestrator.manager import RemoteQueriesManager
from remote_queries.orchestrator.monitor import PollingQueryMonitor

__all__ = [
    "CancellationToken",
    "InMemoryQueryHistory",
    "PollingQueryMonitor",
    "RemoteQueriesManager",
]
