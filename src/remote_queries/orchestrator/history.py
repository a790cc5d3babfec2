"""In-process query history tracker."""

from __future__ import annotations

import logging
from collections.abc import Callable

from remote_queries.orchestrator.models import QueryStatus, RemoteQueryHistoryItem

logger = logging.getLogger(__name__)


class InMemoryQueryHistory:
    """Keeps history items in insertion order and notifies refresh listeners."""

    def __init__(self) -> None:
        self._items: dict[str, RemoteQueryHistoryItem] = {}
        self._listeners: list[Callable[[list[RemoteQueryHistoryItem]], None]] = []

    def add_query(self, item: RemoteQueryHistoryItem) -> None:
        if item.query_id in self._items:
            raise ValueError(f"Query {item.query_id} is already tracked")
        self._items[item.query_id] = item
        logger.info("Tracking query %s (%s)", item.query_id, item.query_name)

    def refresh_tree_view(self) -> None:
        snapshot = self.items()
        for listener in self._listeners:
            listener(snapshot)

    def on_refresh(self, listener: Callable[[list[RemoteQueryHistoryItem]], None]) -> None:
        self._listeners.append(listener)

    def get(self, query_id: str) -> RemoteQueryHistoryItem | None:
        return self._items.get(query_id)

    def items(self) -> list[RemoteQueryHistoryItem]:
        return list(self._items.values())

    def in_progress(self) -> list[RemoteQueryHistoryItem]:
        return [item for item in self._items.values() if item.status == QueryStatus.IN_PROGRESS]
