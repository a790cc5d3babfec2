"""Per-query storage directories for persisted query state."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Any
from uuid import uuid4

from remote_queries.orchestrator.contracts import (
    load_json,
    query_result_from_payload,
    remote_query_from_payload,
    write_json,
)
from remote_queries.orchestrator.models import RemoteQuery, RemoteQueryResult

logger = logging.getLogger(__name__)

QUERY_FILE_NAME = "query.json"
QUERY_RESULT_FILE_NAME = "query-result.json"
TIMESTAMP_FILE_NAME = "timestamp"


class QueryStorage:
    """Creates and reads the directory layout of each monitored query.

    Every query id maps to its own directory under ``root_dir``; no two
    queries share a path.
    """

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = root_dir

    def create_query_id(self, query_name: str) -> str:
        """Generate a unique id naming the query's storage directory."""

        return f"{query_name}-{uuid4().hex}"

    def query_dir(self, query_id: str) -> Path:
        return self.root_dir / query_id

    async def prepare_storage_directory(self, query_id: str) -> Path:
        """Create the query directory with a creation timestamp marker.

        The marker is read by retention cleanup to decide when the directory
        can be removed.
        """

        return await asyncio.to_thread(self._create_timestamped_dir, self.query_dir(query_id))

    async def store_file(self, query_id: str, file_name: str, payload: dict[str, Any]) -> Path:
        path = self.query_dir(query_id) / file_name
        await asyncio.to_thread(write_json, path, payload)
        logger.debug("Stored %s for query %s", file_name, query_id)
        return path

    def load_query(self, query_id: str) -> RemoteQuery:
        return remote_query_from_payload(load_json(self.query_dir(query_id) / QUERY_FILE_NAME))

    def load_query_result(self, query_id: str) -> RemoteQueryResult | None:
        """Load the stored result summary, ``None`` when the run never completed."""

        path = self.query_dir(query_id) / QUERY_RESULT_FILE_NAME
        if not path.exists():
            return None
        return query_result_from_payload(load_json(path))

    def read_timestamp(self, query_id: str) -> int:
        """Creation time of the query directory in epoch milliseconds."""

        raw = (self.query_dir(query_id) / TIMESTAMP_FILE_NAME).read_text("utf-8").strip()
        try:
            return int(raw)
        except ValueError as error:
            raise ValueError(f"Invalid timestamp marker for query {query_id}: {raw!r}") from error

    @staticmethod
    def _create_timestamped_dir(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / TIMESTAMP_FILE_NAME).write_text(str(time.time_ns() // 1_000_000), "utf-8")
        return path
