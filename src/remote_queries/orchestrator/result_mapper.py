"""Normalize a raw result index into a stored query result."""

from __future__ import annotations

from datetime import datetime

from remote_queries.orchestrator.models import (
    AnalysisSummary,
    DownloadLink,
    RemoteQueryResult,
    ResultIndex,
    ResultIndexItem,
)

SARIF_INNER_FILE_PATH = "results.sarif"
BQRS_INNER_FILE_PATH = "results.bqrs"


def map_query_result(
    execution_end_time: datetime,
    result_index: ResultIndex,
    query_id: str,
) -> RemoteQueryResult:
    """Build one analysis summary per index item, keeping index order.

    ``execution_end_time`` is the moment the caller observed the terminal
    workflow status, not a server timestamp. ``query_id`` ties every download
    link back to the query's storage directory.
    """

    return RemoteQueryResult(
        execution_end_time=execution_end_time,
        analysis_summaries=tuple(
            _map_item(item, artifacts_url_path=result_index.artifacts_url_path, query_id=query_id)
            for item in result_index.items
        ),
    )


def _map_item(item: ResultIndexItem, *, artifacts_url_path: str, query_id: str) -> AnalysisSummary:
    # A zero SARIF size means the analysis only produced BQRS.
    has_sarif = bool(item.sarif_file_size)
    return AnalysisSummary(
        nwo=item.nwo,
        result_count=item.result_count,
        file_size_in_bytes=item.sarif_file_size if has_sarif else item.bqrs_file_size,
        download_link=DownloadLink(
            id=str(item.artifact_id),
            url_path=f"{artifacts_url_path}/{item.artifact_id}",
            inner_file_path=SARIF_INNER_FILE_PATH if has_sarif else BQRS_INNER_FILE_PATH,
            query_id=query_id,
        ),
    )
