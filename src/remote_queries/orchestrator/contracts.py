"""File-based contracts for persisted query state and result indexes."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from remote_queries.orchestrator.models import (
    AnalysisSummary,
    DownloadLink,
    RemoteQuery,
    RemoteQueryResult,
    Repository,
    ResultIndex,
    ResultIndexItem,
)


def write_json(path: Path, payload: dict[str, Any]) -> None:
    """Persist JSON payload using deterministic formatting."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True), "utf-8")


def load_json(path: Path) -> dict[str, Any]:
    """Load JSON document and validate top-level object type."""

    payload = json.loads(path.read_text("utf-8"))
    if not isinstance(payload, dict):
        raise TypeError(f"Expected JSON object in {path}")
    return payload


def remote_query_to_payload(query: RemoteQuery) -> dict[str, Any]:
    return {
        "query_name": query.query_name,
        "query_file_path": query.query_file_path,
        "query_text": query.query_text,
        "language": query.language,
        "controller_repository": _repository_to_payload(query.controller_repository),
        "repositories": [_repository_to_payload(repo) for repo in query.repositories],
        "execution_start_time": query.execution_start_time.isoformat(),
        "actions_workflow_run_id": query.actions_workflow_run_id,
    }


def remote_query_from_payload(raw: dict[str, Any]) -> RemoteQuery:
    """Validate and build a query descriptor from its stored form."""

    for field_name in ("query_name", "query_file_path", "query_text", "language"):
        if not isinstance(raw.get(field_name), str):
            raise TypeError(f"query.{field_name} must be a string")
    run_id = raw.get("actions_workflow_run_id")
    if not isinstance(run_id, int) or isinstance(run_id, bool):
        raise TypeError("query.actions_workflow_run_id must be an integer")
    raw_repositories = raw.get("repositories")
    if not isinstance(raw_repositories, list):
        raise TypeError("query.repositories must be an array")
    started_raw = raw.get("execution_start_time")
    if not isinstance(started_raw, str):
        raise TypeError("query.execution_start_time must be an ISO timestamp string")
    try:
        started_at = datetime.fromisoformat(started_raw)
    except ValueError as error:
        raise ValueError(f"Invalid query.execution_start_time: {started_raw!r}") from error

    return RemoteQuery(
        query_name=raw["query_name"],
        query_file_path=raw["query_file_path"],
        query_text=raw["query_text"],
        language=raw["language"],
        controller_repository=_repository_from_payload(
            raw.get("controller_repository"),
            field_name="query.controller_repository",
        ),
        repositories=tuple(
            _repository_from_payload(item, field_name="query.repositories[]")
            for item in raw_repositories
        ),
        execution_start_time=started_at,
        actions_workflow_run_id=run_id,
    )


def query_result_to_payload(result: RemoteQueryResult) -> dict[str, Any]:
    return {
        "execution_end_time": result.execution_end_time.isoformat(),
        "analysis_summaries": [
            {
                "nwo": summary.nwo,
                "result_count": summary.result_count,
                "file_size_in_bytes": summary.file_size_in_bytes,
                "download_link": {
                    "id": summary.download_link.id,
                    "url_path": summary.download_link.url_path,
                    "inner_file_path": summary.download_link.inner_file_path,
                    "query_id": summary.download_link.query_id,
                },
            }
            for summary in result.analysis_summaries
        ],
    }


def query_result_from_payload(raw: dict[str, Any]) -> RemoteQueryResult:
    """Validate and build a stored result summary."""

    ended_raw = raw.get("execution_end_time")
    if not isinstance(ended_raw, str):
        raise TypeError("query_result.execution_end_time must be an ISO timestamp string")
    raw_summaries = raw.get("analysis_summaries")
    if not isinstance(raw_summaries, list):
        raise TypeError("query_result.analysis_summaries must be an array")

    summaries: list[AnalysisSummary] = []
    for item in raw_summaries:
        if not isinstance(item, dict):
            raise TypeError("query_result.analysis_summaries entry must be an object")
        link = item.get("download_link")
        if not isinstance(link, dict):
            raise TypeError("analysis_summary.download_link must be an object")
        for key in ("id", "url_path", "inner_file_path", "query_id"):
            if not isinstance(link.get(key), str):
                raise TypeError(f"download_link.{key} must be a string")
        nwo = item.get("nwo")
        if not isinstance(nwo, str) or not nwo.strip():
            raise ValueError("analysis_summary.nwo must be a non-empty string")
        summaries.append(
            AnalysisSummary(
                nwo=nwo,
                result_count=_require_non_negative_int(
                    item.get("result_count"),
                    field_name="analysis_summary.result_count",
                ),
                file_size_in_bytes=_require_non_negative_int(
                    item.get("file_size_in_bytes"),
                    field_name="analysis_summary.file_size_in_bytes",
                ),
                download_link=DownloadLink(
                    id=link["id"],
                    url_path=link["url_path"],
                    inner_file_path=link["inner_file_path"],
                    query_id=link["query_id"],
                ),
            ),
        )
    try:
        ended_at = datetime.fromisoformat(ended_raw)
    except ValueError as error:
        raise ValueError(f"Invalid query_result.execution_end_time: {ended_raw!r}") from error
    return RemoteQueryResult(
        execution_end_time=ended_at,
        analysis_summaries=tuple(summaries),
    )


def read_result_index(path: Path) -> ResultIndex:
    """Deserialize a result index document as served by the platform."""

    return result_index_from_payload(load_json(path))


def result_index_from_payload(raw: dict[str, Any]) -> ResultIndex:
    artifacts_url_path = raw.get("artifacts_url_path")
    if not isinstance(artifacts_url_path, str):
        raise TypeError("result_index.artifacts_url_path must be a string")
    raw_items = raw.get("items")
    if not isinstance(raw_items, list):
        raise TypeError("result_index.items must be an array")

    items: list[ResultIndexItem] = []
    for item in raw_items:
        if not isinstance(item, dict):
            raise TypeError("result_index entry must be an object")
        nwo = item.get("nwo")
        if not isinstance(nwo, str) or not nwo.strip():
            raise ValueError("result_index.nwo must be a non-empty string")
        item_id = item.get("id")
        if not isinstance(item_id, str):
            raise TypeError("result_index.id must be a string")
        if not item_id.strip():
            raise ValueError("result_index.id must be a non-empty string")
        sarif_raw = item.get("sarif_file_size")
        items.append(
            ResultIndexItem(
                id=item_id,
                artifact_id=_require_non_negative_int(
                    item.get("artifact_id"),
                    field_name="result_index.artifact_id",
                ),
                nwo=nwo,
                result_count=_require_non_negative_int(
                    item.get("result_count"),
                    field_name="result_index.result_count",
                ),
                bqrs_file_size=_require_non_negative_int(
                    item.get("bqrs_file_size", 0),
                    field_name="result_index.bqrs_file_size",
                ),
                sarif_file_size=(
                    _require_non_negative_int(
                        sarif_raw,
                        field_name="result_index.sarif_file_size",
                    )
                    if sarif_raw is not None
                    else None
                ),
            ),
        )
    return ResultIndex(artifacts_url_path=artifacts_url_path, items=tuple(items))


def _repository_to_payload(repository: Repository) -> dict[str, str]:
    return {"owner": repository.owner, "name": repository.name}


def _repository_from_payload(raw: object, *, field_name: str) -> Repository:
    if not isinstance(raw, dict):
        raise TypeError(f"{field_name} must be an object")
    owner = raw.get("owner")
    name = raw.get("name")
    if not isinstance(owner, str) or not owner.strip():
        raise ValueError(f"{field_name}.owner must be a non-empty string")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"{field_name}.name must be a non-empty string")
    return Repository(owner=owner, name=name)


def _require_non_negative_int(value: object, *, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{field_name} must be an integer")
    if value < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return value
