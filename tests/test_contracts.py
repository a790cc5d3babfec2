from __future__ import annotations

import json
from pathlib import Path

import allure
import pytest

from remote_queries.orchestrator.contracts import (
    load_json,
    query_result_from_payload,
    read_result_index,
    remote_query_from_payload,
    result_index_from_payload,
)

pytestmark = [
    allure.epic("Remote Queries"),
    allure.feature("Durable Query State"),
]


def _index_payload(**item_overrides: object) -> dict[str, object]:
    item: dict[str, object] = {
        "id": "1",
        "artifact_id": 55,
        "nwo": "octo/app",
        "result_count": 3,
        "bqrs_file_size": 120,
    }
    item.update(item_overrides)
    return {"artifacts_url_path": "/artifacts", "items": [item]}


def test_read_result_index_from_file(tmp_path: Path) -> None:
    path = tmp_path / "index.json"
    path.write_text(json.dumps(_index_payload(sarif_file_size=900)), "utf-8")

    index = read_result_index(path)

    assert index.artifacts_url_path == "/artifacts"
    (item,) = index.items
    assert item.artifact_id == 55
    assert item.sarif_file_size == 900
    assert item.bqrs_file_size == 120


def test_sarif_size_is_optional() -> None:
    (item,) = result_index_from_payload(_index_payload()).items

    assert item.sarif_file_size is None


@pytest.mark.parametrize(
    ("overrides", "error", "message"),
    [
        ({"nwo": ""}, ValueError, "nwo"),
        ({"artifact_id": "55"}, TypeError, "artifact_id"),
        ({"result_count": -1}, ValueError, "result_count"),
        ({"bqrs_file_size": True}, TypeError, "bqrs_file_size"),
        ({"id": ""}, ValueError, "result_index.id"),
        ({"id": None}, TypeError, "result_index.id"),
        ({"id": 7}, TypeError, "result_index.id"),
    ],
)
def test_invalid_index_items_are_rejected(
    overrides: dict[str, object],
    error: type[Exception],
    message: str,
) -> None:
    with pytest.raises(error, match=message):
        result_index_from_payload(_index_payload(**overrides))


def test_index_requires_items_array() -> None:
    with pytest.raises(TypeError, match="items must be an array"):
        result_index_from_payload({"artifacts_url_path": "/artifacts", "items": {}})


def test_load_json_requires_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[]", "utf-8")

    with pytest.raises(TypeError, match="Expected JSON object"):
        load_json(path)


def test_query_payload_requires_repositories() -> None:
    with pytest.raises(TypeError, match="repositories"):
        remote_query_from_payload(
            {
                "query_name": "q",
                "query_file_path": "/q.ql",
                "query_text": "select 1",
                "language": "go",
                "actions_workflow_run_id": 1,
                "execution_start_time": "2026-03-01T12:00:00+00:00",
            },
        )


def test_query_payload_rejects_bad_timestamp() -> None:
    with pytest.raises(ValueError, match="execution_start_time"):
        remote_query_from_payload(
            {
                "query_name": "q",
                "query_file_path": "/q.ql",
                "query_text": "select 1",
                "language": "go",
                "actions_workflow_run_id": 1,
                "repositories": [],
                "controller_repository": {"owner": "octo", "name": "controller"},
                "execution_start_time": "not a time",
            },
        )


def test_query_result_payload_requires_download_link() -> None:
    with pytest.raises(TypeError, match="download_link"):
        query_result_from_payload(
            {
                "execution_end_time": "2026-03-01T12:30:00+00:00",
                "analysis_summaries": [
                    {"nwo": "octo/app", "result_count": 1, "file_size_in_bytes": 10},
                ],
            },
        )


def test_query_result_payload_rejects_bad_timestamp() -> None:
    with pytest.raises(ValueError, match="query_result.execution_end_time"):
        query_result_from_payload(
            {"execution_end_time": "yesterday", "analysis_summaries": []},
        )
