"""Domain models for remote query runs and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar


class QueryStatus(str, Enum):
    """Tracked lifecycle states of a query history entry."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class AnalysisResultStatus(str, Enum):
    """Download state of one repository's analysis results."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Repository:
    """Repository identified by owner and name."""

    owner: str
    name: str

    @property
    def nwo(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class RemoteQuery:
    """One submitted query run, immutable once the platform accepted it."""

    query_name: str
    query_file_path: str
    query_text: str
    language: str
    controller_repository: Repository
    repositories: tuple[Repository, ...]
    execution_start_time: datetime
    actions_workflow_run_id: int


@dataclass(frozen=True, slots=True)
class InProgress:
    """Workflow run has not finished yet."""

    status: ClassVar[str] = "InProgress"


@dataclass(frozen=True, slots=True)
class CompletedSuccessfully:
    """Workflow run finished and produced a result index."""

    status: ClassVar[str] = "CompletedSuccessfully"


@dataclass(frozen=True, slots=True)
class CompletedUnsuccessfully:
    """Workflow run finished with a failure reported by the platform."""

    error: str
    status: ClassVar[str] = "CompletedUnsuccessfully"


@dataclass(frozen=True, slots=True)
class Cancelled:
    """Monitoring stopped before the run reached a terminal state."""

    status: ClassVar[str] = "Cancelled"


QueryWorkflowResult = InProgress | CompletedSuccessfully | CompletedUnsuccessfully | Cancelled


@dataclass(frozen=True, slots=True)
class ResultIndexItem:
    """One repository entry of the raw result index."""

    id: str
    artifact_id: int
    nwo: str
    result_count: int
    bqrs_file_size: int
    sarif_file_size: int | None = None


@dataclass(frozen=True, slots=True)
class ResultIndex:
    """Per-repository artifact manifest returned for a successful run."""

    artifacts_url_path: str
    items: tuple[ResultIndexItem, ...]


@dataclass(frozen=True, slots=True)
class DownloadLink:
    """Where to fetch one analysis artifact and which file to read from it."""

    id: str
    url_path: str
    inner_file_path: str
    query_id: str


@dataclass(frozen=True, slots=True)
class AnalysisSummary:
    """Normalized result record for one repository."""

    nwo: str
    result_count: int
    file_size_in_bytes: int
    download_link: DownloadLink


@dataclass(frozen=True, slots=True)
class RemoteQueryResult:
    """Materialized result of a successful run, persisted once."""

    execution_end_time: datetime
    analysis_summaries: tuple[AnalysisSummary, ...]


@dataclass(frozen=True, slots=True)
class AnalysisToDownload:
    """Admitted download request handed to the download engine."""

    nwo: str
    result_count: int
    download_link: DownloadLink
    file_size: str


@dataclass(slots=True)
class AnalysisResults:
    """Outcome of downloading one repository's analysis."""

    nwo: str
    status: AnalysisResultStatus
    results: list[Any] = field(default_factory=list)


@dataclass(slots=True)
class RemoteQueryHistoryItem:
    """History entry tracked for one monitored query."""

    query_name: str
    query_id: str
    storage_path: Path
    completed: bool = False
    status: QueryStatus = QueryStatus.IN_PROGRESS
    failure_reason: str | None = None


@dataclass(slots=True)
class QuerySubmissionResult:
    """What the submitter produced; no query means nothing was run."""

    query: RemoteQuery | None = None
    query_dir_path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    """Progress report emitted while submitting a query."""

    step: int
    max_step: int
    message: str
