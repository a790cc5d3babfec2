"""Admission policy for unattended background downloads of analysis results."""

from __future__ import annotations

from collections.abc import Iterable

from remote_queries.orchestrator.models import AnalysisSummary, AnalysisToDownload

AUTO_DOWNLOAD_MAX_SIZE = 300 * 1024
AUTO_DOWNLOAD_MAX_COUNT = 100


def partition_analyses(
    analysis_summaries: Iterable[AnalysisSummary],
    *,
    max_size: int = AUTO_DOWNLOAD_MAX_SIZE,
    max_count: int = AUTO_DOWNLOAD_MAX_COUNT,
) -> tuple[list[AnalysisSummary], list[AnalysisSummary]]:
    """Split summaries into ``(automatic, on_demand)``, both in original order.

    Summaries strictly below ``max_size`` bytes are admitted until
    ``max_count`` of them are taken. Everything else stays in the stored
    result for on-demand download.
    """

    if max_count < 0:
        raise ValueError(f"max_count must be >= 0, got {max_count}")
    automatic: list[AnalysisSummary] = []
    on_demand: list[AnalysisSummary] = []
    for summary in analysis_summaries:
        if summary.file_size_in_bytes < max_size and len(automatic) < max_count:
            automatic.append(summary)
        else:
            on_demand.append(summary)
    return automatic, on_demand


def select_analyses_to_download(
    analysis_summaries: Iterable[AnalysisSummary],
    *,
    max_size: int = AUTO_DOWNLOAD_MAX_SIZE,
    max_count: int = AUTO_DOWNLOAD_MAX_COUNT,
) -> list[AnalysisToDownload]:
    """Pick the analyses small enough to fetch without asking."""

    automatic, _ = partition_analyses(
        analysis_summaries,
        max_size=max_size,
        max_count=max_count,
    )
    return [
        AnalysisToDownload(
            nwo=summary.nwo,
            result_count=summary.result_count,
            download_link=summary.download_link,
            file_size=str(summary.file_size_in_bytes),
        )
        for summary in automatic
    ]
