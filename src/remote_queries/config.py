"""Runtime configuration for remote query orchestration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class AutoDownloadSettings:
    """Caps for unattended result downloads after a run completes."""

    enabled: bool = True
    max_size_bytes: int = 300 * 1024
    max_count: int = 100


@dataclass(slots=True)
class MonitorSettings:
    """Workflow status polling settings."""

    poll_interval_seconds: float = 5.0
    max_attempts: int = 17_280
    max_consecutive_errors: int = 3


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    storage_path: Path = Path(".remote_queries")
    auto_download: AutoDownloadSettings = field(default_factory=AutoDownloadSettings)
    monitor: MonitorSettings = field(default_factory=MonitorSettings)

    @classmethod
    def from_env(cls, storage_path: Path | None = None) -> Settings:
        """Load settings from environment with sane defaults for local development."""

        return cls(
            storage_path=storage_path
            or Path(os.getenv("REMOTE_QUERIES_STORAGE_PATH", ".remote_queries")),
            auto_download=AutoDownloadSettings(
                enabled=_env_bool("REMOTE_QUERIES_AUTO_DOWNLOAD_ENABLED", default=True),
                max_size_bytes=int(
                    os.getenv("REMOTE_QUERIES_AUTO_DOWNLOAD_MAX_SIZE_BYTES", str(300 * 1024)),
                ),
                max_count=int(os.getenv("REMOTE_QUERIES_AUTO_DOWNLOAD_MAX_COUNT", "100")),
            ),
            monitor=MonitorSettings(
                poll_interval_seconds=float(
                    os.getenv("REMOTE_QUERIES_MONITOR_POLL_INTERVAL_SECONDS", "5.0"),
                ),
                max_attempts=int(os.getenv("REMOTE_QUERIES_MONITOR_MAX_ATTEMPTS", "17280")),
                max_consecutive_errors=int(
                    os.getenv("REMOTE_QUERIES_MONITOR_MAX_CONSECUTIVE_ERRORS", "3"),
                ),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error on out-of-range limits."""

        if self.auto_download.max_size_bytes <= 0:
            raise ValueError("REMOTE_QUERIES_AUTO_DOWNLOAD_MAX_SIZE_BYTES must be > 0.")
        if self.auto_download.max_count <= 0:
            raise ValueError("REMOTE_QUERIES_AUTO_DOWNLOAD_MAX_COUNT must be > 0.")
        if self.monitor.poll_interval_seconds <= 0:
            raise ValueError("REMOTE_QUERIES_MONITOR_POLL_INTERVAL_SECONDS must be > 0.")
        if self.monitor.max_attempts <= 0:
            raise ValueError("REMOTE_QUERIES_MONITOR_MAX_ATTEMPTS must be > 0.")
        if self.monitor.max_consecutive_errors <= 0:
            raise ValueError("REMOTE_QUERIES_MONITOR_MAX_CONSECUTIVE_ERRORS must be > 0.")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
