from __future__ import annotations

from pathlib import Path

import allure
import pytest

from remote_queries.config import AutoDownloadSettings, MonitorSettings, Settings

pytestmark = [
    allure.epic("Remote Queries"),
    allure.feature("Configuration"),
]


def test_defaults_match_auto_download_caps() -> None:
    settings = Settings()

    assert settings.storage_path == Path(".remote_queries")
    assert settings.auto_download.enabled is True
    assert settings.auto_download.max_size_bytes == 300 * 1024
    assert settings.auto_download.max_count == 100
    settings.validate()


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REMOTE_QUERIES_STORAGE_PATH", str(tmp_path))
    monkeypatch.setenv("REMOTE_QUERIES_AUTO_DOWNLOAD_MAX_SIZE_BYTES", "1024")
    monkeypatch.setenv("REMOTE_QUERIES_AUTO_DOWNLOAD_MAX_COUNT", "7")
    monkeypatch.setenv("REMOTE_QUERIES_AUTO_DOWNLOAD_ENABLED", "off")
    monkeypatch.setenv("REMOTE_QUERIES_MONITOR_POLL_INTERVAL_SECONDS", "0.5")
    monkeypatch.setenv("REMOTE_QUERIES_MONITOR_MAX_ATTEMPTS", "10")

    settings = Settings.from_env()

    assert settings.storage_path == tmp_path
    assert settings.auto_download == AutoDownloadSettings(
        enabled=False,
        max_size_bytes=1024,
        max_count=7,
    )
    assert settings.monitor.poll_interval_seconds == 0.5
    assert settings.monitor.max_attempts == 10


def test_explicit_storage_path_wins_over_env(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("REMOTE_QUERIES_STORAGE_PATH", str(tmp_path / "env"))

    settings = Settings.from_env(storage_path=tmp_path / "cli")

    assert settings.storage_path == tmp_path / "cli"


def test_invalid_boolean_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REMOTE_QUERIES_AUTO_DOWNLOAD_ENABLED", "maybe")

    with pytest.raises(ValueError, match="Invalid boolean value"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (Settings(auto_download=AutoDownloadSettings(max_size_bytes=0)), "MAX_SIZE_BYTES"),
        (Settings(auto_download=AutoDownloadSettings(max_count=0)), "MAX_COUNT"),
        (Settings(monitor=MonitorSettings(poll_interval_seconds=0)), "POLL_INTERVAL"),
        (Settings(monitor=MonitorSettings(max_attempts=0)), "MAX_ATTEMPTS"),
        (Settings(monitor=MonitorSettings(max_consecutive_errors=0)), "CONSECUTIVE_ERRORS"),
    ],
)
def test_validate_rejects_out_of_range_limits(settings: Settings, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        settings.validate()
