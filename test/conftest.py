"""
Shared pytest fixtures for time-report tests.
"""

from __future__ import annotations

import pytest

SAMPLE_LOG = """\
Date: Thursday 07/04/2024
acme,cms: 0835-1155,1400-1500,1530-1810
bozon,prototype: 1205-1400,1810-2000

Date: Friday 07/05/2024
acme,cms: 0815-1415
bozon,prototype: 1515-1820
"""


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path, monkeypatch) -> None:
    """
    Ensure tests never read the real settings file or write debug logs.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("TIME_REPORT_CONFIG", str(tmp_path / "config.toml"))
    monkeypatch.delenv("TIME_REPORT_LOG", raising=False)
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)


@pytest.fixture
def sample_text() -> str:
    """
    Return the two-day sample log.

    Returns
    -------
    str
        Log text.
    """
    return SAMPLE_LOG


@pytest.fixture
def sample_file(tmp_path):
    """
    Write the sample log to a temporary file.

    Returns
    -------
    pathlib.Path
        Path to the log file.
    """
    path = tmp_path / "time.log"
    path.write_text(SAMPLE_LOG, encoding="utf-8")
    return path
