"""
Tests for settings loading.
"""

from __future__ import annotations

import doctest

import pytest

import timereport.config as config


@pytest.mark.unit
def test_missing_file_gives_defaults(tmp_path):
    """
    Ensure absent settings fall back to defaults.

    Returns
    -------
    None
        This test asserts default settings.
    """
    assert config.load_settings(tmp_path / "absent.toml") == config.DEFAULT_SETTINGS


@pytest.mark.unit
def test_environment_override_is_used(tmp_path, monkeypatch):
    """
    Ensure TIME_REPORT_CONFIG selects the settings file.

    Returns
    -------
    None
        This test asserts the config path override.
    """
    path = tmp_path / "custom.toml"
    path.write_text('editor = "nvim"\ndebounce_ms = 350\nrecent_count = 3\n', encoding="utf-8")
    monkeypatch.setenv("TIME_REPORT_CONFIG", str(path))

    settings = config.load_settings()

    assert config.get_config_path() == path
    assert settings.editor == "nvim"
    assert settings.debounce_ms == 350
    assert settings.recent_count == 3
    assert settings.poll_ms == 100


@pytest.mark.parametrize(
    ("raw", "field", "expected"),
    [
        ({"poll_ms": 0}, "poll_ms", 100),
        ({"poll_ms": "fast"}, "poll_ms", 100),
        ({"poll_ms": True}, "poll_ms", 100),
        ({"refresh_seconds": 5}, "refresh_seconds", 5),
        ({"editor": "   "}, "editor", None),
        ({"editor": 3}, "editor", None),
        ({"unknown": 1}, "recent_days", 30),
    ],
)
@pytest.mark.unit
def test_invalid_values_fall_back(raw, field, expected):
    """
    Ensure invalid values keep their defaults.

    Parameters
    ----------
    raw : dict
        Parsed TOML mapping.
    field : str
        Setting to inspect.
    expected : object
        Expected setting value.

    Returns
    -------
    None
        This test asserts value coercion.
    """
    assert getattr(config.settings_from_mapping(raw), field) == expected


@pytest.mark.unit
def test_malformed_toml_gives_defaults(tmp_path):
    """
    Ensure unparsable settings fall back to defaults.

    Returns
    -------
    None
        This test asserts malformed file handling.
    """
    path = tmp_path / "bad.toml"
    path.write_text("debounce_ms = = 3\n", encoding="utf-8")

    assert config.load_settings(path) == config.DEFAULT_SETTINGS


@pytest.mark.unit
def test_doctest_examples():
    """
    Run doctest examples embedded in config docstrings.

    Returns
    -------
    None
        This test asserts that doctest examples succeed.
    """
    results = doctest.testmod(config)
    assert results.failed == 0
