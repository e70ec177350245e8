"""
README documentation checks.
"""

from pathlib import Path

import pytest


@pytest.mark.parametrize(
    "needle",
    [
        "time-report report LOG",
        "time-report append LOG",
        "time-report watch LOG",
        "TIME_REPORT_CONFIG",
        "END",
        "DELTA",
    ],
)
@pytest.mark.unit
def test_readme_documents_commands(needle):
    """
    Ensure README documents the commands and settings.

    Parameters
    ----------
    needle : str
        Expected substring in README.

    Returns
    -------
    None
        This test asserts README guidance exists.
    """
    readme_path = Path(__file__).resolve().parents[1] / "README.md"

    assert needle in readme_path.read_text(encoding="utf-8")
