"""
Tests for the time-report command line.
"""

import doctest
from datetime import date

import pytest
from typer.testing import CliRunner

import timereport
from timereport.model import ReportMode


@pytest.mark.unit
def test_run_report_prints_summary(sample_file, capsys):
    """
    Ensure the report command prints the period totals.

    Parameters
    ----------
    sample_file : pathlib.Path
        Sample log path.
    capsys : pytest.CaptureFixture[str]
        Capture fixture for stdout/stderr.

    Returns
    -------
    None
        This test asserts report output.
    """
    exit_code = timereport.run_report(sample_file, today=date(2024, 7, 10))

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out.splitlines()[0] == "Summary report 07/01/2024 - 07/15/2024"
    assert "TOTAL             19:50      19:45" in captured.out
    assert captured.out.splitlines()[-1] == "DELTA                        +3:45"
    assert "     MON     TUE     WED     THU     FRI     SAT     SUN" in captured.out
    assert captured.err == ""


@pytest.mark.unit
def test_run_report_detail_with_explicit_range(tmp_path, capsys):
    """
    Ensure detail mode and explicit ranges reach the report.

    Returns
    -------
    None
        This test asserts report options.
    """
    path = tmp_path / "time.log"
    path.write_text(
        "Date: Sunday 06/30/2024\nacme,cms,docs: 0900-1000\n"
        "Date: Monday 07/01/2024\nacme,cms,api: 0900-0930\n",
        encoding="utf-8",
    )

    exit_code = timereport.run_report(
        path,
        first=date(2024, 6, 30),
        last=date(2024, 7, 1),
        mode=ReportMode.DETAIL,
    )

    out = capsys.readouterr().out
    assert exit_code == 0
    assert out.splitlines()[0] == "Detail report 06/30/2024 - 07/01/2024"
    assert "acme,cms,api" in out
    assert "acme,cms,docs" in out


@pytest.mark.unit
def test_run_report_prints_warnings_to_stderr(tmp_path, capsys):
    """
    Ensure parser warnings go to stderr.

    Returns
    -------
    None
        This test asserts warning output.
    """
    path = tmp_path / "time.log"
    path.write_text("Date: Monday 07/04/2024\nacme,cms: 0900-1000\n", encoding="utf-8")

    exit_code = timereport.run_report(path, today=date(2024, 7, 4))

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.err == "warning: line 1: 07/04/2024 is a Thursday, not Monday\n"


@pytest.mark.unit
def test_run_report_parse_failure(tmp_path, capsys):
    """
    Ensure parse failures exit 1 with the line number.

    Returns
    -------
    None
        This test asserts failure reporting.
    """
    path = tmp_path / "time.log"
    path.write_text("Date: Thursday 07/04/2024\nacme,cms: 1000-0900\n", encoding="utf-8")

    exit_code = timereport.run_report(path, today=date(2024, 7, 4))

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert captured.err.startswith("time-report: report failed: line 2: ")


@pytest.mark.unit
def test_run_report_missing_file(tmp_path, capsys):
    """
    Ensure unreadable files exit 1.

    Returns
    -------
    None
        This test asserts read failures.
    """
    exit_code = timereport.run_report(tmp_path / "missing.log")

    assert exit_code == 1
    assert "time-report: report failed: read " in capsys.readouterr().err


@pytest.mark.unit
def test_run_append_reports_projects(sample_file, capsys):
    """
    Ensure append confirms the new block and its projects.

    Returns
    -------
    None
        This test asserts append output.
    """
    exit_code = timereport.run_append(sample_file, today=date(2024, 7, 8))

    assert exit_code == 0
    assert capsys.readouterr().out == (
        f"Appended 07/08/2024 to {sample_file} (acme,cms, bozon,prototype).\n"
    )
    assert "Date: Monday 07/08/2024" in sample_file.read_text(encoding="utf-8")


@pytest.mark.unit
def test_run_append_uses_configured_count(sample_file, tmp_path, capsys):
    """
    Ensure recent_count from settings limits the pre-filled projects.

    Returns
    -------
    None
        This test asserts settings reach append.
    """
    (tmp_path / "config.toml").write_text("recent_count = 1\n", encoding="utf-8")

    timereport.run_append(sample_file, today=date(2024, 7, 8))

    assert "(acme,cms)." in capsys.readouterr().out


@pytest.mark.unit
def test_run_append_twice_fails(sample_file, capsys):
    """
    Ensure appending the same day twice exits 1.

    Returns
    -------
    None
        This test asserts duplicate append handling.
    """
    timereport.run_append(sample_file, today=date(2024, 7, 8))
    capsys.readouterr()

    exit_code = timereport.run_append(sample_file, today=date(2024, 7, 8))

    assert exit_code == 1
    assert capsys.readouterr().err == (
        "time-report: append failed: 07/08/2024 is already in the log\n"
    )


@pytest.mark.unit
def test_run_random_is_reproducible(capsys):
    """
    Ensure the random command honours its seed.

    Returns
    -------
    None
        This test asserts seeded output.
    """
    timereport.run_random(first=date(2024, 7, 1), seed=7)
    first = capsys.readouterr().out
    timereport.run_random(first=date(2024, 7, 1), seed=7)
    second = capsys.readouterr().out

    assert first == second
    assert first.count("Date: ") == 15


@pytest.mark.unit
def test_cli_report_command(sample_file):
    """
    Ensure the Typer app wires report arguments through.

    Returns
    -------
    None
        This test asserts CLI dispatch.
    """
    result = CliRunner().invoke(timereport.build_app(), ["report", str(sample_file), "07/04/2024"])

    assert result.exit_code == 0
    assert "Summary report 07/01/2024 - 07/15/2024" in result.output
    assert "bozon,prototype" in result.output


@pytest.mark.unit
def test_cli_report_detail_flag(sample_file):
    """
    Ensure --detail selects detail mode.

    Returns
    -------
    None
        This test asserts the detail option.
    """
    result = CliRunner().invoke(
        timereport.build_app(),
        ["report", str(sample_file), "07/04/2024", "--detail"],
    )

    assert result.exit_code == 0
    assert "Detail report" in result.output


@pytest.mark.parametrize(
    "argv",
    [
        ["report", "time.log", "2024-07-04"],
        ["report", "time.log", "07/04/2024", "13/45/2024"],
        ["random", "07/32/2024"],
    ],
)
@pytest.mark.unit
def test_cli_rejects_bad_dates(argv):
    """
    Ensure malformed dates are usage errors.

    Parameters
    ----------
    argv : list[str]
        Command-line arguments.

    Returns
    -------
    None
        This test asserts date validation.
    """
    result = CliRunner().invoke(timereport.build_app(), argv)

    assert result.exit_code == 2


@pytest.mark.unit
def test_parse_date_args_requires_first_for_last():
    """
    Ensure a lone last date is rejected.

    Returns
    -------
    None
        This test asserts argument validation.
    """
    with pytest.raises(ValueError):
        timereport.parse_date_args(None, "07/04/2024")


@pytest.mark.unit
def test_doctest_examples():
    """
    Run doctest examples embedded in timereport docstrings.

    Returns
    -------
    None
        This test asserts that doctest examples succeed.
    """
    results = doctest.testmod(timereport)
    assert results.failed == 0
