"""
Tests for the command-line entry point.
"""

import logging

import pytest

from linefinder.cli import EXIT_ERROR, EXIT_SUCCESS, build_parser, main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Isolated working and home directory so no user settings are picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    return tmp_path


def test_file_output(workdir):
    (workdir / "input.txt").write_text("hello WORLD\nfoo bar\nWorld peace\n", encoding="utf-8")

    rc = main(["world", "input.txt", "-o", "out.txt"])

    assert rc == EXIT_SUCCESS
    lines = (workdir / "out.txt").read_text(encoding="utf-8").splitlines()
    assert sorted(lines) == ["World peace", "hello WORLD"]


def test_console_output(workdir, capsys):
    (workdir / "input.csv").write_text("a,world\nb,c\n", encoding="utf-8")

    rc = main(["world", "input.csv"])

    assert rc == EXIT_SUCCESS
    assert capsys.readouterr().out == "world\n"


def test_zero_matches_is_success(workdir, capsys):
    (workdir / "input.txt").write_text("nothing here\n", encoding="utf-8")

    assert main(["world", "input.txt"]) == EXIT_SUCCESS
    assert capsys.readouterr().out == ""


def test_empty_term_fails(workdir):
    (workdir / "input.txt").write_text("world\n", encoding="utf-8")
    assert main(["", "input.txt"]) == EXIT_ERROR


def test_missing_input_fails(workdir):
    assert main(["world", "missing.txt"]) == EXIT_ERROR


def test_malformed_csv_fails(workdir):
    (workdir / "input.csv").write_text("a,b\nc\n", encoding="utf-8")
    assert main(["world", "input.csv", "-o", "out.txt"]) == EXIT_ERROR


def test_settings_file_and_worker_cap(workdir):
    (workdir / "input.csv").write_text("a;world\nb;c\n", encoding="utf-8")
    (workdir / "settings.yaml").write_text("csv:\n  delimiter: ';'\n", encoding="utf-8")

    rc = main(["WORLD", "input.csv", "-o", "out.txt", "-c", "settings.yaml", "-j", "2"])

    assert rc == EXIT_SUCCESS
    assert (workdir / "out.txt").read_text(encoding="utf-8") == "world\n"


def test_unbounded_workers_warned(workdir, caplog):
    (workdir / "input.txt").write_text("world\n", encoding="utf-8")
    caplog.set_level(logging.WARNING, logger="linefinder")

    assert main(["world", "input.txt", "-o", "out.txt"]) == EXIT_SUCCESS

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("max_workers is not set" in r.getMessage() for r in warnings)


def test_worker_cap_flag_clears_unbounded_warning(workdir, caplog):
    (workdir / "input.txt").write_text("world\n", encoding="utf-8")
    caplog.set_level(logging.DEBUG, logger="linefinder")

    assert main(["world", "input.txt", "-o", "out.txt", "-j", "2"]) == EXIT_SUCCESS

    assert not any("max_workers is not set" in r.getMessage() for r in caplog.records)


def test_invalid_settings_file_fails(workdir):
    (workdir / "input.txt").write_text("world\n", encoding="utf-8")
    (workdir / "settings.yaml").write_text("max_workers: -3\n", encoding="utf-8")

    assert main(["world", "input.txt", "-c", "settings.yaml"]) == EXIT_ERROR


def test_non_positive_worker_cap_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["world", "input.txt", "-j", "0"])
