import io
import logging

import pytest

import repl
from calculator.session import Calculator


def run_lines(monkeypatch: pytest.MonkeyPatch, lines: list[str], **kwargs) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("".join(line + "\n" for line in lines)))
    repl.run_prompt(Calculator(), **kwargs)


def test_prompt_session(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    run_lines(monkeypatch, ["x = 2 * 5", "x * 2", "y", "quit", "1 + 1"], quiet=True)
    out = capsys.readouterr().out
    assert "x = 10.0" in out
    assert "20.0" in out
    assert "ERROR: 'y' is not a valid variable name" in out
    assert "2.0" not in out.replace("20.0", "")


def test_prompt_prints_manual(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    run_lines(monkeypatch, ["help", "quit"])
    assert capsys.readouterr().out.count("MANUAL") == 2


def test_prompt_stops_on_eof(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    run_lines(monkeypatch, ["", "1 +"], quiet=True)
    assert "ERROR: invalid expression" in capsys.readouterr().out


def test_prompt_verbose_errors(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    run_lines(monkeypatch, ["1 + (2"], quiet=True, verbose_errors=True)
    out = capsys.readouterr().out
    assert "ERROR: invalid expression" in out
    assert "Parser error: Unclosed bracket" in out


def test_main_with_expressions(capsys: pytest.CaptureFixture[str]) -> None:
    assert repl.main(["a = 3", "a ^ 2"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a = 3.0", "9.0"]


def test_main_exit_status_on_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert repl.main(["pi = 3", "1"]) == 1
    assert capsys.readouterr().out.splitlines() == ["ERROR: Can't change value of a constant", "1.0"]


def test_main_logfile(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    logfile = tmp_path / "calc.log"
    assert repl.main(["--logfile", str(logfile), "b = 1"]) == 0
    for handler in logging.getLogger("calculator").handlers:
        handler.flush()
    assert "variable b set to 1.0" in logfile.read_text()
