import io
import sys

import pytest

from gridcalc.cli import ABOUT_TEXT, USAGE, main
from gridcalc.display import render_sheet
from gridcalc.parsing import parse_input
from gridcalc.sheet import Sheet


def run(monkeypatch, capsys, argv, text):
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))
    code = main(argv)
    return code, capsys.readouterr().out


@pytest.mark.parametrize("argv", [[], ["3"], ["1", "2", "3"]])
def test_usage_message(capsys, argv):
    assert main(argv) == 0
    assert capsys.readouterr().out.strip() == USAGE


def test_about_message_is_case_insensitive(capsys):
    assert main(["About"]) == 0
    assert capsys.readouterr().out.strip() == ABOUT_TEXT


@pytest.mark.parametrize(
    "argv, word", [(["x", "3"], "rows"), (["3", "-1"], "columns")]
)
def test_bad_dimensions(argv, word):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert word in str(excinfo.value.code)


def test_session_shows_results(monkeypatch, capsys):
    code, out = run(monkeypatch, capsys, ["2", "2"], "A1=5\nB1=A1\nq\n")
    expected = Sheet(2, 2)
    parse_input("A1=5", expected)
    parse_input("B1=A1", expected)
    assert code == 0
    assert out.startswith(render_sheet(Sheet(2, 2)))
    assert out.count("(ok) > ") == 3
    assert render_sheet(expected) in out
    assert out.rstrip().endswith("(ok) >")


def test_errors_are_reported_in_prompt(monkeypatch, capsys):
    _, out = run(monkeypatch, capsys, ["3", "3"], "A1\nA1=zz\nq\n")
    assert "(Missing '=' in the input) > " in out
    assert "(zz: Invalid RHS.) > " in out


def test_quit_is_case_insensitive(monkeypatch, capsys):
    _, out = run(monkeypatch, capsys, ["2", "2"], "Q\nA1=3\n")
    assert out.count(") > ") == 1


def test_end_of_input_ends_session(monkeypatch, capsys):
    code, out = run(monkeypatch, capsys, ["2", "2"], "A1=3\n")
    assert code == 0
    assert out.count("(ok) > ") == 2


def test_disable_and_enable_output(monkeypatch, capsys):
    grid = render_sheet(Sheet(1, 1))
    _, out = run(monkeypatch, capsys, ["1", "1"], "disable_output\nA1=4\nq\n")
    assert out.count(grid) == 1
    changed = Sheet(1, 1)
    parse_input("A1=4", changed)
    assert render_sheet(changed) not in out

    _, out = run(monkeypatch, capsys, ["1", "1"], "disable_output\nenable_output\nq\n")
    assert out.count(grid) == 2


def test_scroll_keys(monkeypatch, capsys):
    _, out = run(monkeypatch, capsys, ["30", "30"], "d\ns\nq\n")
    expected = Sheet(30, 30)
    expected.scroll_right()
    expected.scroll_down()
    assert out.endswith(render_sheet(expected) + out[out.rindex("["):])
    assert render_sheet(expected) in out


def test_scroll_to(monkeypatch, capsys):
    _, out = run(monkeypatch, capsys, ["20", "20"], "scroll_to B2\nq\n")
    expected = Sheet(20, 20)
    expected.scroll_to("B2")
    assert render_sheet(expected) in out
    assert out.count("(ok) > ") == 2


def test_scroll_to_invalid_cell(monkeypatch, capsys):
    _, out = run(monkeypatch, capsys, ["5", "5"], "scroll_to F1\nq\n")
    assert (
        "(F1: Column number cannot be greater than the number of columns.) > " in out
    )