import io

import pytest

import score_position
from goterritory import scoring

WALLED_HALVES = """
. x o . .
. x o . .
. x o . .
. x o . .
"""


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.txt"
    path.write_text(WALLED_HALVES)
    return str(path)


def test_japanese(board_file, capsys):
    assert score_position.main(["-board", board_file, "-komi", "0.5"]) == 0
    out = capsys.readouterr().out
    assert "Territory:" in out
    assert out.strip().endswith("Black 4 White 8.5 W+4.5")


def test_chinese_default_komi(board_file, capsys):
    assert score_position.main(["-board", board_file, "-rules", "chinese"]) == 0
    out = capsys.readouterr().out
    assert "Area:" in out
    assert out.strip().endswith("Black 8 White 19.5 W+11.5")


def test_captures(board_file, capsys):
    assert score_position.main(["-board", board_file, "-komi", "0", "-black-captures", "6", "-white-captures", "1"]) == 0
    out = capsys.readouterr().out
    assert out.strip().endswith("Black 10 White 9.0 B+1.0")


def test_show_analysis(board_file, capsys):
    assert score_position.main(["-board", board_file, "-show-analysis", "-score-false-eyes"]) == 0
    out = capsys.readouterr().out
    assert "Region ids:" in out
    assert "EyeInfo(" in out


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("x . o"))
    assert score_position.main(["-board", "-", "-rules", "tt", "-komi", "0"]) == 0
    out = capsys.readouterr().out
    assert out.strip().endswith("Black 1 White 1.0 Draw")


def test_bad_diagram(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("x . q\n")
    assert score_position.main(["-board", str(path)]) == 1
    assert "Could not score board" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert score_position.main(["-board", str(tmp_path / "missing.txt")]) == 1
    assert "Could not read board" in capsys.readouterr().out


def test_unknown_rules(board_file):
    with pytest.raises(SystemExit):
        score_position.main(["-board", board_file, "-rules", "stones"])


@pytest.mark.parametrize("rules", ["japanese", "chinese"])
def test_analyzes_once(board_file, monkeypatch, capsys, rules):
    calls = []
    analyze_board = scoring.analyze_board
    def counting_analyze_board(board):
        calls.append(board)
        return analyze_board(board)
    monkeypatch.setattr(scoring, "analyze_board", counting_analyze_board)

    assert score_position.main(["-board", board_file, "-rules", rules, "-show-analysis"]) == 0
    assert len(calls) == 1
    assert "Region ids:" in capsys.readouterr().out
