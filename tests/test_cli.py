import json

import pytest

from mcp_dice_notation.cli import EXIT_EVAL, EXIT_SYNTAX, main
from mcp_dice_notation.dice import DIRECTIONS


def test_roll_table(capsys):
    assert main(["2d6", "+", "1"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == " d6"
    assert lines[1].startswith("2d6 + 1 = ")
    assert len(lines) == 4


def test_roll_short(capsys):
    assert main(["-s", "3", "+", "4"]) == 0
    assert capsys.readouterr().out.strip() == "3 + 4 = 3 + 4 = 7"


def test_roll_json(capsys):
    assert main(["--json", "d6"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["rolls"][0]["sides"] == 6
    assert 1 <= report["total"] <= 6


def test_roll_advanced(capsys):
    assert main(["-a", "-s", "(2)d(1)"]) == 0
    assert capsys.readouterr().out.strip() == "(2)d(1) = [1, 1] = 2"


def test_syntax_error(capsys):
    assert main(["3", "+"]) == EXIT_SYNTAX
    err = capsys.readouterr().err
    assert "^" in err
    assert "Expected any of" in err


def test_eval_error(capsys):
    assert main(["3d0"]) == EXIT_EVAL
    assert "[INVALID_DIE]" in capsys.readouterr().err


def test_stats(capsys):
    assert main(["stats"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 6


def test_dir(capsys):
    assert main(["dir"]) == 0
    assert capsys.readouterr().out.strip() in DIRECTIONS


@pytest.mark.parametrize("argv", [[], ["-h"]])
def test_usage(capsys, argv):
    if argv:
        with pytest.raises(SystemExit) as exc:
            main(argv)
        assert exc.value.code == 0
    else:
        assert main(argv) == 0
    assert "roll" in capsys.readouterr().out
