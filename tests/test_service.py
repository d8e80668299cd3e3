from random import Random

import pytest

from mcp_dice_notation.errors import EvalError, ParseError
from mcp_dice_notation.service import roll_from_text


def test_roll_from_text_report():
    result = roll_from_text("2d6 + d8", rng=Random(3))

    assert result["type"] == "rolls"
    assert result["input"] == "2d6 + d8"
    assert result["advanced"] is False
    assert result["rng"]["source"] == "Random"
    assert [r["dpos"] for r in result["rolls"]] == [1, 6]
    assert [r["sides"] for r in result["rolls"]] == [6, 8]
    assert all(r["type"] == "roll" for r in result["rolls"])
    assert result["total"] == sum(r["total"] for r in result["rolls"])
    assert result["explanation"].startswith("2d6 + d8 = [")
    assert result["explanation"].endswith(f" = {result['total']}")
    assert len(result["request_id"]) == 32
    assert result["timestamp"].endswith("Z")


def test_roll_from_text_advanced():
    result = roll_from_text("(2d8 + 5) * 12 // 3 + 2d%kh", advanced=True, rng=Random(5))

    assert len(result["rolls"]) == 2
    assert result["rolls"][0]["sides"] == 8
    assert len(result["rolls"][0]["vals"]) == 2
    assert result["rolls"][1]["sides"] == 100
    assert len(result["rolls"][1]["vals"]) == 1


def test_roll_from_text_syntax_error():
    with pytest.raises(ParseError):
        roll_from_text("2d6 +")


def test_roll_from_text_eval_error():
    with pytest.raises(EvalError):
        roll_from_text("2d0")
