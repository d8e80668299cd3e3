import pytest

from mcp_dice_notation.filtermodifier import FilterModifier
from mcp_dice_notation.models import (
    Add,
    Const,
    Dice,
    IntDiv,
    Mod,
    Mul,
    Negate,
    Power,
    Sub,
)
from mcp_dice_notation.parser import Parser, parse


NONE = FilterModifier.none()


@pytest.mark.parametrize(
    ("text", "ast"),
    [
        ("d", Dice(None, None, NONE, 0)),
        ("d6", Dice(None, Const("6"), NONE, 0)),
        ("3d6", Dice(Const("3"), Const("6"), NONE, 1)),
        ("0d6", Dice(Const("0"), Const("6"), NONE, 1)),
        ("3.5d6", Dice(Const("3.5"), Const("6"), NONE, 3)),
        ("3d3.5", Dice(Const("3"), Const("3.5"), NONE, 1)),
        ("3d0", Dice(Const("3"), Const("0"), NONE, 1)),
        ("d%", Dice(None, Const("100"), NONE, 0)),
        ("4d6kh3", Dice(Const("4"), Const("6"), FilterModifier.keep_highest(Const("3")), 1)),
        ("4d6h", Dice(Const("4"), Const("6"), FilterModifier.keep_highest(Const("1")), 1)),
        ("4d6l", Dice(Const("4"), Const("6"), FilterModifier.drop_lowest(Const("1")), 1)),
        ("4d6dl2", Dice(Const("4"), Const("6"), FilterModifier.drop_lowest(Const("2")), 1)),
        ("4d6dh2", Dice(Const("4"), Const("6"), FilterModifier.drop_highest(Const("2")), 1)),
        ("5d%kl", Dice(Const("5"), Const("100"), FilterModifier.keep_lowest(Const("1")), 1)),
        ("3 + 5", Add(Const("3"), Const("5"))),
        ("1 - 2 - 3", Sub(Sub(Const("1"), Const("2")), Const("3"))),
        ("-3 * 2", Mul(Negate(Const("3")), Const("2"))),
        ("3 // 5", IntDiv(Const("3"), Const("5"))),
        ("7 mod 2", Mod(Const("7"), Const("2"))),
        ("7 % 2", Mod(Const("7"), Const("2"))),
        ("2 ** 3 ** 2", Power(Const("2"), Power(Const("3"), Const("2")))),
        ("2 ** -1", Power(Const("2"), Negate(Const("1")))),
        ("(1 + 2) * 3", Mul(Add(Const("1"), Const("2")), Const("3"))),
        (" 2d6 + 1 ", Add(Dice(Const("2"), Const("6"), NONE, 2), Const("1"))),
        ("2d6+d8", Add(Dice(Const("2"), Const("6"), NONE, 1), Dice(None, Const("8"), NONE, 4))),
        ("d20 mod 3", Mod(Dice(None, Const("20"), NONE, 0), Const("3"))),
        ("3 5", Const("35")),
        ("2 * * 3", Power(Const("2"), Const("3"))),
        ("3 / / 3", IntDiv(Const("3"), Const("3"))),
        ("4d6k h2", Dice(Const("4"), Const("6"), FilterModifier.keep_highest(Const("2")), 1)),
    ],
)
def test_parse_acceptance(text, ast):
    assert parse(text) == ast


@pytest.mark.parametrize(
    ("text", "ast"),
    [
        (
            "(3d5)d(5d3)",
            Dice(
                Dice(Const("3"), Const("5"), NONE, 2),
                Dice(Const("5"), Const("3"), NONE, 8),
                NONE,
                5,
            ),
        ),
        ("(2)d6", Dice(Const("2"), Const("6"), NONE, 3)),
        ("d(1 + 1)", Dice(None, Add(Const("1"), Const("1")), NONE, 0)),
        ("(1 + 2)", Add(Const("1"), Const("2"))),
        ("3d6", Dice(Const("3"), Const("6"), NONE, 1)),
    ],
)
def test_parse_advanced(text, ast):
    assert parse(text, advanced=True) == ast


def test_advanced_mode_setter():
    p = Parser("(2)d6")
    assert p.advanced is False
    assert p.advanced_mode() is p
    assert p.parse() == Dice(Const("2"), Const("6"), NONE, 3)


def test_dice_positions_are_distinct():
    ast = parse("d4 + 2d6 - (d8)")
    positions = [ast.left.left.pos, ast.left.right.pos, ast.right.pos]
    assert positions == [0, 6, 12]
