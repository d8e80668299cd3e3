from mcp_dice_notation.options import Options


def test_pos_keeps_furthest():
    o = Options("3 + x").pos(4).pos(2)
    assert o.lastpos == 4


def test_merge_unions_expectations_and_messages():
    a = Options("src").add("(").pos(1).message("first")
    b = Options("src").add("0-9").pos(3).message("first").message("second")

    merged = a.merge(b)
    assert merged.expected == {"(", "0-9"}
    assert merged.lastpos == 3
    assert merged.messages == ("first", "second")


def test_builder_does_not_mutate():
    base = Options("src")
    base.add("d").message("x").pos(2)
    assert base == Options("src")


def test_render_without_expectations():
    text = str(Options("3 5").pos(2).message("unexpected trailing character(s)"))
    assert text.splitlines() == ["3 5", "  ^", "unexpected trailing character(s)"]


def test_render_sorted_expectations():
    text = str(Options("x").add("d").add("(").add("0-9"))
    assert "Expected any of: [(, 0-9, d]" in text.splitlines()
