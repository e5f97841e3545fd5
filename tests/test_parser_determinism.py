from dice_expressions.parser import DiceParser


def test_parse_is_deterministic():
    text = "2d6 + (d20 - 3) * 2"
    a = DiceParser().parse(text)
    b = DiceParser().parse(text)

    assert a.tokens == b.tokens
    assert a.root == b.root
    assert a.dice_count == b.dice_count
    assert a.normalized_expression == b.normalized_expression


def test_rerolling_keeps_shape_but_not_identity():
    expr = DiceParser().parse("3d100 + d20 * 2")
    first = expr.roll()
    results = [expr.roll() for _ in range(50)]

    for res in results:
        assert res is not first
        assert [d.size for d in res.dice_rolled] == [100, 100, 100, 20]

    # 50 rerolls of four dice landing on identical faces would mean nothing was resampled.
    assert len({tuple(d.value for d in r.dice_rolled) for r in results}) > 1
