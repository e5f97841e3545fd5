import pytest

from dice_expressions.errors import DiceConfigError, DiceCountError
from dice_expressions.models import ParserConfig
from dice_expressions.parser import DiceParser, parse_expression


def test_configures_maximum_dice_count():
    parser = DiceParser()
    parser.maximum_dice_count = 5
    assert parser.parse("5d20").dice_count == 5
    with pytest.raises(DiceCountError) as exc:
        parser.parse("6d20")
    assert exc.value.maximum == 5
    assert exc.value.requested == 6
    assert str(exc.value).startswith("[TOO_MANY_DICE]")

    parser.maximum_dice_count = None
    assert parser.parse("6d20").dice_count == 6


def test_limit_applies_to_the_running_total():
    parser = DiceParser(maximum_dice_count=5)
    assert parser.parse("2d6 + 2d8 + d4").dice_count == 5
    with pytest.raises(DiceCountError) as exc:
        parser.parse("2d6 + 2d8 + d4 + d4")
    assert exc.value.requested == 6


def test_limit_is_checked_per_primitive():
    with pytest.raises(DiceCountError) as exc:
        parse_expression("1000000d6", ParserConfig(maximum_dice_count=100))
    assert exc.value.requested == 1000000


def test_numbers_do_not_count_as_dice():
    parser = DiceParser(maximum_dice_count=1)
    assert parser.parse("d20 + 1000 * 3").dice_count == 1


@pytest.mark.parametrize("limit", [0, -3, 2.5, True, "5"])
def test_invalid_limits_are_rejected(limit):
    with pytest.raises(DiceConfigError):
        DiceParser(maximum_dice_count=limit)
    parser = DiceParser()
    with pytest.raises(DiceConfigError):
        parser.maximum_dice_count = limit
    assert parser.maximum_dice_count is None
