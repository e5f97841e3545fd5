import pytest

from dice_expressions import cli
from dice_expressions.errors import DiceConfigError


def test_joins_arguments_and_prints_value(capsys):
    assert cli.main(["2", "*", "(3", "+", "4)"]) == 0
    assert capsys.readouterr().out == "14\n"


def test_negative_leading_number_is_an_expression(capsys):
    assert cli.main(["-4", "+", "10"]) == 0
    assert capsys.readouterr().out == "6\n"


def test_verbose_prints_dice(capsys):
    assert cli.main(["--verbose", "3d1", "/", "2"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["1.5", "d1=1, d1=1, d1=1 => 1.5"]


def test_dice_roll_is_in_range(capsys):
    assert cli.main(["d6"]) == 0
    assert int(capsys.readouterr().out) in range(1, 7)


@pytest.mark.parametrize(
    ("argv", "prefix"),
    [
        ([], "error: [EMPTY_EXPRESSION]"),
        (["1++1"], "error: [CONSECUTIVE_OPERATORS]"),
        (["--max-dice", "3", "4d6"], "error: [TOO_MANY_DICE]"),
        (["--max-dice", "0", "d6"], "error: [INVALID_CONFIG]"),
    ],
)
def test_errors_go_to_stderr(capsys, argv, prefix):
    assert cli.main(argv) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith(prefix)


def test_max_dice_from_environment(capsys, monkeypatch):
    monkeypatch.setenv(cli.MAX_DICE_ENV, "2")
    assert cli.main(["3d6"]) == 1
    assert "[TOO_MANY_DICE]" in capsys.readouterr().err

    assert cli.main(["--max-dice", "3", "3d6"]) == 0


def test_bad_environment_limit(capsys, monkeypatch):
    monkeypatch.setenv(cli.MAX_DICE_ENV, "lots")
    assert cli.main(["d6"]) == 1
    assert capsys.readouterr().err.startswith("error: [INVALID_CONFIG]")
    with pytest.raises(DiceConfigError):
        cli._resolve_max_dice(cli.parse_args(["d6"]))


def test_oversized_literal_is_reported_not_raised(capsys):
    assert cli.main(["1" * 5000, "+", "d6"]) == 1
    assert capsys.readouterr().err.startswith("error: [INVALID_NUMBER]")


def test_overflow_is_reported_not_raised(capsys):
    assert cli.main(["1" + "0" * 400, "/", "3"]) == 1
    assert capsys.readouterr().err.startswith("error: [OVERFLOW]")
