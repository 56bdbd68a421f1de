import pytest

from plasmatree.flags import (
    ArgOption,
    BoolOption,
    FlagParser,
    MissingOptionError,
    Option,
)


def test_arg_option_reads_converted_value():
    length = ArgOption("--length", "-l", "Length of system", float)
    parser = FlagParser(["prog", "--length", "2.5"]).add(length)
    assert parser.parse() == 1
    assert length.value == 2.5


def test_short_name_matches():
    number = ArgOption("--number", "-n", "Number of each species", int)
    parser = FlagParser(["prog", "-n", "40"]).add(number)
    parser.parse()
    assert number.value == 40
    assert number.matches("--number") and number.matches("-n")
    assert not number.matches("--num")


def test_bool_option():
    periodic = BoolOption("--periodic", "-p", "Use periodic boundary conditions")
    open_ = BoolOption("--open", "-o", "Use open boundary conditions")
    parser = FlagParser(["prog", "-p"]).add(periodic).add(open_)
    assert periodic.value is False
    assert parser.parse() == 1
    assert periodic.value is True
    assert open_.value is False


def test_missing_optional_keeps_default():
    temp = ArgOption("--temperature", "-temp", "Temperature of plasma.", float, default=1.0)
    parser = FlagParser(["prog"]).add(temp)
    assert parser.parse() == 0
    assert temp.value == 1.0


def test_missing_compulsory_option_raises():
    theta = ArgOption("--theta", "-t", "Critical opening angle.", float, compulsory=True)
    parser = FlagParser(["prog", "--length", "3"]).add(theta)
    with pytest.raises(MissingOptionError, match="You must set this option") as excinfo:
        parser.parse()
    assert excinfo.value.option is theta


def test_missing_value_raises():
    length = ArgOption("--length", "-l", "Length", float)
    with pytest.raises(ValueError):
        FlagParser(["prog", "--length"]).add(length).parse()


def test_bad_value_raises():
    number = ArgOption("--number", "-n", "Number", int)
    with pytest.raises(ValueError):
        FlagParser(["prog", "-n", "many"]).add(number).parse()


def test_first_occurrence_wins():
    number = ArgOption("--number", "-n", "Number", int)
    FlagParser(["prog", "-n", "1", "--number", "2"]).add(number).parse()
    assert number.value == 1


def test_usage_and_len():
    parser = FlagParser(["prog"])
    parser.add(ArgOption("--length", "-l", "Length of system", float))
    parser.add(BoolOption("--help", "-h", "This help text."))
    assert len(parser) == 2
    assert parser.usage().splitlines() == [
        "--length,-l\tLength of system",
        "--help,-h\tThis help text.",
    ]


def test_consume_returns_last_index_used():
    length = ArgOption("--length", "-l", "Length", float)
    flag = BoolOption("--open", "-o", "Open")
    assert length.consume(["--length", "4"], 0) == 1
    assert flag.consume(["--open"], 0) == 0


def test_option_base_is_abstract():
    with pytest.raises(TypeError):
        Option("--x", "-x", "x")