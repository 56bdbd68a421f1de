import numpy as np
import pytest

from plasmatree.options import OptionError, OptionParser, parse_vector


def build_parser():
    parser = OptionParser("Options")
    parser.add_group("Main").add("pos-file,P", str, "positions", required=True).add(
        "mass,m", float, "mass of particles", default=1.0
    ).add("charges,q", int, "charges", multiple=True).add(
        "origin", parse_vector, "origin of system"
    ).add("quiet", help="less output")
    return parser


def test_parse_vector_reads_components():
    np.testing.assert_array_equal(parse_vector("(1,2.5,-3)"), [1.0, 2.5, -3.0])
    np.testing.assert_array_equal(parse_vector("(7)"), [7.0])


@pytest.mark.parametrize("text", ["1,2)", "(1;2)", "(1,2", "()", "(1,,2)", "(1,2)x", ""])
def test_parse_vector_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_vector(text)


def test_short_and_long_forms():
    parser = build_parser()
    parser.parse(["-P", "a.txt"])
    assert parser.get("pos-file") == "a.txt"
    parser.parse(["--pos-file=b.txt"])
    assert parser.get("pos-file") == "b.txt"


def test_attached_short_value():
    parser = build_parser()
    parser.parse(["-P", "x", "-m2.5"])
    assert parser.get("mass") == 2.5


def test_defaults_are_present():
    parser = build_parser()
    parser.parse(["-P", "x"])
    assert parser.get("mass") == 1.0
    assert "mass" in parser
    assert "origin" not in parser
    assert "quiet" not in parser
    with pytest.raises(KeyError):
        parser.get("origin")


def test_multiple_values_and_negative_numbers():
    parser = build_parser()
    parser.parse(["-P", "x", "--charges", "1", "-1", "2", "--quiet"])
    assert parser.get("charges") == [1, -1, 2]
    assert "quiet" in parser


def test_vector_option():
    parser = build_parser()
    parser.parse(["-P", "x", "--origin", "(0,1,2)"])
    np.testing.assert_array_equal(parser.get("origin"), [0.0, 1.0, 2.0])


def test_missing_required_option():
    with pytest.raises(OptionError, match="Required option 'pos-file' not supplied"):
        build_parser().parse(["-m", "2"])


@pytest.mark.parametrize(
    "args",
    [
        ["-P", "x", "-m", "heavy"],
        ["-P", "x", "--nonsense"],
        ["-P", "x", "-P", "y"],
        ["-P", "x", "stray"],
        ["-P", "x", "--quiet=1"],
        ["-P"],
        ["-P", "x", "--origin", "(1,2"],
    ],
)
def test_invalid_command_lines(args):
    with pytest.raises(OptionError):
        build_parser().parse(args)


def test_help_prints_and_exits(capsys):
    parser = build_parser()
    with pytest.raises(SystemExit) as excinfo:
        parser.parse(["--help"])
    assert excinfo.value.code == 0
    out = capsys.readouterr().out
    assert "Main:" in out
    assert "--pos-file" in out
    assert "mass of particles" in out


def test_config_file_values_yield_to_command_line(tmp_path):
    config = tmp_path / "run.cfg"
    config.write_text("# settings\npos-file = from_config\nmass = 3\ncharges = 1\ncharges = -1\n")
    parser = build_parser()
    parser.use_config_file()
    parser.parse(["--config-file", str(config), "-m", "2"])
    assert parser.get("pos-file") == "from_config"
    assert parser.get("mass") == 2.0
    assert parser.get("charges") == [1, -1]


def test_config_file_unknown_key(tmp_path):
    config = tmp_path / "run.cfg"
    config.write_text("colour = blue\n")
    parser = build_parser()
    parser.use_config_file()
    with pytest.raises(OptionError):
        parser.parse(["-P", "x", "--config-file", str(config)])


def test_config_option_absent_unless_enabled(tmp_path):
    with pytest.raises(OptionError):
        build_parser().parse(["-P", "x", "--config-file", str(tmp_path / "a.cfg")])


def test_duplicate_definition_rejected():
    parser = build_parser()
    with pytest.raises(ValueError):
        parser.add_group("Again").add("mass", float)