import pytest

from clinic_points.cli import parse_args


def test_parse_args_defaults():
    args = parse_args(["--in", "clinics.txt"])
    assert args.input_path == "clinics.txt"
    assert args.output_path is None
    assert args.output_format is None
    assert args.debug is False
    assert args.config_dir == "./config"
    assert args.overlay_config_dir is None
    assert args.strict is False


def test_parse_args_accepts_output_options():
    args = parse_args(["--in", "in.txt", "--out", "-", "--format", "js", "--debug"])
    assert args.output_path == "-"
    assert args.output_format == "js"
    assert args.debug is True


def test_parse_args_rejects_unknown_format():
    with pytest.raises(SystemExit):
        parse_args(["--in", "in.txt", "--format", "xml"])


def test_parse_args_requires_input():
    with pytest.raises(SystemExit):
        parse_args([])
