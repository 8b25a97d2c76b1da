"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from clinic_points.common.constants import OUTPUT_ENVELOPES
from clinic_points.common.errors import ConfigError


def _assert_mapping(obj: object, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_geocoder_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "geocoder config")
    top_required = {"geocoder", "dispatch", "output"}
    _assert_required_keys(cfg, top_required, "geocoder config")
    _assert_no_unknown_keys(cfg, top_required, "geocoder config", allow_unknown)

    geocoder = cfg["geocoder"]
    _assert_mapping(geocoder, "geocoder")
    _assert_required_keys(geocoder, {"endpoint", "lang", "kind", "format"}, "geocoder")
    _assert_no_unknown_keys(
        geocoder,
        {"endpoint", "lang", "kind", "format", "api_key_env"},
        "geocoder",
        allow_unknown,
    )
    if geocoder["format"] != "json":
        raise ConfigError(f"geocoder.format must be json, got {geocoder['format']!r}")

    dispatch = cfg["dispatch"]
    _assert_mapping(dispatch, "dispatch")
    _assert_required_keys(dispatch, {"max_in_flight"}, "dispatch")
    _assert_no_unknown_keys(dispatch, {"max_in_flight"}, "dispatch", allow_unknown)
    max_in_flight = dispatch["max_in_flight"]
    if isinstance(max_in_flight, bool) or not isinstance(max_in_flight, int) or max_in_flight < 1:
        raise ConfigError("dispatch.max_in_flight must be a positive integer")

    output = cfg["output"]
    _assert_mapping(output, "output")
    _assert_required_keys(output, {"default_format"}, "output")
    _assert_no_unknown_keys(output, {"default_format"}, "output", allow_unknown)
    if output["default_format"] not in OUTPUT_ENVELOPES:
        raise ConfigError(f"output.default_format must be one of {', '.join(OUTPUT_ENVELOPES)}")

    return cfg
