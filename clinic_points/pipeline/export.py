"""Record export as JSON or as a JS assignment."""

from __future__ import annotations

import json
from typing import IO, Iterable

from clinic_points.common.constants import JS_ENVELOPE_PREFIX, OUTPUT_ENVELOPES
from clinic_points.common.errors import ConfigError, OutputError, SerializationError
from clinic_points.common.models import ClinicRecord


def encode_records(records: Iterable[ClinicRecord]) -> str:
    payload = [record.to_dict() for record in records]
    try:
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode records: {exc}") from exc
    return text + "\n"


def render_envelope(encoded: str, envelope: str) -> str:
    if envelope == "json":
        return encoded
    if envelope == "js":
        return f"{JS_ENVELOPE_PREFIX}{encoded}"
    raise ConfigError(f"Unknown output format: {envelope!r} (expected one of {', '.join(OUTPUT_ENVELOPES)})")


def write_records(records: Iterable[ClinicRecord], stream: IO[str], envelope: str = "json") -> int:
    """Encode ``records`` in ``envelope`` and write them to ``stream``.

    Returns the number of characters written.
    """
    text = render_envelope(encode_records(records), envelope)
    try:
        return stream.write(text)
    except OSError as exc:
        raise OutputError(f"Cannot write output: {exc}") from exc


def load_records(text: str) -> list[ClinicRecord]:
    """Inverse of ``encode_records`` for either envelope."""
    if text.startswith(JS_ENVELOPE_PREFIX):
        text = text[len(JS_ENVELOPE_PREFIX):]
    return [ClinicRecord.from_dict(item) for item in json.loads(text)]
