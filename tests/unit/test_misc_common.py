import json
import logging
import time
from pathlib import Path

from clinic_points.common.ids import generate_run_id
from clinic_points.common.logging import JsonLineFormatter, build_logger, log_event
from clinic_points.common.models import ClinicRecord
from clinic_points.common.time_utils import elapsed_ms, utc_timestamp_iso


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_utc_timestamp_iso_has_offset():
    assert utc_timestamp_iso().endswith("+00:00")


def test_elapsed_ms_is_non_negative():
    assert elapsed_ms(time.monotonic()) >= 0


def test_record_to_dict_omits_address_until_geocoded():
    record = ClinicRecord(name="A", raw_address="Addr", phone="1")
    assert record.to_dict() == {"name": "A", "raw_address": "Addr", "phone": "1", "points": None}
    assert record.is_geocoded is False

    record.coordinates = (55.75, 37.6)
    record.normalized_address = "Normalized"
    assert record.to_dict()["address"] == "Normalized"
    assert record.to_dict()["points"] == [55.75, 37.6]
    assert record.is_geocoded is True


def test_json_line_formatter_emits_stable_fields():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "could not geocode", None, None)
    record.event = "GEOCODE_FAIL"
    record.record = "ClinicA"

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["event"] == "GEOCODE_FAIL"
    assert payload["record"] == "ClinicA"
    assert payload["error_code"] is None
    assert payload["message"] == "could not geocode"


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("run-log-test", log_dir=tmp_path, level="WARN")
    log_event(logger, "dropped", level=logging.WARNING, event="PARSE_TAIL_DROPPED")
    log_event(logger, "ignored at WARN level", event="RUN_START")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run-log-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event"] == "PARSE_TAIL_DROPPED"
