"""CLI entrypoint: geocode a clinic listing and export it as JSON or JS."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from clinic_points.common.config_loader import load_config, resolve_api_key
from clinic_points.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, OUTPUT_ENVELOPES
from clinic_points.common.errors import PipelineError
from clinic_points.common.fs import open_output, read_lines
from clinic_points.common.ids import generate_run_id
from clinic_points.common.logging import build_logger, log_event
from clinic_points.geocode.dispatcher import DispatchSummary, geocode_all
from clinic_points.geocode.yandex import YandexGeocoder
from clinic_points.ingest.listing_parser import ListingParser
from clinic_points.pipeline.export import write_records


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--in", dest="input_path", required=True, help="path to input listing")
    parser.add_argument("--out", dest="output_path", default=None, help="path to output file, '-' for stdout")
    parser.add_argument("--format", dest="output_format", default=None, choices=list(OUTPUT_ENVELOPES))
    parser.add_argument("--debug", action="store_true", help="trace every geocoder request")
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def run_pipeline(
    args: argparse.Namespace,
    logger: logging.Logger,
    run_id: str,
    geocoder: YandexGeocoder | None = None,
) -> DispatchSummary:
    bundle = load_config(
        Path(args.config_dir),
        overlay_config_dir=Path(args.overlay_config_dir) if args.overlay_config_dir else None,
    )
    output_format = args.output_format or bundle.default_format

    parser = ListingParser()
    records = parser.parse(read_lines(Path(args.input_path)))
    log_event(logger, "parse end", run_id=run_id, stage="parse", event="PARSE_END", status="ok", rows_out=len(records))
    if parser.dropped_tail is not None:
        log_event(
            logger,
            "last block is not followed by a blank line and was dropped",
            level=logging.WARNING,
            run_id=run_id,
            stage="parse",
            record=parser.dropped_tail,
            event="PARSE_TAIL_DROPPED",
            status="warning",
        )

    owns_geocoder = geocoder is None
    if geocoder is None:
        geocoder = YandexGeocoder.from_config(
            bundle.geocoder,
            api_key=resolve_api_key(bundle.geocoder),
            pool_maxsize=bundle.max_in_flight,
            logger=logger,
            run_id=run_id,
        )
    try:
        summary = geocode_all(
            records,
            geocoder.geocode,
            max_in_flight=bundle.max_in_flight,
            logger=logger,
            run_id=run_id,
        )
    finally:
        if owns_geocoder:
            geocoder.close()

    with open_output(args.output_path) as out:
        write_records(records, out, output_format)
    log_event(
        logger,
        f"wrote {len(records)} records as {output_format}",
        run_id=run_id,
        stage="export",
        event="EXPORT_END",
        status="ok",
        rows_out=len(records),
    )
    return summary


def run_command(args: argparse.Namespace, geocoder: YandexGeocoder | None = None) -> int:
    run_id = args.run_id or generate_run_id()
    level = "DEBUG" if args.debug else args.log_level
    logger = build_logger(run_id, log_dir=Path(args.log_dir) if args.log_dir else None, level=level)
    log_event(logger, "run start", run_id=run_id, event="RUN_START", status="ok")

    try:
        summary = run_pipeline(args, logger, run_id, geocoder=geocoder)
    except PipelineError as exc:
        log_event(
            logger,
            str(exc),
            level=logging.ERROR,
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL

    if summary.failures and args.strict:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
