"""Bounded concurrent geocoding of a record collection.

Every record gets exactly one attempt on a worker thread. A bounded semaphore
caps the number of geocode calls in flight; failures are logged per record and
never abort the batch. Records are updated in place, so the caller's list keeps
its order whatever order the attempts complete in.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Sequence

from clinic_points.common.constants import DEFAULT_MAX_IN_FLIGHT
from clinic_points.common.logging import log_event
from clinic_points.common.models import ClinicRecord
from clinic_points.common.time_utils import elapsed_ms

GeocodeFn = Callable[[ClinicRecord], None]


@dataclass(frozen=True)
class GeocodeFailure:
    index: int
    name: str
    raw_address: str
    error_code: str
    message: str


@dataclass
class DispatchSummary:
    attempted: int = 0
    succeeded: int = 0
    failures: list[GeocodeFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


def _error_code(exc: BaseException) -> str:
    return getattr(exc, "error_code", "UNEXPECTED_ERROR")


class BoundedDispatcher:
    def __init__(
        self,
        geocode: GeocodeFn,
        *,
        max_in_flight: int = DEFAULT_MAX_IN_FLIGHT,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
    ) -> None:
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")
        self.geocode = geocode
        self.max_in_flight = max_in_flight
        self.logger = logger or logging.getLogger(__name__)
        self.run_id = run_id
        self.slots = threading.BoundedSemaphore(max_in_flight)
        self._lock = threading.Lock()

    def _attempt(self, index: int, record: ClinicRecord, summary: DispatchSummary) -> None:
        with self.slots:
            try:
                self.geocode(record)
            except Exception as exc:
                failure = GeocodeFailure(
                    index=index,
                    name=record.name,
                    raw_address=record.raw_address,
                    error_code=_error_code(exc),
                    message=str(exc),
                )
                with self._lock:
                    summary.failures.append(failure)
                log_event(
                    self.logger,
                    f"could not geocode clinic {record.name!r}: {exc}",
                    level=logging.WARNING,
                    run_id=self.run_id,
                    stage="geocode",
                    record=record.name,
                    raw_address=record.raw_address,
                    event="GEOCODE_FAIL",
                    status="error",
                    error_code=failure.error_code,
                )
                return
        with self._lock:
            summary.succeeded += 1

    def run(self, records: Sequence[ClinicRecord]) -> DispatchSummary:
        summary = DispatchSummary(attempted=len(records))
        started_at = time.monotonic()
        log_event(
            self.logger,
            "dispatch start",
            run_id=self.run_id,
            stage="geocode",
            event="DISPATCH_START",
            status="ok",
            rows_in=len(records),
        )

        if records:
            with ThreadPoolExecutor(
                max_workers=min(self.max_in_flight, len(records)),
                thread_name_prefix="geocode",
            ) as executor:
                futures = [
                    executor.submit(self._attempt, index, record, summary)
                    for index, record in enumerate(records)
                ]
                # No timeout: a hung lookup holds its slot until it returns.
                wait(futures)
                for future in futures:
                    future.result()

        summary.failures.sort(key=lambda failure: failure.index)
        log_event(
            self.logger,
            f"dispatch end: {summary.succeeded}/{summary.attempted} geocoded",
            run_id=self.run_id,
            stage="geocode",
            event="DISPATCH_END",
            status="ok" if not summary.failures else "partial",
            duration_ms=elapsed_ms(started_at),
            rows_in=summary.attempted,
            rows_out=summary.succeeded,
        )
        return summary


def geocode_all(
    records: Sequence[ClinicRecord],
    geocode: GeocodeFn,
    *,
    max_in_flight: int = DEFAULT_MAX_IN_FLIGHT,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> DispatchSummary:
    dispatcher = BoundedDispatcher(geocode, max_in_flight=max_in_flight, logger=logger, run_id=run_id)
    return dispatcher.run(records)
