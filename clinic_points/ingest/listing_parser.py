"""Line-mode parser for clinic directory listings.

A listing is a sequence of blocks::

    1.
    Clinic name
    Street address
    Phone

Section headers (``1.``, ``12.``) reset the field order, blank lines close the
current block. A block that is still open at end of input is dropped; callers
can inspect ``ListingParser.dropped_tail`` to report it.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable

from clinic_points.common.models import ClinicRecord

SECTION_HEADER_RE = re.compile(r"^\d{1,2}\.")


class Role(Enum):
    NAME = "name"
    ADDRESS = "address"
    PHONE = "phone"


NEXT_ROLE = {
    Role.NAME: Role.ADDRESS,
    Role.ADDRESS: Role.PHONE,
    Role.PHONE: Role.PHONE,
}


def is_section_header(line: str) -> bool:
    return bool(SECTION_HEADER_RE.match(line))


class ListingParser:
    def __init__(self) -> None:
        self.records: list[ClinicRecord] = []
        self.dropped_tail: str | None = None
        self._role = Role.NAME
        self._current: ClinicRecord | None = None
        self._phone_seen = False

    def _flush(self) -> None:
        if self._current is not None:
            self.records.append(self._current)
        self._current = None
        self._role = Role.NAME
        self._phone_seen = False

    def _consume(self, line: str) -> None:
        if self._current is None:
            self._current = ClinicRecord()

        if self._role is Role.NAME:
            self._current.name = line
        elif self._role is Role.ADDRESS:
            self._current.raw_address = line
        elif not self._phone_seen:
            self._current.phone = line
            self._phone_seen = True
        self._role = NEXT_ROLE[self._role]

    def feed(self, raw_line: str) -> None:
        line = raw_line.strip()
        if not line:
            self._flush()
        elif is_section_header(line):
            self._role = Role.NAME
            self._phone_seen = False
        else:
            self._consume(line)

    def parse(self, lines: Iterable[str]) -> list[ClinicRecord]:
        for raw_line in lines:
            self.feed(raw_line)
        # No flush at end of input: an unterminated last block is not emitted.
        if self._current is not None:
            self.dropped_tail = self._current.name
        return self.records


def parse_listing(lines: Iterable[str]) -> list[ClinicRecord]:
    return ListingParser().parse(lines)
