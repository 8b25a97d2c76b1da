"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ClinicRecord:
    name: str = ""
    raw_address: str = ""
    phone: str = ""
    normalized_address: str | None = None
    # (longitude, latitude): the geocoder's two position tokens, stored reversed.
    coordinates: tuple[float, float] | None = None

    @property
    def is_geocoded(self) -> bool:
        return self.coordinates is not None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "raw_address": self.raw_address,
            "phone": self.phone,
        }
        if self.normalized_address:
            out["address"] = self.normalized_address
        out["points"] = list(self.coordinates) if self.is_geocoded else None
        return out

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ClinicRecord":
        points = payload.get("points")
        return cls(
            name=payload.get("name", ""),
            raw_address=payload.get("raw_address", ""),
            phone=payload.get("phone", ""),
            normalized_address=payload.get("address"),
            coordinates=(float(points[0]), float(points[1])) if points else None,
        )
