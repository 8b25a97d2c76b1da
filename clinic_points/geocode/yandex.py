"""Yandex Geocoder client: one blocking lookup per clinic record."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from clinic_points.common.constants import (
    DEFAULT_GEOCODER_ENDPOINT,
    DEFAULT_GEOCODER_KIND,
    DEFAULT_GEOCODER_LANG,
    GEOCODER_RESPONSE_FORMAT,
)
from clinic_points.common.errors import (
    CoordinateParseError,
    EmptyAddressError,
    GeocodeDecodeError,
    NoResultError,
)
from clinic_points.common.http import HttpClient
from clinic_points.common.logging import log_event
from clinic_points.common.models import ClinicRecord


@dataclass(frozen=True)
class GeocodeResult:
    address: str
    # Position tokens in the service's wire order.
    first: float
    second: float


def _first_geo_object(payload: Any) -> dict:
    try:
        members = payload["response"]["GeoObjectCollection"]["featureMember"]
    except (KeyError, TypeError) as exc:
        raise GeocodeDecodeError("Response lacks response.GeoObjectCollection.featureMember") from exc
    if not isinstance(members, list):
        raise GeocodeDecodeError("featureMember is not a list")
    if not members:
        raise NoResultError("Geocoder returned no results")
    try:
        return members[0]["GeoObject"]
    except (KeyError, TypeError) as exc:
        raise GeocodeDecodeError("First featureMember has no GeoObject") from exc


def parse_position(pos: Any) -> tuple[float, float]:
    """Split a ``"<a> <b>"`` position string into two floats, in input order."""
    if not isinstance(pos, str):
        raise CoordinateParseError(f"Bad points in response: {pos!r}")
    tokens = pos.split()
    if len(tokens) != 2:
        raise CoordinateParseError(f"Bad points in response: {pos!r}")
    try:
        first, second = float(tokens[0]), float(tokens[1])
    except ValueError as exc:
        raise CoordinateParseError(f"Bad points in response: {pos!r}") from exc
    if not (math.isfinite(first) and math.isfinite(second)):
        raise CoordinateParseError(f"Non-finite points in response: {pos!r}")
    return first, second


def parse_geocode_response(payload: Any) -> GeocodeResult:
    geo_object = _first_geo_object(payload)
    try:
        pos = geo_object["Point"]["pos"]
        text = geo_object["metaDataProperty"]["GeocoderMetaData"]["text"]
    except (KeyError, TypeError) as exc:
        raise GeocodeDecodeError("GeoObject lacks Point.pos or GeocoderMetaData.text") from exc
    if not isinstance(text, str):
        raise GeocodeDecodeError(f"GeocoderMetaData.text is not a string: {text!r}")
    first, second = parse_position(pos)
    return GeocodeResult(address=text, first=first, second=second)


class YandexGeocoder:
    def __init__(
        self,
        *,
        http_client: HttpClient | None = None,
        endpoint: str = DEFAULT_GEOCODER_ENDPOINT,
        lang: str = DEFAULT_GEOCODER_LANG,
        kind: str = DEFAULT_GEOCODER_KIND,
        api_key: str | None = None,
        pool_maxsize: int | None = None,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
    ) -> None:
        self.owns_client = http_client is None
        self.http_client = http_client or HttpClient(pool_maxsize=pool_maxsize)
        self.endpoint = endpoint
        self.lang = lang
        self.kind = kind
        self.api_key = api_key
        self.logger = logger
        self.run_id = run_id

    @classmethod
    def from_config(cls, geocoder_cfg: dict, **kwargs: Any) -> "YandexGeocoder":
        return cls(
            endpoint=geocoder_cfg["endpoint"],
            lang=geocoder_cfg["lang"],
            kind=geocoder_cfg["kind"],
            **kwargs,
        )

    def close(self) -> None:
        if self.owns_client:
            self.http_client.close()

    def build_params(self, address: str) -> dict[str, str]:
        params = {
            "geocode": address,
            "lang": self.lang,
            "kind": self.kind,
            "format": GEOCODER_RESPONSE_FORMAT,
        }
        if self.api_key:
            params["apikey"] = self.api_key
        return params

    def lookup(self, address: str) -> GeocodeResult:
        if self.logger is not None and self.logger.isEnabledFor(logging.DEBUG):
            log_event(
                self.logger,
                f"geocoding {address}",
                level=logging.DEBUG,
                run_id=self.run_id,
                stage="geocode",
                raw_address=address,
                event="GEOCODE_REQUEST",
            )
        payload = self.http_client.get_json(self.endpoint, params=self.build_params(address))
        return parse_geocode_response(payload)

    def geocode(self, record: ClinicRecord) -> None:
        """Resolve ``record.raw_address`` and store the result on the record.

        The record is only modified when the whole response parsed cleanly.
        Coordinates are stored as ``(second, first)``, the reverse of the
        service's ``pos`` order.
        """
        if not record.raw_address:
            raise EmptyAddressError(f"Clinic {record.name!r} has an empty address")
        result = self.lookup(record.raw_address)
        record.coordinates = (result.second, result.first)
        record.normalized_address = result.address
