"""Application constants."""

USER_AGENT = "clinic-points/0.3 (+clinic directory geocoder)"
DEFAULT_GEOCODER_ENDPOINT = "https://geocode-maps.yandex.ru/1.x/"
DEFAULT_GEOCODER_LANG = "ru_RU"
DEFAULT_GEOCODER_KIND = "house"
GEOCODER_RESPONSE_FORMAT = "json"
DEFAULT_MAX_IN_FLIGHT = 10
OUTPUT_ENVELOPES = ("json", "js")
JS_ENVELOPE_PREFIX = "data = "
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "level",
    "run_id",
    "stage",
    "record",
    "raw_address",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
