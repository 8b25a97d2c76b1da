"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InputError(PipelineError):
    """Raised when the listing cannot be opened or read."""

    error_code = "INPUT_ERROR"


class OutputError(PipelineError):
    """Raised when the output destination cannot be created or written."""

    error_code = "OUTPUT_ERROR"


class SerializationError(PipelineError):
    """Raised when the record collection cannot be encoded."""

    error_code = "SERIALIZATION_ERROR"


class GeocodeError(PipelineError):
    """Raised for a single failed geocode attempt. Never fatal to the run."""

    error_code = "GEOCODE_ERROR"


class EmptyAddressError(GeocodeError):
    error_code = "EMPTY_ADDRESS"


class GeocodeDecodeError(GeocodeError):
    error_code = "DECODE_ERROR"


class NoResultError(GeocodeError):
    error_code = "NO_RESULT"


class CoordinateParseError(GeocodeError):
    error_code = "COORDINATE_ERROR"
