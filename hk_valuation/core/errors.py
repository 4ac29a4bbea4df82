"""Domain exceptions for the aggregation workflow."""


class AggregatorError(Exception):
    """Base class for errors raised by this service."""


class ValidationError(AggregatorError, ValueError):
    """Raised when the inbound request is missing required fields."""


class ConfigurationError(AggregatorError, RuntimeError):
    """Raised when a required credential or setting is missing."""


class ExtractionError(AggregatorError):
    """Raised inside an extractor when one source cannot be read.

    Never escapes ``extract``; it is turned into an ``error`` result there.
    """


class PersistenceError(AggregatorError):
    """Raised by a valuation log when a row cannot be written."""
