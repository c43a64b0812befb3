"""
Exceptions raised by the ADCortex client.
"""


class AdcortexError(Exception):
    """Base class for all ADCortex client errors."""


class ConfigurationError(AdcortexError):
    """The client cannot be built from the given configuration."""


class ValidationError(AdcortexError, ValueError):
    """A record did not match its expected shape."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class TransportError(AdcortexError):
    """The ad request failed on the network or with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TransportTimeoutError(TransportError):
    """The ad request did not complete within the configured timeout."""
