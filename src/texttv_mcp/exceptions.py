"""Exceptions for Text TV operations."""


class TextTVError(Exception):
    """Base exception for Text TV errors."""


class InvalidArgumentError(TextTVError, ValueError):
    """Exception raised for out-of-range or malformed arguments.

    Raised before any cache or network access takes place.
    """


class FetchFailureError(TextTVError):
    """Exception raised when a page cannot be retrieved from upstream."""
