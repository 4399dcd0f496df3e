"""Domain-specific exceptions for POS Reports.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from PosReportError for easy catching.

An empty reporting window is not an error: report builders degrade to a
zero-valued payload with ``has_activity`` set to False.
"""

from __future__ import annotations


class PosReportError(Exception):
    """Base exception for all POS Reports errors.

    This is the base class for all domain-specific exceptions in the package.
    Users can catch this exception to handle any POS Reports error.
    """

    pass


class ConfigError(PosReportError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Unknown configuration keys are supplied
    - Configuration files cannot be loaded or parsed
    """

    pass


class InputValidationError(PosReportError):
    """Raised when report request parameters are rejected.

    This exception is raised before any snapshot is loaded when:
    - The report date is not in YYYY-MM-DD format
    - The employee filter is not a positive integer
    - The employee filter references an employee of another business

    Attributes:
        field: Name of the offending request parameter.
        status_code: HTTP status the transport layer should answer with.
    """

    status_code = 422

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class DataQualityError(PosReportError):
    """Raised when snapshot source data is structurally unusable.

    This exception is raised when:
    - Required columns are missing from loader frames
    - A row cannot be mapped onto a snapshot record
    """

    pass


class SnapshotLoadError(PosReportError):
    """Raised when the bulk read of a reporting snapshot fails.

    The original driver exception is always chained as ``__cause__``.
    """

    pass
