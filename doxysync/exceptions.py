"""Exceptions raised by doxysync.

Only conditions that must abort a run are modelled as exceptions. Recoverable
problems (dangling references, missing images, unknown markup) are logged as
warnings by the component that meets them.
"""

from __future__ import annotations


class DoxysyncError(Exception):
    """Base exception for all doxysync errors."""


class SchemaViolationError(DoxysyncError):
    """Raised when an XML document does not match the expected Doxygen schema.

    Parameters
    ----------
    message : str
        Description of the violated expectation.
    document : str, optional
        Path or name of the offending XML document.
    identifier : str, optional
        Doxygen identifier of the entity being processed.
    """

    def __init__(
        self,
        message: str,
        *,
        document: str | None = None,
        identifier: str | None = None,
    ) -> None:
        self.document = document
        self.identifier = identifier
        details = [
            f"{label}={value}"
            for label, value in (("document", document), ("id", identifier))
            if value
        ]
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


__all__ = ["DoxysyncError", "SchemaViolationError"]
