"""Custom exceptions for the QuickEdit pipeline."""


class QuickEditError(Exception):
    """Base exception for all QuickEdit errors."""


class InvalidParameterError(QuickEditError, ValueError):
    """Raised when a render parameter is outside its declared domain.

    Typical causes: an aspect ratio that resolves to zero, a negative or
    non-finite value, a malformed ratio or colour string.
    """


class UnsupportedInputError(QuickEditError):
    """Raised when an uploaded file cannot be used as a source image.

    Typical causes: not an image, corrupted file, disallowed format,
    oversized upload, zero-size image.
    """


class PreconditionViolationError(QuickEditError, AssertionError):
    """Raised when an internal invariant of the pipeline is broken.

    This signals a programming defect (e.g. a pixel buffer whose shape does
    not match the declared dimensions), never a user error.
    """


class ExportError(QuickEditError):
    """Raised when the final canvas cannot be encoded for export."""
