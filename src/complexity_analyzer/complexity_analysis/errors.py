"""Exception hierarchy for the complexity analysis engine.

Per-file problems never escape a batch: the orchestrator converts each of
these into the ErrorKind carried by a failed AnalysisResult.
"""

from typing import Optional

from .models import ErrorKind


class ComplexityAnalysisError(Exception):
    """Base exception for complexity analysis errors."""

    kind: ErrorKind = ErrorKind.SCAN_FAILURE

    def __init__(self, message: str, language: Optional[str] = None):
        super().__init__(message)
        self.language = language


class ScannerRegistrationError(ComplexityAnalysisError, TypeError):
    """Raised when a scanner does not implement the StructuralScanner interface."""


class UnsupportedLanguageError(ComplexityAnalysisError):
    """No language could be detected or no scanner is registered for it."""

    kind = ErrorKind.UNSUPPORTED


class FileTooLargeError(ComplexityAnalysisError):
    """File exceeds the configured size cap."""

    kind = ErrorKind.TOO_LARGE


class ScanError(ComplexityAnalysisError):
    """A scanner failed on pathological input."""

    kind = ErrorKind.SCAN_FAILURE
