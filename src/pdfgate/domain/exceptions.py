"""Domain exceptions for admission, browser lifecycle, rendering and lookups."""

from __future__ import annotations

from collections.abc import Sequence


class PdfGateError(Exception):
    """Base class for all pdfgate errors."""


class ResourceUnavailableError(PdfGateError):
    """Raised when the shared browser cannot be created or the pool is shut down."""


class RenderFailedError(PdfGateError):
    """Raised when a render against a live browser fails.

    ``handle_lost`` is set when the failure shows the browser process itself
    went away, so the caller should retire the handle.
    """

    def __init__(self, message: str, *, handle_lost: bool = False) -> None:
        super().__init__(message)
        self.handle_lost = handle_lost


class AdmissionTimeoutError(PdfGateError):
    """Raised when a render request waited longer than its admission deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"No render slot became available within {timeout:g}s")
        self.timeout = timeout


class ExecutableNotFoundError(PdfGateError):
    """Raised when no runnable Chromium/Chrome binary could be located."""

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        tried = ", ".join(self.candidates) or "<none>"
        super().__init__(
            "No runnable Chromium binary found. Set CHROME_PATH or "
            f"browser.executable_path. Tried: {tried}"
        )


class InvalidInputError(PdfGateError):
    """Raised when request input cannot be used (e.g. malformed CNPJ)."""


class NotFoundError(PdfGateError):
    """Raised when a data provider has no record for the identifier."""


class ProviderUnavailableError(PdfGateError):
    """Raised when a data provider cannot be reached or answers with an error."""
