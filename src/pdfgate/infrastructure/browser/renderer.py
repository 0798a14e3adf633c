"""HTML → PDF rendering on a shared browser handle.

One page per render; the page is always closed, the browser never is.
"""

from __future__ import annotations

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from pdfgate.domain.exceptions import RenderFailedError
from pdfgate.domain.ports.browser import BrowserHandlePort

log = structlog.get_logger(__name__)

_PDF_MAGIC = b"%PDF"

PDF_MARGINS: dict[str, str] = {
    "top": "18mm",
    "right": "12mm",
    "bottom": "18mm",
    "left": "12mm",
}

# Messages Playwright uses when the browser process (not just a page) is gone
_HANDLE_LOST_MARKERS: tuple[str, ...] = (
    "browser has been closed",
    "browser has disconnected",
    "target page, context or browser has been closed",
    "target closed",
    "connection closed",
)


def is_handle_lost(exc: BaseException) -> bool:
    """Whether *exc* reports that the browser itself went away."""
    message = str(exc).lower()
    return any(marker in message for marker in _HANDLE_LOST_MARKERS)


class PlaywrightPdfRenderer:
    """Render a resolved HTML string to A4 PDF bytes.

    Args:
        timeout_ms: Playwright timeout for loading content and printing.
        min_pdf_bytes: Output shorter than this is treated as corrupt.
    """

    def __init__(self, *, timeout_ms: int = 30_000, min_pdf_bytes: int = 1000) -> None:
        self._timeout_ms = timeout_ms
        self._min_pdf_bytes = min_pdf_bytes

    async def render(self, handle: BrowserHandlePort, html: str) -> bytes:
        page: Page | None = None
        try:
            page = await handle.new_page()
            await page.set_content(
                html, wait_until="networkidle", timeout=self._timeout_ms
            )
            pdf = await page.pdf(
                format="A4",
                print_background=True,
                margin=PDF_MARGINS,
            )
        except PlaywrightError as exc:
            lost = is_handle_lost(exc) or not handle.is_connected()
            raise RenderFailedError(
                f"Browser failed to render document: {exc}", handle_lost=lost
            ) from exc
        finally:
            if page is not None:
                await self._close_page(page)

        self._check_output(pdf)
        return pdf

    def _check_output(self, pdf: bytes) -> None:
        if not pdf.startswith(_PDF_MAGIC):
            raise RenderFailedError("Renderer output is not a PDF document")
        if len(pdf) < self._min_pdf_bytes:
            raise RenderFailedError(
                f"Renderer output too small ({len(pdf)} bytes, "
                f"minimum {self._min_pdf_bytes})"
            )

    async def _close_page(self, page: Page) -> None:
        try:
            if not page.is_closed():
                await page.close()
        except PlaywrightError:
            log.debug("page_close_failed", exc_info=True)
