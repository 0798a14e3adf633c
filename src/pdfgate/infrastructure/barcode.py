"""Code 128 barcode images embedded as data URIs."""

from __future__ import annotations

import base64
from io import BytesIO
from typing import Any

from barcode import Code128
from barcode.errors import BarcodeError
from barcode.writer import SVGWriter

from pdfgate.domain.exceptions import InvalidInputError

# Bar geometry in millimetres; no human-readable text under the bars.
_WRITER_OPTIONS: dict[str, Any] = {
    "module_width": 0.3,
    "module_height": 12.0,
    "quiet_zone": 2.0,
    "write_text": False,
}


class Code128Barcode:
    """Render Code 128 barcodes as inline SVG images."""

    def __init__(self, *, writer_options: dict[str, Any] | None = None) -> None:
        self._options = {**_WRITER_OPTIONS, **(writer_options or {})}

    def svg(self, text: str) -> bytes:
        """Encode *text* as an SVG document.

        Raises:
            ValueError: *text* is empty.
            InvalidInputError: *text* has characters Code 128 cannot encode.
        """
        if not text:
            raise ValueError("barcode text must not be empty")
        buf = BytesIO()
        try:
            Code128(text, writer=SVGWriter()).write(buf, options=self._options)
        except BarcodeError as exc:
            raise InvalidInputError(f"Invalid barcode text: {exc}") from exc
        return buf.getvalue()

    def data_uri(self, text: str) -> str:
        encoded = base64.b64encode(self.svg(text)).decode("ascii")
        return f"data:image/svg+xml;base64,{encoded}"
