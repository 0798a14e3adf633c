"""Alvará use case — form data + barcode → HTML → PDF."""

from __future__ import annotations

import time
from typing import Protocol

import structlog

from pdfgate.domain.entities.documents import AlvaraForm, RenderedDocument
from pdfgate.domain.ports.content import BarcodePort, TemplatePort

log = structlog.get_logger(__name__)

ALVARA_TEMPLATE = "alvara.html"


class _Pipeline(Protocol):
    async def render(self, html: str) -> bytes: ...


class GenerateAlvaraUseCase:
    """Build the payment permit document for one form submission."""

    def __init__(
        self,
        *,
        pipeline: _Pipeline,
        templates: TemplatePort,
        barcode: BarcodePort,
    ) -> None:
        self._pipeline = pipeline
        self._templates = templates
        self._barcode = barcode

    def build_html(self, form: AlvaraForm) -> str:
        """Resolve the barcode and interpolate everything into the template."""
        barcode_text = form.resolved_barcode_text()
        return self._templates.render(
            ALVARA_TEMPLATE,
            {
                "data": form.template_data(),
                "barcode_text": barcode_text,
                "barcode_data_uri": self._barcode.data_uri(barcode_text),
            },
        )

    async def execute(self, form: AlvaraForm) -> RenderedDocument:
        html = self.build_html(form)
        pdf = await self._pipeline.render(html)
        filename = f"alvara_{int(time.time() * 1000)}.pdf"
        log.info("alvara_generated", filename=filename, size=len(pdf))
        return RenderedDocument(content=pdf, filename=filename)
