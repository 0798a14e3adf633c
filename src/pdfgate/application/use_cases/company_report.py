"""Company report use case — registry lookup → HTML → PDF."""

from __future__ import annotations

import re
import time
from datetime import date
from typing import Protocol

import structlog

from pdfgate.domain.entities.documents import RenderedDocument
from pdfgate.domain.exceptions import InvalidInputError
from pdfgate.domain.ports.content import CompanyRegistryPort, TemplatePort

log = structlog.get_logger(__name__)

COMPANY_TEMPLATE = "company.html"

_NON_DIGITS = re.compile(r"\D")


class _Pipeline(Protocol):
    async def render(self, html: str) -> bytes: ...


def normalize_cnpj(raw: str) -> str:
    """Strip punctuation and require exactly 14 digits.

    Raises:
        InvalidInputError: the value does not contain 14 digits.
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) != 14:
        raise InvalidInputError("CNPJ must contain exactly 14 digits")
    return digits


class GenerateCompanyReportUseCase:
    """Look a company up and render its registry summary.

    Lookup errors (``NotFoundError``, ``ProviderUnavailableError``) are
    raised before any render slot is requested.
    """

    def __init__(
        self,
        *,
        pipeline: _Pipeline,
        templates: TemplatePort,
        registry: CompanyRegistryPort,
    ) -> None:
        self._pipeline = pipeline
        self._templates = templates
        self._registry = registry

    async def execute(self, cnpj: str) -> RenderedDocument:
        digits = normalize_cnpj(cnpj)
        company = await self._registry.lookup(digits)

        html = self._templates.render(
            COMPANY_TEMPLATE,
            {
                "company": company,
                "generated_on": date.today().strftime("%d/%m/%Y"),
            },
        )
        pdf = await self._pipeline.render(html)
        filename = f"empresa_{digits}_{int(time.time() * 1000)}.pdf"
        log.info("company_report_generated", cnpj=digits, size=len(pdf))
        return RenderedDocument(content=pdf, filename=filename)
