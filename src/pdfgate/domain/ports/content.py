"""Ports for the data and markup that feed a render."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from pdfgate.domain.entities.documents import CompanyRecord


@runtime_checkable
class CompanyRegistryPort(Protocol):
    """Async company registry lookup."""

    async def lookup(self, cnpj: str) -> CompanyRecord:
        """Return the record for a 14-digit CNPJ.

        Raises ``NotFoundError`` or ``ProviderUnavailableError``.
        """
        ...


@runtime_checkable
class BarcodePort(Protocol):
    """Produces an embeddable barcode image."""

    def data_uri(self, text: str) -> str:
        """Return a ``data:`` URI for a Code 128 barcode of *text*."""
        ...


@runtime_checkable
class TemplatePort(Protocol):
    """Renders named HTML templates."""

    def render(self, name: str, context: Mapping[str, Any]) -> str: ...
