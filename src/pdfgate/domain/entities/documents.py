"""Domain entities for document generation.

Pure value objects — no framework dependencies, no I/O.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Mapping

PDF_MEDIA_TYPE = "application/pdf"


def _today_br() -> str:
    return date.today().strftime("%d/%m/%Y")


def random_barcode_text() -> str:
    """Return 12 upper-case hex characters (6 random bytes)."""
    return secrets.token_hex(6).upper()


# Form field name -> attribute name. Field names match the HTML form.
_FORM_FIELDS: dict[str, str] = {
    "credor": "credor",
    "cpfCnpj": "cpf_cnpj",
    "advogado": "advogado",
    "agencia": "agencia",
    "conta": "conta",
    "processo": "processo",
    "contra": "contra",
    "assunto": "assunto",
    "situacao": "situacao",
    "valor": "valor",
    "dataEmissao": "data_emissao",
    "observacoes": "observacoes",
    "barcodeText": "barcode_text",
}


@dataclass(frozen=True)
class AlvaraForm:
    """Input data for a payment permit ("alvará") document.

    Every field has a placeholder default; blank submissions fall back to it.
    """

    credor: str = "Fulano"
    cpf_cnpj: str = "000.000.000-00"
    advogado: str = "Advogado"
    agencia: str = "0000"
    conta: str = "000000"
    processo: str = "0000000-00.0000.0.00.0000"
    contra: str = "Réu"
    assunto: str = "Assunto"
    situacao: str = "AUTORIZADO"
    valor: str = "R$ 0,00"
    data_emissao: str = field(default_factory=_today_br)
    observacoes: str = ""
    barcode_text: str = ""

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> AlvaraForm:
        """Build from raw form fields, ignoring unknown and blank values."""
        values: dict[str, str] = {}
        for form_name, attr in _FORM_FIELDS.items():
            raw = data.get(form_name)
            if raw is None:
                continue
            text = str(raw).strip()
            if text:
                values[attr] = text
        return cls(**values)

    def resolved_barcode_text(self) -> str:
        """Return the submitted barcode text or a fresh random one."""
        return self.barcode_text or random_barcode_text()

    def template_data(self) -> dict[str, str]:
        """Field values keyed by their form names, for the template."""
        attrs = {f.name: getattr(self, f.name) for f in fields(self)}
        return {form_name: attrs[attr] for form_name, attr in _FORM_FIELDS.items()}


@dataclass(frozen=True)
class CompanyRecord:
    """Normalized company registry entry."""

    cnpj: str
    legal_name: str
    trade_name: str = ""
    status: str = ""
    opened_on: str = ""
    activity: str = ""
    address: str = ""
    city: str = ""
    state: str = ""

    @property
    def formatted_cnpj(self) -> str:
        """CNPJ as ``00.000.000/0000-00`` when it has 14 digits."""
        c = self.cnpj
        if len(c) != 14 or not c.isdigit():
            return c
        return f"{c[:2]}.{c[2:5]}.{c[5:8]}/{c[8:12]}-{c[12:]}"


@dataclass(frozen=True)
class RenderedDocument:
    """A finished PDF ready to be streamed to the client."""

    content: bytes
    filename: str
    media_type: str = PDF_MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.content)
