"""Company registry client: async httpx lookup of CNPJ records."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pdfgate.domain.entities.documents import CompanyRecord
from pdfgate.domain.exceptions import (
    InvalidInputError,
    NotFoundError,
    ProviderUnavailableError,
)

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://brasilapi.com.br/api/cnpj/v1"


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value).strip()


def _address(data: dict[str, Any]) -> str:
    street = " ".join(
        part
        for part in (_text(data, "descricao_tipo_de_logradouro"), _text(data, "logradouro"))
        if part
    )
    parts = [street, _text(data, "numero"), _text(data, "complemento"), _text(data, "bairro")]
    line = ", ".join(p for p in parts if p)
    cep = _text(data, "cep")
    return f"{line} - CEP {cep}" if cep and line else line or cep


def to_company_record(cnpj: str, data: dict[str, Any]) -> CompanyRecord:
    """Map a registry JSON payload onto :class:`CompanyRecord`."""
    return CompanyRecord(
        cnpj=_text(data, "cnpj") or cnpj,
        legal_name=_text(data, "razao_social"),
        trade_name=_text(data, "nome_fantasia"),
        status=_text(data, "descricao_situacao_cadastral"),
        opened_on=_text(data, "data_inicio_atividade"),
        activity=_text(data, "cnae_fiscal_descricao"),
        address=_address(data),
        city=_text(data, "municipio"),
        state=_text(data, "uf"),
    )


class HttpxCompanyRegistry:
    """Async company registry client using httpx.

    Implements ``CompanyRegistryPort`` from domain.ports.content.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    async def lookup(self, cnpj: str) -> CompanyRecord:
        url = f"{self._base_url}/{cnpj}"
        try:
            resp = await self._http.get(url)
        except httpx.HTTPError as exc:
            log.warning("registry_network_error", cnpj=cnpj, exc_info=True)
            raise ProviderUnavailableError(
                f"Company registry unreachable: {exc}"
            ) from exc

        if resp.status_code == 404:
            log.info("registry_not_found", cnpj=cnpj)
            raise NotFoundError(f"No company registered under CNPJ {cnpj}")
        if resp.status_code == 400:
            # BrasilAPI rejects CNPJs whose check digits do not match.
            log.info("registry_rejected_cnpj", cnpj=cnpj)
            raise InvalidInputError(f"Registry rejected CNPJ {cnpj} as invalid")
        if resp.is_error:
            log.warning("registry_http_error", cnpj=cnpj, status=resp.status_code)
            raise ProviderUnavailableError(
                f"Company registry answered HTTP {resp.status_code}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderUnavailableError("Company registry returned invalid JSON") from exc
        if not isinstance(data, dict) or not data.get("razao_social"):
            raise ProviderUnavailableError("Company registry returned an unexpected payload")

        log.debug("registry_lookup_ok", cnpj=cnpj)
        return to_company_record(cnpj, data)
