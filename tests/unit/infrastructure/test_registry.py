"""Tests for HttpxCompanyRegistry (respx-mocked HTTP)."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
import respx

from pdfgate.domain.exceptions import (
    InvalidInputError,
    NotFoundError,
    ProviderUnavailableError,
)
from pdfgate.domain.ports import CompanyRegistryPort
from pdfgate.infrastructure.registry import HttpxCompanyRegistry, to_company_record

_BASE = "https://registry.test/api/cnpj/v1"
_CNPJ = "19131243000197"

_PAYLOAD: dict[str, Any] = {
    "cnpj": _CNPJ,
    "razao_social": "OPEN KNOWLEDGE BRASIL",
    "nome_fantasia": "REDE PELO CONHECIMENTO LIVRE",
    "descricao_situacao_cadastral": "ATIVA",
    "data_inicio_atividade": "2013-10-03",
    "cnae_fiscal_descricao": "Atividades de associações de defesa de direitos sociais",
    "descricao_tipo_de_logradouro": "AVENIDA",
    "logradouro": "PAULISTA",
    "numero": "37",
    "complemento": "ANDAR 4",
    "bairro": "BELA VISTA",
    "cep": "01311902",
    "municipio": "SAO PAULO",
    "uf": "SP",
}


@pytest.fixture()
def registry() -> HttpxCompanyRegistry:
    return HttpxCompanyRegistry(http_client=httpx.AsyncClient(), base_url=_BASE + "/")


class TestToCompanyRecord:
    def test_maps_fields(self) -> None:
        record = to_company_record(_CNPJ, _PAYLOAD)
        assert record.legal_name == "OPEN KNOWLEDGE BRASIL"
        assert record.trade_name == "REDE PELO CONHECIMENTO LIVRE"
        assert record.status == "ATIVA"
        assert record.address == "AVENIDA PAULISTA, 37, ANDAR 4, BELA VISTA - CEP 01311902"
        assert record.city == "SAO PAULO"
        assert record.state == "SP"

    def test_missing_optional_fields(self) -> None:
        record = to_company_record(_CNPJ, {"razao_social": "ACME", "nome_fantasia": None})
        assert record.cnpj == _CNPJ
        assert record.trade_name == ""
        assert record.address == ""


class TestLookup:
    def test_satisfies_port(self, registry: HttpxCompanyRegistry) -> None:
        assert isinstance(registry, CompanyRegistryPort)

    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, registry: HttpxCompanyRegistry) -> None:
        route = respx.get(f"{_BASE}/{_CNPJ}").mock(
            return_value=httpx.Response(200, json=_PAYLOAD)
        )
        record = await registry.lookup(_CNPJ)
        assert route.called
        assert record.cnpj == _CNPJ
        assert record.formatted_cnpj == "19.131.243/0001-97"

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_is_not_found(self, registry: HttpxCompanyRegistry) -> None:
        respx.get(f"{_BASE}/{_CNPJ}").mock(return_value=httpx.Response(404))
        with pytest.raises(NotFoundError, match=_CNPJ):
            await registry.lookup(_CNPJ)

    @pytest.mark.asyncio
    @respx.mock
    async def test_400_is_invalid_input(self, registry: HttpxCompanyRegistry) -> None:
        bad = "19131243000198"
        respx.get(f"{_BASE}/{bad}").mock(
            return_value=httpx.Response(400, json={"message": "CNPJ 19131243000198 inválido."})
        )
        with pytest.raises(InvalidInputError, match=bad):
            await registry.lookup(bad)

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_is_provider_unavailable(self, registry: HttpxCompanyRegistry) -> None:
        respx.get(f"{_BASE}/{_CNPJ}").mock(return_value=httpx.Response(503))
        with pytest.raises(ProviderUnavailableError, match="503"):
            await registry.lookup(_CNPJ)

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self, registry: HttpxCompanyRegistry) -> None:
        respx.get(f"{_BASE}/{_CNPJ}").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(ProviderUnavailableError, match="unreachable"):
            await registry.lookup(_CNPJ)

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json(self, registry: HttpxCompanyRegistry) -> None:
        respx.get(f"{_BASE}/{_CNPJ}").mock(
            return_value=httpx.Response(200, content=b"<html>maintenance</html>")
        )
        with pytest.raises(ProviderUnavailableError, match="invalid JSON"):
            await registry.lookup(_CNPJ)

    @pytest.mark.asyncio
    @respx.mock
    async def test_payload_without_name(self, registry: HttpxCompanyRegistry) -> None:
        respx.get(f"{_BASE}/{_CNPJ}").mock(
            return_value=httpx.Response(200, json={"message": "rate limited"})
        )
        with pytest.raises(ProviderUnavailableError, match="unexpected payload"):
            await registry.lookup(_CNPJ)
