"""Shared test fixtures for the pdfgate test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pdfgate.domain.entities.documents import AlvaraForm, CompanyRecord

# A syntactically plausible PDF big enough to pass the size check.
FAKE_PDF = b"%PDF-1.7\n" + b"0" * 2048 + b"\n%%EOF"

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_pdf() -> bytes:
    return FAKE_PDF


@pytest.fixture()
def alvara_form() -> AlvaraForm:
    """Fully populated permit form."""
    return AlvaraForm(
        credor="Maria Silva",
        cpf_cnpj="123.456.789-00",
        advogado="Dr. João Souza",
        agencia="1234",
        conta="567890",
        processo="1234567-89.2024.8.26.0100",
        contra="Banco Exemplo S.A.",
        assunto="Indenização",
        situacao="AUTORIZADO",
        valor="R$ 15.000,00",
        data_emissao="01/02/2024",
        observacoes="Levantamento integral.",
        barcode_text="ABC123DEF456",
    )


@pytest.fixture()
def company_record() -> CompanyRecord:
    return CompanyRecord(
        cnpj="19131243000197",
        legal_name="OPEN KNOWLEDGE BRASIL",
        trade_name="REDE PELO CONHECIMENTO LIVRE",
        status="ATIVA",
        opened_on="2013-10-03",
        activity="Atividades de associações de defesa de direitos sociais",
        address="AVENIDA PAULISTA, 37, ANDAR 4, BELA VISTA - CEP 01311902",
        city="SAO PAULO",
        state="SP",
    )


# ---------------------------------------------------------------------------
# Browser fakes
# ---------------------------------------------------------------------------


class FakeHandle:
    """In-memory stand-in for a launched browser."""

    def __init__(self, generation: int, *, close_error: Exception | None = None) -> None:
        self.generation = generation
        self.connected = True
        self.closed = False
        self.close_calls = 0
        self._close_error = close_error
        self.page = AsyncMock()
        self.page.pdf = AsyncMock(return_value=FAKE_PDF)
        self.page.is_closed = MagicMock(return_value=False)

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self) -> Any:
        return self.page

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False
        self.closed = True
        if self._close_error is not None:
            raise self._close_error

    def crash(self) -> None:
        self.connected = False


class FakeLauncher:
    """Counts launches; can block on a gate and fail on demand."""

    def __init__(self) -> None:
        self.calls = 0
        self.handles: list[FakeHandle] = []
        self.gate: asyncio.Event | None = None
        self.fail_with: Exception | None = None
        self.close_error: Exception | None = None

    async def __call__(self, generation: int) -> FakeHandle:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        handle = FakeHandle(generation, close_error=self.close_error)
        self.handles.append(handle)
        return handle


@pytest.fixture()
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture()
def make_handle() -> Callable[..., FakeHandle]:
    return FakeHandle


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_templates() -> MagicMock:
    """Mock TemplatePort returning a fixed HTML document."""
    templates = MagicMock()
    templates.render.return_value = "<html><body>doc</body></html>"
    return templates


@pytest.fixture()
def mock_pipeline() -> AsyncMock:
    """Mock render pipeline."""
    pipeline = AsyncMock()
    pipeline.render = AsyncMock(return_value=FAKE_PDF)
    return pipeline


@pytest.fixture()
def mock_barcode() -> MagicMock:
    barcode = MagicMock()
    barcode.data_uri.side_effect = lambda text: f"data:image/svg+xml;base64,{text}"
    return barcode


@pytest.fixture()
def mock_registry(company_record: CompanyRecord) -> AsyncMock:
    """Mock CompanyRegistryPort."""
    registry = AsyncMock()
    registry.lookup = AsyncMock(return_value=company_record)
    return registry
