"""Document endpoints: the permit form, permit PDFs and company reports."""

from __future__ import annotations

import math
from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.responses import Response

from pdfgate.domain.entities.documents import AlvaraForm, RenderedDocument
from pdfgate.domain.exceptions import (
    AdmissionTimeoutError,
    InvalidInputError,
    NotFoundError,
    PdfGateError,
    ProviderUnavailableError,
    RenderFailedError,
    ResourceUnavailableError,
)
from pdfgate.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["documents"])

FORM_TEMPLATE = "form.html"

# (form field, label) pairs shown as single-line inputs on the form page.
FORM_FIELDS: list[tuple[str, str]] = [
    ("credor", "Credor"),
    ("cpfCnpj", "CPF/CNPJ"),
    ("advogado", "Advogado"),
    ("agencia", "Agência"),
    ("conta", "Conta"),
    ("processo", "Processo"),
    ("contra", "Contra"),
    ("assunto", "Assunto"),
    ("situacao", "Situação"),
    ("valor", "Valor"),
    ("dataEmissao", "Data de emissão"),
    ("barcodeText", "Código de barras (opcional)"),
]

# Exception -> (HTTP status, error code). First match wins.
_ERROR_MAP: list[tuple[type[PdfGateError], int, str]] = [
    (InvalidInputError, 422, "invalid_input"),
    (NotFoundError, 404, "not_found"),
    (ProviderUnavailableError, 502, "provider_unavailable"),
    (AdmissionTimeoutError, 503, "server_busy"),
    (ResourceUnavailableError, 503, "browser_unavailable"),
    (RenderFailedError, 500, "render_failed"),
]


def error_response(exc: PdfGateError) -> JSONResponse:
    """Translate a domain error into its JSON error response."""
    status_code, code = 500, "internal_error"
    for exc_type, status, name in _ERROR_MAP:
        if isinstance(exc, exc_type):
            status_code, code = status, name
            break

    headers: dict[str, str] = {}
    if isinstance(exc, AdmissionTimeoutError):
        headers["Retry-After"] = str(max(1, math.ceil(exc.timeout)))

    return JSONResponse(
        status_code=status_code,
        content={"error": code, "detail": str(exc)},
        headers=headers,
    )


def pdf_response(document: RenderedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"',
        },
    )


@router.get("/", response_class=HTMLResponse)
async def form_page(request: Request) -> HTMLResponse:
    """Serve the permit form, pre-filled with placeholder values."""
    state = cast(AppState, request.app.state)
    html = state.templates.render(
        FORM_TEMPLATE,
        {"fields": FORM_FIELDS, "defaults": AlvaraForm().template_data()},
    )
    return HTMLResponse(html)


@router.post("/generate")
async def generate_alvara(request: Request) -> Response:
    """Render the permit document from a URL-encoded form submission.

    Blank or missing fields fall back to their placeholder values, and a
    random barcode is generated when ``barcodeText`` is empty.
    """
    state = cast(AppState, request.app.state)
    form = AlvaraForm.from_form(await request.form())

    try:
        document = await state.alvara_uc.execute(form)
    except PdfGateError as exc:
        log.warning("generate_failed", error_type=type(exc).__name__, error=str(exc))
        return error_response(exc)

    log.info("generate_served", filename=document.filename, size=document.size)
    return pdf_response(document)


@router.post("/company-report")
async def company_report(request: Request) -> Response:
    """Render a registry summary for the CNPJ in the form body or query string."""
    state = cast(AppState, request.app.state)
    form = await request.form()
    cnpj = str(form.get("cnpj") or request.query_params.get("cnpj") or "")

    try:
        document = await state.company_report_uc.execute(cnpj)
    except PdfGateError as exc:
        log.warning(
            "company_report_failed",
            cnpj=cnpj,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return error_response(exc)

    log.info("company_report_served", filename=document.filename, size=document.size)
    return pdf_response(document)
