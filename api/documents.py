"""Preview and PDF export of invoice documents."""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import Response

from api.base import success_response
from core.document_builder import build_document
from core.editor import EditableInvoiceState
from core.rendering import export_filename, render_html, render_pdf

logger = logging.getLogger(__name__)


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 original."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def _pdf_response(doc) -> Response:
    return Response(
        content=render_pdf(doc),
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(export_filename(doc))},
    )


def create_documents_router(services: dict) -> APIRouter:
    router = APIRouter()

    invoice_svc = services["invoice"]

    # Plain def: rendering and database reads run in the threadpool.
    @router.post("/documents/preview")
    def preview(request: Request, state: EditableInvoiceState):
        """Snapshot the state and render the HTML preview."""
        doc = build_document(state)
        return success_response({
            "document": doc.model_dump(mode="json"),
            "totals": doc.totals.model_dump(mode="json"),
            "html": render_html(doc),
        }).model_dump(mode="json")

    @router.post("/documents/pdf")
    def export_pdf(request: Request, state: EditableInvoiceState):
        """PDF of the state as currently edited. Nothing is saved."""
        return _pdf_response(build_document(state))

    @router.get("/invoices/{invoice_number}/pdf")
    def saved_invoice_pdf(request: Request, invoice_number: str):
        """PDF of a saved invoice, totals recomputed from its items."""
        state = invoice_svc.load_state(invoice_number)
        logger.info(f"Exporting saved invoice {invoice_number}")
        return _pdf_response(build_document(state))

    return router
