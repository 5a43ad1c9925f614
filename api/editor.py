"""Start or reopen an editing session."""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from api.base import success_response
from core.delivery import LoadAction, build_mailto, parse_load_action, resolve_invoice_param
from core.document_builder import build_document
from core.editor import EditableInvoiceState
from core.rendering import export_filename


def create_editor_router(services: dict) -> APIRouter:
    router = APIRouter()

    invoice_svc = services["invoice"]
    template_svc = services["template"]
    numbering_svc = services["numbering"]
    config = services["config"]

    @router.get("/editor/new")
    def new_invoice(request: Request, template_id: str | None = Query(None)):
        """
        Default state for a new invoice. Allocates the next invoice number,
        so every call consumes one.
        """
        template = None
        if template_id:
            template = template_svc.get_by_id(UUID(template_id))
            if template is None:
                raise ValueError(f"Template {template_id} not found")

        state = EditableInvoiceState.new(numbering_svc.next_number(), config)
        if template is not None:
            state.apply_template(template, config)

        return success_response({
            "state": state.model_dump(mode="json"),
            "totals": state.totals().model_dump(mode="json"),
        }).model_dump(mode="json")

    @router.get("/editor/load")
    def load_invoice(
        request: Request,
        invoice_number: str | None = Query(None),
        invoice: str | None = Query(None),
        action: str | None = Query(None),
    ):
        """
        Reopen a saved invoice, optionally with a follow-up action:
        'download' returns the PDF URL, 'email' a prefilled mailto link.
        """
        number = resolve_invoice_param(invoice_number, invoice)
        if number is None:
            raise ValueError("'invoice_number' query parameter is required")

        state = invoice_svc.load_state(number)
        doc = build_document(state)

        follow_up = None
        load_action = parse_load_action(action)
        if load_action == LoadAction.DOWNLOAD:
            follow_up = {
                "type": load_action.value,
                "download_url": request.url_for("saved_invoice_pdf", invoice_number=doc.invoice_number).path,
                "filename": export_filename(doc),
            }
        elif load_action == LoadAction.EMAIL:
            follow_up = {"type": load_action.value, "mailto": build_mailto(doc)}

        return success_response({
            "state": state.model_dump(mode="json"),
            "document": doc.model_dump(mode="json"),
            "action": follow_up,
        }).model_dump(mode="json")

    return router
