"""GET /api/data: unified read endpoint."""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from api.base import success_response
from core.reporting import SortOrder, calculate_stats, list_consultants, query_invoices


VALID_TYPES = {"invoices", "templates", "stats", "consultants"}


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    invoice_svc = services["invoice"]
    template_svc = services["template"]
    config = services["config"]

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        search: str | None = Query(None),
        consultant: str | None = Query(None),
        sort: SortOrder = Query(SortOrder.DATE_DESC),
        page: int = Query(1, ge=1),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        if type == "invoices":
            return _handle_invoices(invoice_svc, config, id, search, consultant, sort, page)

        if type == "templates":
            return _handle_templates(template_svc, id)

        invoices = invoice_svc.list_for_owner()

        if type == "stats":
            return success_response(calculate_stats(invoices).model_dump(mode="json")).model_dump(mode="json")

        return success_response(list_consultants(invoices)).model_dump(mode="json")

    return router


def _handle_invoices(invoice_svc, config, id, search, consultant, sort, page):
    if id:
        invoice = invoice_svc.get_by_number(id)
        if invoice is None:
            raise ValueError(f"Invoice {id} not found")
        return success_response(invoice.model_dump(mode="json")).model_dump(mode="json")

    listing = query_invoices(
        invoice_svc.list_for_owner(),
        search=search,
        consultant=consultant,
        sort=sort,
        page=page,
        per_page=config.invoices_per_page,
    )
    return success_response(listing.model_dump(mode="json")).model_dump(mode="json")


def _handle_templates(template_svc, id):
    if id:
        template = template_svc.get_by_id(UUID(id))
        if template is None:
            raise ValueError(f"Template {id} not found")
        return success_response(template.model_dump(mode="json")).model_dump(mode="json")

    templates = template_svc.list_for_owner()
    return success_response(
        [t.model_dump(mode="json") for t in templates]
    ).model_dump(mode="json")
