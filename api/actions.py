"""POST /api/actions: unified mutation endpoint."""

from uuid import UUID

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from core.editor import EditableInvoiceState
from core.models import TemplateCreate


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict = {}


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "invoice": InvoiceHandler(services["invoice"]),
        "template": TemplateHandler(services["template"]),
        "numbering": NumberingHandler(services["numbering"]),
        "editor": EditorHandler(services["template"], services["config"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(body.data)
        return success_response(result).model_dump(mode="json")

    return router


def _state(data: dict) -> EditableInvoiceState:
    if "state" not in data:
        raise ValueError("'state' is required")
    return EditableInvoiceState.model_validate(data["state"])


def _index(data: dict) -> int:
    if "index" not in data:
        raise ValueError("'index' is required")
    return int(data["index"])


def _editor_result(state: EditableInvoiceState) -> dict:
    return {
        "state": state.model_dump(mode="json"),
        "totals": state.totals().model_dump(mode="json"),
    }


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class InvoiceHandler:
    ALLOWED_ACTIONS = {"save", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_save(self, data: dict):
        invoice = self.service.save(_state(data))
        return invoice.model_dump(mode="json")

    def _handle_delete(self, data: dict):
        self.service.delete(data["invoice_number"])
        return {"deleted": True}


class TemplateHandler:
    ALLOWED_ACTIONS = {"save", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_save(self, data: dict):
        if "state" in data:
            # Save the business, client and settings currently being edited
            state = _state(data)
            template_data = TemplateCreate(
                name=data.get("name", ""),
                business_info=state.business,
                client_info=state.client,
                settings=state.settings,
            )
        else:
            template_data = TemplateCreate(**data)
        template = self.service.save(template_data)
        return template.model_dump(mode="json")

    def _handle_delete(self, data: dict):
        self.service.delete(UUID(data["id"]))
        return {"deleted": True}


class NumberingHandler:
    ALLOWED_ACTIONS = {"next"}

    def __init__(self, service):
        self.service = service

    def _handle_next(self, data: dict):
        return {"invoice_number": self.service.next_number()}


class EditorHandler:
    """Edits applied to a client-held editing state; returns the new state and totals."""

    ALLOWED_ACTIONS = {
        "add_item", "update_item", "remove_item",
        "update_settings", "set_logo", "apply_template",
    }

    def __init__(self, template_service, config):
        self.template_service = template_service
        self.config = config

    def _handle_add_item(self, data: dict):
        state = _state(data)
        state.add_item(**data.get("item", {}))
        return _editor_result(state)

    def _handle_update_item(self, data: dict):
        state = _state(data)
        state.update_item(_index(data), **data.get("changes", {}))
        return _editor_result(state)

    def _handle_remove_item(self, data: dict):
        state = _state(data)
        state.remove_item(_index(data))
        return _editor_result(state)

    def _handle_update_settings(self, data: dict):
        state = _state(data)
        state.update_settings(**data.get("changes", {}))
        return _editor_result(state)

    def _handle_set_logo(self, data: dict):
        state = _state(data)
        state.set_logo(data.get("logo"))
        return _editor_result(state)

    def _handle_apply_template(self, data: dict):
        state = _state(data)
        template_id = UUID(data["template_id"])
        template = self.template_service.get_by_id(template_id)
        if template is None:
            raise ValueError(f"Template {template_id} not found")
        state.apply_template(template, self.config)
        return _editor_result(state)
