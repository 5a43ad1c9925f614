"""
Invoice templates.

A template stores a business block, a client block and settings under a
name. Names are unique per owner; saving an existing name overwrites it.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.event_bus import EventBus
from core.events import TemplateSaved
from core.models import Template, TemplateCreate
from utils.owner_context import get_current_owner_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class TemplateService:
    """Service for invoice template operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, event_bus: EventBus):
        self.postgres = postgres
        self.audit = audit
        self.event_bus = event_bus

    def save(self, data: TemplateCreate) -> Template:
        """
        Create a template, or overwrite the one with the same name.

        Returns:
            Stored template
        """
        owner_id = get_current_owner_id()
        existing = self.get_by_name(data.name)
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO templates (
                id, user_id, name, business_info, client_info, settings,
                created_at, updated_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (user_id, name) DO UPDATE SET
                business_info = EXCLUDED.business_info,
                client_info = EXCLUDED.client_info,
                settings = EXCLUDED.settings,
                updated_at = EXCLUDED.updated_at
            RETURNING *
            """,
            (
                uuid4(), owner_id, data.name,
                data.business_info.model_dump(mode="json"),
                data.client_info.model_dump(mode="json"),
                data.settings.model_dump(mode="json"),
                now, now
            )
        )[0]

        template = Template.model_validate(row)

        if existing is None:
            self.audit.log_change(
                entity_type="template",
                entity_id=template.id,
                action=AuditAction.CREATE,
                changes={"created": data.model_dump(mode="json")}
            )
        else:
            changes = compute_changes(
                existing.model_dump(mode="json"),
                template.model_dump(mode="json")
            )
            if changes:
                self.audit.log_change(
                    entity_type="template",
                    entity_id=template.id,
                    action=AuditAction.UPDATE,
                    changes=changes
                )

        self.event_bus.publish(TemplateSaved.create(template=template))

        return template

    def get_by_id(self, template_id: UUID) -> Template | None:
        row = self.postgres.execute_single(
            "SELECT * FROM templates WHERE id = %s AND user_id = %s",
            (template_id, get_current_owner_id())
        )
        if row is None:
            return None
        return Template.model_validate(row)

    def get_by_name(self, name: str) -> Template | None:
        row = self.postgres.execute_single(
            "SELECT * FROM templates WHERE name = %s AND user_id = %s",
            (name.strip(), get_current_owner_id())
        )
        if row is None:
            return None
        return Template.model_validate(row)

    def list_for_owner(self) -> list[Template]:
        """Owner's templates, newest first."""
        rows = self.postgres.execute(
            "SELECT * FROM templates WHERE user_id = %s ORDER BY created_at DESC",
            (get_current_owner_id(),)
        )
        return [Template.model_validate(row) for row in rows]

    def delete(self, template_id: UUID) -> Template:
        """
        Delete a template.

        Raises:
            ValueError: If template not found
        """
        current = self.get_by_id(template_id)
        if current is None:
            raise ValueError(f"Template {template_id} not found")

        self.postgres.execute(
            "DELETE FROM templates WHERE id = %s AND user_id = %s",
            (template_id, current.user_id)
        )

        self.audit.log_change(
            entity_type="template",
            entity_id=template_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        return current
