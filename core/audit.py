"""
Audit trail for invoice and template changes.

Append-only: entries are never modified or deleted. Each entry records the
owner who made the change and the old/new values. The audit_log table has no
RLS; entries are written with the owner ID taken from the request context.
"""

from enum import Enum
from uuid import UUID, uuid4
from typing import Any

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from utils.owner_context import get_current_owner_id
from utils.timezone import now_utc


class AuditAction(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Field-level diff between two stored states.

    Args:
        old: Previous row (JSON-compatible dict)
        new: New row
        exclude_fields: Fields to ignore (defaults to timestamps)

    Returns:
        {field: {"old": ..., "new": ...}} for each changed field; {} if none.
    """
    exclude = exclude_fields or {"created_at", "updated_at"}
    changes = {}

    for key in sorted(set(old) | set(new)):
        if key in exclude:
            continue
        if old.get(key) != new.get(key):
            changes[key] = {"old": old.get(key), "new": new.get(key)}

    return changes


class AuditLogger:
    """
    Writes and reads audit_log rows.

    Pass models through model_dump(mode="json") so Decimals, dates and UUIDs
    arrive as JSON-compatible values.

    Usage:
        audit = AuditLogger(postgres)
        audit.log_change(
            entity_type="invoice",
            entity_id=record.id,
            action=AuditAction.UPDATE,
            changes=compute_changes(old.model_dump(mode="json"), new.model_dump(mode="json")),
        )
    """

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def log_change(
        self,
        entity_type: str,
        entity_id: UUID,
        action: AuditAction,
        changes: dict[str, Any],
        owner_id: UUID | None = None
    ) -> None:
        """
        Append one entry.

        Changes format by action:
        - CREATE: {"created": {full row}}
        - UPDATE: {"field": {"old": ..., "new": ...}, ...}
        - DELETE: {"deleted": {full row at deletion}}
        """
        if owner_id is None:
            owner_id = get_current_owner_id()

        self.postgres.execute(
            """
            INSERT INTO audit_log (id, user_id, entity_type, entity_id, action, changes, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (
                uuid4(),
                owner_id,
                entity_type,
                entity_id,
                action.value,
                Json(changes),
                now_utc()
            )
        )
