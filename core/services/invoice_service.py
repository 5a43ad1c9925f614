"""
Invoice persistence.

An invoice is stored by snapshotting the editing session into an
InvoiceDocument and upserting it on (owner, invoice_number): saving an
existing number overwrites it (last write wins). Totals are stored for the
listing and dashboard but recomputed whenever the invoice is reopened.
"""

import logging
from uuid import uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.document_builder import build_document
from core.editor import EditableInvoiceState
from core.event_bus import EventBus
from core.events import InvoiceSaved, InvoiceDeleted
from core.models import InvoiceRecord
from utils.owner_context import get_current_owner_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service for stored invoices of the current owner."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, event_bus: EventBus):
        self.postgres = postgres
        self.audit = audit
        self.event_bus = event_bus

    def save(self, state: EditableInvoiceState) -> InvoiceRecord:
        """
        Snapshot the editing state and upsert it.

        Args:
            state: Current editing session

        Returns:
            Stored invoice

        Raises:
            RuntimeError: If no owner context is set
        """
        owner_id = get_current_owner_id()
        doc = build_document(state)
        existing = self.get_by_number(doc.invoice_number)
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO invoices (
                id, user_id, invoice_number, status,
                business_info, client_info, invoice_meta, settings,
                items, notes, payment_instructions, totals,
                created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s,
                %s, %s, %s, %s,
                %s, %s, %s, %s,
                %s, %s
            )
            ON CONFLICT (user_id, invoice_number) DO UPDATE SET
                status = EXCLUDED.status,
                business_info = EXCLUDED.business_info,
                client_info = EXCLUDED.client_info,
                invoice_meta = EXCLUDED.invoice_meta,
                settings = EXCLUDED.settings,
                items = EXCLUDED.items,
                notes = EXCLUDED.notes,
                payment_instructions = EXCLUDED.payment_instructions,
                totals = EXCLUDED.totals,
                updated_at = EXCLUDED.updated_at
            RETURNING *
            """,
            (
                uuid4(), owner_id, doc.invoice_number, doc.status.value,
                doc.business.model_dump(mode="json"),
                doc.client.model_dump(mode="json"),
                doc.meta.model_dump(mode="json"),
                doc.settings.model_dump(mode="json"),
                [item.model_dump(mode="json") for item in doc.items],
                doc.notes, doc.payment_instructions,
                doc.totals.model_dump(mode="json"),
                now, now
            )
        )[0]

        record = InvoiceRecord.model_validate(row)

        if existing is None:
            self.audit.log_change(
                entity_type="invoice",
                entity_id=record.id,
                action=AuditAction.CREATE,
                changes={"created": record.model_dump(mode="json")}
            )
        else:
            changes = compute_changes(
                existing.model_dump(mode="json"),
                record.model_dump(mode="json")
            )
            if changes:
                self.audit.log_change(
                    entity_type="invoice",
                    entity_id=record.id,
                    action=AuditAction.UPDATE,
                    changes=changes
                )

        self.event_bus.publish(InvoiceSaved.create(invoice=record, created=existing is None))

        return record

    def get_by_number(self, invoice_number: str) -> InvoiceRecord | None:
        """Current owner's invoice with this number, or None."""
        row = self.postgres.execute_single(
            "SELECT * FROM invoices WHERE invoice_number = %s AND user_id = %s",
            (invoice_number, get_current_owner_id())
        )

        if row is None:
            return None

        return InvoiceRecord.model_validate(row)

    def list_for_owner(self, limit: int | None = None) -> list[InvoiceRecord]:
        """All of the owner's invoices, newest first."""
        query = "SELECT * FROM invoices WHERE user_id = %s ORDER BY created_at DESC"
        params: tuple = (get_current_owner_id(),)
        if limit is not None:
            query += " LIMIT %s"
            params += (limit,)

        rows = self.postgres.execute(query, params)
        return [InvoiceRecord.model_validate(row) for row in rows]

    def delete(self, invoice_number: str) -> InvoiceRecord:
        """
        Delete an invoice.

        Raises:
            ValueError: If invoice not found
        """
        current = self.get_by_number(invoice_number)
        if current is None:
            raise ValueError(f"Invoice {invoice_number} not found")

        self.postgres.execute(
            "DELETE FROM invoices WHERE id = %s AND user_id = %s",
            (current.id, current.user_id)
        )

        self.audit.log_change(
            entity_type="invoice",
            entity_id=current.id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        self.event_bus.publish(InvoiceDeleted.create(invoice=current))

        return current

    def load_state(self, invoice_number: str) -> EditableInvoiceState:
        """
        Reopen a saved invoice as an editing session.

        Raises:
            ValueError: If invoice not found
        """
        record = self.get_by_number(invoice_number)
        if record is None:
            raise ValueError(f"Invoice {invoice_number} not found")
        return EditableInvoiceState.from_record(record)
