"""
Domain events for invoicing.

Immutable records of something that already happened. Services publish them
after the database write and audit entry have committed; handlers react
without the publisher knowing who listens.

Events carry the stored record so handlers don't need to re-fetch it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class InvoicingEvent:
    """Base class for all invoicing domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# INVOICE EVENTS
# =============================================================================


@dataclass(frozen=True)
class InvoiceEvent(InvoicingEvent):
    """Events related to invoice lifecycle."""
    pass


@dataclass(frozen=True)
class InvoiceSaved(InvoiceEvent):
    """An invoice was inserted or overwritten."""
    invoice: Any = None  # InvoiceRecord
    created: bool = False

    @classmethod
    def create(cls, invoice: Any, created: bool) -> "InvoiceSaved":
        return cls(invoice=invoice, created=created)

    @property
    def owner_id(self) -> UUID:
        return self.invoice.user_id


@dataclass(frozen=True)
class InvoiceDeleted(InvoiceEvent):
    """An invoice was deleted."""
    invoice: Any = None

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceDeleted":
        return cls(invoice=invoice)


# =============================================================================
# TEMPLATE EVENTS
# =============================================================================


@dataclass(frozen=True)
class TemplateSaved(InvoicingEvent):
    """A template was created or overwritten by name."""
    template: Any = None

    @classmethod
    def create(cls, template: Any) -> "TemplateSaved":
        return cls(template=template)
