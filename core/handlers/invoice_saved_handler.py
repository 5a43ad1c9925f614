"""
Handler for InvoiceSaved events.

Tells the owner's other open sessions that an invoice was saved, so they can
refresh their listing. Delivery is best effort: a Valkey failure is logged by
the event bus and never undoes the save.
"""

import logging
from typing import Callable

from core.events import InvoiceSaved

logger = logging.getLogger(__name__)

INVOICE_SAVED_MESSAGE = "invoice_saved"


def invoice_channel(owner_id) -> str:
    """Pub/sub channel carrying one owner's invoice notifications."""
    return f"invoices:{owner_id}"


def handle_invoice_saved(valkey) -> Callable:
    """
    Factory that returns an InvoiceSaved handler.

    Args:
        valkey: ValkeyClient instance

    Returns:
        Handler callable that publishes the saved-invoice notification
    """

    def handler(event: InvoiceSaved):
        invoice = event.invoice
        receivers = valkey.publish(
            invoice_channel(event.owner_id),
            {
                "type": INVOICE_SAVED_MESSAGE,
                "invoice_number": invoice.invoice_number,
                "created": event.created,
                "event_id": event.event_id,
            },
        )
        logger.debug(f"Notified {receivers} session(s) of saved invoice {invoice.invoice_number}")

    return handler
