"""Tests for the InvoiceSaved notification handler."""

from core.event_bus import EventBus
from core.events import InvoiceSaved
from core.handlers.invoice_saved_handler import handle_invoice_saved, invoice_channel


class TestHandleInvoiceSaved:

    def test_publishes_to_owner_channel(self, valkey, record):
        """The owner's channel receives the saved invoice number."""
        event = InvoiceSaved.create(invoice=record, created=True)

        handle_invoice_saved(valkey)(event)

        channel, message = valkey.publish.call_args.args
        assert channel == f"invoices:{record.user_id}"
        assert message == {
            "type": "invoice_saved",
            "invoice_number": "INV-0042",
            "created": True,
            "event_id": event.event_id,
        }

    def test_channel_name(self, test_owner_id):
        assert invoice_channel(test_owner_id) == "invoices:00000000-0000-0000-0000-000000000001"

    def test_valkey_failure_does_not_escape_bus(self, valkey, record, caplog):
        """A failed notification is logged by the bus; the publisher carries on."""
        valkey.publish.side_effect = ConnectionError("valkey down")
        bus = EventBus()
        bus.subscribe("InvoiceSaved", handle_invoice_saved(valkey))

        bus.publish(InvoiceSaved.create(invoice=record, created=False))

        assert "failed for InvoiceSaved" in caplog.text
