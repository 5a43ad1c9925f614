"""Shared test fixtures for the invoicer test suite."""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock
from uuid import UUID, uuid4

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from clients.postgres_client import PostgresClient
from clients.valkey_client import ValkeyClient
from core.editor import EditableInvoiceState
from core.models import InvoiceRecord, InvoiceSettings, LineItem, PartyInfo
from core.document_builder import build_document
from utils.owner_context import owner_context, clear_current_owner_id


# =============================================================================
# TEST OWNER CONSTANTS
# =============================================================================

# Primary test owner - use for single-owner tests
TEST_OWNER_ID = UUID("00000000-0000-0000-0000-000000000001")

# Secondary test owner - use for isolation tests
TEST_OWNER_B_ID = UUID("00000000-0000-0000-0000-000000000002")

# 1x1 transparent PNG
PNG_1X1 = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


# =============================================================================
# OWNER CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_owner_context():
    """Ensure clean owner context before and after each test."""
    clear_current_owner_id()
    yield
    clear_current_owner_id()


@pytest.fixture
def test_owner_id() -> UUID:
    return TEST_OWNER_ID


@pytest.fixture
def test_owner_b_id() -> UUID:
    return TEST_OWNER_B_ID


@pytest.fixture
def as_test_owner(test_owner_id):
    """Run the test as the primary owner."""
    with owner_context(test_owner_id):
        yield test_owner_id


# =============================================================================
# INFRASTRUCTURE DOUBLES
# =============================================================================


@pytest.fixture
def db():
    """PostgresClient double. Tests set return values per query."""
    return Mock(spec=PostgresClient)


@pytest.fixture
def valkey():
    """ValkeyClient double."""
    return Mock(spec=ValkeyClient)


# =============================================================================
# DOMAIN DATA
# =============================================================================


def sample_state(**overrides) -> EditableInvoiceState:
    """A filled-in editing state: two items, 10% tax, no discount."""
    data = dict(
        invoice_number="INV-0042",
        business=PartyInfo(
            name="Acme Consulting",
            email="billing@acme.test",
            phone="555-0100",
            address="1 Main St\nSpringfield",
        ),
        client=PartyInfo(
            name="Globex",
            email="ap@globex.test",
            address="9 Elm Rd\nShelbyville",
        ),
        issue_date=date(2026, 1, 5),
        due_date=date(2026, 2, 4),
        terms="Net 30",
        settings=InvoiceSettings(tax_rate_percent=Decimal("10")),
        items=[
            LineItem(description="Design", quantity=2, rate=50, consultant_tag="Ada"),
            LineItem(description="Review", quantity=1, rate=25),
        ],
        notes="Thank you for your business!",
    )
    data.update(overrides)
    return EditableInvoiceState(**data)


def sample_record(state: EditableInvoiceState | None = None, created_at: datetime | None = None,
                  owner_id: UUID = TEST_OWNER_ID) -> InvoiceRecord:
    """A stored invoice built the same way InvoiceService.save stores one."""
    state = state or sample_state()
    doc = build_document(state)
    created_at = created_at or datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)
    return InvoiceRecord(
        id=uuid4(),
        user_id=owner_id,
        invoice_number=doc.invoice_number,
        status=doc.status,
        business_info=doc.business,
        client_info=doc.client,
        invoice_meta=doc.meta,
        settings=doc.settings,
        items=list(doc.items),
        notes=doc.notes,
        payment_instructions=doc.payment_instructions,
        totals=doc.totals,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def state() -> EditableInvoiceState:
    return sample_state()


@pytest.fixture
def record() -> InvoiceRecord:
    return sample_record()


@pytest.fixture
def make_state():
    """Factory for editing states: make_state(invoice_number=..., items=[...])."""
    return sample_state


@pytest.fixture
def make_record():
    """Factory for stored invoices: make_record(state, created_at=..., owner_id=...)."""
    return sample_record


@pytest.fixture
def png_logo() -> str:
    return PNG_1X1
