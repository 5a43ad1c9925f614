"""
Invoice number allocation.

Numbers look like INV-0001: a configurable prefix plus a zero-padded sequence
that increases monotonically per owner. Two allocators exist:

- InvoiceNumberService: backend mode. One row per owner in invoice_counters,
  incremented with a single INSERT ... ON CONFLICT DO UPDATE ... RETURNING, so
  concurrent requests from the same owner can never receive the same number.
  Each allocation also looks at the owner's highest saved invoice number, so
  a hand-typed number ahead of the counter is never handed out again.
- LocalInvoiceCounter: local-only mode. A JSON file holding the last number
  used; the new value is written before it is returned.

Reading the newest invoice and adding one (the older approach) races when two
sessions create invoices at once and is not used for allocation.
"""

import json
import logging
import os
import re
import tempfile
import threading
from pathlib import Path

from clients.postgres_client import PostgresClient
from core.config import InvoicingConfig
from utils.owner_context import get_current_owner_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "INV-"
DEFAULT_WIDTH = 4


def format_invoice_number(sequence: int, prefix: str = DEFAULT_PREFIX, width: int = DEFAULT_WIDTH) -> str:
    """5 -> 'INV-0005'. Sequences wider than width are not truncated."""
    return f"{prefix}{sequence:0{width}d}"


def parse_invoice_sequence(invoice_number: str | None, prefix: str = DEFAULT_PREFIX) -> int | None:
    """'INV-0042' -> 42. None if the number doesn't have the expected shape."""
    if not invoice_number:
        return None
    match = re.fullmatch(rf"{re.escape(prefix)}(\d+)", invoice_number.strip())
    if match is None:
        return None
    return int(match.group(1))


def increment_invoice_number(
    last_number: str | None,
    prefix: str = DEFAULT_PREFIX,
    width: int = DEFAULT_WIDTH,
) -> str:
    """
    Number following last_number.

    'INV-0042' -> 'INV-0043'. A missing or malformed last number starts the
    sequence over at 1.
    """
    sequence = parse_invoice_sequence(last_number, prefix)
    return format_invoice_number((sequence or 0) + 1, prefix, width)


class InvoiceNumberService:
    """Atomic per-owner invoice counter in PostgreSQL."""

    def __init__(self, postgres: PostgresClient, config: InvoicingConfig | None = None):
        self.postgres = postgres
        self.config = config or InvoicingConfig()

    def next_number(self) -> str:
        """
        Allocate the next invoice number for the current owner.

        Every call consumes a number, whether or not an invoice is saved
        with it. Gaps are allowed; duplicates are not.

        Raises:
            RuntimeError: If no owner context is set
        """
        owner_id = get_current_owner_id()
        prefix = self.config.invoice_number_prefix
        pattern = f"^{re.escape(prefix)}([0-9]{{1,18}})$"

        sequence = self.postgres.execute_scalar(
            """
            INSERT INTO invoice_counters (scope_id, last_number, updated_at)
            VALUES (
                %s,
                COALESCE((
                    SELECT MAX(CAST(substring(invoice_number FROM %s) AS BIGINT))
                    FROM invoices
                    WHERE user_id = %s AND invoice_number ~ %s
                ), 0) + 1,
                %s
            )
            ON CONFLICT (scope_id) DO UPDATE
            SET last_number = GREATEST(invoice_counters.last_number, EXCLUDED.last_number - 1) + 1,
                updated_at = EXCLUDED.updated_at
            RETURNING last_number
            """,
            (owner_id, pattern, owner_id, pattern, now_utc())
        )

        number = format_invoice_number(int(sequence), prefix, self.config.invoice_number_width)
        logger.info(f"Allocated invoice number {number} for owner {owner_id}")
        return number


class LocalInvoiceCounter:
    """
    File-backed counter for a single-user local session.

    The file holds {"last_number": "INV-0042"}. A missing file starts at
    INV-0001.
    """

    def __init__(self, path: str | Path, config: InvoicingConfig | None = None):
        self.path = Path(path).expanduser()
        self.config = config or InvoicingConfig()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: InvoicingConfig) -> "LocalInvoiceCounter":
        """Counter at config.local_counter_path."""
        return cls(config.local_counter_path, config)

    def last_number(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable invoice counter {self.path}: {e}")
            return None
        return data.get("last_number") if isinstance(data, dict) else None

    def next_number(self) -> str:
        """Increment, persist, then return the new number."""
        with self._lock:
            number = increment_invoice_number(
                self.last_number(),
                self.config.invoice_number_prefix,
                self.config.invoice_number_width,
            )
            self._write(number)
            return number

    def _write(self, number: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".counter-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"last_number": number}, f)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
