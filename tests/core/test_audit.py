"""Tests for the audit trail."""

from uuid import uuid4

import pytest
from psycopg2.extras import Json

from core.audit import AuditAction, AuditLogger, compute_changes


class TestComputeChanges:

    def test_reports_changed_fields_only(self):
        changes = compute_changes(
            {"notes": "a", "status": "draft", "updated_at": "t1"},
            {"notes": "b", "status": "draft", "updated_at": "t2"},
        )
        assert changes == {"notes": {"old": "a", "new": "b"}}

    def test_added_and_removed_keys(self):
        changes = compute_changes({"a": 1}, {"b": 2})
        assert changes == {"a": {"old": 1, "new": None}, "b": {"old": None, "new": 2}}

    def test_custom_exclusions(self):
        assert compute_changes({"a": 1}, {"a": 2}, exclude_fields={"a"}) == {}


class TestAuditLogger:

    def test_log_change_uses_owner_context(self, db, as_test_owner):
        entity_id = uuid4()
        AuditLogger(db).log_change("invoice", entity_id, AuditAction.CREATE, {"created": {"x": 1}})

        query, params = db.execute.call_args.args
        assert "INSERT INTO audit_log" in query
        assert params[1] == as_test_owner
        assert params[2:5] == ("invoice", entity_id, "create")
        assert isinstance(params[5], Json)

    def test_explicit_owner(self, db, test_owner_b_id):
        AuditLogger(db).log_change("template", uuid4(), AuditAction.DELETE, {}, owner_id=test_owner_b_id)
        assert db.execute.call_args.args[1][1] == test_owner_b_id

    def test_requires_owner(self, db):
        with pytest.raises(RuntimeError, match="No owner context"):
            AuditLogger(db).log_change("invoice", uuid4(), AuditAction.UPDATE, {})
        db.execute.assert_not_called()
