"""Tests for ValkeyClient - session store and save notifications."""

import json
from unittest.mock import patch

import pytest
import redis

from clients.valkey_client import ValkeyClient


@pytest.fixture
def redis_mock():
    with patch("clients.valkey_client.redis.from_url") as from_url:
        yield from_url.return_value


@pytest.fixture
def client(redis_mock):
    return ValkeyClient("redis://localhost:6379/0")


class TestValkeyClientInit:
    """Connection initialization."""

    def test_pings_on_connect(self, redis_mock):
        """Constructor pings so a bad URL fails fast."""
        ValkeyClient("redis://localhost:6379/0")
        redis_mock.ping.assert_called_once()

    def test_unreachable_raises(self, redis_mock):
        redis_mock.ping.side_effect = redis.ConnectionError("refused")
        with pytest.raises(redis.ConnectionError):
            ValkeyClient("redis://localhost:6379/0")

    def test_ping_after_connect(self, client, redis_mock):
        assert client.ping() is True
        assert redis_mock.ping.call_count == 2


class TestBasicOperations:
    """Get/set/delete operations."""

    def test_set_with_expiry_uses_setex(self, client, redis_mock):
        client.set("k", "v", expire_seconds=60)
        redis_mock.setex.assert_called_once_with("k", 60, "v")

    def test_set_without_expiry(self, client, redis_mock):
        client.set("k", "v")
        redis_mock.set.assert_called_once_with("k", "v")

    def test_delete_reports_existence(self, client, redis_mock):
        redis_mock.delete.return_value = 0
        assert client.delete("missing") is False
        redis_mock.delete.return_value = 1
        assert client.delete("present") is True


class TestJson:
    """JSON helpers."""

    def test_get_json(self, client, redis_mock):
        redis_mock.get.return_value = '{"user_id": "abc"}'
        assert client.get_json("session:t") == {"user_id": "abc"}

    def test_get_json_missing(self, client, redis_mock):
        redis_mock.get.return_value = None
        assert client.get_json("session:t") is None

    def test_get_json_invalid_raises(self, client, redis_mock):
        """Corrupt values fail loudly rather than returning a fallback."""
        redis_mock.get.return_value = "{oops"
        with pytest.raises(ValueError, match="Invalid JSON"):
            client.get_json("session:t")


class TestPublish:

    def test_publish_serializes_message(self, client, redis_mock):
        redis_mock.publish.return_value = 2

        receivers = client.publish("invoices:1", {"type": "invoice_saved", "invoice_number": "INV-0001"})

        assert receivers == 2
        channel, payload = redis_mock.publish.call_args.args
        assert channel == "invoices:1"
        assert json.loads(payload) == {"type": "invoice_saved", "invoice_number": "INV-0001"}
