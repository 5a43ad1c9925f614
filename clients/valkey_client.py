"""
Valkey (Redis-compatible) client for editing sessions and save notifications.

Thin wrapper around redis-py. Connection URL from Vault.
Fail-fast: raises on connection failure, never returns fallback values.
"""

import json
import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Redis-compatible client for Valkey.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        client.set_json("session:abc", {...}, expire_seconds=3600)
        client.publish("invoices:<owner>", {"type": "invoice_saved", ...})
    """

    def __init__(self, url: str):
        """
        Connect and ping.

        Raises:
            redis.ConnectionError: If Valkey is unreachable
        """
        self._client = redis.from_url(url, decode_responses=True)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def ping(self) -> bool:
        """True if Valkey responds. Raises redis.ConnectionError otherwise."""
        self._client.ping()
        return True

    def get(self, key: str) -> str | None:
        """Value for key, or None if the key doesn't exist."""
        return self._client.get(key)

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        if expire_seconds is not None:
            self._client.setex(key, expire_seconds, value)
        else:
            self._client.set(key, value)

    def delete(self, key: str) -> bool:
        """True if the key existed."""
        return self._client.delete(key) > 0

    def set_json(self, key: str, value: dict | list, expire_seconds: int | None = None) -> None:
        self.set(key, json.dumps(value, default=str), expire_seconds)

    def get_json(self, key: str) -> dict | list | None:
        """
        Deserialized value for key, or None if missing.

        Raises ValueError if the stored value is not valid JSON.
        """
        value = self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}")

    def publish(self, channel: str, message: dict) -> int:
        """
        Publish a JSON message on a channel.

        Returns the number of subscribers that received it (0 is not an error:
        nobody else has the owner's invoices open).
        """
        return self._client.publish(channel, json.dumps(message, default=str))

    def close(self) -> None:
        self._client.close()
        logger.info("ValkeyClient closed")
