"""
Session Store - Redis Store Adapter

This module provides the thin Redis wrapper used by the session layer.

Every key handled here lives under a reserved namespace (key_prefix), so bulk
operations (delete_all, list_keys) never touch keys owned by other
subsystems sharing the same Redis database.

Backend failures are raised as StoreError with the failed operation and key;
each failure is also logged and dispatched to "error" listeners.

Pattern: Repository pattern
Pattern: Dependency injection for Redis client
"""

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from redis.asyncio import Redis
from redis.exceptions import RedisError

from header_session.core.config import SessionSettings
from header_session.core.exceptions import StoreError
from header_session.observability.logging import get_logger, resolve_logger
from header_session.observability.metrics import record_store_error


Listener = Callable[..., Union[None, Awaitable[None]]]

STORE_EVENTS = ("connect", "error", "end")

# Keys requested per SCAN call in bulk operations
_SCAN_COUNT = 100


def _decode(value: Union[bytes, str]) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisSessionStore:
    """
    Redis-based key/value store for session records.

    Attributes:
        _redis: The Redis client instance.
        _key_prefix: Prefix for Redis keys.
        _listeners: Lifecycle callbacks per event.

    Example:
        >>> import redis.asyncio as redis
        >>> client = redis.Redis(host="127.0.0.1", port=6379)
        >>> store = RedisSessionStore(redis_client=client)
        >>> await store.set_with_expiry("abc", '{"sid": "abc"}', 600)
        >>> await store.get("abc")
        '{"sid": "abc"}'
    """

    def __init__(
        self,
        redis_client: Redis,
        key_prefix: str = "session:",
        logger: Optional[Any] = None,
    ) -> None:
        """
        Initialize RedisSessionStore with Redis client.

        Args:
            redis_client: Async Redis client instance.
            key_prefix: Namespace prepended to every session key.
            logger: Logger exposing info/error. Defaults to a structlog logger.
        """
        self._redis: Redis = redis_client
        self._key_prefix: str = key_prefix
        self._logger = resolve_logger(logger) if logger is not None else get_logger(__name__)
        self._listeners: dict[str, list[Listener]] = {e: [] for e in STORE_EVENTS}
        self._connected: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: SessionSettings,
        logger: Optional[Any] = None,
    ) -> "RedisSessionStore":
        """
        Build a store and its Redis client from connection settings.

        The client is lazy: no network I/O happens until connect() or the
        first operation.
        """
        con = settings.connection
        password = con.password.get_secret_value() or None
        client = Redis(
            host=con.host,
            port=con.port,
            db=con.db or 0,
            username=con.username,
            password=password,
            decode_responses=True,
        )
        return cls(redis_client=client, key_prefix=settings.key_prefix, logger=logger)

    # =========================================================================
    # Keys
    # =========================================================================

    @property
    def key_prefix(self) -> str:
        return self._key_prefix

    def _make_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def _strip_key(self, key: Union[bytes, str]) -> str:
        key = _decode(key)
        if key.startswith(self._key_prefix):
            return key[len(self._key_prefix):]
        return key

    # =========================================================================
    # Lifecycle Events
    # =========================================================================

    def add_listener(self, event: str, callback: Listener) -> None:
        """
        Register a callback for a connection lifecycle event.

        Args:
            event: "connect", "error" (called with the exception) or "end".
            callback: Plain function or coroutine function.

        Raises:
            ValueError: If the event name is unknown.
        """
        if event not in self._listeners:
            raise ValueError(f"Unknown store event: {event}")
        self._listeners[event].append(callback)

    async def _emit(self, event: str, *args: Any) -> None:
        # A failing listener never replaces the store result or error
        for callback in self._listeners[event]:
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._logger.error(
                    f"session store: {event} listener {callback!r} raised: {e}"
                )

    async def _fail(
        self, operation: str, key: Optional[str], exc: RedisError
    ) -> StoreError:
        self._logger.error(
            f"session store: database ERROR during {operation} (key={key}): {exc}"
        )
        record_store_error(operation)
        await self._emit("error", exc)
        return StoreError(
            f"Redis {operation} failed: {exc}",
            operation=operation,
            key=key,
        )

    @property
    def connected(self) -> bool:
        """True between a successful connect() and disconnect()."""
        return self._connected

    async def connect(self) -> None:
        """
        Open the connection by pinging Redis.

        Raises:
            StoreError: If Redis cannot be reached.
        """
        try:
            await self._redis.ping()
        except RedisError as e:
            self._connected = False
            raise await self._fail("ping", None, e) from e

        self._connected = True
        self._logger.info("session store: connected to Redis database")
        await self._emit("connect")

    async def disconnect(self) -> None:
        """Close the Redis connection once in-flight commands have finished."""
        await self._redis.aclose()
        self._connected = False
        self._logger.info("session store: disconnected from Redis database")
        await self._emit("end")

    async def ping(self) -> bool:
        """Return True if Redis answers, False otherwise."""
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            self._logger.error(f"session store: ping failed: {e}")
            return False

    # =========================================================================
    # Key/Value Operations
    # =========================================================================

    async def exists(self, key: str) -> bool:
        """Check whether a key exists."""
        try:
            return await self._redis.exists(self._make_key(key)) > 0
        except RedisError as e:
            raise await self._fail("exists", key, e) from e

    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        try:
            value = await self._redis.get(self._make_key(key))
        except RedisError as e:
            raise await self._fail("get", key, e) from e
        return None if value is None else _decode(value)

    async def set(self, key: str, value: str, only_if_absent: bool = False) -> bool:
        """
        Store a value without expiry.

        Args:
            key: Session key (without prefix).
            value: Serialized value.
            only_if_absent: Write only if the key does not exist (SET NX).

        Returns:
            True if the value was written.
        """
        try:
            result = await self._redis.set(
                self._make_key(key), value, nx=only_if_absent
            )
        except RedisError as e:
            raise await self._fail("set", key, e) from e
        return bool(result)

    async def set_with_expiry(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        only_if_absent: bool = False,
    ) -> bool:
        """
        Store a value that Redis evicts after ttl_seconds.

        Returns:
            True if the value was written.
        """
        full_key = self._make_key(key)
        try:
            if only_if_absent:
                result = await self._redis.set(full_key, value, ex=ttl_seconds, nx=True)
            else:
                result = await self._redis.setex(full_key, ttl_seconds, value)
        except RedisError as e:
            raise await self._fail("setex", key, e) from e
        return bool(result)

    async def delete(self, key: str) -> int:
        """Delete a key and return the number of keys removed."""
        try:
            return int(await self._redis.delete(self._make_key(key)))
        except RedisError as e:
            raise await self._fail("del", key, e) from e

    async def refresh_expiry(self, key: str, ttl_seconds: int) -> bool:
        """Reset a key's TTL. Returns True iff the key existed."""
        try:
            return bool(await self._redis.expire(self._make_key(key), ttl_seconds))
        except RedisError as e:
            raise await self._fail("expire", key, e) from e

    # =========================================================================
    # Bulk Operations (namespace-scoped)
    # =========================================================================

    async def list_keys(self, pattern: str = "*") -> list[str]:
        """
        List keys in the session namespace matching a glob pattern.

        Returns:
            Keys with the namespace prefix removed.
        """
        match = self._make_key(pattern)
        keys: list[str] = []
        try:
            cursor = 0
            while True:
                cursor, batch = await self._redis.scan(cursor, match=match, count=_SCAN_COUNT)
                keys.extend(self._strip_key(key) for key in batch)
                if cursor == 0:
                    break
        except RedisError as e:
            raise await self._fail("scan", pattern, e) from e
        # SCAN may return a key more than once
        return list(dict.fromkeys(keys))

    async def delete_all(self) -> int:
        """
        Irreversibly delete every key in the session namespace.

        Returns:
            Number of keys removed.
        """
        match = self._make_key("*")
        deleted = 0
        try:
            cursor = 0
            while True:
                cursor, keys = await self._redis.scan(cursor, match=match, count=_SCAN_COUNT)
                if keys:
                    deleted += await self._redis.delete(*keys)
                if cursor == 0:
                    break
        except RedisError as e:
            raise await self._fail("del", None, e) from e
        return int(deleted)
