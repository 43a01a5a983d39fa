"""
Session Manager - Session record operations.

SessionManager owns the settings and the store handle and implements the
record-level operations used by the request middleware and by host code:
save, load, refresh, exists, destroy, destroy_all, get_all_keys and
disconnect.

Errors are raised, never returned:
- InvalidArgumentError: an operation needing a sid received none
- StoreError: Redis failed (logged here when debug is on)
- OperationNotPermittedError: an admin operation ran outside admin mode

exists() is the one sid-taking operation that accepts a missing sid; it
answers False so the middleware can treat "no header" and "unknown sid"
alike.

Pattern: Service layer over the store repository
"""

import json
from typing import Any, Optional

from header_session.core.config import SessionSettings, get_settings
from header_session.core.exceptions import (
    InvalidArgumentError,
    OperationNotPermittedError,
    StoreError,
)
from header_session.observability.logging import get_logger, resolve_logger
from header_session.observability.metrics import record_admin_operation
from header_session.sessions.identifiers import SidGenerator
from header_session.sessions.store import RedisSessionStore


class SessionManager:
    """
    Store-backed session record operations.

    Args:
        store: RedisSessionStore instance for persistence operations.
        settings: Session settings. Defaults to the settings singleton.
        logger: Object exposing debug/info/error, or only log().
            Defaults to a structlog logger.
        sid_generator: Identifier generator. Built from settings when omitted.

    Example:
        >>> manager = SessionManager.from_settings(SessionSettings(debug=True))
        >>> await manager.save("abc", {"sid": "abc", "user": 1})
        True
        >>> await manager.load("abc")
        {'sid': 'abc', 'user': 1}
    """

    name = "session"

    def __init__(
        self,
        store: RedisSessionStore,
        settings: Optional[SessionSettings] = None,
        logger: Optional[Any] = None,
        sid_generator: Optional[SidGenerator] = None,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()

        if logger is None:
            self._logger = get_logger(
                "header_session.sessions", level=self._settings.effective_log_level
            )
        else:
            self._logger = resolve_logger(logger)

        self._sid_generator = sid_generator or SidGenerator(
            store,
            sid_length=self._settings.sid_length,
            debug=self._settings.debug,
            logger=self._logger,
        )

    @classmethod
    def from_settings(
        cls,
        settings: SessionSettings,
        logger: Optional[Any] = None,
    ) -> "SessionManager":
        """Build a manager together with its Redis-backed store."""
        if logger is None:
            logger = get_logger(
                "header_session.sessions", level=settings.effective_log_level
            )
        store = RedisSessionStore.from_settings(settings, logger=logger)
        return cls(store=store, settings=settings, logger=logger)

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def store(self) -> RedisSessionStore:
        return self._store

    @property
    def logger(self) -> Any:
        return self._logger

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_sid(self, sid: Optional[str], operation: str) -> str:
        if not sid:
            if self._settings.debug:
                self._logger.debug(f"{self.name}: {operation} called without sid")
            raise InvalidArgumentError("no sid given")
        return sid

    def _log_store_error(self, message: str, exc: StoreError) -> None:
        if self._settings.debug:
            self._logger.error(f"{self.name}: {message} ERROR: {exc}")

    def _require_admin(self, operation: str, description: str) -> None:
        permitted = bool(self._settings.allow_admin_operations)
        record_admin_operation(operation, permitted)
        if not permitted:
            message = f"unable to {description} when admin operations are disabled"
            self._logger.debug(f"{self.name}: {message}")
            raise OperationNotPermittedError(message, operation=operation)

    # =========================================================================
    # Identifier Generation
    # =========================================================================

    async def create_sid(self) -> str:
        """Return a fresh identifier not used by any live session."""
        return await self._sid_generator.create_sid()

    # =========================================================================
    # Record Operations
    # =========================================================================

    async def save(
        self,
        sid: Optional[str],
        data: dict[str, Any],
        claim: bool = False,
    ) -> bool:
        """
        Save session data.

        Uses SET when persist is on, otherwise SETEX with the configured ttl.

        Args:
            sid: Session identifier.
            data: JSON-serializable session data.
            claim: Only write if no record exists under sid (SET NX).

        Returns:
            True if the record was written; False only when claim is set
            and the sid was already taken.

        Raises:
            InvalidArgumentError: If sid is empty.
            StoreError: If Redis fails.
        """
        sid = self._require_sid(sid, "save")
        info = json.dumps(data)

        try:
            if self._settings.persist:
                return await self._store.set(sid, info, only_if_absent=claim)
            return await self._store.set_with_expiry(
                sid, info, self._settings.ttl, only_if_absent=claim
            )
        except StoreError as e:
            self._log_store_error(f"saving sid {sid}", e)
            raise

    async def load(self, sid: Optional[str]) -> Optional[dict[str, Any]]:
        """
        Load session data.

        Returns:
            The stored mapping, or None if no live record exists.

        Raises:
            InvalidArgumentError: If sid is empty.
            StoreError: If Redis fails or the record is not a JSON object.
        """
        sid = self._require_sid(sid, "load")

        try:
            info = await self._store.get(sid)
        except StoreError as e:
            self._log_store_error(f"sid {sid} loading", e)
            raise

        if info is None:
            return None

        try:
            data = json.loads(info)
        except ValueError as e:
            raise StoreError(
                f"Corrupt session record {sid}: {e}", operation="decode", key=sid
            ) from e
        if not isinstance(data, dict):
            raise StoreError(
                f"Corrupt session record {sid}: not an object",
                operation="decode",
                key=sid,
            )
        return data

    async def refresh(self, sid: Optional[str]) -> bool:
        """
        Reset the ttl of a session.

        Returns:
            True if the session is still active. Always True when persist
            is on, without touching the store.

        Raises:
            InvalidArgumentError: If sid is empty.
            StoreError: If Redis fails.
        """
        sid = self._require_sid(sid, "refresh")
        if self._settings.persist:
            return True

        try:
            return await self._store.refresh_expiry(sid, self._settings.ttl)
        except StoreError as e:
            self._log_store_error(f"sid {sid} refreshing", e)
            raise

    async def exists(self, sid: Optional[str]) -> bool:
        """
        Check if a session identifier exists.

        A missing sid is not an error here: it simply does not exist.

        Raises:
            StoreError: If Redis fails.
        """
        if not sid:
            return False

        try:
            return await self._store.exists(sid)
        except StoreError as e:
            self._log_store_error(f"sid {sid} existence check", e)
            raise

    async def destroy(self, sid: Optional[str]) -> int:
        """
        Destroy a session.

        Returns:
            Number of records removed (0 or 1).

        Raises:
            InvalidArgumentError: If sid is empty.
            StoreError: If Redis fails.
        """
        sid = self._require_sid(sid, "destroy")

        try:
            removed = await self._store.delete(sid)
        except StoreError as e:
            self._log_store_error(f"sid {sid} destroying", e)
            raise

        if self._settings.debug:
            self._logger.debug(f"{self.name}: sid {sid} destroyed")
        return removed

    # =========================================================================
    # Administrative Operations
    # =========================================================================

    async def destroy_all(self) -> int:
        """
        Destroy every session record. Irreversible; meant for test setups.

        Returns:
            Number of records removed.

        Raises:
            OperationNotPermittedError: If admin operations are disabled.
            StoreError: If Redis fails.
        """
        self._require_admin("destroy_all", "destroy all sessions")

        removed = await self._store.delete_all()
        self._logger.info(f"{self.name}: destroyed {removed} sessions")
        return removed

    async def get_all_keys(self) -> list[str]:
        """
        List the identifiers of every stored session.

        Raises:
            OperationNotPermittedError: If admin operations are disabled.
            StoreError: If Redis fails.
        """
        self._require_admin("get_all_keys", "get all session identifiers")
        return await self._store.list_keys("*")

    # =========================================================================
    # Connection
    # =========================================================================

    async def connect(self) -> None:
        """Open the store connection."""
        await self._store.connect()

    async def disconnect(self) -> None:
        """Close the store connection."""
        await self._store.disconnect()
