"""
Session identifier generation.

Identifiers are sid_length symbols drawn from a 62-symbol alphabet
(digits, uppercase, lowercase). Each symbol comes from one byte of
secrets.token_bytes mapped with floor(byte * 62 / 256).

A generated identifier is checked against the store and regenerated on
collision. With 40 symbols the space is 62**40, so the retry loop is
effectively never taken more than once.
"""

import secrets
import string
from typing import Any, Optional

from header_session.core.exceptions import StoreError
from header_session.observability.logging import get_logger, resolve_logger
from header_session.sessions.store import RedisSessionStore


SID_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


class SidGenerator:
    """
    Generates session identifiers unique among live sessions.

    Args:
        store: Store used for the collision check.
        sid_length: Number of symbols per identifier.
        debug: Log generation details and collision-check failures.
        logger: Logger exposing debug/info/error.
    """

    def __init__(
        self,
        store: RedisSessionStore,
        sid_length: int = 40,
        debug: bool = False,
        logger: Optional[Any] = None,
    ) -> None:
        if sid_length < 1:
            raise ValueError("sid_length must be at least 1")
        self._store = store
        self._sid_length = sid_length
        self._debug = debug
        self._logger = resolve_logger(logger) if logger is not None else get_logger(__name__)

    @property
    def sid_length(self) -> int:
        return self._sid_length

    def generate(self) -> str:
        """Return a random identifier without consulting the store."""
        size = len(SID_ALPHABET)
        return "".join(
            SID_ALPHABET[byte * size // 256]
            for byte in secrets.token_bytes(self._sid_length)
        )

    async def create_sid(self) -> str:
        """
        Return an identifier not currently used by a live session.

        Raises:
            StoreError: If the collision check cannot reach the store.
        """
        while True:
            sid = self.generate()
            try:
                taken = await self._store.exists(sid)
            except StoreError as e:
                if self._debug:
                    self._logger.error(f"session: sid creation ERROR: {e}")
                raise
            if not taken:
                break
            if self._debug:
                self._logger.debug("session: sid collision, regenerating")

        if self._debug:
            self._logger.debug(f"session: sid created {sid}")
        return sid
