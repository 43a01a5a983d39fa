"""
Request session resolution.

Decides, for one request, which session it gets:

- inbound sid exists in the store: load it, stamp data["sid"] and save it
  again, which also resets its ttl
- no sid, or an unknown/expired one: generate a fresh sid, claim it with
  SET NX and start from an empty mapping
- any failure along the way: no session at all

Every step is ordered exists -> load/create -> save. Errors never escape
resolve(); the caller always continues with the request.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from header_session.core.exceptions import HeaderSessionException
from header_session.observability.metrics import (
    record_session_failure,
    record_session_outcome,
)
from header_session.sessions.manager import SessionManager


@dataclass
class ResolvedSession:
    """Session attached to a request."""

    sid: str
    data: dict[str, Any] = field(default_factory=dict)
    created: bool = False


class SessionResolver:
    """Per-request create/reuse decision over a SessionManager."""

    def __init__(self, manager: SessionManager) -> None:
        self._manager = manager

    @property
    def manager(self) -> SessionManager:
        return self._manager

    def _fail(self, stage: str, exc: HeaderSessionException) -> None:
        record_session_failure(stage)
        record_session_outcome("none")
        if self._manager.settings.debug:
            self._manager.logger.debug(
                f"{self._manager.name}: continuing without session, {stage} failed: {exc}"
            )

    async def resolve(self, inbound_sid: Optional[str]) -> Optional[ResolvedSession]:
        """
        Resolve the session for a request carrying inbound_sid.

        Args:
            inbound_sid: Header value, or None when the header is missing.

        Returns:
            The attached session, or None if the store failed at any step.
        """
        try:
            active = await self._manager.exists(inbound_sid)
        except HeaderSessionException as e:
            self._fail("exists", e)
            return None

        if not active:
            return await self._create()

        try:
            data = await self._manager.load(inbound_sid)
        except HeaderSessionException as e:
            self._fail("load", e)
            return None

        # Record expired between exists and load: start over under the same sid
        return await self._attach(inbound_sid, data or {})

    async def _attach(self, sid: str, data: dict[str, Any]) -> Optional[ResolvedSession]:
        data["sid"] = sid
        try:
            await self._manager.save(sid, data)
        except HeaderSessionException as e:
            self._fail("save", e)
            return None

        record_session_outcome("reused")
        return ResolvedSession(sid=sid, data=data, created=False)

    async def _create(self) -> Optional[ResolvedSession]:
        while True:
            try:
                sid = await self._manager.create_sid()
            except HeaderSessionException as e:
                self._fail("create", e)
                return None

            data: dict[str, Any] = {"sid": sid}
            try:
                claimed = await self._manager.save(sid, data, claim=True)
            except HeaderSessionException as e:
                self._fail("save", e)
                return None

            if claimed:
                record_session_outcome("created")
                return ResolvedSession(sid=sid, data=data, created=True)

            # Another request claimed the same sid after our collision check
            if self._manager.settings.debug:
                self._manager.logger.debug(
                    f"{self._manager.name}: sid {sid} claimed concurrently, regenerating"
                )
