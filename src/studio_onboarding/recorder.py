"""
Progress Recorder.

Best-effort record of (designer_name, current_step) in the progress table.
Insert first; if the unique key on designer_name rejects it, update the
existing row instead. Last write wins per name.

Every outcome comes back as a RecordResult. Nothing here raises to the
caller: onboarding must keep working when telemetry does not.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from postgrest.exceptions import APIError
from supabase import Client

from .config import get_settings
from .db.client import get_client
from .errors import ConfigurationMissing, PersistenceFailure, UniqueConstraintConflict

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation, passed through by PostgREST
UNIQUE_VIOLATION = "23505"


class RecordStatus(Enum):
    SKIPPED = "skipped"
    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True)
class RecordResult:
    status: RecordStatus
    detail: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status == RecordStatus.OK


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_designer_name(name: str | None, fallback: str = "anonymous") -> str:
    """Trim the display name; blank or missing names become the fallback."""
    return (name or "").strip() or fallback


class ProgressRecorder:
    """
    Writes progress rows through a Supabase client.

    The client is looked up on every call, so a store that was never
    configured (or failed to initialise) turns each call into SKIPPED.
    """

    def __init__(
        self,
        client_provider: Callable[[], Client | None] = get_client,
        table: str | None = None,
        anonymous_name: str | None = None,
        clock: Callable[[], str] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        if table is None or anonymous_name is None:
            settings = get_settings()
            table = table or settings.progress_table
            anonymous_name = anonymous_name or settings.anonymous_name
        self.table = table
        self.anonymous_name = anonymous_name
        self._client_provider = client_provider
        self._clock = clock
        self._id_factory = id_factory

    async def record(self, step: int, name: str | None = None) -> RecordResult:
        """Upsert the progress row for name at step."""
        try:
            client = self._require_client()
        except ConfigurationMissing as e:
            logger.warning(f"Skipping progress record for step {step}: {e}")
            return RecordResult(RecordStatus.SKIPPED, e)

        designer_name = normalize_designer_name(name, self.anonymous_name)
        now = self._clock()
        payload = {
            "id": self._id_factory(),
            "designer_name": designer_name,
            "current_step": step,
            "is_stuck": False,
            "updated_at": now,
        }

        try:
            await asyncio.to_thread(self._insert, client, payload)
        except UniqueConstraintConflict:
            logger.info(f"Progress row exists for {designer_name!r}; updating to step {step}")
            try:
                await asyncio.to_thread(self._update, client, designer_name, step, now)
            except PersistenceFailure as e:
                logger.error(f"Progress update failed for {designer_name!r}: {e.cause}")
                return RecordResult(RecordStatus.FAILED, e)
        except PersistenceFailure as e:
            logger.error(f"Progress insert failed for {designer_name!r}: {e.cause}")
            return RecordResult(RecordStatus.FAILED, e)

        logger.debug(f"Recorded step {step} for {designer_name!r}")
        return RecordResult(RecordStatus.OK)

    def _require_client(self) -> Client:
        client = self._client_provider()
        if client is None:
            raise ConfigurationMissing("Supabase client is not configured")
        return client

    def _insert(self, client: Client, payload: dict) -> None:
        try:
            client.table(self.table).insert(payload).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise UniqueConstraintConflict(payload["designer_name"]) from e
            raise PersistenceFailure("insert", e) from e
        except Exception as e:
            raise PersistenceFailure("insert", e) from e

    def _update(self, client: Client, designer_name: str, step: int, now: str) -> None:
        try:
            response = (
                client.table(self.table)
                .update({"current_step": step, "updated_at": now})
                .eq("designer_name", designer_name)
                .execute()
            )
        except Exception as e:
            raise PersistenceFailure("update", e) from e

        if not response.data:
            # Row vanished between the conflict and the update; nothing to retry
            logger.warning(f"Progress update for {designer_name!r} matched no rows")
