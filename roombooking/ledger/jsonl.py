"""File-backed ledger: one JSON booking per line.

Each append is a single unbuffered write followed by fsync.  If the write
fails part-way, the file is truncated back to its previous length so the
ledger never ends with a half-written record.

The file is the source of truth for sequence numbers: every append
recounts the records on disk, so several ledgers (the web service and the
CLI) can take turns writing the same path.  A record torn by a crash
(no trailing newline) is cut off before the next append and skipped when
reading.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from functools import partial
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from roombooking.ledger.base import LedgerStore, StorageError
from roombooking.models.booking import Booking, StoredBooking

logger = logging.getLogger(__name__)


class JsonlLedger(LedgerStore):
    """LedgerStore persisted to a JSONL file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run blocking file I/O in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    def _read_entries(self) -> list[StoredBooking]:
        if not self._path.exists():
            return []
        text = self._path.read_text(encoding="utf-8")
        lines = text.splitlines()
        if text and not text.endswith("\n"):
            logger.warning("Ignoring torn record at end of %s", self._path)
            lines = lines[:-1]

        entries: list[StoredBooking] = []
        for lineno, line in enumerate(lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(StoredBooking.model_validate(json.loads(line)))
            except (json.JSONDecodeError, ValidationError) as e:
                raise StorageError(
                    f"Ledger {self._path} is corrupted at line {lineno}: {e}"
                ) from e
        return entries

    def _append_record(self, booking: Booking) -> StoredBooking:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "a+b", buffering=0) as f:
            f.seek(0)
            existing = f.read()
            if existing and not existing.endswith(b"\n"):
                keep = existing.rfind(b"\n") + 1
                logger.warning(
                    "Truncating torn record in %s (%d bytes)",
                    self._path,
                    len(existing) - keep,
                )
                f.truncate(keep)
                existing = existing[:keep]

            count = sum(1 for line in existing.splitlines() if line.strip())
            stored = StoredBooking(**booking.model_dump(), seq=count + 1)
            line = json.dumps(stored.to_wire(), ensure_ascii=False) + "\n"

            start = len(existing)
            try:
                view = memoryview(line.encode("utf-8"))
                while view:
                    written = f.write(view)
                    view = view[written:]
                os.fsync(f.fileno())
            except OSError:
                f.truncate(start)
                raise
        return stored

    # ------------------------------------------------------------------
    # LedgerStore interface
    # ------------------------------------------------------------------

    async def append(self, booking: Booking) -> StoredBooking:
        async with self._lock:
            try:
                stored = await self._run_in_executor(self._append_record, booking)
            except OSError as e:
                logger.error("Ledger append failed (%s): %s", self._path, e)
                raise StorageError(f"Could not write to ledger {self._path}: {e}") from e

            logger.debug("Ledger append seq=%d (%s)", stored.seq, self._path)
            return stored

    async def list_all(self) -> list[StoredBooking]:
        try:
            return await self._run_in_executor(self._read_entries)
        except OSError as e:
            raise StorageError(f"Could not read ledger {self._path}: {e}") from e
