"""
Health Diary Client — Entry Service
====================================

What:  The single place components get diary entries from.
Why:   Calendar, chart, list and dashboard all want the full entry list at
       about the same moment; they should cost one request, not four.

Cache rules:
    - One snapshot of the caller's entries plus the time it was fetched.
      Either complete (one successful fetch) or empty, never partial.
    - Fresh while clock() - last_fetch_time < cache_lifetime; a fresh hit
      returns the very same list object.
    - Concurrent misses share one fetch task. Awaiters are shielded, so a
      cancelled caller does not cancel the fetch the others are waiting on.
    - Any create/update/delete, successful or not, empties the cache.
    - A fetch that started before an invalidation never writes its result
      into the cache (generation counter), though its awaiters still get it.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from healthdiary_client.core.http_client import HttpClient
from healthdiary_client.models import DiaryEntry
from healthdiary_client.utils.date_utils import to_iso_date

logger = logging.getLogger(__name__)


class EntryService:

    def __init__(
        self,
        http: HttpClient,
        cache_lifetime: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.http = http
        self.cache_lifetime = cache_lifetime
        self.clock = clock

        self.cache: Optional[List[DiaryEntry]] = None
        self.last_fetch_time: Optional[float] = None
        self.pending_request: Optional[asyncio.Future] = None
        self._generation = 0

    # ── Cache ─────────────────────────────────────────────────────────────

    def _is_fresh(self) -> bool:
        return (
            self.cache is not None
            and self.last_fetch_time is not None
            and self.clock() - self.last_fetch_time < self.cache_lifetime
        )

    def clear_cache(self) -> None:
        self.cache = None
        self.last_fetch_time = None
        self.pending_request = None
        self._generation += 1
        logger.debug("Entry cache cleared (generation %d)", self._generation)

    async def _fetch(self, generation: int) -> List[DiaryEntry]:
        try:
            data = await self.http.get("/entries")
            entries = [DiaryEntry.model_validate(item) for item in data or []]
        except Exception as e:
            logger.error("Error fetching entries: %s", str(e))
            if generation == self._generation:
                self.cache = None
                self.last_fetch_time = None
                self.pending_request = None
            raise

        if generation == self._generation:
            self.cache = entries
            self.last_fetch_time = self.clock()
            self.pending_request = None
            logger.info("Fetched %d entries", len(entries))
        else:
            logger.debug("Discarding fetch result from invalidated generation %d", generation)
        return entries

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_all_entries(self) -> List[DiaryEntry]:
        if self._is_fresh():
            logger.debug("Returning entries from cache")
            return self.cache

        if self.pending_request is None:
            logger.debug("Fetching entries from server")
            self.pending_request = asyncio.ensure_future(self._fetch(self._generation))
        else:
            logger.debug("Request already in progress, waiting")

        return await asyncio.shield(self.pending_request)

    async def get_entry_by_id(self, entry_id: Any) -> DiaryEntry:
        """Served from the cache when it holds the entry; never fills the cache."""
        entry_id = int(entry_id)
        if self.cache:
            for entry in self.cache:
                if entry.entry_id == entry_id:
                    logger.debug("Returning entry %d from cache", entry_id)
                    return entry

        data = await self.http.get(f"/entries/{entry_id}")
        return DiaryEntry.model_validate(data)

    # ── Writes ────────────────────────────────────────────────────────────

    @staticmethod
    def _prepare(data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {}
        for key, value in dict(data).items():
            payload[key] = value.value if isinstance(value, Enum) else value
        if payload.get("entry_date"):
            payload["entry_date"] = to_iso_date(payload["entry_date"])
        return payload

    async def create_entry(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._prepare(data)
        logger.info("Creating entry for %s", payload.get("entry_date"))
        self.clear_cache()
        try:
            return await self.http.post("/entries", payload)
        finally:
            # A fetch started during the write may hold pre-write data
            self.clear_cache()

    async def update_entry(self, entry_id: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._prepare(data)
        logger.info("Updating entry %s: %s", entry_id, sorted(payload))
        self.clear_cache()
        try:
            return await self.http.put(f"/entries/{entry_id}", payload)
        finally:
            self.clear_cache()

    async def delete_entry(self, entry_id: Any) -> Dict[str, Any]:
        logger.info("Deleting entry %s", entry_id)
        self.clear_cache()
        try:
            return await self.http.delete(f"/entries/{entry_id}")
        finally:
            self.clear_cache()
