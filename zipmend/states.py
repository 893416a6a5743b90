from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Dict, Optional

from zipmend.models import ProcessingOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingZip:
    """A diagnosed ZIP waiting for the user to press Fix."""
    file_id: str
    file_name: str
    options: ProcessingOptions
    expires_at: datetime


class PendingStore:
    """
    In-memory store of the last diagnosed ZIP per user.
    Presentation state only; the engine itself keeps nothing between calls.
    """
    def __init__(self, ttl_seconds: int = 900, cleanup_interval: int = 300):
        self._items: Dict[int, PendingZip] = {}
        self._ttl = ttl_seconds
        self._cleanup_interval = cleanup_interval
        self._cleanup_task: Optional[asyncio.Task] = None

    def _ensure_cleanup_task(self):
        if self._cleanup_task is None or self._cleanup_task.done():
            try:
                self._cleanup_task = asyncio.get_running_loop().create_task(self._cleanup_expired())
            except RuntimeError:
                # no running loop yet, started on the next call from a handler
                pass

    async def _cleanup_expired(self):
        while True:
            await asyncio.sleep(self._cleanup_interval)
            removed = self.purge_expired()
            if removed:
                logger.info(f"Dropped {removed} expired pending ZIPs")

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        expired = [uid for uid, item in self._items.items() if now > item.expires_at]
        for uid in expired:
            del self._items[uid]
        return len(expired)

    def put(self, user_id: int, file_id: str, file_name: str, options: ProcessingOptions) -> PendingZip:
        self._ensure_cleanup_task()
        item = PendingZip(file_id, file_name, options, datetime.now() + timedelta(seconds=self._ttl))
        self._items[user_id] = item
        return item

    def get(self, user_id: int) -> Optional[PendingZip]:
        item = self._items.get(user_id)
        if item is None:
            return None
        if datetime.now() > item.expires_at:
            del self._items[user_id]
            return None
        return item

    def toggle(self, user_id: int, option: str) -> Optional[PendingZip]:
        item = self.get(user_id)
        if item is None:
            return None
        item = replace(item, options=item.options.toggled(option))
        self._items[user_id] = item
        return item

    def pop(self, user_id: int) -> Optional[PendingZip]:
        item = self.get(user_id)
        self._items.pop(user_id, None)
        return item
