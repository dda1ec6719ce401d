"""In-memory read cache invalidated by database commits"""

import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set, Union

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from app.core.logging import get_logger

logger = get_logger(__name__)

_TOUCHED_KEY = "cache_touched_tables"


@dataclass
class _Entry:
    value: Any
    stored_at: float
    ttl: float


class DataCache:
    """
    Expiring key/value store for read query results.

    Keys are namespaced by table, e.g. ``bills:resident:<id>:False``. A
    session passed to :meth:`watch` reports which tables it wrote, and every
    key under ``<table>:`` is dropped once that session commits.

    Example:
        ```python
        cache = DataCache(default_ttl=120)
        cache.watch(session)
        bills = cache.get("bills:admin:all:True")
        if bills is None:
            bills = await load_bills(session)
            cache.set("bills:admin:all:True", bills)
        ```
    """

    def __init__(self, default_ttl: float = 120.0, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > entry.ttl:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = _Entry(
            value=value,
            stored_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``; returns how many went."""
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def invalidate_pattern(self, pattern: Union[str, "re.Pattern[str]"]) -> int:
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        doomed = [key for key in self._entries if regex.search(key)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        return {"size": len(self._entries), "keys": sorted(self._entries)}

    # Commit observer

    def watch(self, session: Union[AsyncSession, Session]) -> None:
        """Invalidate touched tables whenever ``session`` commits."""
        sync_session = session.sync_session if isinstance(session, AsyncSession) else session
        event.listen(sync_session, "after_flush", self._on_flush)
        event.listen(sync_session, "after_commit", self._on_commit)
        event.listen(sync_session, "after_soft_rollback", self._on_rollback)

    def _on_flush(self, session: Session, flush_context: Any) -> None:
        touched: Set[str] = session.info.setdefault(_TOUCHED_KEY, set())
        for obj in (*session.new, *session.dirty, *session.deleted):
            table = getattr(obj, "__tablename__", None)
            if table:
                touched.add(table)

    def _on_commit(self, session: Session) -> None:
        touched: Set[str] = session.info.pop(_TOUCHED_KEY, set())
        for table in sorted(touched):
            dropped = self.invalidate_prefix(f"{table}:")
            if dropped:
                logger.debug("Invalidated cached reads", extra={"table": table, "keys": dropped})

    def _on_rollback(self, session: Session, previous_transaction: Any) -> None:
        session.info.pop(_TOUCHED_KEY, None)
