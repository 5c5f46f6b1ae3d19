"""
Session-scoped document context store.

Maps an opaque session id to the extracted text of one uploaded document so
follow-up questions can be answered without re-sending the PDF. Every entry
lives for a fixed TTL counted from creation; reads never extend it.
"""
import asyncio
import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class DocumentSession:
    id: str
    document_text: str
    created_at: float
    ttl_seconds: float

    @property
    def expires_at(self) -> float:
        return self.created_at + self.ttl_seconds

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class ContextStore(ABC):
    """Key-value interface the session controller talks to."""

    ttl_seconds: float

    @abstractmethod
    async def create(self, document_text: str) -> str:
        """Store the text under a fresh session id and schedule its expiry."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, session_id: str) -> Optional[str]:
        """Return the stored text, or None if the session is unknown or expired."""
        raise NotImplementedError

    @abstractmethod
    async def expire(self, session_id: str) -> None:
        """Remove the session if it is still present. Safe to call repeatedly."""
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        """Number of sessions that are still reachable."""
        raise NotImplementedError

    async def close(self) -> None:
        return None


class InMemoryContextStore(ContextStore):
    """
    Process-local store.

    Each entry owns a cancellable ``TimerHandle`` that deletes it once the TTL
    elapses. ``get`` also checks the clock, so an entry is never served past
    its ``expires_at`` even if the event loop has not run the timer yet.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, DocumentSession] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._lock = threading.Lock()

    async def create(self, document_text: str) -> str:
        loop = asyncio.get_running_loop()
        with self._lock:
            session_id = new_session_id()
            while session_id in self._sessions:
                session_id = new_session_id()
            self._sessions[session_id] = DocumentSession(
                id=session_id,
                document_text=document_text,
                created_at=self._clock(),
                ttl_seconds=self.ttl_seconds,
            )
            self._timers[session_id] = loop.call_later(
                self.ttl_seconds, self._on_timer, session_id
            )
        logger.info("Created session %s and stored document text (%d chars)", session_id, len(document_text))
        return session_id

    async def get(self, session_id: str) -> Optional[str]:
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None or session.is_expired(self._clock()):
            return None
        return session.document_text

    async def expire(self, session_id: str) -> None:
        if self._remove(session_id):
            logger.info("Cleared session %s from memory", session_id)

    async def count(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for s in self._sessions.values() if not s.is_expired(now))

    async def close(self) -> None:
        with self._lock:
            pending = len(self._timers)
            for handle in self._timers.values():
                handle.cancel()
            self._timers.clear()
            self._sessions.clear()
        logger.info("Context store closed, abandoned %d pending expiry timers", pending)

    def _on_timer(self, session_id: str) -> None:
        if self._remove(session_id):
            logger.info("Session %s expired after %.0fs", session_id, self.ttl_seconds)

    def _remove(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
            handle = self._timers.pop(session_id, None)
        if handle is not None:
            handle.cancel()
        return session is not None


class RedisContextStore(ContextStore):
    """Store backed by Redis; expiry is delegated to the key TTL."""

    KEY_PREFIX = "lawwise:session:"

    def __init__(self, ttl_seconds: float, redis_url: str = "redis://localhost:6379/0", client: Optional[redis.Redis] = None):
        self.ttl_seconds = ttl_seconds
        self._redis = client or redis.Redis.from_url(redis_url, decode_responses=True)

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    async def create(self, document_text: str) -> str:
        ttl_ms = int(self.ttl_seconds * 1000)
        session_id = new_session_id()
        # NX so a colliding id can never overwrite a live entry
        while not await self._redis.set(self._key(session_id), document_text, px=ttl_ms, nx=True):
            session_id = new_session_id()
        logger.info("Created session %s in redis (%d chars)", session_id, len(document_text))
        return session_id

    async def get(self, session_id: str) -> Optional[str]:
        if not session_id:
            return None
        return await self._redis.get(self._key(session_id))

    async def expire(self, session_id: str) -> None:
        if await self._redis.delete(self._key(session_id)):
            logger.info("Cleared session %s from redis", session_id)

    async def count(self) -> int:
        total = 0
        async for _ in self._redis.scan_iter(match=f"{self.KEY_PREFIX}*"):
            total += 1
        return total

    async def close(self) -> None:
        await self._redis.aclose()


def build_context_store(backend: str, ttl_seconds: float, redis_url: str = "") -> ContextStore:
    if backend == "redis":
        return RedisContextStore(ttl_seconds, redis_url=redis_url)
    return InMemoryContextStore(ttl_seconds)
