import time
from typing import Any, Callable, Dict, Optional

from ..config.settings import CONTEXT_EXPIRY_SECONDS
from ..schemas.ai import ConversationContext
from ..utils import logger


class ContextStore:
    """In-process conversation memory keyed by session id.

    Entries expire ``expiry_seconds`` after their last write. ``set`` sweeps
    expired entries on every call, and ``get`` never hands one out even if a
    sweep has not happened yet. Nothing is shared across processes or
    persisted; a restart forgets every conversation.
    """

    def __init__(
        self,
        expiry_seconds: float = CONTEXT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.expiry_seconds = expiry_seconds
        self.clock = clock
        self._contexts: Dict[str, ConversationContext] = {}

    def __len__(self) -> int:
        return len(self._contexts)

    def _expired(self, context: ConversationContext, now: float) -> bool:
        return now - context.timestamp > self.expiry_seconds

    def get(self, session_id: Optional[str]) -> Optional[ConversationContext]:
        if not session_id:
            return None
        context = self._contexts.get(session_id)
        if context is None or self._expired(context, self.clock()):
            return None
        return context

    def set(self, session_id: str, **fields: Any) -> ConversationContext:
        """Merge ``fields`` into the session's context and stamp it now."""
        if not session_id:
            raise ValueError("session_id is required to store context")
        now = self.clock()
        existing = self._contexts.get(session_id)
        if existing is not None and not self._expired(existing, now):
            context = existing.model_copy(update={**fields, "timestamp": now})
        else:
            context = ConversationContext(session_id=session_id, timestamp=now, **fields)
        self._contexts[session_id] = context
        self.sweep(now)
        return context

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop every expired context; returns how many were removed."""
        now = self.clock() if now is None else now
        expired = [
            sid for sid, ctx in self._contexts.items() if self._expired(ctx, now)
        ]
        for sid in expired:
            del self._contexts[sid]
        if expired:
            logger.info(f"🧹 Evicted {len(expired)} expired conversation context(s)")
        return len(expired)

    def clear(self) -> None:
        self._contexts.clear()
