"""
In-memory conversation session store.

Each conversation is identified by an opaque token (carried in a cookie) and
owns an isolated ConversationSession. Sessions expire after a period of
inactivity and the store is bounded; least-recently-used sessions are evicted
first. The store lives in process memory and is touched only from the event
loop, so no locking is needed.
"""

from __future__ import annotations

import logging
import secrets
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from sermon_wizard.services.wizard.steps import Step

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 1800
DEFAULT_MAX_ENTRIES = 10000


@dataclass
class ConversationSession:
    """Answers collected so far for one in-progress wizard run."""

    conversation_id: str
    topic: str | None = None
    audience: str | None = None
    sermon_type: str | None = None
    duration: str | None = None
    last_seen: float = field(default=0.0, repr=False)

    def get_answer(self, step: Step) -> str | None:
        return getattr(self, step.slot)

    def set_answer(self, step: Step, answer: str) -> None:
        """Record the answer for a step. Last write wins."""
        setattr(self, step.slot, answer)

    def missing_fields(self) -> list[str]:
        """Slot names still unset, in step order."""
        return [step.slot for step in Step if self.get_answer(step) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def clear(self) -> None:
        for step in Step:
            setattr(self, step.slot, None)

    def answers(self) -> dict[str, str | None]:
        return {step.slot: self.get_answer(step) for step in Step}


class SessionStore:
    """Bounded TTL map of conversation id -> ConversationSession."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._sessions: OrderedDict[str, ConversationSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._sessions

    def create(self) -> ConversationSession:
        """Start a new, empty conversation with a fresh opaque id."""
        self._prune_expired()
        conversation_id = secrets.token_urlsafe(24)
        while conversation_id in self._sessions:
            conversation_id = secrets.token_urlsafe(24)
        session = ConversationSession(conversation_id=conversation_id, last_seen=self._clock())
        self._sessions[conversation_id] = session
        while len(self._sessions) > self.max_entries:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Session store full; evicted least recently used conversation")
            logger.debug("Evicted conversation %s", evicted_id)
        return session

    def get(self, conversation_id: str | None) -> ConversationSession | None:
        """Return the live session for this id and refresh its TTL, or None."""
        if not conversation_id:
            return None
        session = self._sessions.get(conversation_id)
        if session is None:
            return None
        now = self._clock()
        if now - session.last_seen > self.ttl_seconds:
            del self._sessions[conversation_id]
            return None
        session.last_seen = now
        self._sessions.move_to_end(conversation_id)
        return session

    def get_or_create(self, conversation_id: str | None) -> ConversationSession:
        session = self.get(conversation_id)
        if session is None:
            session = self.create()
        return session

    def clear(self, conversation_id: str) -> None:
        """Empty the answers of one conversation, keeping its id."""
        session = self._sessions.get(conversation_id)
        if session is not None:
            session.clear()

    def discard(self, conversation_id: str | None) -> None:
        if conversation_id:
            self._sessions.pop(conversation_id, None)

    def _prune_expired(self) -> None:
        # Entries are kept in recency order, so expired ones sit at the front.
        now = self._clock()
        pruned = 0
        while self._sessions:
            cid, oldest = next(iter(self._sessions.items()))
            if now - oldest.last_seen <= self.ttl_seconds:
                break
            del self._sessions[cid]
            pruned += 1
        if pruned:
            logger.debug("Pruned %d expired conversations", pruned)
