"""In-memory implementation of SessionStore."""

from uuid import UUID

from colloquy.conversation.models import Session
from colloquy.conversation.store import SessionStore
from colloquy.exceptions import ConflictError, NotFoundError


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore for testing and development.

    Stores deep copies so callers cannot mutate stored state without
    calling ``update``. Not durable.
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, Session] = {}

    async def create(self, session: Session) -> UUID:
        if session.id in self._sessions:
            raise ConflictError(f"Session already exists: {session.id}")
        self._sessions[session.id] = session.model_copy(deep=True)
        return session.id

    async def get(self, session_id: UUID) -> Session | None:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    async def update(self, session_id: UUID, session: Session) -> None:
        if session_id not in self._sessions:
            raise NotFoundError(f"Session not found: {session_id}")
        self._sessions[session_id] = session.model_copy(deep=True)

    async def delete(self, session_id: UUID) -> bool:
        return self._sessions.pop(session_id, None) is not None

    async def list(self) -> list[UUID]:
        return list(self._sessions)

    async def exists(self, session_id: UUID) -> bool:
        return session_id in self._sessions
