"""SessionStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from colloquy.conversation.models import Session


class SessionStore(ABC):
    """Abstract interface for session storage.

    Each call is atomic on its own; callers that read, modify and write
    back a session serialize that sequence themselves.
    """

    @abstractmethod
    async def create(self, session: Session) -> UUID:
        """Store a new session.

        Raises:
            ConflictError: If a session with the same id exists
        """
        pass

    @abstractmethod
    async def get(self, session_id: UUID) -> Session | None:
        """Get a session by ID."""
        pass

    @abstractmethod
    async def update(self, session_id: UUID, session: Session) -> None:
        """Replace a stored session.

        Raises:
            NotFoundError: If no session has this id
        """
        pass

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        """Delete a session; returns whether it existed."""
        pass

    @abstractmethod
    async def list(self) -> list[UUID]:
        """List all session ids."""
        pass

    async def exists(self, session_id: UUID) -> bool:
        return await self.get(session_id) is not None
