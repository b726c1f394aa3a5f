"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Services only ever
depend on these interfaces, so tests substitute in-memory fixtures.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from event_setup.domain import EventDraft, EventId, EventStatus, StaffRef, StoredEvent, SupervisorAccessToken


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self, status: EventStatus | None = None) -> list[StoredEvent]:
        """Return events ordered by created_at descending, optionally by status."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> StoredEvent | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def create_event(self, draft: EventDraft, status: EventStatus) -> EventId:
        """Persist a new event and return its ID."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, draft: EventDraft, status: EventStatus | None = None) -> bool:
        """Replace an event's content. Returns False if it does not exist."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event. Returns False if it does not exist."""
        ...


class StaffRoster(ABC):
    """Read-only view of the organizer's staff roster."""

    @abstractmethod
    def search(self, query: str) -> list[StaffRef]:
        """Return staff whose name or contact matches the query."""
        ...

    @abstractmethod
    def get(self, staff_id: str) -> StaffRef | None:
        """Return a staff member by ID, or None if not found."""
        ...


class SupervisorTokenIssuer(ABC):
    """Issues and looks up supervisor access tokens."""

    @abstractmethod
    def create_token(
        self, event_id: str, team_id: str, supervisor_staff_id: str, expires_at: datetime
    ) -> SupervisorAccessToken:
        """Create and persist a new active token."""
        ...

    @abstractmethod
    def find_token(self, access_token: str) -> SupervisorAccessToken | None:
        """Return the token record for a raw token string, or None."""
        ...


class LocalDraftStore(ABC):
    """Key-scoped local store for autosaved drafts."""

    @abstractmethod
    def get(self, key: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def set(self, key: str, value: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def clear(self, key: str) -> None:
        ...
