"""Event service - orchestration over the event storage collaborator.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from datetime import date
from typing import Callable, NoReturn

from event_setup.domain import CalendarEventRecord, EventDraft, EventId, EventStatus, StoredEvent
from event_setup.domain.errors import (
    EventNotFoundError,
    InvalidEventIdError,
    PersistenceError,
    StepValidationError,
    ValidationError,
)
from event_setup.services.step_validator import validate_through
from event_setup.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


def status_for(draft: EventDraft, today: date) -> EventStatus:
    """Derive the live status of a submitted event from its dates."""
    start = draft.start_date or today
    end = draft.end_date if draft.is_multi_day and draft.end_date else start
    if today < start:
        return EventStatus.UPCOMING
    if today > end:
        return EventStatus.ENDED
    return EventStatus.ONGOING


class EventService:
    """Service for creating, updating and drafting events."""

    def __init__(self, store: EventStore, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today

    def list_events(self, status: str | None = None) -> list[StoredEvent]:
        """Return all events, optionally filtered by status."""
        wanted = None
        if status:
            try:
                wanted = EventStatus(status)
            except ValueError as exc:
                raise ValidationError(f"Unknown event status: {status}") from exc
        return self._store.list_events(wanted)

    def get_event(self, event_id: str) -> StoredEvent:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(self._parse_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(self, draft: EventDraft) -> str:
        """Validate every editable step and store the event as live.

        Raises:
            StepValidationError: If any wizard step is invalid.
            PersistenceError: If the store fails.
        """
        self._require_valid(draft)
        status = status_for(draft, self._today())
        try:
            event_id = self._store.create_event(draft, status)
        except Exception as exc:
            self._storage_failed("create event", exc, "Failed to create event. Please try again.")
        logger.info("Created event %s (%s)", event_id, draft.name)
        return str(event_id)

    def update_event(self, event_id: str, draft: EventDraft) -> None:
        """Replace an existing event's content.

        A draft being completed through the wizard becomes a live event.
        """
        current = self.get_event(event_id)
        self._require_valid(draft)
        status = None
        if current.status == EventStatus.DRAFT:
            status = status_for(draft, self._today())
        try:
            updated = self._store.update_event(EventId.from_string(current.id), draft, status)
        except Exception as exc:
            self._storage_failed("update event", exc, "Failed to update event. Please try again.")
        if not updated:
            raise EventNotFoundError(event_id)
        logger.info("Updated event %s", event_id)

    def save_draft(self, draft: EventDraft, existing_id: str | None = None) -> str:
        """Store a draft-status event, creating it or overwriting an existing draft.

        Live events are never demoted back to drafts.
        """
        message = "Failed to save draft. Please try again."
        if existing_id:
            current = self.get_event(existing_id)
            if current.status != EventStatus.DRAFT:
                raise ValidationError("Only draft events can be saved as drafts")
        try:
            if existing_id:
                event_id = EventId.from_string(current.id)
                updated = self._store.update_event(event_id, draft, EventStatus.DRAFT)
            else:
                event_id = self._store.create_event(draft, EventStatus.DRAFT)
                updated = True
        except Exception as exc:
            self._storage_failed("save draft", exc, message)
        if not updated:
            raise EventNotFoundError(existing_id)
        logger.info("Saved draft %s (%s)", event_id, draft.name)
        return str(event_id)

    def delete_draft(self, event_id: str) -> None:
        """Delete a draft-status event. Live events cannot be deleted this way."""
        event = self.get_event(event_id)
        if event.status != EventStatus.DRAFT:
            raise ValidationError("Only draft events can be deleted")
        try:
            deleted = self._store.delete_event(EventId.from_string(event.id))
        except Exception as exc:
            self._storage_failed("delete draft", exc, "Failed to delete draft. Please try again.")
        if not deleted:
            raise EventNotFoundError(event_id)
        logger.info("Deleted draft %s", event_id)

    def calendar_record(self, event_id: str) -> CalendarEventRecord:
        event = self.get_event(event_id)
        return CalendarEventRecord.from_draft(event.id, event.draft)

    @staticmethod
    def _require_valid(draft: EventDraft) -> None:
        result = validate_through(draft, last_step=4)
        if not result.ok:
            raise StepValidationError(result.step, result)

    @staticmethod
    def _parse_id(event_id: str) -> EventId:
        try:
            return EventId.from_string(event_id)
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidEventIdError() from exc

    @staticmethod
    def _storage_failed(action: str, exc: Exception, message: str) -> NoReturn:
        logger.exception("Event storage failed to %s", action)
        raise PersistenceError(message) from exc
