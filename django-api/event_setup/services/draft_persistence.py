"""Two independent save channels for an in-progress event.

Local autosave keeps the latest wizard state in a key-scoped local store
and is debounced: only the trailing write after a quiet period happens.
The explicit backend save hands the draft to the event service with
status=draft. A successful backend save always clears the local channel,
so the backend copy becomes the only one.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Protocol, Self

from django.utils import timezone

from event_setup.conf import app_setting
from event_setup.domain import EventDraft
from event_setup.domain.errors import ValidationError
from event_setup.services.event_service import EventService
from event_setup.stores.interfaces import LocalDraftStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalDraft:
    """What the autosave channel stores."""

    event_data: EventDraft
    step: int
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_data": self.event_data.to_dict(),
            "step": self.step,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            event_data=EventDraft.from_dict(data["event_data"]),
            step=int(data["step"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class Timer(Protocol):
    def cancel(self) -> None: ...


def start_timer(delay: float, callback: Callable[[], None]) -> Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class DraftPersistence:
    """Local autosave plus explicit backend draft saves for one wizard session."""

    def __init__(
        self,
        local_store: LocalDraftStore,
        event_service: EventService,
        scope: str,
        is_edit_mode: bool = False,
        debounce_seconds: float | None = None,
        scheduler: Callable[[float, Callable[[], None]], Timer] = start_timer,
    ) -> None:
        self._local = local_store
        self._events = event_service
        self._key = scope
        self.is_edit_mode = is_edit_mode
        self._debounce = (
            debounce_seconds
            if debounce_seconds is not None
            else app_setting("AUTOSAVE_DEBOUNCE_SECONDS")
        )
        self._schedule = scheduler
        self._lock = threading.Lock()
        self._pending: tuple[EventDraft, int] | None = None
        self._timer: Timer | None = None
        self._generation = 0
        self._resume_offered = False

    # Local channel

    def autosave(self, draft: EventDraft, step: int) -> None:
        """Restart the quiet period; only the latest call is written when it ends."""
        if self.is_edit_mode:
            return
        with self._lock:
            self._disarm()
            self._pending = (draft, step)
            self._generation += 1
            generation = self._generation
            self._timer = self._schedule(self._debounce, lambda: self._fire(generation))

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer cancelled after it started firing must not write stale state.
            if generation != self._generation or self._pending is None:
                return
            draft, step = self._pending
            self._pending = None
            self._timer = None
        self.save_local(draft, step)

    def flush(self) -> None:
        """Write the pending draft now instead of waiting for the quiet period."""
        with self._lock:
            pending = self._pending
            self._disarm()
        if pending is not None:
            self.save_local(*pending)

    def cancel_pending(self) -> None:
        with self._lock:
            self._disarm()

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None
        self._generation += 1

    def save_local(self, draft: EventDraft, step: int) -> bool:
        if self.is_edit_mode:
            logger.debug("Skipping local autosave in edit mode")
            return False
        record = LocalDraft(event_data=draft, step=step, timestamp=timezone.now())
        self._local.set(self._key, record.to_dict())
        logger.debug("Autosaved draft for %s at step %d", self._key, step)
        return True

    def load_local(self) -> LocalDraft | None:
        data = self._local.get(self._key)
        if not data:
            return None
        try:
            return LocalDraft.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable local draft for %s", self._key)
            self._local.clear(self._key)
            return None

    def clear_local(self) -> None:
        self.cancel_pending()
        self._local.clear(self._key)

    # Resume flow

    def resume_offer(self) -> LocalDraft | None:
        """Return the saved local draft, at most once per wizard mount."""
        if self.is_edit_mode or self._resume_offered:
            return None
        self._resume_offered = True
        return self.load_local()

    def resume(self) -> tuple[EventDraft, int] | None:
        saved = self.load_local()
        if saved is None:
            return None
        return saved.event_data, saved.step

    def discard(self) -> None:
        logger.info("Discarding local draft for %s", self._key)
        self.clear_local()

    # Backend channel

    def save_to_backend(self, draft: EventDraft, existing_id: str | None = None) -> str:
        """Save the draft on the backend and make it the single copy.

        Raises:
            ValidationError: If the draft has no name yet.
            PersistenceError: If the backend save fails; the local draft is kept.
        """
        if not draft.name.strip():
            raise ValidationError("Please enter an event name before saving a draft")
        event_id = self._events.save_draft(draft, existing_id)
        self.clear_local()
        return event_id

    def delete_backend_draft(self, event_id: str) -> None:
        self._events.delete_draft(event_id)


def has_unsaved_changes(draft: EventDraft, initial: EventDraft) -> bool:
    return draft != initial
