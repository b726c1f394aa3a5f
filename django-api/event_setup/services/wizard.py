"""State machine for the six-step event setup wizard.

Steps 1-4 collect data (basic info, schedule, roles/teams, staff) and are
gated by the step validator; steps 5 and 6 are read-only review. Going
back is always allowed. Cancel routes through a confirmation state when
there is something to lose. Submit is only reachable from the last step.

Each backend action allows at most one request in flight; a repeated call
while the previous one is running is ignored.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from event_setup.domain import Action, CalendarEventRecord, EventDraft, StaffRef, SupervisorAccessToken, reduce
from event_setup.domain.errors import DomainError, LookupFailure, PersistenceError, StepValidationError, ValidationError
from event_setup.services.draft_persistence import DraftPersistence, has_unsaved_changes
from event_setup.services.event_service import EventService
from event_setup.services.staffing import ShareLink, StaffingAssigner
from event_setup.services.step_validator import FIRST_STEP, LAST_STEP, validate_step

logger = logging.getLogger(__name__)


class WizardState(str, Enum):
    EDITING = "editing"
    CONFIRMING_CANCEL = "confirming_cancel"
    DISCARDED = "discarded"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class Notice:
    """A toast-style message for the user."""

    level: str
    title: str
    message: str


class EventSetupWizard:
    """One organizer's wizard session over a single EventDraft."""

    def __init__(
        self,
        persistence: DraftPersistence,
        event_service: EventService,
        staffing: StaffingAssigner,
        initial: EventDraft | None = None,
        event_id: str | None = None,
    ) -> None:
        self._persistence = persistence
        self._events = event_service
        self._staffing = staffing
        self.initial = initial or EventDraft.empty()
        self.draft = self.initial
        self.event_id = event_id
        self.step = FIRST_STEP
        self.state = WizardState.EDITING
        self.notices: list[Notice] = []
        self.calendar_offer: CalendarEventRecord | None = None
        self.is_saving = False
        self.is_creating = False
        self.is_generating_token = False
        self.saved_draft = persistence.resume_offer()

    @property
    def is_edit_mode(self) -> bool:
        return self._persistence.is_edit_mode

    # Editing

    def dispatch(self, action: Action) -> EventDraft:
        self._require_editing()
        self.draft = reduce(self.draft, action)
        self._persistence.autosave(self.draft, self.step)
        return self.draft

    def replace_draft(self, draft: EventDraft) -> None:
        self._require_editing()
        self.draft = draft
        self._persistence.autosave(self.draft, self.step)

    # Resume dialog

    def resume(self) -> bool:
        restored = self._persistence.resume()
        self.saved_draft = None
        if restored is None:
            return False
        self.draft, self.step = restored
        logger.info("Resumed local draft at step %d", self.step)
        return True

    def discard_saved(self) -> None:
        self._persistence.discard()
        self.saved_draft = None

    # Navigation

    def next_step(self) -> int:
        """Advance one step if the current step validates.

        Raises:
            StepValidationError: If the current step has blocking errors.
        """
        self._require_editing()
        result = validate_step(self.draft, self.step)
        if not result.ok:
            logger.info("Blocked advancing from step %d: %s", self.step, "; ".join(result.errors))
            raise StepValidationError(self.step, result)
        if self.step < LAST_STEP:
            self.step += 1
            self._persistence.autosave(self.draft, self.step)
        return self.step

    def previous_step(self) -> int:
        self._require_editing()
        if self.step > FIRST_STEP:
            self.step -= 1
        return self.step

    # Cancel

    def request_cancel(self) -> WizardState:
        self._require_editing()
        if has_unsaved_changes(self.draft, self.initial):
            self.state = WizardState.CONFIRMING_CANCEL
        else:
            self.state = WizardState.DISCARDED
        return self.state

    def confirm_cancel(self) -> None:
        if self.state != WizardState.CONFIRMING_CANCEL:
            return
        if not self.is_edit_mode:
            self._persistence.discard()
        self.state = WizardState.DISCARDED

    def keep_editing(self) -> None:
        if self.state == WizardState.CONFIRMING_CANCEL:
            self.state = WizardState.EDITING

    # Backend actions

    def save_as_draft(self) -> str | None:
        if self.is_saving:
            return None
        self.is_saving = True
        try:
            self.event_id = self._persistence.save_to_backend(self.draft, self.event_id)
        except (ValidationError, PersistenceError) as exc:
            self._notify("error", "Error", exc.message)
            return None
        finally:
            self.is_saving = False
        self._notify("success", "Draft saved", "Your event draft has been saved successfully.")
        return self.event_id

    def submit(self) -> str | None:
        """Create (or update, in edit mode) the event from the last step."""
        self._require_editing()
        if self.step != LAST_STEP:
            raise ValidationError("Review the event before submitting")
        if self.is_creating:
            return None
        self.is_creating = True
        try:
            if self.is_edit_mode and self.event_id:
                self._events.update_event(self.event_id, self.draft)
                event_id = self.event_id
            else:
                event_id = self._events.create_event(self.draft)
        except DomainError as exc:
            logger.warning("Submitting event failed: %s", exc)
            self._notify("error", "Failed to create event", exc.message)
            return None
        finally:
            self.is_creating = False

        self.event_id = event_id
        self._persistence.clear_local()
        self.state = WizardState.SUBMITTED
        self.calendar_offer = CalendarEventRecord.from_draft(event_id, self.draft)
        self._notify("success", "Event created", "Your event has been created successfully.")
        return event_id

    def generate_supervisor_token(
        self, team_id: str, staff: StaffRef | None
    ) -> tuple[SupervisorAccessToken, ShareLink] | None:
        if self.is_generating_token:
            return None
        if not self.event_id:
            self._notify("warning", "Save first", "Save the event before granting supervisor access.")
            return None
        team = next((t for t in self.draft.teams if t.id == team_id), None)
        if team is None:
            self._notify("error", "Error", "Team not found")
            return None

        self.is_generating_token = True
        try:
            token = self._staffing.generate_supervisor_token(self.event_id, team, staff)
        except (ValidationError, LookupFailure) as exc:
            self._notify("error", "Error", exc.message)
            return None
        finally:
            self.is_generating_token = False

        link = self._staffing.share_token_link(token, staff, team)
        if link.warning:
            self._notify("warning", "Share link", link.warning)
        return token, link

    def _require_editing(self) -> None:
        if self.state != WizardState.EDITING:
            raise ValidationError(f"The wizard is {self.state.value}")

    def _notify(self, level: str, title: str, message: str) -> None:
        self.notices.append(Notice(level=level, title=title, message=message))
