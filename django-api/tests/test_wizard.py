"""Unit tests for the event setup wizard state machine.

Run with: pytest tests/test_wizard.py -v
"""

from datetime import date

import pytest

from event_setup.domain import Action, ActionType, EventStatus, Role, StaffRef, Team
from event_setup.domain.errors import StepValidationError, ValidationError
from event_setup.services import DraftPersistence, EventService, StaffingAssigner
from event_setup.services.wizard import EventSetupWizard, WizardState
from factories import BrokenEventStore, InMemoryEventStore, make_draft

SCOPE = "session-1"


def ready_draft(**overrides):
    role = Role(id="r1", name="Security", staff_count=1, assigned_staff=(StaffRef(id="s1", name="Bob"),))
    return make_draft(roles=(role,), **overrides)


@pytest.fixture
def build(draft_store, roster, token_issuer, token_clock, clock):
    def factory(store=None, is_edit_mode=False, initial=None, event_id=None):
        store = store or InMemoryEventStore()
        service = EventService(store, today=lambda: date(2026, 5, 1))
        persistence = DraftPersistence(
            draft_store,
            service,
            scope=SCOPE,
            is_edit_mode=is_edit_mode,
            debounce_seconds=0.5,
            scheduler=clock.call_later,
        )
        staffing = StaffingAssigner(roster, token_issuer, store, clock=token_clock)
        return EventSetupWizard(persistence, service, staffing, initial=initial, event_id=event_id)

    return factory


def walk_to_review(wizard):
    while wizard.step < 6:
        wizard.next_step()


class TestNavigation:
    """Tests for moving between steps."""

    def test_starts_on_step_one(self, build):
        wizard = build()
        assert wizard.step == 1
        assert wizard.state is WizardState.EDITING

    def test_invalid_step_blocks_advance(self, build):
        wizard = build()
        with pytest.raises(StepValidationError) as excinfo:
            wizard.next_step()
        assert excinfo.value.step == 1
        assert wizard.step == 1

    def test_valid_draft_walks_to_review(self, build):
        wizard = build()
        wizard.replace_draft(ready_draft())
        walk_to_review(wizard)
        assert wizard.step == 6
        assert wizard.next_step() == 6

    def test_back_is_always_allowed(self, build):
        wizard = build()
        wizard.replace_draft(ready_draft())
        wizard.next_step()
        wizard.replace_draft(ready_draft(name=""))
        assert wizard.previous_step() == 1
        assert wizard.previous_step() == 1

    def test_dispatch_updates_draft_and_schedules_autosave(self, build, clock, draft_store):
        wizard = build()
        wizard.dispatch(Action(ActionType.SET_FIELD, {"name": "Expo"}))
        clock.advance(1)
        assert wizard.draft.name == "Expo"
        assert draft_store.data[SCOPE]["event_data"]["name"] == "Expo"

    def test_edits_are_written_once_after_typing_stops(self, build, clock, draft_store):
        """A burst of edits lands in the local store without any explicit flush."""
        wizard = build()
        wizard.dispatch(Action(ActionType.SET_FIELD, {"name": "Ex"}))
        clock.advance(0.2)
        wizard.dispatch(Action(ActionType.SET_FIELD, {"name": "Expo"}))
        clock.advance(0.2)
        assert draft_store.writes == 0

        clock.advance(10)

        assert draft_store.writes == 1
        assert draft_store.data[SCOPE]["event_data"]["name"] == "Expo"
        assert wizard._persistence.has_pending is False


class TestResume:
    """Tests for the resume dialog."""

    def test_saved_draft_is_offered_and_restored(self, build):
        first = build()
        first._persistence.save_local(make_draft(name="Expo"), 3)

        wizard = build()
        assert wizard.saved_draft.event_data.name == "Expo"
        assert wizard.resume() is True
        assert (wizard.draft.name, wizard.step) == ("Expo", 3)
        assert wizard.saved_draft is None

    def test_discard_saved(self, build, draft_store):
        build()._persistence.save_local(make_draft(), 3)
        wizard = build()
        wizard.discard_saved()
        assert wizard.saved_draft is None
        assert SCOPE not in draft_store.data

    def test_edit_mode_never_offers(self, build):
        build()._persistence.save_local(make_draft(), 3)
        assert build(is_edit_mode=True, event_id="x").saved_draft is None


class TestCancel:
    """Tests for the cancel confirmation flow."""

    def test_untouched_draft_cancels_immediately(self, build):
        assert build().request_cancel() is WizardState.DISCARDED

    def test_changes_require_confirmation(self, build, draft_store):
        wizard = build()
        wizard.replace_draft(make_draft())
        wizard._persistence.flush()
        assert wizard.request_cancel() is WizardState.CONFIRMING_CANCEL

        wizard.keep_editing()
        assert wizard.state is WizardState.EDITING

        wizard.request_cancel()
        wizard.confirm_cancel()
        assert wizard.state is WizardState.DISCARDED
        assert SCOPE not in draft_store.data

    def test_discarded_wizard_rejects_edits(self, build):
        wizard = build()
        wizard.request_cancel()
        with pytest.raises(ValidationError):
            wizard.dispatch(Action(ActionType.SET_FIELD, {"name": "Late"}))


class TestSaveAsDraft:
    """Tests for explicit draft saves."""

    def test_success_notice_and_id(self, build):
        wizard = build()
        wizard.replace_draft(make_draft())
        event_id = wizard.save_as_draft()
        assert event_id == wizard.event_id
        assert wizard.notices[-1].title == "Draft saved"
        assert wizard.is_saving is False

    def test_missing_name_is_an_error_notice(self, build):
        wizard = build()
        assert wizard.save_as_draft() is None
        assert wizard.notices[-1].message == "Please enter an event name before saving a draft"

    def test_edit_mode_cannot_demote_live_event(self, build):
        store = InMemoryEventStore()
        existing = str(store.create_event(ready_draft(), EventStatus.UPCOMING))
        wizard = build(store=store, is_edit_mode=True, initial=ready_draft(), event_id=existing)

        assert wizard.save_as_draft() is None

        assert wizard.notices[-1].message == "Only draft events can be saved as drafts"
        assert store.get_event(existing).status is EventStatus.UPCOMING
        assert wizard.event_id == existing

    def test_backend_failure_keeps_editing(self, build):
        wizard = build(store=BrokenEventStore())
        wizard.replace_draft(make_draft())
        assert wizard.save_as_draft() is None
        assert wizard.notices[-1].level == "error"
        assert wizard.state is WizardState.EDITING


class ReentrantStore(InMemoryEventStore):
    """Calls back into the wizard while the first create is in flight."""

    wizard = None
    nested_result = "unset"

    def create_event(self, draft, status):
        self.nested_result = self.wizard.submit()
        return super().create_event(draft, status)


class TestSubmit:
    """Tests for final submission."""

    def test_submit_only_from_last_step(self, build):
        wizard = build()
        wizard.replace_draft(ready_draft())
        with pytest.raises(ValidationError):
            wizard.submit()

    def test_submit_creates_event_and_clears_local(self, build, draft_store):
        wizard = build()
        wizard.replace_draft(ready_draft())
        walk_to_review(wizard)
        wizard._persistence.flush()

        event_id = wizard.submit()

        assert event_id is not None
        assert wizard.state is WizardState.SUBMITTED
        assert wizard.calendar_offer.id == event_id
        assert SCOPE not in draft_store.data

    def test_second_submit_while_in_flight_is_ignored(self, build):
        store = ReentrantStore()
        wizard = build(store=store)
        store.wizard = wizard
        wizard.replace_draft(ready_draft())
        walk_to_review(wizard)

        wizard.submit()

        assert store.nested_result is None
        assert store.create_calls == 1

    def test_failure_keeps_wizard_open(self, build):
        wizard = build(store=BrokenEventStore())
        wizard.replace_draft(ready_draft())
        walk_to_review(wizard)
        assert wizard.submit() is None
        assert wizard.state is WizardState.EDITING
        assert wizard.notices[-1].title == "Failed to create event"
        assert wizard.is_creating is False

    def test_edit_mode_updates_existing_event(self, build):
        store = InMemoryEventStore()
        existing = str(store.create_event(ready_draft(), status=None))
        wizard = build(store=store, is_edit_mode=True, initial=ready_draft(), event_id=existing)
        wizard.replace_draft(ready_draft(name="Renamed"))
        walk_to_review(wizard)

        assert wizard.submit() == existing
        assert store.get_event(existing).draft.name == "Renamed"
        assert store.create_calls == 1


class TestSupervisorAccess:
    """Tests for generating supervisor links from the wizard."""

    def _team_draft(self):
        captain = Role(
            id="r1",
            name="Captain",
            staff_count=1,
            assigned_staff=(StaffRef(id="s1", name="John Doe", contact_info="+971501234567"),),
        )
        return ready_draft(has_teams=True, teams=(Team(id="t1", name="Alpha", roles=(captain,)),))

    def test_requires_saved_event(self, build):
        wizard = build()
        wizard.replace_draft(self._team_draft())
        assert wizard.generate_supervisor_token("t1", StaffRef(id="s1", name="John Doe")) is None
        assert wizard.notices[-1].title == "Save first"

    def test_generates_token_and_link(self, build):
        wizard = build()
        wizard.replace_draft(self._team_draft())
        wizard.save_as_draft()

        token, link = wizard.generate_supervisor_token("t1", StaffRef(id="s1", name="John Doe"))

        assert token.team_id == "t1"
        assert link.compose_url.startswith("https://wa.me/971501234567")
        assert wizard.is_generating_token is False

    def test_missing_supervisor_is_an_error_notice(self, build):
        wizard = build()
        wizard.replace_draft(self._team_draft())
        wizard.save_as_draft()
        assert wizard.generate_supervisor_token("t1", None) is None
        assert wizard.notices[-1].message == "Please select a supervisor"
