"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import date, datetime

import pytest

from event_setup.domain import (
    CalendarEventRecord,
    EventDraft,
    EventId,
    Geofence,
    Role,
    Schedule,
    Shift,
    StaffRef,
    SupervisorAccessToken,
    Team,
    derive_shift_id,
    shift_label,
)
from event_setup.domain.errors import ErrorCode, StepValidationError, ValidationError
from event_setup.domain.validation import StepResult
from event_setup.domain.value_objects import clamp_count, new_shift_id
from factories import NOW, make_draft


class TestGeofence:
    """Tests for Geofence value object."""

    def test_geofence_accepts_valid_coordinates(self):
        """Geofence can be created inside the coordinate ranges."""
        fence = Geofence(latitude=25.2048, longitude=55.2708, radius_meters=100)
        assert fence.radius_meters == 100

    @pytest.mark.parametrize("latitude", [-90.5, 91])
    def test_geofence_rejects_out_of_range_latitude(self, latitude):
        """Geofence raises ValueError for latitude outside [-90, 90]."""
        with pytest.raises(ValueError):
            Geofence(latitude=latitude, longitude=0, radius_meters=100)

    def test_geofence_rejects_out_of_range_longitude(self):
        """Geofence raises ValueError for longitude outside [-180, 180]."""
        with pytest.raises(ValueError):
            Geofence(latitude=0, longitude=181, radius_meters=100)

    def test_geofence_rejects_non_positive_radius(self):
        """Geofence raises ValueError for a zero radius."""
        with pytest.raises(ValueError):
            Geofence(latitude=0, longitude=0, radius_meters=0)


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId can be created from a valid UUID string."""
        raw = "0b6f1c9e-8f5e-4a3b-9d6a-2f1e3c4b5a69"
        assert str(EventId.from_string(raw)) == raw

    def test_from_string_invalid_uuid_raises(self):
        """EventId raises ValueError for an invalid UUID string."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")


class TestCounts:
    """Tests for staff count helpers."""

    @pytest.mark.parametrize("raw, expected", [(-3, 0), (0, 0), (4, 4)])
    def test_clamp_count(self, raw, expected):
        assert clamp_count(raw) == expected

    def test_new_shift_ids_are_unique(self):
        assert new_shift_id() != new_shift_id()


class TestShiftIdentity:
    """Tests for the single shift-id derivation rule."""

    def test_stable_id_wins(self):
        """A shift with an id is keyed by that id."""
        assert derive_shift_id(Shift("Morning", "08:00", "12:00", id="shift_a"), 0) == "shift_a"

    def test_falls_back_to_name(self):
        """Hydrated shifts without an id are keyed by name."""
        assert derive_shift_id(Shift("Morning", "08:00", "12:00"), 0) == "Morning"

    def test_falls_back_to_position(self):
        """Unnamed shifts without an id are keyed by position."""
        assert derive_shift_id(Shift("", "08:00", "12:00"), 2) == "shift-2"

    def test_label_is_one_based(self):
        assert shift_label(Shift("", "08:00", "12:00"), 0) == "Shift 1"
        assert shift_label(Shift("Evening", "14:00", "22:00"), 1) == "Evening"

    def test_schedule_label_lookup(self):
        schedule = Schedule(shifts=(Shift("Morning", "08:00", "12:00", id="a"),))
        assert schedule.label_for("a") == "Morning"
        assert schedule.label_for("missing") == "missing"


class TestRole:
    """Tests for role staffing arithmetic."""

    def test_required_and_assigned_per_shift(self):
        role = Role(
            id="r1",
            name="Usher",
            shift_staff_counts={"a": 2},
            assigned_staff=(StaffRef(id="s1", name="John", shift_id="a"),),
        )
        assert role.required_for("a") == 2
        assert role.required_for("b") == 0
        assert role.assigned_for("a") == 1
        assert role.assigned_for("b") == 0

    def test_without_shifts_counts_every_assignment(self):
        role = Role(
            id="r1",
            name="Usher",
            staff_count=3,
            assigned_staff=(StaffRef(id="s1", name="John"), StaffRef(id="s2", name="Jane")),
        )
        assert role.required_for() == 3
        assert role.assigned_for() == 2


class TestEventDraft:
    """Tests for EventDraft construction and serialization."""

    def test_empty_draft_defaults(self):
        """A fresh draft starts today with the default geofence and no roles."""
        draft = EventDraft.empty(date(2026, 1, 10))
        assert draft.start_date == draft.end_date == date(2026, 1, 10)
        assert draft.schedule == Schedule()
        assert draft.geofence.radius_meters == 100
        assert draft.roles == () and draft.teams == ()

    def test_all_roles_follows_team_mode(self):
        """The flat role list is ignored while teams are on, and vice versa."""
        flat = Role(id="r1", name="Usher")
        nested = Role(id="r2", name="Supervisor")
        draft = make_draft(roles=(flat,), teams=(Team(id="t1", name="Alpha", roles=(nested,)),))

        assert draft.all_roles() == [(None, flat)]
        teamed = draft.with_changes(has_teams=True)
        assert teamed.all_roles() == [(teamed.teams[0], nested)]

    def test_dict_round_trip_keeps_nested_data(self):
        draft = make_draft(
            has_teams=True,
            teams=(
                Team(
                    id="t1",
                    name="Alpha",
                    roles=(
                        Role(
                            id="r1",
                            name="Captain",
                            shift_staff_counts={"a": 1},
                            assigned_staff=(StaffRef(id="s1", name="John", shift_id="a", team_id="t1"),),
                        ),
                    ),
                ),
            ),
        )
        assert EventDraft.from_dict(draft.to_dict()) == draft

    def test_from_dict_tolerates_missing_sections(self):
        """Older payloads without schedule or geofence get the defaults."""
        draft = EventDraft.from_dict({"name": "Expo", "start_date": "2026-05-01"})
        assert draft.schedule == Schedule()
        assert draft.start_date == date(2026, 5, 1)
        assert draft.end_date is None
        assert draft.geofence.latitude == pytest.approx(25.2048)

    def test_draft_is_immutable(self):
        draft = make_draft()
        with pytest.raises(AttributeError):
            draft.name = "Changed"


class TestCalendarEventRecord:
    """Tests for the calendar export record."""

    def test_single_day_uses_start_date_for_both_ends(self):
        draft = make_draft(end_date=date(2026, 5, 20))
        record = CalendarEventRecord.from_draft("evt-1", draft)
        assert record.start_datetime == datetime(2026, 5, 15, 9, 0)
        assert record.end_datetime == datetime(2026, 5, 15, 17, 0)

    def test_multi_day_uses_end_date(self):
        draft = make_draft(is_multi_day=True, end_date=date(2026, 5, 17))
        record = CalendarEventRecord.from_draft("evt-1", draft)
        assert record.end_datetime == datetime(2026, 5, 17, 17, 0)
        assert record.location == "Dubai World Trade Centre"


class TestSupervisorAccessToken:
    """Tests for token usability."""

    def _token(self, **overrides):
        fields = dict(
            id="tok-1",
            event_id="evt-1",
            team_id="t1",
            supervisor_staff_id="s1",
            access_token="abc",
            expires_at=NOW.replace(day=8),
            is_active=True,
            created_at=NOW,
        )
        fields.update(overrides)
        return SupervisorAccessToken(**fields)

    def test_active_unexpired_token_is_usable(self):
        assert self._token().is_usable(NOW)

    def test_expired_token_is_not_usable(self):
        assert not self._token().is_usable(NOW.replace(day=9))

    def test_inactive_token_is_not_usable(self):
        assert not self._token(is_active=False).is_usable(NOW)


class TestErrors:
    """Tests for domain error types."""

    def test_validation_error_defaults_errors_to_message(self):
        exc = ValidationError("Role not found")
        assert exc.code is ErrorCode.VALIDATION_FAILED
        assert exc.errors == ("Role not found",)

    def test_step_validation_error_carries_result(self):
        result = StepResult.failed(1, ["Event name is required"])
        exc = StepValidationError(1, result)
        assert exc.step == 1
        assert exc.errors == ("Event name is required",)
        assert exc.result is result
