"""Unit tests for per-step wizard validation.

Run with: pytest tests/test_step_validator.py -v
"""

from datetime import date

import pytest

from event_setup.domain import Role, Schedule, Shift, StaffRef, Team
from event_setup.domain.errors import InvalidStepError
from event_setup.services.step_validator import validate_step, validate_through
from factories import make_draft, make_shifted_draft


def staffed(role: Role, *assignments: tuple[str, str | None]) -> Role:
    staff = tuple(StaffRef(id=sid, name=sid, shift_id=shift) for sid, shift in assignments)
    return Role(
        id=role.id,
        name=role.name,
        staff_count=role.staff_count,
        shift_staff_counts=role.shift_staff_counts,
        assigned_staff=staff,
    )


class TestBasicInfo:
    """Tests for step 1."""

    def test_valid_basic_info_passes(self):
        assert validate_step(make_draft(), 1).ok

    def test_missing_fields_are_reported_together(self):
        result = validate_step(make_draft(name="  ", location="", start_date=None), 1)
        assert not result.ok
        assert result.errors == (
            "Event name is required",
            "Location is required",
            "Start date is required",
        )

    def test_multi_day_end_before_start_fails(self):
        draft = make_draft(is_multi_day=True, end_date=date(2026, 5, 14))
        result = validate_step(draft, 1)
        assert result.errors == ("End date cannot be before the start date",)

    def test_single_day_ignores_end_date(self):
        assert validate_step(make_draft(end_date=date(2026, 1, 1)), 1).ok


class TestSchedule:
    """Tests for step 2."""

    def test_end_must_follow_start(self):
        draft = make_draft(schedule=Schedule(start_time="17:00", end_time="09:00"))
        assert validate_step(draft, 2).errors == ("Event end time must be after the start time",)

    def test_shifts_on_without_shifts_fails(self):
        draft = make_draft(schedule=Schedule(has_shifts=True))
        assert validate_step(draft, 2).errors == ("Add at least one shift or turn shifts off",)

    def test_shift_times_required(self):
        schedule = Schedule(has_shifts=True, shifts=(Shift("", "09:00", ""),))
        result = validate_step(make_draft(schedule=schedule), 2)
        assert result.errors == ("Shift 1 needs both a start and an end time",)

    def test_shift_outside_event_hours_fails(self):
        schedule = Schedule(has_shifts=True, shifts=(Shift("Late", "16:00", "19:00"),))
        result = validate_step(make_draft(schedule=schedule), 2)
        assert not result.ok
        assert "Late (16:00-19:00) must fall within the event hours (09:00-17:00)" in result.errors

    def test_shifts_ignored_when_turned_off(self):
        schedule = Schedule(has_shifts=False, shifts=(Shift("Late", "16:00", "19:00"),))
        assert validate_step(make_draft(schedule=schedule), 2).ok


class TestRolesAndTeams:
    """Tests for step 3."""

    def test_partial_shift_staffing_warns_but_passes(self):
        """Usher staffed for Morning only: warning, not an error."""
        result = validate_step(make_shifted_draft({"Morning": 2, "Evening": 0}), 3)
        assert result.ok
        assert result.warnings == ('Incomplete shift staffing: "Usher" has no staff for Evening',)

    def test_role_without_any_shift_staff_fails(self):
        result = validate_step(make_shifted_draft({"Morning": 0, "Evening": 0}), 3)
        assert not result.ok
        assert result.errors == ('Role "Usher" needs staff in at least one shift',)

    def test_flat_mode_requires_a_role(self):
        assert validate_step(make_draft(), 3).errors == ("Add at least one role",)

    def test_flat_role_needs_staff_count(self):
        draft = make_draft(roles=(Role(id="r1", name="Usher"),))
        assert validate_step(draft, 3).errors == ('Role "Usher" needs at least one staff member',)

    def test_unnamed_role_fails(self):
        draft = make_draft(roles=(Role(id="r1", name="", staff_count=1),))
        assert validate_step(draft, 3).errors == ("Every role needs a name",)

    def test_team_mode_requires_named_teams_with_roles(self):
        draft = make_draft(has_teams=True, teams=(Team(id="t1", name=""), Team(id="t2", name="Bravo")))
        result = validate_step(draft, 3)
        assert result.errors == ("Team 1 needs a name", 'Team "Bravo" needs at least one role')

    def test_team_without_supervisor_warns(self):
        team = Team(id="t1", name="Alpha", roles=(Role(id="r1", name="Team Lead", staff_count=1),))
        result = validate_step(make_draft(has_teams=True, teams=(team,)), 3)
        assert result.ok
        assert result.warnings == (
            'Team "Alpha" has no supervisor, leader or captain role; nobody can be granted team access',
        )

    def test_team_with_supervisor_has_no_warning(self):
        team = Team(id="t1", name="Alpha", roles=(Role(id="r1", name="Floor Supervisor", staff_count=1),))
        result = validate_step(make_draft(has_teams=True, teams=(team,)), 3)
        assert result.ok and result.warnings == ()

    def test_warnings_survive_blocking_errors(self):
        draft = make_shifted_draft({"Morning": 1, "Evening": 0})
        draft = draft.with_changes(roles=draft.roles + (Role(id="r2", name=""),))
        result = validate_step(draft, 3)
        assert not result.ok
        assert result.warnings


class TestAssignments:
    """Tests for step 4."""

    def test_understaffed_role_blocks(self):
        """Security needs 2, has 1."""
        role = staffed(Role(id="r1", name="Security", staff_count=2), ("s1", None))
        result = validate_step(make_draft(roles=(role,)), 4)
        assert result.errors == ('"Security" is understaffed (1/2 assigned)',)

    def test_fully_staffed_role_passes(self):
        role = staffed(Role(id="r1", name="Security", staff_count=2), ("s1", None), ("s2", None))
        assert validate_step(make_draft(roles=(role,)), 4).ok

    def test_understaffed_shift_blocks(self):
        draft = make_shifted_draft({"Morning": 2, "Evening": 1})
        role = staffed(draft.roles[0], ("s1", "Morning"), ("s2", "Morning"))
        result = validate_step(draft.with_changes(roles=(role,)), 4)
        assert result.errors == ('"Usher" is understaffed for Evening (0/1 assigned)',)

    def test_extra_staff_never_fails(self):
        role = staffed(Role(id="r1", name="Security", staff_count=1), ("s1", None), ("s2", None))
        assert validate_step(make_draft(roles=(role,)), 4).ok


class TestReviewSteps:
    """Tests for steps 5, 6 and unknown steps."""

    @pytest.mark.parametrize("step", [5, 6])
    def test_review_steps_always_pass(self, step):
        assert validate_step(make_draft(name=""), step).ok

    @pytest.mark.parametrize("step", [0, 7])
    def test_unknown_step_raises(self, step):
        with pytest.raises(InvalidStepError):
            validate_step(make_draft(), step)


class TestValidateThrough:
    """Tests for validating every editable step in order."""

    def test_returns_first_failing_step(self):
        result = validate_through(make_draft(name="", roles=()))
        assert result.step == 1 and not result.ok

    def test_ready_draft_passes(self):
        role = staffed(Role(id="r1", name="Security", staff_count=1), ("s1", None))
        result = validate_through(make_draft(roles=(role,)))
        assert result.ok

    def test_validation_does_not_touch_the_draft(self):
        draft = make_shifted_draft({"Morning": 2, "Evening": 0})
        before = draft.to_dict()
        validate_through(draft)
        assert draft.to_dict() == before


def _flat_ready():
    return make_draft(roles=(staffed(Role(id="r1", name="Security", staff_count=1), ("s1", None)),))


def _shifted_ready():
    draft = make_shifted_draft({"Morning": 1, "Evening": 1})
    return draft.with_changes(roles=(staffed(draft.roles[0], ("s1", "Morning"), ("s2", "Evening")),))


def _teams_ready():
    lead = staffed(Role(id="r1", name="Captain", staff_count=1), ("s1", None))
    return make_draft(has_teams=True, teams=(Team(id="t1", name="Alpha", roles=(lead,)),))


def _with_role(draft):
    extra = staffed(Role(id="r9", name="Cleaner", staff_count=2), ("s8", None), ("s9", None))
    return draft.with_changes(roles=draft.roles + (extra,))


def _with_shift_role(draft):
    extra = Role(id="r9", name="Cleaner", shift_staff_counts={"Morning": 1, "Evening": 1})
    extra = staffed(extra, ("s8", "Morning"), ("s9", "Evening"))
    return draft.with_changes(roles=draft.roles + (extra,))


def _with_team(draft):
    lead = staffed(Role(id="r9", name="Floor Supervisor", staff_count=1), ("s9", None))
    return draft.with_changes(teams=draft.teams + (Team(id="t9", name="Bravo", roles=(lead,)),))


def _with_extra_staff(draft):
    roles = tuple(
        staffed(r, *[(s.id, s.shift_id) for s in r.assigned_staff], ("extra", None)) for r in draft.roles
    )
    return draft.with_changes(roles=roles)


class TestAddingCompleteEntities:
    """Adding a fully specified role, team or assignment never breaks a valid step."""

    @pytest.mark.parametrize(
        "build, grow",
        [
            (_flat_ready, _with_role),
            (_flat_ready, _with_extra_staff),
            (_shifted_ready, _with_shift_role),
            (_shifted_ready, _with_extra_staff),
            (_teams_ready, _with_team),
        ],
    )
    @pytest.mark.parametrize("step", [1, 2, 3, 4])
    def test_valid_step_stays_valid(self, build, grow, step):
        draft = build()
        assert validate_step(draft, step).ok

        result = validate_step(grow(draft), step)

        assert result.ok
        assert result.errors == ()
