"""Per-step validation for the event setup wizard.

validate_step never mutates the draft and has no side effects. Each step
checks its rules category by category and stops at the first category that
produces errors. Warnings never block and are gathered before any early
return.
"""

from event_setup.domain import EventDraft, Role, StepResult, Team, shift_label
from event_setup.domain.errors import InvalidStepError
from event_setup.services.staffing import teams_missing_supervisor

FIRST_STEP = 1
LAST_STEP = 6
REVIEW_STEPS = frozenset({5, 6})


def validate_step(draft: EventDraft, step: int) -> StepResult:
    if step not in _VALIDATORS and step not in REVIEW_STEPS:
        raise InvalidStepError(step)
    if step in REVIEW_STEPS:
        return StepResult.passed(step)
    return _VALIDATORS[step](draft)


def validate_through(draft: EventDraft, last_step: int = 4) -> StepResult:
    """Validate steps 1..last_step in order; return the first failure."""
    result = StepResult.passed(FIRST_STEP)
    for step in range(FIRST_STEP, last_step + 1):
        result = validate_step(draft, step)
        if not result.ok:
            return result
    return result


def _basic_info(draft: EventDraft) -> StepResult:
    missing = []
    if not draft.name.strip():
        missing.append("Event name is required")
    if not draft.location.strip():
        missing.append("Location is required")
    if draft.start_date is None:
        missing.append("Start date is required")
    if missing:
        return StepResult.failed(1, missing)

    if draft.is_multi_day:
        if draft.end_date is None:
            return StepResult.failed(1, ["End date is required for multi-day events"])
        if draft.end_date < draft.start_date:
            return StepResult.failed(1, ["End date cannot be before the start date"])
    return StepResult.passed(1)


def _schedule(draft: EventDraft) -> StepResult:
    schedule = draft.schedule
    missing = []
    if not schedule.start_time:
        missing.append("Event start time is required")
    if not schedule.end_time:
        missing.append("Event end time is required")
    if missing:
        return StepResult.failed(2, missing)
    if schedule.end_time <= schedule.start_time:
        return StepResult.failed(2, ["Event end time must be after the start time"])

    if not schedule.has_shifts:
        return StepResult.passed(2)
    if not schedule.shifts:
        return StepResult.failed(2, ["Add at least one shift or turn shifts off"])

    incomplete = [
        f"{shift_label(shift, i)} needs both a start and an end time"
        for i, shift in enumerate(schedule.shifts)
        if not shift.start_time or not shift.end_time
    ]
    if incomplete:
        return StepResult.failed(2, incomplete)

    outside = []
    for i, shift in enumerate(schedule.shifts):
        label = shift_label(shift, i)
        if shift.end_time <= shift.start_time:
            outside.append(f"{label} must end after it starts")
        elif shift.start_time < schedule.start_time or shift.end_time > schedule.end_time:
            outside.append(
                f"{label} ({shift.start_time}-{shift.end_time}) must fall within the event hours "
                f"({schedule.start_time}-{schedule.end_time})"
            )
    if outside:
        return StepResult.failed(2, outside)
    return StepResult.passed(2)


def _role_label(role: Role, team: Team | None) -> str:
    if team is None:
        return f'"{role.name}"'
    return f'"{role.name}" in team "{team.name}"'


def _staffing_warnings(draft: EventDraft) -> list[str]:
    warnings = []
    schedule = draft.schedule
    if schedule.has_shifts and schedule.shifts:
        shift_ids = schedule.shift_ids()
        for team, role in draft.all_roles():
            unstaffed = [sid for sid in shift_ids if role.required_for(sid) <= 0]
            if unstaffed and len(unstaffed) < len(shift_ids):
                labels = ", ".join(schedule.label_for(sid) for sid in unstaffed)
                warnings.append(
                    f"Incomplete shift staffing: {_role_label(role, team)} has no staff for {labels}"
                )
    if draft.has_teams:
        for team in teams_missing_supervisor(draft):
            warnings.append(
                f'Team "{team.name}" has no supervisor, leader or captain role; '
                "nobody can be granted team access"
            )
    return warnings


def _role_errors(draft: EventDraft, roles: list[tuple[Team | None, Role]]) -> list[str]:
    unnamed = [
        f'Every role in team "{team.name}" needs a name' if team else "Every role needs a name"
        for team, role in roles
        if not role.name.strip()
    ]
    if unnamed:
        return list(dict.fromkeys(unnamed))

    schedule = draft.schedule
    errors = []
    for team, role in roles:
        if schedule.has_shifts:
            if all(role.required_for(sid) <= 0 for sid in schedule.shift_ids()):
                errors.append(f"Role {_role_label(role, team)} needs staff in at least one shift")
        elif role.staff_count <= 0:
            errors.append(f"Role {_role_label(role, team)} needs at least one staff member")
    return errors


def _roles_and_teams(draft: EventDraft) -> StepResult:
    warnings = _staffing_warnings(draft)

    if draft.has_teams:
        if not draft.teams:
            return StepResult.failed(3, ["Add at least one team"], warnings)
        structure = []
        for index, team in enumerate(draft.teams):
            if not team.name.strip():
                structure.append(f"Team {index + 1} needs a name")
            elif not team.roles:
                structure.append(f'Team "{team.name}" needs at least one role')
        if structure:
            return StepResult.failed(3, structure, warnings)
    elif not draft.roles:
        return StepResult.failed(3, ["Add at least one role"], warnings)

    errors = _role_errors(draft, draft.all_roles())
    if errors:
        return StepResult.failed(3, errors, warnings)
    return StepResult.passed(3, warnings)


def _assignments(draft: EventDraft) -> StepResult:
    schedule = draft.schedule
    errors = []
    for team, role in draft.all_roles():
        if schedule.has_shifts:
            for sid in schedule.shift_ids():
                required = role.required_for(sid)
                assigned = role.assigned_for(sid)
                if assigned < required:
                    errors.append(
                        f"{_role_label(role, team)} is understaffed for {schedule.label_for(sid)} "
                        f"({assigned}/{required} assigned)"
                    )
        else:
            assigned = role.assigned_for(None)
            if assigned < role.staff_count:
                errors.append(
                    f"{_role_label(role, team)} is understaffed ({assigned}/{role.staff_count} assigned)"
                )
    if errors:
        return StepResult.failed(4, errors)
    return StepResult.passed(4)


_VALIDATORS = {
    1: _basic_info,
    2: _schedule,
    3: _roles_and_teams,
    4: _assignments,
}
