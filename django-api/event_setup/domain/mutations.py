"""Pure mutation operations on an EventDraft.

Each operation returns a new EventDraft and leaves its input untouched.
Nothing here enforces wizard invariants; that is the step validator's job.
Roles are addressed by id, optionally scoped by the owning team's id.
"""

from dataclasses import replace
from datetime import date
from typing import Any, Callable

from event_setup.domain.errors import ValidationError
from event_setup.domain.models import EventDraft, Role, Shift, StaffRef, Team, derive_shift_id
from event_setup.domain.value_objects import Geofence, clamp_count, new_entity_id, new_shift_id

TEXT_FIELDS = frozenset({"name", "location", "description"})
FLAG_FIELDS = frozenset({"is_multi_day", "has_teams"})
DATE_FIELDS = frozenset({"start_date", "end_date"})
EDITABLE_FIELDS = TEXT_FIELDS | FLAG_FIELDS | DATE_FIELDS


def set_fields(draft: EventDraft, **changes: Any) -> EventDraft:
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown event field: {sorted(unknown)[0]}")
    for field, value in changes.items():
        _check_field_type(field, value)
    return draft.with_changes(**changes)


def _check_field_type(field: str, value: Any) -> None:
    if field in TEXT_FIELDS:
        ok = isinstance(value, str)
    elif field in FLAG_FIELDS:
        ok = isinstance(value, bool)
    else:
        ok = value is None or isinstance(value, date)
    if not ok:
        raise ValidationError(f"Invalid value for {field}")


def set_schedule(
    draft: EventDraft,
    start_time: str | None = None,
    end_time: str | None = None,
    has_shifts: bool | None = None,
) -> EventDraft:
    checks = (("start_time", start_time, str), ("end_time", end_time, str), ("has_shifts", has_shifts, bool))
    for field, value, kind in checks:
        if value is not None and not isinstance(value, kind):
            raise ValidationError(f"Invalid value for {field}")
    schedule = draft.schedule
    if start_time is not None:
        schedule = replace(schedule, start_time=start_time)
    if end_time is not None:
        schedule = replace(schedule, end_time=end_time)
    if has_shifts is not None:
        schedule = replace(schedule, has_shifts=has_shifts)
    return draft.with_changes(schedule=schedule)


def set_geofence(draft: EventDraft, latitude: float, longitude: float, radius_meters: int) -> EventDraft:
    try:
        geofence = Geofence(latitude=latitude, longitude=longitude, radius_meters=radius_meters)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    return draft.with_changes(geofence=geofence)


# Shifts


def add_shift(draft: EventDraft, shift: Shift) -> EventDraft:
    """Append a shift. Does not turn shifts on; the caller flips has_shifts."""
    if not shift.id:
        shift = replace(shift, id=new_shift_id())
    elif shift.id in draft.schedule.shift_ids():
        raise ValidationError("Shift id already exists")
    schedule = replace(draft.schedule, shifts=draft.schedule.shifts + (shift,))
    return draft.with_changes(schedule=schedule)


def update_shift(
    draft: EventDraft,
    shift_id: str,
    name: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
) -> EventDraft:
    index = _shift_index(draft, shift_id)
    shift = draft.schedule.shifts[index]
    # Pin the current key so renaming keeps the staffing slot.
    shift = replace(shift, id=derive_shift_id(shift, index))
    if name is not None:
        shift = replace(shift, name=name)
    if start_time is not None:
        shift = replace(shift, start_time=start_time)
    if end_time is not None:
        shift = replace(shift, end_time=end_time)
    shifts = list(draft.schedule.shifts)
    shifts[index] = shift
    return draft.with_changes(schedule=replace(draft.schedule, shifts=tuple(shifts)))


def remove_shift(draft: EventDraft, shift_id: str) -> EventDraft:
    """Remove a shift along with the staffing counts and assignments keyed by it."""
    index = _shift_index(draft, shift_id)
    # Pin positional keys so the remaining shifts keep their staffing slots.
    pinned = tuple(replace(s, id=derive_shift_id(s, i)) for i, s in enumerate(draft.schedule.shifts))
    shifts = pinned[:index] + pinned[index + 1 :]

    def drop_slot(role: Role) -> Role:
        counts = {k: v for k, v in role.shift_staff_counts.items() if k != shift_id}
        staff = tuple(s for s in role.assigned_staff if s.shift_id != shift_id)
        return replace(role, shift_staff_counts=counts, assigned_staff=staff)

    draft = draft.with_changes(schedule=replace(draft.schedule, shifts=shifts))
    return _map_all_roles(draft, drop_slot)


def _shift_index(draft: EventDraft, shift_id: str) -> int:
    for index, shift in enumerate(draft.schedule.shifts):
        if derive_shift_id(shift, index) == shift_id:
            return index
    raise ValidationError("Shift not found")


# Teams


def add_team(draft: EventDraft, name: str = "", team_id: str | None = None) -> EventDraft:
    team = Team(id=team_id or new_entity_id("team"), name=name)
    return draft.with_changes(teams=draft.teams + (team,))


def rename_team(draft: EventDraft, team_id: str, name: str) -> EventDraft:
    return _update_team(draft, team_id, lambda team: replace(team, name=name))


def remove_team(draft: EventDraft, team_id: str) -> EventDraft:
    _find_team(draft, team_id)
    return draft.with_changes(teams=tuple(t for t in draft.teams if t.id != team_id))


def _find_team(draft: EventDraft, team_id: str) -> Team:
    for team in draft.teams:
        if team.id == team_id:
            return team
    raise ValidationError("Team not found")


def _update_team(draft: EventDraft, team_id: str, fn: Callable[[Team], Team]) -> EventDraft:
    _find_team(draft, team_id)
    teams = tuple(fn(t) if t.id == team_id else t for t in draft.teams)
    return draft.with_changes(teams=teams)


# Roles


def add_role(
    draft: EventDraft,
    name: str = "",
    team_id: str | None = None,
    staff_count: int = 0,
    role_id: str | None = None,
) -> EventDraft:
    role = Role(id=role_id or new_entity_id("role"), name=name, staff_count=clamp_count(staff_count))
    if team_id is None:
        return draft.with_changes(roles=draft.roles + (role,))
    return _update_team(draft, team_id, lambda team: replace(team, roles=team.roles + (role,)))


def rename_role(draft: EventDraft, role_id: str, name: str, team_id: str | None = None) -> EventDraft:
    return update_role(draft, role_id, lambda role: replace(role, name=name), team_id)


def remove_role(draft: EventDraft, role_id: str, team_id: str | None = None) -> EventDraft:
    find_role(draft, role_id, team_id)
    if team_id is None:
        return draft.with_changes(roles=tuple(r for r in draft.roles if r.id != role_id))
    return _update_team(
        draft,
        team_id,
        lambda team: replace(team, roles=tuple(r for r in team.roles if r.id != role_id)),
    )


def set_role_staff_count(
    draft: EventDraft, role_id: str, count: int, team_id: str | None = None
) -> EventDraft:
    return update_role(
        draft, role_id, lambda role: replace(role, staff_count=clamp_count(count)), team_id
    )


def set_shift_staff_count(
    draft: EventDraft, role_id: str, shift_id: str, count: int, team_id: str | None = None
) -> EventDraft:
    def apply(role: Role) -> Role:
        counts = dict(role.shift_staff_counts)
        counts[shift_id] = clamp_count(count)
        return replace(role, shift_staff_counts=counts)

    return update_role(draft, role_id, apply, team_id)


def assign_staff(
    draft: EventDraft,
    role_id: str,
    staff: StaffRef,
    shift_id: str | None = None,
    team_id: str | None = None,
) -> EventDraft:
    """Append a staff member to a role slot. Duplicates are not rejected here."""
    entry = replace(staff, shift_id=shift_id, team_id=team_id or staff.team_id)
    return update_role(
        draft, role_id, lambda role: replace(role, assigned_staff=role.assigned_staff + (entry,)), team_id
    )


def remove_staff(
    draft: EventDraft,
    role_id: str,
    staff_id: str,
    shift_id: str | None = None,
    team_id: str | None = None,
) -> EventDraft:
    """Remove entries matching exactly (staff_id, shift_id).

    Omitting shift_id only matches assignments that have no shift.
    """

    def apply(role: Role) -> Role:
        staff = tuple(
            s for s in role.assigned_staff if (s.id, s.shift_id) != (staff_id, shift_id)
        )
        return replace(role, assigned_staff=staff)

    return update_role(draft, role_id, apply, team_id)


def find_role(draft: EventDraft, role_id: str, team_id: str | None = None) -> Role:
    roles = draft.roles if team_id is None else _find_team(draft, team_id).roles
    for role in roles:
        if role.id == role_id:
            return role
    raise ValidationError("Role not found")


def update_role(
    draft: EventDraft, role_id: str, fn: Callable[[Role], Role], team_id: str | None = None
) -> EventDraft:
    find_role(draft, role_id, team_id)

    def apply(roles: tuple[Role, ...]) -> tuple[Role, ...]:
        return tuple(fn(r) if r.id == role_id else r for r in roles)

    if team_id is None:
        return draft.with_changes(roles=apply(draft.roles))
    return _update_team(draft, team_id, lambda team: replace(team, roles=apply(team.roles)))


def _map_all_roles(draft: EventDraft, fn: Callable[[Role], Role]) -> EventDraft:
    return draft.with_changes(
        roles=tuple(fn(r) for r in draft.roles),
        teams=tuple(replace(t, roles=tuple(fn(r) for r in t.roles)) for t in draft.teams),
    )
