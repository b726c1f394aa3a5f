"""Reducer-style actions over the EventDraft.

The wizard front end dispatches flat actions instead of nesting updates
through team -> role -> staff closures. Every action maps to exactly one
operation in event_setup.domain.mutations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Self

from event_setup.domain import mutations
from event_setup.domain.errors import ValidationError
from event_setup.domain.models import EventDraft, Shift, StaffRef, parse_date


class ActionType(str, Enum):
    SET_FIELD = "SET_FIELD"
    SET_SCHEDULE = "SET_SCHEDULE"
    SET_GEOFENCE = "SET_GEOFENCE"
    ADD_SHIFT = "ADD_SHIFT"
    UPDATE_SHIFT = "UPDATE_SHIFT"
    REMOVE_SHIFT = "REMOVE_SHIFT"
    ADD_TEAM = "ADD_TEAM"
    RENAME_TEAM = "RENAME_TEAM"
    REMOVE_TEAM = "REMOVE_TEAM"
    ADD_ROLE = "ADD_ROLE"
    RENAME_ROLE = "RENAME_ROLE"
    REMOVE_ROLE = "REMOVE_ROLE"
    SET_STAFF_COUNT = "SET_STAFF_COUNT"
    SET_SHIFT_COUNT = "SET_SHIFT_COUNT"
    ASSIGN_STAFF = "ASSIGN_STAFF"
    UNASSIGN_STAFF = "UNASSIGN_STAFF"


@dataclass(frozen=True)
class Action:
    """A single draft edit."""

    type: ActionType
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        try:
            action_type = ActionType(data["type"])
        except (KeyError, ValueError) as exc:
            raise ValidationError("Unknown draft action") from exc
        return cls(type=action_type, payload=dict(data.get("payload") or {}))


def _set_field(draft: EventDraft, p: dict[str, Any]) -> EventDraft:
    changes = dict(p)
    for key in ("start_date", "end_date"):
        if key in changes:
            changes[key] = parse_date(changes[key])
    return mutations.set_fields(draft, **changes)


def _add_shift(draft: EventDraft, p: dict[str, Any]) -> EventDraft:
    shift = Shift(
        name=p.get("name", ""),
        start_time=p.get("start_time", ""),
        end_time=p.get("end_time", ""),
        id=p.get("id", ""),
    )
    return mutations.add_shift(draft, shift)


def _assign_staff(draft: EventDraft, p: dict[str, Any]) -> EventDraft:
    return mutations.assign_staff(
        draft,
        p["role_id"],
        StaffRef.from_dict(p["staff"]),
        shift_id=p.get("shift_id"),
        team_id=p.get("team_id"),
    )


_HANDLERS: dict[ActionType, Callable[[EventDraft, dict[str, Any]], EventDraft]] = {
    ActionType.SET_FIELD: _set_field,
    ActionType.SET_SCHEDULE: lambda d, p: mutations.set_schedule(
        d, p.get("start_time"), p.get("end_time"), p.get("has_shifts")
    ),
    ActionType.SET_GEOFENCE: lambda d, p: mutations.set_geofence(
        d, float(p["latitude"]), float(p["longitude"]), int(p["radius_meters"])
    ),
    ActionType.ADD_SHIFT: _add_shift,
    ActionType.UPDATE_SHIFT: lambda d, p: mutations.update_shift(
        d, p["shift_id"], p.get("name"), p.get("start_time"), p.get("end_time")
    ),
    ActionType.REMOVE_SHIFT: lambda d, p: mutations.remove_shift(d, p["shift_id"]),
    ActionType.ADD_TEAM: lambda d, p: mutations.add_team(d, p.get("name", ""), p.get("team_id")),
    ActionType.RENAME_TEAM: lambda d, p: mutations.rename_team(d, p["team_id"], p["name"]),
    ActionType.REMOVE_TEAM: lambda d, p: mutations.remove_team(d, p["team_id"]),
    ActionType.ADD_ROLE: lambda d, p: mutations.add_role(
        d, p.get("name", ""), p.get("team_id"), int(p.get("staff_count", 0)), p.get("role_id")
    ),
    ActionType.RENAME_ROLE: lambda d, p: mutations.rename_role(
        d, p["role_id"], p["name"], p.get("team_id")
    ),
    ActionType.REMOVE_ROLE: lambda d, p: mutations.remove_role(d, p["role_id"], p.get("team_id")),
    ActionType.SET_STAFF_COUNT: lambda d, p: mutations.set_role_staff_count(
        d, p["role_id"], int(p["count"]), p.get("team_id")
    ),
    ActionType.SET_SHIFT_COUNT: lambda d, p: mutations.set_shift_staff_count(
        d, p["role_id"], p["shift_id"], int(p["count"]), p.get("team_id")
    ),
    ActionType.ASSIGN_STAFF: _assign_staff,
    ActionType.UNASSIGN_STAFF: lambda d, p: mutations.remove_staff(
        d, p["role_id"], str(p["staff_id"]), p.get("shift_id"), p.get("team_id")
    ),
}


def reduce(draft: EventDraft, action: Action) -> EventDraft:
    """Apply one action and return the resulting draft."""
    try:
        return _HANDLERS[action.type](draft, action.payload)
    except KeyError as exc:
        raise ValidationError(f"Missing action field: {exc.args[0]}") from exc
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid value for {action.type.value}") from exc
