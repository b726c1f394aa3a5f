"""Domain models for the event setup wizard.

These are pure domain objects. The wizard owns a single EventDraft and
replaces it wholesale on every change; nothing here mutates in place.
Django ORM models are in event_setup/models.py (persistence layer).
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Self

from event_setup.domain.value_objects import Geofence

DEFAULT_GEOFENCE = Geofence(latitude=25.2048, longitude=55.2708, radius_meters=100)


class EventStatus(str, Enum):
    """Lifecycle status of a stored event."""

    DRAFT = "draft"
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    ENDED = "ended"
    CANCELLED = "cancelled"


def derive_shift_id(shift: "Shift", index: int) -> str:
    """Return the key identifying a shift's staffing slot.

    Every subsystem (role shift counts, staff assignments, validation messages)
    goes through this function. Shifts created by the wizard carry a stable id;
    shifts hydrated from older payloads fall back to their name, then position.
    """
    if shift.id:
        return shift.id
    return shift.name or f"shift-{index}"


def shift_label(shift: "Shift", index: int) -> str:
    return shift.name or f"Shift {index + 1}"


@dataclass(frozen=True)
class StaffRef:
    """A staff member as assigned to a role within the draft."""

    id: str
    name: str
    role: str = ""
    team_id: str | None = None
    shift_id: str | None = None
    contact_info: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "team_id": self.team_id,
            "shift_id": self.shift_id,
            "contact_info": self.contact_info,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            role=data.get("role") or "",
            team_id=data.get("team_id"),
            shift_id=data.get("shift_id"),
            contact_info=data.get("contact_info") or "",
        )


@dataclass(frozen=True)
class Shift:
    """A time sub-window of the event day."""

    name: str
    start_time: str
    end_time: str
    id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            start_time=data.get("start_time") or "",
            end_time=data.get("end_time") or "",
        )


@dataclass(frozen=True)
class Schedule:
    """Overall event-day window and its optional shifts."""

    start_time: str = "09:00"
    end_time: str = "17:00"
    has_shifts: bool = False
    shifts: tuple[Shift, ...] = ()

    def shift_ids(self) -> list[str]:
        return [derive_shift_id(shift, i) for i, shift in enumerate(self.shifts)]

    def label_for(self, shift_id: str) -> str:
        for index, shift in enumerate(self.shifts):
            if derive_shift_id(shift, index) == shift_id:
                return shift_label(shift, index)
        return shift_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "has_shifts": self.has_shifts,
            "shifts": [shift.to_dict() for shift in self.shifts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            start_time=data.get("start_time") or "",
            end_time=data.get("end_time") or "",
            has_shifts=bool(data.get("has_shifts", False)),
            shifts=tuple(Shift.from_dict(s) for s in data.get("shifts", ())),
        )


@dataclass(frozen=True)
class Role:
    """A named staffing requirement and the staff assigned to it."""

    id: str
    name: str
    staff_count: int = 0
    shift_staff_counts: dict[str, int] = field(default_factory=dict)
    assigned_staff: tuple[StaffRef, ...] = ()

    def required_for(self, shift_id: str | None = None) -> int:
        if shift_id is None:
            return self.staff_count
        return self.shift_staff_counts.get(shift_id, 0)

    def assigned_for(self, shift_id: str | None = None) -> int:
        if shift_id is None:
            return len(self.assigned_staff)
        return sum(1 for staff in self.assigned_staff if staff.shift_id == shift_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "staff_count": self.staff_count,
            "shift_staff_counts": dict(self.shift_staff_counts),
            "assigned_staff": [staff.to_dict() for staff in self.assigned_staff],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            staff_count=int(data.get("staff_count") or 0),
            shift_staff_counts={
                str(k): int(v) for k, v in (data.get("shift_staff_counts") or {}).items()
            },
            assigned_staff=tuple(
                StaffRef.from_dict(s) for s in data.get("assigned_staff", ())
            ),
        )


@dataclass(frozen=True)
class Team:
    """A group of roles with their own staffing requirements."""

    id: str
    name: str
    roles: tuple[Role, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "roles": [role.to_dict() for role in self.roles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            roles=tuple(Role.from_dict(r) for r in data.get("roles", ())),
        )


@dataclass(frozen=True)
class EventDraft:
    """The in-progress event being built by the setup wizard."""

    name: str = ""
    location: str = ""
    is_multi_day: bool = False
    start_date: date | None = None
    end_date: date | None = None
    geofence: Geofence = DEFAULT_GEOFENCE
    schedule: Schedule = field(default_factory=Schedule)
    has_teams: bool = False
    roles: tuple[Role, ...] = ()
    teams: tuple[Team, ...] = ()
    description: str = ""

    @classmethod
    def empty(cls, today: date | None = None) -> Self:
        today = today or date.today()
        return cls(start_date=today, end_date=today)

    def all_roles(self) -> list[tuple[Team | None, Role]]:
        """Return the roles that apply to the current team mode."""
        if self.has_teams:
            return [(team, role) for team in self.teams for role in team.roles]
        return [(None, role) for role in self.roles]

    def with_changes(self, **changes: Any) -> Self:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "location": self.location,
            "is_multi_day": self.is_multi_day,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "geofence": {
                "latitude": self.geofence.latitude,
                "longitude": self.geofence.longitude,
                "radius_meters": self.geofence.radius_meters,
            },
            "schedule": self.schedule.to_dict(),
            "has_teams": self.has_teams,
            "roles": [role.to_dict() for role in self.roles],
            "teams": [team.to_dict() for team in self.teams],
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        geofence = data.get("geofence")
        return cls(
            name=data.get("name") or "",
            location=data.get("location") or "",
            is_multi_day=bool(data.get("is_multi_day", False)),
            start_date=parse_date(data.get("start_date")),
            end_date=parse_date(data.get("end_date")),
            geofence=Geofence(
                latitude=float(geofence["latitude"]),
                longitude=float(geofence["longitude"]),
                radius_meters=int(geofence["radius_meters"]),
            )
            if geofence
            else DEFAULT_GEOFENCE,
            schedule=Schedule.from_dict(data["schedule"]) if data.get("schedule") else Schedule(),
            has_teams=bool(data.get("has_teams", False)),
            roles=tuple(Role.from_dict(r) for r in data.get("roles", ())),
            teams=tuple(Team.from_dict(t) for t in data.get("teams", ())),
            description=data.get("description") or "",
        )


def parse_date(value: date | str | None) -> date | None:
    if not value:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


@dataclass(frozen=True)
class SupervisorAccessToken:
    """Delegated credential letting a team lead manage their team's attendance."""

    id: str
    event_id: str
    team_id: str
    supervisor_staff_id: str
    access_token: str
    expires_at: datetime
    is_active: bool
    created_at: datetime

    def is_usable(self, now: datetime) -> bool:
        return self.is_active and now < self.expires_at


@dataclass(frozen=True)
class SupervisorContext:
    """What a validated supervisor link grants access to."""

    event_id: str
    team_id: str
    supervisor_staff_id: str
    event_name: str
    supervisor_name: str


@dataclass(frozen=True)
class CalendarEventRecord:
    """Data handed to the calendar exporter after an event is created."""

    id: str
    name: str
    description: str
    location: str
    start_datetime: datetime
    end_datetime: datetime

    @classmethod
    def from_draft(cls, event_id: str, draft: EventDraft) -> Self:
        start_day = draft.start_date or date.today()
        end_day = draft.end_date if draft.is_multi_day and draft.end_date else start_day
        return cls(
            id=event_id,
            name=draft.name,
            description=draft.description,
            location=draft.location,
            start_datetime=datetime.combine(start_day, _parse_time(draft.schedule.start_time)),
            end_datetime=datetime.combine(end_day, _parse_time(draft.schedule.end_time)),
        )


def _parse_time(value: str):
    return datetime.strptime(value or "00:00", "%H:%M").time()


@dataclass(frozen=True)
class StoredEvent:
    """An event as returned by the event storage collaborator."""

    id: str
    status: EventStatus
    draft: EventDraft
    created_at: datetime
    updated_at: datetime
