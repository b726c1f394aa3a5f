from event_setup.domain.actions import Action, ActionType, reduce
from event_setup.domain.models import (
    CalendarEventRecord,
    EventDraft,
    EventStatus,
    Role,
    Schedule,
    Shift,
    StaffRef,
    StoredEvent,
    SupervisorAccessToken,
    SupervisorContext,
    Team,
    derive_shift_id,
    shift_label,
)
from event_setup.domain.validation import StepResult
from event_setup.domain.value_objects import EventId, Geofence

__all__ = [
    "Action",
    "ActionType",
    "reduce",
    "CalendarEventRecord",
    "EventDraft",
    "EventStatus",
    "Role",
    "Schedule",
    "Shift",
    "StaffRef",
    "StoredEvent",
    "SupervisorAccessToken",
    "SupervisorContext",
    "Team",
    "derive_shift_id",
    "shift_label",
    "StepResult",
    "EventId",
    "Geofence",
]
