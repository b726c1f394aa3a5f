from event_setup.handlers.views import (
    DraftActionView,
    EventCalendarView,
    EventDetailView,
    EventDraftDeleteView,
    EventDraftSaveView,
    EventListView,
    LocalDraftView,
    StaffSearchView,
    StepValidationView,
    SupervisorTokenValidateView,
    SupervisorTokenView,
)

__all__ = [
    "DraftActionView",
    "EventCalendarView",
    "EventDetailView",
    "EventDraftDeleteView",
    "EventDraftSaveView",
    "EventListView",
    "LocalDraftView",
    "StaffSearchView",
    "StepValidationView",
    "SupervisorTokenValidateView",
    "SupervisorTokenView",
]
