from django.urls import path

from event_setup.handlers import (
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

urlpatterns = [
    path("event-setup/draft", LocalDraftView.as_view(), name="local-draft"),
    path("event-setup/validate/<int:step>", StepValidationView.as_view(), name="validate-step"),
    path("event-setup/actions", DraftActionView.as_view(), name="draft-action"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/drafts", EventDraftSaveView.as_view(), name="event-draft-save"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/draft", EventDraftDeleteView.as_view(), name="event-draft-delete"),
    path("events/<str:event_id>/calendar", EventCalendarView.as_view(), name="event-calendar"),
    path(
        "events/<str:event_id>/teams/<str:team_id>/supervisor-tokens",
        SupervisorTokenView.as_view(),
        name="supervisor-token",
    ),
    path("staff", StaffSearchView.as_view(), name="staff-search"),
    path(
        "supervisor-tokens/validate",
        SupervisorTokenValidateView.as_view(),
        name="supervisor-token-validate",
    ),
]
