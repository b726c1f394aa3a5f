"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain error mapping to handlers.errors
- Never contain business logic
"""

from contextlib import contextmanager

from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from event_setup.domain import Action, ActionType, EventDraft, reduce
from event_setup.domain.errors import LookupFailure, SubmissionInProgressError
from event_setup.handlers import serializers as s
from event_setup.services import DraftPersistence, EventService, StaffingAssigner, validate_step
from event_setup.signals import event_cache_key
from event_setup.stores import CacheDraftStore, DjangoEventStore, DjangoStaffRoster, DjangoSupervisorTokenIssuer

EVENT_CACHE_TIMEOUT = 300
IN_FLIGHT_TIMEOUT = 30


def _event_service() -> EventService:
    return EventService(DjangoEventStore())


def _staffing() -> StaffingAssigner:
    return StaffingAssigner(DjangoStaffRoster(), DjangoSupervisorTokenIssuer(), DjangoEventStore())


def _scope(request: Request) -> str:
    session = request.session
    if session.session_key is None:
        session.save()
        # Forces SessionMiddleware to send the cookie for the new key.
        session.modified = True
    return session.session_key


def in_flight_key(action: str, scope: str) -> str:
    return f"staffloop:in-flight:{action}:{scope}"


@contextmanager
def _single_flight(request: Request, action: str):
    """Reject a request while the same session's previous one is still running."""
    key = in_flight_key(action, _scope(request))
    if not cache.add(key, True, timeout=IN_FLIGHT_TIMEOUT):
        raise SubmissionInProgressError(action)
    try:
        yield
    finally:
        cache.delete(key)


def _persistence(request: Request, is_edit_mode: bool = False) -> DraftPersistence:
    return DraftPersistence(
        CacheDraftStore(), _event_service(), scope=_scope(request), is_edit_mode=is_edit_mode
    )


def _draft_from(data) -> EventDraft:
    serializer = s.EventDraftSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.to_draft()


class LocalDraftView(APIView):
    """Handler for GET/PUT/DELETE /api/event-setup/draft"""

    def get(self, request: Request) -> Response:
        saved = _persistence(request).resume_offer()
        return Response({"draft": s.LocalDraftSerializer(saved).data if saved else None})

    def put(self, request: Request) -> Response:
        serializer = s.LocalDraftInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        draft = _draft_from(request.data["event_data"])
        persistence = _persistence(request, is_edit_mode=request.query_params.get("edit") == "1")
        saved = persistence.save_local(draft, serializer.validated_data["step"])
        return Response({"saved": saved})

    def delete(self, request: Request) -> Response:
        _persistence(request).discard()
        return Response(status=status.HTTP_204_NO_CONTENT)


class StepValidationView(APIView):
    """Handler for POST /api/event-setup/validate/{step}"""

    def post(self, request: Request, step: int) -> Response:
        result = validate_step(_draft_from(request.data), step)
        return Response(s.StepResultSerializer(result).data)


class DraftActionView(APIView):
    """Handler for POST /api/event-setup/actions"""

    def post(self, request: Request) -> Response:
        serializer = s.DraftActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        draft = _draft_from(request.data["event_data"])
        action = Action(
            type=ActionType(serializer.validated_data["type"]),
            payload=serializer.validated_data["payload"],
        )
        return Response({"event_data": reduce(draft, action).to_dict()})


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        events = _event_service().list_events(request.query_params.get("status"))
        return Response(s.StoredEventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        draft = _draft_from(request.data)
        service = _event_service()
        with _single_flight(request, "create"):
            event_id = service.create_event(draft)
        _persistence(request).clear_local()
        record = service.calendar_record(event_id)
        return Response(
            {"id": event_id, "calendar": s.CalendarEventSerializer(record).data},
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(APIView):
    """Handler for GET/PUT /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        key = event_cache_key(event_id)
        data = cache.get(key)
        if data is None:
            data = s.StoredEventSerializer(_event_service().get_event(event_id)).data
            cache.set(key, data, timeout=EVENT_CACHE_TIMEOUT)
        return Response(data)

    def put(self, request: Request, event_id: str) -> Response:
        service = _event_service()
        service.update_event(event_id, _draft_from(request.data))
        return Response(s.StoredEventSerializer(service.get_event(event_id)).data)


class EventDraftSaveView(APIView):
    """Handler for POST /api/events/drafts"""

    def post(self, request: Request) -> Response:
        serializer = s.SaveDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        draft = _draft_from(request.data["event_data"])
        with _single_flight(request, "save-draft"):
            event_id = _persistence(request).save_to_backend(draft, serializer.validated_data["event_id"])
        return Response({"id": event_id, "success": True}, status=status.HTTP_201_CREATED)


class EventDraftDeleteView(APIView):
    """Handler for DELETE /api/events/{event_id}/draft"""

    def delete(self, request: Request, event_id: str) -> Response:
        _persistence(request).delete_backend_draft(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventCalendarView(APIView):
    """Handler for GET /api/events/{event_id}/calendar"""

    def get(self, request: Request, event_id: str) -> Response:
        record = _event_service().calendar_record(event_id)
        return Response(s.CalendarEventSerializer(record).data)


class StaffSearchView(APIView):
    """Handler for GET /api/staff?q=...&exclude=id1,id2"""

    def get(self, request: Request) -> Response:
        exclude = [i for i in request.query_params.get("exclude", "").split(",") if i]
        staff = _staffing().find_assignable_staff(request.query_params.get("q", ""), exclude_ids=exclude)
        return Response([ref.to_dict() for ref in staff])


class SupervisorTokenView(APIView):
    """Handler for POST /api/events/{event_id}/teams/{team_id}/supervisor-tokens"""

    def post(self, request: Request, event_id: str, team_id: str) -> Response:
        serializer = s.SupervisorTokenRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = _event_service().get_event(event_id)
        team = next((t for t in event.draft.teams if t.id == team_id), None)
        if team is None:
            raise LookupFailure("Team not found")

        staffing = _staffing()
        staff_id = serializer.validated_data["supervisor_staff_id"]
        staff = None
        if staff_id:
            staff = next(
                (m for role in team.roles for m in role.assigned_staff if m.id == staff_id),
                None,
            ) or DjangoStaffRoster().get(staff_id)
            if staff is None:
                raise LookupFailure("Supervisor not found")

        token = staffing.generate_supervisor_token(event.id, team, staff)
        link = staffing.share_token_link(token, staff, team)
        return Response(
            {
                "token": s.SupervisorTokenSerializer(token).data,
                "access_url": link.access_url,
                "compose_url": link.compose_url,
                "warning": link.warning,
            },
            status=status.HTTP_201_CREATED,
        )


class SupervisorTokenValidateView(APIView):
    """Handler for POST /api/supervisor-tokens/validate"""

    def post(self, request: Request) -> Response:
        serializer = s.TokenValidationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        context = _staffing().validate_supervisor_token(serializer.validated_data["access_token"])
        return Response(s.SupervisorContextSerializer(context).data)
