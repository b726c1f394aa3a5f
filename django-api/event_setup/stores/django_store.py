"""Django ORM implementations of the store interfaces."""

import logging
import secrets
from datetime import datetime

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q

from event_setup import models
from event_setup.domain import EventDraft, EventId, EventStatus, StaffRef, StoredEvent, SupervisorAccessToken
from event_setup.stores.interfaces import EventStore, StaffRoster, SupervisorTokenIssuer

logger = logging.getLogger(__name__)


def _to_domain_event(record: models.Event) -> StoredEvent:
    return StoredEvent(
        id=str(record.id),
        status=EventStatus(record.status),
        draft=EventDraft.from_dict(record.payload),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_domain_token(record: models.SupervisorAccessToken) -> SupervisorAccessToken:
    return SupervisorAccessToken(
        id=str(record.id),
        event_id=str(record.event_id),
        team_id=record.team_id,
        supervisor_staff_id=record.supervisor_staff_id,
        access_token=record.access_token,
        expires_at=record.expires_at,
        is_active=record.is_active,
        created_at=record.created_at,
    )


class DjangoEventStore(EventStore):
    """Database-backed event store using Django ORM."""

    def list_events(self, status: EventStatus | None = None) -> list[StoredEvent]:
        queryset = models.Event.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [_to_domain_event(record) for record in queryset]

    def get_event(self, event_id: EventId) -> StoredEvent | None:
        record = models.Event.objects.filter(id=event_id.value).first()
        return _to_domain_event(record) if record else None

    def create_event(self, draft: EventDraft, status: EventStatus) -> EventId:
        record = models.Event.objects.create(status=status.value, **self._columns(draft))
        logger.info("Stored event %s with status %s", record.id, status.value)
        return EventId(value=record.id)

    def update_event(self, event_id: EventId, draft: EventDraft, status: EventStatus | None = None) -> bool:
        record = models.Event.objects.filter(id=event_id.value).first()
        if record is None:
            return False
        for column, value in self._columns(draft).items():
            setattr(record, column, value)
        if status is not None:
            record.status = status.value
        record.save()
        return True

    def delete_event(self, event_id: EventId) -> bool:
        record = models.Event.objects.filter(id=event_id.value).first()
        if record is None:
            return False
        record.delete()
        return True

    @staticmethod
    def _columns(draft: EventDraft) -> dict:
        return {
            "name": draft.name,
            "location": draft.location,
            "start_date": draft.start_date,
            "end_date": draft.end_date if draft.is_multi_day else draft.start_date,
            "payload": draft.to_dict(),
        }


class DjangoStaffRoster(StaffRoster):
    """Staff roster backed by the StaffMember table."""

    def search(self, query: str) -> list[StaffRef]:
        queryset = models.StaffMember.objects.all()
        if query:
            queryset = queryset.filter(Q(name__icontains=query) | Q(contact_info__icontains=query))
        return [self._to_ref(member) for member in queryset]

    def get(self, staff_id: str) -> StaffRef | None:
        try:
            member = models.StaffMember.objects.filter(id=staff_id).first()
        except DjangoValidationError:
            # Malformed UUIDs are simply unknown staff.
            return None
        return self._to_ref(member) if member else None

    @staticmethod
    def _to_ref(member: models.StaffMember) -> StaffRef:
        return StaffRef(
            id=str(member.id),
            name=member.name,
            role=member.role,
            contact_info=member.contact_info,
        )


class DjangoSupervisorTokenIssuer(SupervisorTokenIssuer):
    """Issues opaque URL-safe tokens and stores them in the database."""

    def create_token(
        self, event_id: str, team_id: str, supervisor_staff_id: str, expires_at: datetime
    ) -> SupervisorAccessToken:
        record = models.SupervisorAccessToken.objects.create(
            event_id=event_id,
            team_id=team_id,
            supervisor_staff_id=supervisor_staff_id,
            access_token=secrets.token_urlsafe(32),
            expires_at=expires_at,
            is_active=True,
        )
        return _to_domain_token(record)

    def find_token(self, access_token: str) -> SupervisorAccessToken | None:
        record = models.SupervisorAccessToken.objects.filter(access_token=access_token).first()
        return _to_domain_token(record) if record else None
