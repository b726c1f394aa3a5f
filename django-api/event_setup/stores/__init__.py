from event_setup.stores.cache_store import CacheDraftStore
from event_setup.stores.django_store import DjangoEventStore, DjangoStaffRoster, DjangoSupervisorTokenIssuer
from event_setup.stores.interfaces import EventStore, LocalDraftStore, StaffRoster, SupervisorTokenIssuer

__all__ = [
    "CacheDraftStore",
    "DjangoEventStore",
    "DjangoStaffRoster",
    "DjangoSupervisorTokenIssuer",
    "EventStore",
    "LocalDraftStore",
    "StaffRoster",
    "SupervisorTokenIssuer",
]
