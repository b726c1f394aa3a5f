"""Django signals for cache invalidation."""

import logging

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from event_setup.models import Event, SupervisorAccessToken

logger = logging.getLogger(__name__)


def event_cache_key(event_id) -> str:
    return f"events:{event_id}"


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate the cached detail when an event is saved or deleted."""
    cache.delete(event_cache_key(instance.id))
    logger.debug("Invalidated cache for event %s", instance.id)


@receiver(post_save, sender=SupervisorAccessToken)
def log_token_issued(sender, instance, created, **kwargs):
    """Audit trail for delegated access."""
    if created:
        logger.info(
            "Supervisor access granted: event=%s team=%s staff=%s",
            instance.event_id,
            instance.team_id,
            instance.supervisor_staff_id,
        )
