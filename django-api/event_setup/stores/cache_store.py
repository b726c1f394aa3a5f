"""Local draft store on top of Django's cache framework."""

from typing import Any

from django.core.cache import cache

from event_setup.conf import app_setting
from event_setup.stores.interfaces import LocalDraftStore

KEY_PREFIX = "staffloop:new-event-draft"


class CacheDraftStore(LocalDraftStore):
    """Keeps one autosaved draft per scope (browser session or user)."""

    def __init__(self, timeout: int | None = None) -> None:
        self._timeout = timeout or app_setting("LOCAL_DRAFT_TTL_SECONDS")

    def get(self, key: str) -> dict[str, Any] | None:
        return cache.get(self._key(key))

    def set(self, key: str, value: dict[str, Any]) -> None:
        cache.set(self._key(key), value, timeout=self._timeout)

    def clear(self, key: str) -> None:
        cache.delete(self._key(key))

    @staticmethod
    def _key(key: str) -> str:
        return f"{KEY_PREFIX}:{key}"
