"""App settings with defaults, overridable through settings.STAFFLOOP."""

from django.conf import settings

DEFAULTS = {
    "AUTOSAVE_DEBOUNCE_SECONDS": 0.5,
    "LOCAL_DRAFT_TTL_SECONDS": 7 * 24 * 60 * 60,
    "SUPERVISOR_TOKEN_TTL_DAYS": 7,
    "SUPERVISOR_ACCESS_URL": "http://localhost:8000/supervisor-access",
    "MESSAGING_COMPOSE_URL": "https://wa.me/",
}


def app_setting(name: str):
    return getattr(settings, "STAFFLOOP", {}).get(name, DEFAULTS[name])
