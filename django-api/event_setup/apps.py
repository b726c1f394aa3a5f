from django.apps import AppConfig


class EventSetupConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "event_setup"

    def ready(self) -> None:
        from event_setup import signals  # noqa: F401
