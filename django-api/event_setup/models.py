"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events and saved drafts."""

    class Status(models.TextChoices):
        DRAFT = "draft"
        UPCOMING = "upcoming"
        ONGOING = "ongoing"
        ENDED = "ended"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_setup_created_3c0d1e_idx"),
            models.Index(fields=["status"], name="event_setup_status_8f2a41_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class StaffMember(models.Model):
    """Persistence model for the organizer's staff roster."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=100, blank=True)
    contact_info = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class SupervisorAccessToken(models.Model):
    """Persistence model for delegated team-lead access links."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="supervisor_tokens")
    team_id = models.CharField(max_length=64)
    supervisor_staff_id = models.CharField(max_length=64)
    access_token = models.CharField(max_length=128, unique=True)
    expires_at = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["event", "team_id"], name="event_setup_event_i_5b7c2d_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event.name} - {self.team_id}"
