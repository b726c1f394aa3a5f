"""Serializers for request validation and API responses.

Input serializers only check shape and formats; business rules stay in
the services. Output serializers render domain models.
"""

from rest_framework import serializers

from event_setup.domain import ActionType, EventDraft

TIME_REGEX = r"^([01]\d|2[0-3]):[0-5]\d$"
TIME_ERROR = {"invalid": "Use HH:MM (24-hour) format"}


def _time_field(**kwargs) -> serializers.RegexField:
    return serializers.RegexField(TIME_REGEX, allow_blank=True, error_messages=TIME_ERROR, **kwargs)


class StaffRefSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    role = serializers.CharField(required=False, allow_blank=True, default="")
    team_id = serializers.CharField(required=False, allow_null=True, default=None)
    shift_id = serializers.CharField(required=False, allow_null=True, default=None)
    contact_info = serializers.CharField(required=False, allow_blank=True, default="")


class ShiftSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True, default="")
    name = serializers.CharField(required=False, allow_blank=True, default="")
    start_time = _time_field()
    end_time = _time_field()


class ScheduleSerializer(serializers.Serializer):
    start_time = _time_field()
    end_time = _time_field()
    has_shifts = serializers.BooleanField(default=False)
    shifts = ShiftSerializer(many=True, required=False, default=list)


class RoleSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True, default="")
    staff_count = serializers.IntegerField(required=False, default=0)
    shift_staff_counts = serializers.DictField(
        child=serializers.IntegerField(), required=False, default=dict
    )
    assigned_staff = StaffRefSerializer(many=True, required=False, default=list)


class TeamSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True, default="")
    roles = RoleSerializer(many=True, required=False, default=list)


class GeofenceSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    radius_meters = serializers.IntegerField(min_value=1)


class EventDraftSerializer(serializers.Serializer):
    """Full wizard payload."""

    name = serializers.CharField(required=False, allow_blank=True, default="")
    location = serializers.CharField(required=False, allow_blank=True, default="")
    is_multi_day = serializers.BooleanField(default=False)
    start_date = serializers.DateField(required=False, allow_null=True, default=None)
    end_date = serializers.DateField(required=False, allow_null=True, default=None)
    geofence = GeofenceSerializer(required=False)
    schedule = ScheduleSerializer(required=False)
    has_teams = serializers.BooleanField(default=False)
    roles = RoleSerializer(many=True, required=False, default=list)
    teams = TeamSerializer(many=True, required=False, default=list)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def to_draft(self) -> EventDraft:
        return EventDraft.from_dict(self.validated_data)


class DraftActionSerializer(serializers.Serializer):
    event_data = EventDraftSerializer()
    type = serializers.ChoiceField(choices=[t.value for t in ActionType])
    payload = serializers.DictField(required=False, default=dict)


class LocalDraftInputSerializer(serializers.Serializer):
    event_data = EventDraftSerializer()
    step = serializers.IntegerField(min_value=1, max_value=6)


class SaveDraftSerializer(serializers.Serializer):
    event_data = EventDraftSerializer()
    event_id = serializers.CharField(required=False, allow_null=True, default=None)


class SupervisorTokenRequestSerializer(serializers.Serializer):
    supervisor_staff_id = serializers.CharField(required=False, allow_null=True, default=None)


class TokenValidationSerializer(serializers.Serializer):
    access_token = serializers.CharField(required=False, allow_blank=True, default="")


class StepResultSerializer(serializers.Serializer):
    step = serializers.IntegerField()
    ok = serializers.BooleanField()
    errors = serializers.ListField(child=serializers.CharField())
    warnings = serializers.ListField(child=serializers.CharField())


class StoredEventSerializer(serializers.Serializer):
    id = serializers.CharField()
    status = serializers.SerializerMethodField()
    event_data = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_status(self, obj) -> str:
        return obj.status.value

    def get_event_data(self, obj) -> dict:
        return obj.draft.to_dict()


class LocalDraftSerializer(serializers.Serializer):
    event_data = serializers.SerializerMethodField()
    step = serializers.IntegerField()
    timestamp = serializers.DateTimeField()

    def get_event_data(self, obj) -> dict:
        return obj.event_data.to_dict()


class CalendarEventSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()


class SupervisorTokenSerializer(serializers.Serializer):
    id = serializers.CharField()
    event_id = serializers.CharField()
    team_id = serializers.CharField()
    supervisor_staff_id = serializers.CharField()
    access_token = serializers.CharField()
    expires_at = serializers.DateTimeField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class SupervisorContextSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    team_id = serializers.CharField()
    supervisor_staff_id = serializers.CharField()
    event_name = serializers.CharField()
    supervisor_name = serializers.CharField()
