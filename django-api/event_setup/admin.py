from django.contrib import admin

from event_setup.models import Event, StaffMember, SupervisorAccessToken


class SupervisorAccessTokenInline(admin.TabularInline):
    model = SupervisorAccessToken
    extra = 0
    readonly_fields = ["access_token", "created_at"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "location", "status", "start_date", "created_at"]
    list_filter = ["status"]
    search_fields = ["name", "location"]
    inlines = [SupervisorAccessTokenInline]


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ["name", "role", "contact_info"]
    search_fields = ["name", "contact_info"]


@admin.register(SupervisorAccessToken)
class SupervisorAccessTokenAdmin(admin.ModelAdmin):
    list_display = ["event", "team_id", "supervisor_staff_id", "expires_at", "is_active"]
    list_filter = ["is_active", "event"]
