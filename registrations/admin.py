from django.contrib import admin

from .models import Attendee, Registration


class AttendeeInline(admin.TabularInline):
    model = Attendee
    extra = 0
    raw_id_fields = ("ticket",)


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = (
        "registration_number", "event", "user", "status", "payment_method", "payment_status",
        "total_amount", "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method", "event")
    search_fields = ("registration_number", "payment_id", "user__email", "user__username")
    readonly_fields = ("registration_number", "total_amount", "admin_fee", "payment_id")
    inlines = [AttendeeInline]


@admin.register(Attendee)
class AttendeeAdmin(admin.ModelAdmin):
    list_display = ("full_name", "registration", "ticket", "age_category", "belt_level")
    list_filter = ("age_category", "belt_level")
    search_fields = ("full_name", "registration__registration_number")
