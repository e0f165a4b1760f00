"""
Admin configuration for the events app.

Tickets are edited inline on their event; statistics are read-only
because they are only ever changed by confirmed payments.
"""
from django.contrib import admin

from .models import Category, Event, EventStatistics, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "event_code", "status", "registration_open_date", "registration_close_date", "created_at")
    list_filter = ("status", "categories")
    search_fields = ("title", "event_code", "location")
    filter_horizontal = ("categories",)
    inlines = [TicketInline]


@admin.register(EventStatistics)
class EventStatisticsAdmin(admin.ModelAdmin):
    list_display = ("event", "total_registrations", "total_revenue", "last_updated")
    readonly_fields = ("event", "total_registrations", "total_revenue", "last_updated", "created_at")
