"""
Initial migration for the events app.

Creates the Category, Event, Ticket and EventStatistics tables.  Events
reference categories through an implicit many-to-many table; tickets
and statistics cascade with their event.
"""
from django.db import migrations, models
import django.db.models.deletion

import events.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"], "verbose_name_plural": "categories"},
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                ("registration_open_date", models.DateTimeField()),
                ("registration_close_date", models.DateTimeField()),
                ("location", models.CharField(max_length=255)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                (
                    "event_code",
                    models.CharField(
                        default=events.models.generate_event_code,
                        editable=False,
                        max_length=64,
                        unique=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("ACTIVE", "Active"), ("ARCHIVED", "Archived")],
                        db_index=True,
                        default="ACTIVE",
                        max_length=16,
                    ),
                ),
                ("max_capacity", models.PositiveIntegerField()),
                (
                    "admin_fee",
                    models.PositiveIntegerField(default=0, help_text="Flat fee added to every registration"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "categories",
                    models.ManyToManyField(blank=True, related_name="events", to="events.category"),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.AddIndex(
            model_name="event",
            index=models.Index(
                fields=["registration_open_date", "registration_close_date"],
                name="events_reg_window_idx",
            ),
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("price", models.PositiveIntegerField(help_text="Ticket price in cents")),
                ("available_from", models.DateTimeField()),
                ("available_until", models.DateTimeField()),
                ("max_capacity", models.PositiveIntegerField()),
                (
                    "type",
                    models.CharField(
                        choices=[("ONLINE", "Online"), ("ONSITE", "Onsite")],
                        default="ONLINE",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tickets",
                        to="events.event",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="EventStatistics",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_revenue", models.BigIntegerField(default=0)),
                ("total_registrations", models.PositiveIntegerField(default=0)),
                ("last_updated", models.DateTimeField(auto_now=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="statistics",
                        to="events.event",
                    ),
                ),
            ],
            options={"verbose_name_plural": "event statistics"},
        ),
    ]
