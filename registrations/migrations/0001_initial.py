from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("registration_number", models.CharField(max_length=64, unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("CONFIRMED", "Confirmed"), ("CANCELLED", "Cancelled")],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(choices=[("ONLINE", "Online"), ("OFFLINE", "Offline")], max_length=16),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PAID", "Paid"),
                            ("FAILED", "Failed"),
                            ("REFUNDED", "Refunded"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("total_amount", models.PositiveIntegerField()),
                ("admin_fee", models.PositiveIntegerField(default=0)),
                ("payment_id", models.CharField(blank=True, db_index=True, max_length=128, null=True)),
                ("invoice_url", models.URLField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Attendee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=255)),
                ("gender", models.CharField(max_length=20)),
                (
                    "age_category",
                    models.CharField(
                        choices=[("TK", "TK"), ("SD", "SD"), ("SMP", "SMP"), ("SMA", "SMA")],
                        max_length=8,
                    ),
                ),
                (
                    "belt_level",
                    models.CharField(
                        choices=[
                            ("DASAR", "Dasar"),
                            ("MC_I", "MC I"),
                            ("MC_II", "MC II"),
                            ("MC_III", "MC III"),
                            ("MC_IV", "MC IV"),
                        ],
                        max_length=8,
                    ),
                ),
                ("phone_number", models.CharField(max_length=32)),
                ("biodata_url", models.URLField(blank=True, max_length=500)),
                ("consent_url", models.URLField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "registration",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendees",
                        to="registrations.registration",
                    ),
                ),
                (
                    "ticket",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.RESTRICT,
                        related_name="attendees",
                        to="events.ticket",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
    ]
