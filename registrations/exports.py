"""CSV export of an event's registrations, one row per attendee."""
import csv
import io

from .services import registrations_for_export

CSV_HEADER = [
    "Registration Number",
    "User Name",
    "User Email",
    "Full Name",
    "Gender",
    "Age Category",
    "Belt Level",
    "Phone Number",
    "Ticket Type",
    "Registration Date",
]


def export_registrations_csv(event) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for registration in registrations_for_export(event):
        user = registration.user
        for attendee in registration.attendees.all():
            writer.writerow([
                registration.registration_number,
                user.get_full_name() or user.get_username(),
                user.email,
                attendee.full_name,
                attendee.gender,
                attendee.age_category,
                attendee.belt_level,
                attendee.phone_number,
                attendee.ticket.name,
                attendee.created_at.isoformat(),
            ])
    return buffer.getvalue()
