"""Templates seeded into an empty store; flagged default and protected from deletion."""

from __future__ import annotations

from typing import Any

from .templates_models import TemplateCategory

DEFAULT_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Booking Confirmation",
        "category": TemplateCategory.BOOKING.value,
        "subject": "Deployment slot booked: {{releaseName}}",
        "body": (
            "Hello {{team}},\n\n"
            "Your release {{releaseName}} {{version}} is booked for {{slotDate}}, "
            "{{slotTime}}.\n\nRelease type: {{releaseType}}\n"
        ),
        "variables": {
            "releaseName": "Name of the release",
            "version": "Release version",
            "team": "Team that owns the release",
            "releaseType": "Release type",
            "slotDate": "Date of the deployment slot",
            "slotTime": "Time window of the deployment slot",
        },
    },
    {
        "name": "Status Update",
        "category": TemplateCategory.STATUS_UPDATE.value,
        "subject": "Release {{releaseName}} is now {{status}}",
        "body": (
            "Hello {{team}},\n\n"
            "The status of {{releaseName}} changed to {{status}}.\n\n"
            "Comments: {{comments}}\n"
        ),
        "variables": {
            "releaseName": "Name of the release",
            "team": "Team that owns the release",
            "status": "New release status",
            "comments": "Comments left with the status change",
        },
    },
    {
        "name": "Deployment Reminder",
        "category": TemplateCategory.REMINDER.value,
        "subject": "Reminder: {{releaseName}} deploys on {{slotDate}}",
        "body": (
            "Hello {{team}},\n\n"
            "This is a reminder that {{releaseName}} is scheduled for {{slotDate}}, "
            "{{slotTime}}.\n"
        ),
        "variables": {
            "releaseName": "Name of the release",
            "team": "Team that owns the release",
            "slotDate": "Date of the deployment slot",
            "slotTime": "Time window of the deployment slot",
        },
    },
]


def default_template_values() -> list[dict[str, Any]]:
    return [{**template, "is_default": True} for template in DEFAULT_TEMPLATES]
