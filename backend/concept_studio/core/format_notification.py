"""Notification Formatting — renders the operations summary email for one generation.

Invariants:
    - PURE: timestamp is passed in, never read from the clock here
    - Every user-supplied value is HTML-escaped
    - Binary assets (logo, floor plan, moodboards) are never rendered
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape

from concept_studio.core.domain_types import Branch, IdentityEmail


@dataclass(frozen=True)
class NotificationMessage:
    """A fully rendered summary, ready for the email collaborator."""
    subject: str
    html: str
    reply_to: str


def _render_value(value: object) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        if not value:
            return "None specified"
        return ", ".join(escape(str(v)) for v in value)
    return escape(str(value))


def _label(key: str) -> str:
    """snake_case field name → "Snake case" label."""
    return key.replace("_", " ").capitalize()


def render_brief_rows(brief: dict) -> str:
    """Render brief fields as HTML paragraphs, skipping empty values."""
    rows = []
    for key, value in brief.items():
        if value is None or value == "":
            continue
        rows.append(
            f'<p style="margin: 5px 0;"><strong>{escape(_label(key))}:</strong> '
            f"{_render_value(value)}</p>",
        )
    return "\n".join(rows) or "<p>No brief details submitted.</p>"


def build_notification(
    email: IdentityEmail,
    branch: Branch,
    brief: dict,
    generated_at: datetime,
    new_count: int,
) -> NotificationMessage:
    """Compose the summary email for the operations inbox."""
    subject = f"New {branch.value.capitalize()} Studio Generation - {email}"
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: auto;">'
        f"<h1 style=\"font-size: 22px;\">New {escape(branch.value.capitalize())} "
        "Concept Generation</h1>"
        f'<p style="margin: 5px 0;"><strong>Email:</strong> '
        f'<a href="mailto:{escape(email)}">{escape(email)}</a></p>'
        f'<p style="margin: 5px 0;"><strong>Generated at:</strong> '
        f"{escape(generated_at.isoformat())}</p>"
        f'<p style="margin: 5px 0;"><strong>Generations used:</strong> {new_count}</p>'
        "<h3>Submitted Brief</h3>"
        f"{render_brief_rows(brief)}"
        "</div>"
    )
    return NotificationMessage(subject=subject, html=html, reply_to=email)
