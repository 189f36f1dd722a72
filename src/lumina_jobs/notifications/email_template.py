"""HTML email layout shared by all class notifications."""

from datetime import UTC, datetime
from html import escape

from lumina_jobs.notifications.models import NotificationMessage, Recipient

FALLBACK_NAME = "Student"

_PRIMARY = "#2A5A6A"
_PRIMARY_DARK = "#163945"
_ACCENT = "#3d8e8e"

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="margin:0;padding:20px;background-color:#f5f7fa;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;">
  <div style="max-width:600px;margin:0 auto;background:#ffffff;border-radius:16px;overflow:hidden;border:1px solid #e8edf2;">
    <div style="background:linear-gradient(135deg,{primary} 0%,{primary_dark} 100%);padding:32px;text-align:center;">
      <div style="color:#ffffff;font-size:22px;font-weight:700;letter-spacing:2px;">LMV ACADEMY</div>
    </div>
    <div style="padding:32px;color:#1f2937;font-size:15px;line-height:1.6;">
      <h1 style="margin:0 0 16px;font-size:22px;color:{primary};">{title}</h1>
      <p style="margin:0 0 16px;">Hi {name},</p>
{paragraphs}{action}    </div>
    <div style="padding:20px 32px;background:#f9fafb;color:#6b7280;font-size:12px;text-align:center;">
      &copy; {year} LMV Academy. You are receiving this because you are enrolled in this course.
    </div>
  </div>
</body>
</html>
"""

_PARAGRAPH = '      <p style="margin:0 0 16px;">{text}</p>\n'

_ACTION = (
    '      <p style="margin:24px 0;text-align:center;">'
    '<a href="{url}" style="display:inline-block;padding:12px 28px;border-radius:8px;'
    'background:{accent};color:#ffffff;text-decoration:none;font-weight:600;">'
    "{label}</a></p>\n"
)


def render_email(
    message: NotificationMessage,
    recipient: Recipient,
    now: datetime | None = None,
) -> str:
    """Render ``message`` for ``recipient`` as a complete HTML document.

    Paragraphs and the action button are only emitted when present; every
    interpolated value is HTML-escaped.
    """
    name = (recipient.display_name or "").strip() or FALLBACK_NAME
    paragraphs = "".join(
        _PARAGRAPH.format(text=escape(text)) for text in message.email_paragraphs if text
    )
    action = ""
    if message.action_url:
        action = _ACTION.format(
            url=escape(message.action_url, quote=True),
            accent=_ACCENT,
            label=escape(message.action_label or "Open LMV Academy"),
        )

    return _LAYOUT.format(
        title=escape(message.email_heading),
        name=escape(name),
        paragraphs=paragraphs,
        action=action,
        primary=_PRIMARY,
        primary_dark=_PRIMARY_DARK,
        year=(now or datetime.now(UTC)).year,
    )
