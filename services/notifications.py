"""
New-submission notification email, sent through the SendGrid v3 API (default)
or SendGrid SMTP. Callers only see ok/error; this never raises.
"""
from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Optional

import httpx

from config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    ok: bool
    error: Optional[str] = None


@dataclass
class NotificationMessage:
    to: str
    sender: str
    subject: str
    text: str
    html: str


def compose_message(
    to: str, sender: str, submission_id: str, user_email: Optional[str] = None, origin: Optional[str] = None
) -> NotificationMessage:
    admin_link = f"{origin.rstrip('/')}/admin/submissions/{submission_id}" if origin else None
    subject = "New submission received" + (f": {user_email}" if user_email else "")

    lines = ["A new submission was received.", "", f"Submission ID: {submission_id}"]
    if user_email:
        lines.append(f"User email: {user_email}")
    if admin_link:
        lines.append(f"Admin link: {admin_link}")

    html_parts = [
        '<div style="font-family: ui-sans-serif, system-ui; line-height: 1.4">',
        "<p><strong>A new submission was received.</strong></p>",
        f"<p><strong>Submission ID:</strong> {escape(submission_id)}</p>",
    ]
    if user_email:
        html_parts.append(f"<p><strong>User email:</strong> {escape(user_email)}</p>")
    if admin_link:
        html_parts.append(f'<p><a href="{escape(admin_link)}">Open in Admin</a></p>')
    html_parts.append("</div>")

    return NotificationMessage(to=to, sender=sender, subject=subject, text="\n".join(lines), html="\n".join(html_parts))


async def _send_via_api(
    message: NotificationMessage, s: Settings, transport: Optional[httpx.AsyncBaseTransport]
) -> None:
    body = {
        "personalizations": [{"to": [{"email": message.to}]}],
        "from": {"email": message.sender},
        "subject": message.subject,
        "content": [
            {"type": "text/plain", "value": message.text},
            {"type": "text/html", "value": message.html},
        ],
    }
    headers = {"Authorization": f"Bearer {s.sendgrid_api_key}"}
    async with httpx.AsyncClient(transport=transport, timeout=20) as client:
        response = await client.post(s.sendgrid_api_url, json=body, headers=headers)
        response.raise_for_status()


def _send_via_smtp(message: NotificationMessage, s: Settings) -> None:
    host = s.smtp_host or "smtp.sendgrid.net"
    port = s.smtp_port or 587
    secure = s.smtp_secure if s.smtp_secure is not None else port == 465
    user = s.smtp_user or "apikey"
    password = s.smtp_pass or s.sendgrid_api_key

    email = EmailMessage()
    email["To"] = message.to
    email["From"] = message.sender
    email["Subject"] = message.subject
    email.set_content(message.text)
    email.add_alternative(message.html, subtype="html")

    smtp_cls = smtplib.SMTP_SSL if secure else smtplib.SMTP
    with smtp_cls(host, port, timeout=20) as smtp:
        if not secure:
            smtp.starttls()
        smtp.login(user, password)
        smtp.send_message(email)


async def send_submission_notification(
    submission_id: str,
    user_email: Optional[str] = None,
    origin: Optional[str] = None,
    s: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> NotificationResult:
    s = s or default_settings
    if not s.submission_notify_to:
        return NotificationResult(ok=False, error="SUBMISSION_NOTIFY_TO not configured")
    if not s.submission_notify_from:
        return NotificationResult(ok=False, error="SUBMISSION_NOTIFY_FROM not configured")
    if not s.sendgrid_api_key:
        return NotificationResult(ok=False, error="SENDGRID_API_KEY not configured")

    message = compose_message(s.submission_notify_to, s.submission_notify_from, submission_id, user_email, origin)
    try:
        if s.sendgrid_transport.strip().lower() == "smtp":
            await asyncio.to_thread(_send_via_smtp, message, s)
        else:
            await _send_via_api(message, s, transport)
    except (httpx.HTTPError, smtplib.SMTPException, OSError) as e:
        logger.error("Submission notification for %s failed: %s", submission_id, e)
        return NotificationResult(ok=False, error=str(e) or "Email send failed")

    logger.info("Submission notification sent for %s", submission_id)
    return NotificationResult(ok=True)
