"""
Licence Email Delivery

Sends the one-time licence number to a newly registered school through Resend.
Delivery reports success or failure to the caller; registration rolls the
school back when it fails.
"""

import asyncio
import logging
from html import escape

import resend

from schoolauth.core.config import Settings

logger = logging.getLogger(__name__)

LICENCE_SUBJECT = "Your SchoolAuth licence number"

# Placeholders: admin_name, school_name, licence, activation_url (all pre-escaped)
_LICENCE_HTML = """\
<!DOCTYPE html>
<html>
<body style="margin:0;background:#f8fafc;font-family:Helvetica,Arial,sans-serif;color:#0f172a;">
  <table role="presentation" width="100%" cellpadding="0" cellspacing="0">
    <tr><td align="center" style="padding:32px 16px;">
      <table role="presentation" width="560" cellpadding="0" cellspacing="0"
             style="background:#ffffff;border:1px solid #e2e8f0;border-radius:6px;">
        <tr><td style="padding:32px;">
          <h2 style="margin:0 0 16px;">{school_name} is registered</h2>
          <p>Dear {admin_name},</p>
          <p>Use the licence number below to activate your school's account.</p>
          <p style="font:bold 26px monospace;letter-spacing:3px;text-align:center;
                    padding:14px;background:#f1f5f9;border-radius:4px;">{licence}</p>
          <p><a href="{activation_url}">Activate your account</a></p>
          <p style="color:#475569;font-size:13px;">
            The licence works once. Do not share it. If you did not register
            this school, ignore this message.
          </p>
        </td></tr>
      </table>
    </td></tr>
  </table>
</body>
</html>
"""


async def send_email(
    settings: Settings,
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Deliver one HTML message through Resend.

    Without RESEND_API_KEY nothing is sent: the recipient and subject are
    logged and the call counts as delivered, so local signups work.

    Returns:
        False if the provider call raised, True otherwise
    """
    if not settings.resend_api_key:
        logger.warning(f"RESEND_API_KEY not set; not sending '{subject}' to {to_email}")
        return True

    resend.api_key = settings.resend_api_key
    params: resend.Emails.SendParams = {
        "from": settings.email_from,
        "to": [to_email],
        "subject": subject,
        "html": html_content,
    }

    try:
        # The SDK is synchronous
        result = await asyncio.to_thread(resend.Emails.send, params)
    except Exception as e:
        logger.error(f"Resend rejected mail to {to_email}: {e}")
        return False

    logger.info(f"Mail to {to_email} accepted by Resend (id={result.get('id')})")
    return True


async def send_licence(
    settings: Settings,
    to_email: str,
    admin_name: str,
    school_name: str,
    licence: str,
) -> bool:
    """Email the plaintext licence number to the school's address."""
    html_content = _LICENCE_HTML.format(
        admin_name=escape(admin_name),
        school_name=escape(school_name),
        licence=escape(licence),
        activation_url=escape(f"{settings.frontend_url}/activate"),
    )
    return await send_email(
        settings,
        to_email=to_email,
        subject=LICENCE_SUBJECT,
        html_content=html_content,
    )
