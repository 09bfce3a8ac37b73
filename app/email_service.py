"""
Email Service using Resend
Emails are written as MJML templates and compiled to HTML before sending
"""

import asyncio
import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from . import config
from .email_templates import donor_request_alert_template

logger = logging.getLogger(__name__)

resend.api_key = config.RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a result with 'html' and 'errors'
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        errors = getattr(result, "errors", None)
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        return getattr(result, "html", str(result))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict. Without RESEND_API_KEY nothing is sent and
        {"success": True, "mode": "development"} is returned.
    """
    recipients = [to] if isinstance(to, str) else to
    sender = from_address or config.EMAIL_FROM_ADDRESS

    if not config.RESEND_API_KEY:
        logger.info(f"📧 EMAIL (DEV MODE - would send to): {recipients} | Subject: {subject}")
        logger.debug("📧 Email service not configured. Set RESEND_API_KEY in .env")
        return {"success": True, "mode": "development"}

    html_content = compile_mjml_to_html(mjml_content)

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        email_data = {
            "from": sender,
            "to": recipients,
            "subject": subject,
            "html": html_content,
        }
        # The Resend SDK is blocking; keep concurrent sends off the event loop
        response = await asyncio.to_thread(resend.Emails.send, email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return {"success": True, "id": response.get("id") if isinstance(response, dict) else None}
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


async def send_donor_request_alert(
    to: str,
    donor_name: str,
    blood_group: str,
    hospital_name: str,
    units_needed: int,
    urgency: str,
    contact_phone: str,
    district: Optional[str] = None,
) -> dict:
    """Alert a matching donor about a blood request"""
    prefix = "URGENT " if urgency == "EMERGENCY" else ""
    mjml_content = donor_request_alert_template(
        donor_name=donor_name,
        blood_group=blood_group,
        hospital_name=hospital_name,
        units_needed=units_needed,
        urgency=urgency,
        contact_phone=contact_phone,
        district=district,
    )
    return await send_email(
        to=to,
        subject=f"🩸 {prefix}Blood Donation Request - {blood_group}",
        mjml_content=mjml_content,
    )
