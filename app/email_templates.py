"""
MJML Email Templates
Donor-facing emails, written in MJML for responsive, cross-client rendering
"""

from typing import Optional

from .config import FRONTEND_URL
from .constants import DONATION_COOLDOWN_DAYS
from .utils.sanitization import sanitize_string

# BloodConnect red/slate color scheme
THEME = {
    "primary": "#dc2626",
    "primary_dark": "#b91c1c",
    "primary_light": "#fef2f2",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "success": "#059669",
    "warning": "#f59e0b",
    "danger": "#dc2626",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="6px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, 'Helvetica Neue', sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['primary']}" padding="30px 20px">
          <mj-column>
            <mj-text align="center" font-size="26px" font-weight="700" color="#ffffff" padding="0">
              🩸 BloodConnect Bangladesh
            </mj-text>
            <mj-text align="center" font-size="15px" color="#ffffff" padding="10px 0 0 0">
              A Life Needs Your Help
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px 40px 40px">
          <mj-column>
            <mj-text font-size="22px" font-weight="600" color="{THEME['text_primary']}" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              <strong>BloodConnect Bangladesh</strong><br/>
              Connecting Donors, Saving Lives
            </mj-text>
            <mj-text align="center" font-size="12px" color="#94a3b8" padding="12px 0 0 0">
              This is an automated notification. Please do not reply to this email.<br/>
              For support contact support@bloodconnect.bd
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _detail_row(label: str, value: str, color: Optional[str] = None) -> str:
    style = f' style="color: {color}; font-weight: bold;"' if color else ""
    return f"""
    <tr>
      <td style="padding: 8px 0; font-weight: bold; color: {THEME['text_muted']};">{label}</td>
      <td style="padding: 8px 0; text-align: right;"{style}>{value}</td>
    </tr>
    """


def donor_request_alert_template(
    donor_name: str,
    blood_group: str,
    hospital_name: str,
    units_needed: int,
    urgency: str,
    contact_phone: str,
    district: Optional[str] = None,
) -> str:
    """
    Blood request alert sent to a matching donor.

    All caller-supplied values are HTML-escaped before interpolation.
    """
    donor_name = sanitize_string(donor_name)
    blood_group = sanitize_string(blood_group)
    hospital_name = sanitize_string(hospital_name)
    urgency = sanitize_string(urgency)
    contact_phone = sanitize_string(contact_phone) or "Not provided"
    is_emergency = urgency == "EMERGENCY"

    urgent_banner = ""
    if is_emergency:
        urgent_banner = f"""
        <mj-text background-color="{THEME['primary_light']}" padding="15px" color="{THEME['primary_dark']}">
          <strong>⚠️ URGENT REQUEST</strong><br/>
          This is an emergency blood requirement. Immediate action needed!
        </mj-text>
        """

    rows = [
        _detail_row("Blood Group:", f"<strong>{blood_group}</strong>"),
        _detail_row("Units Needed:", f"{units_needed} units"),
        _detail_row("Hospital:", hospital_name),
    ]
    if district:
        rows.append(_detail_row("Location:", sanitize_string(district)))
    rows.append(_detail_row("Contact:", contact_phone))
    rows.append(
        _detail_row("Urgency:", urgency, THEME["danger"] if is_emergency else THEME["success"])
    )

    content = f"""
    {urgent_banner}

    <mj-text>
      Dear <strong>{donor_name}</strong>,
    </mj-text>

    <mj-text>
      A patient at <strong>{hospital_name}</strong> needs <strong>{blood_group}</strong> blood.
      Your blood group matches this request!
    </mj-text>

    <mj-table padding="10px 0" font-size="15px" color="{THEME['text_primary']}">
      {''.join(rows)}
    </mj-table>

    <mj-text>
      <strong>How You Can Help:</strong><br/>
      • Contact the hospital at <strong>{contact_phone}</strong><br/>
      • Visit the hospital if you're available<br/>
      • Share this request with other potential donors
    </mj-text>

    <mj-text background-color="#fef3c7" padding="15px">
      <strong>⚠️ Important:</strong> Ensure you haven't donated blood in the last
      {DONATION_COOLDOWN_DAYS} days and meet all eligibility criteria before visiting.
    </mj-text>

    <mj-text font-size="14px" color="{THEME['text_muted']}">
      If you're no longer available to donate, please update your status in the BloodConnect app.
    </mj-text>
    """

    return get_base_template(
        title=f"{blood_group} blood needed at {hospital_name}",
        preview_text=f"{units_needed} units of {blood_group} needed",
        content_sections=content,
        cta_url=FRONTEND_URL,
        cta_label="Open BloodConnect Dashboard",
    )
