import asyncio

import pytest

from app import email_service
from app.email_templates import donor_request_alert_template
from tests.conftest import auth_headers


@pytest.fixture
def sent(monkeypatch):
    """Capture alerts instead of sending them; addresses in `failing` raise"""
    calls = []
    failing = set()

    async def fake_send_email(to, subject, mjml_content, from_address=None):
        calls.append({"to": to, "subject": subject, "mjml": mjml_content})
        if to in failing:
            raise Exception("Failed to send email: mailbox unavailable")
        return {"success": True, "id": f"test-{len(calls)}"}

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return calls, failing


def _alert(**overrides):
    payload = {
        "bloodGroup": "O-",
        "hospitalName": "Square Hospital Ltd",
        "unitsNeeded": 3,
        "urgency": "EMERGENCY",
        "contactPhone": "01712345678",
    }
    payload.update(overrides)
    return payload


def test_notifies_available_matching_donors(client, make_user, sent):
    calls, _ = sent
    requester = make_user(blood_group="A+")
    match_a = make_user(blood_group="O-", district="Dhaka")
    match_b = make_user(blood_group="O-", district="Sylhet")
    make_user(blood_group="O-", is_available=False)
    make_user(blood_group="O+")

    response = client.post("/notifications/notify-donors", json=_alert(), headers=auth_headers(requester))

    assert response.status_code == 200
    body = response.json()
    assert body["totalDonors"] == 2
    assert body["successCount"] == 2
    assert body["failCount"] == 0
    assert body["message"] == "Notification sent to 2 matching donors"
    assert {d["name"] for d in body["donors"]} == {match_a.name, match_b.name}
    assert sorted(c["to"] for c in calls) == sorted([match_a.email, match_b.email])
    assert calls[0]["subject"] == "🩸 URGENT Blood Donation Request - O-"


def test_district_narrows_matches(client, make_user, sent):
    calls, _ = sent
    make_user(blood_group="O-", district="Dhaka")
    sylhet = make_user(blood_group="O-", district="Sylhet")

    response = client.post(
        "/notifications/notify-donors", json=_alert(district="Sylhet"), headers=auth_headers(sylhet)
    )

    assert response.json()["totalDonors"] == 1
    assert [c["to"] for c in calls] == [sylhet.email]


def test_failed_sends_are_counted(client, make_user, sent):
    _, failing = sent
    ok = make_user(blood_group="O-")
    broken = make_user(blood_group="O-")
    failing.add(broken.email)

    response = client.post("/notifications/notify-donors", json=_alert(), headers=auth_headers(ok))

    assert response.status_code == 200
    body = response.json()
    assert body["successCount"] == 1
    assert body["failCount"] == 1
    assert body["totalDonors"] == 2


def test_no_matching_donors(client, donor, sent):
    response = client.post(
        "/notifications/notify-donors", json=_alert(bloodGroup="AB-"), headers=auth_headers(donor)
    )
    assert response.status_code == 404
    assert response.json() == {"message": "No matching donors found", "count": 0}


def test_missing_fields(client, donor, sent):
    response = client.post(
        "/notifications/notify-donors", json={"bloodGroup": "O-"}, headers=auth_headers(donor)
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Missing required fields"}


def test_notify_requires_authentication(client, db):
    assert client.post("/notifications/notify-donors", json=_alert()).status_code == 401


def test_at_most_fifty_donors_are_notified(client, make_user, sent):
    calls, _ = sent
    donors = [make_user(blood_group="B+") for _ in range(52)]

    response = client.post(
        "/notifications/notify-donors", json=_alert(bloodGroup="B+"), headers=auth_headers(donors[0])
    )

    assert response.json()["totalDonors"] == 50
    assert len(calls) == 50


def test_send_email_without_api_key_runs_in_development_mode(monkeypatch):
    monkeypatch.setattr(email_service.config, "RESEND_API_KEY", None)

    result = asyncio.run(email_service.send_email("donor@example.com", "Subject", "<mjml></mjml>"))

    assert result == {"success": True, "mode": "development"}


def test_alert_template_escapes_values():
    mjml = donor_request_alert_template(
        donor_name="<script>alert(1)</script>",
        blood_group="A+",
        hospital_name="Popular & Co",
        units_needed=2,
        urgency="NORMAL",
        contact_phone="01712345678",
        district="Dhaka",
    )

    assert "<script>" not in mjml
    assert "&lt;script&gt;" in mjml
    assert "Popular &amp; Co" in mjml
    assert "URGENT REQUEST" not in mjml
    assert "Location:" in mjml
