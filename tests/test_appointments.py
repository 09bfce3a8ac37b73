from datetime import datetime, timedelta

import pytest

from app.domain.appointments.schemas import AppointmentCreate, AppointmentUpdate
from app.domain.appointments.service import (
    AppointmentService,
    check_donation_cooldown,
    days_since,
    derive_hospital_id,
)
from app.exceptions import AuthorizationError, CooldownError, NotFoundError, StateError, ValidationError
from app.models import Appointment, BloodInventory, User
from tests.conftest import auth_headers


def _when(days: int) -> str:
    return (datetime.utcnow() + timedelta(days=days)).replace(microsecond=0).isoformat()


def _payload(**overrides):
    payload = {
        "hospitalName": "City Hospital",
        "hospitalAddress": "Mirpur 10, Dhaka",
        "hospitalPhone": "01711111111",
        "bloodGroup": "O+",
        "appointmentDate": _when(1),
        "appointmentTime": "10:00 AM",
        "notes": "First time donor",
    }
    payload.update(overrides)
    return payload


def _book(service, donor, **overrides):
    return service.create_appointment(AppointmentCreate(**_payload(**overrides)), donor.id)


# ----------------------------------------------------------------------------
# Cooldown
# ----------------------------------------------------------------------------


def test_days_since_rounds_down():
    now = datetime(2026, 3, 1, 12, 0, 0)
    assert days_since(now - timedelta(days=3, hours=23), now) == 3
    assert days_since(now - timedelta(days=120), now) == 120


@pytest.mark.parametrize("days_ago", [0, 1, 30, 90, 119])
def test_cooldown_blocks_recent_donors(make_user, days_ago):
    now = datetime.utcnow()
    donor = make_user(last_donation_date=now - timedelta(days=days_ago))

    with pytest.raises(CooldownError) as exc_info:
        check_donation_cooldown(donor, now)

    assert exc_info.value.days_remaining == 120 - days_ago
    assert exc_info.value.to_dict()["daysRemaining"] == 120 - days_ago


@pytest.mark.parametrize("days_ago", [120, 121, 365])
def test_cooldown_allows_after_120_days(make_user, days_ago):
    now = datetime.utcnow()
    donor = make_user(last_donation_date=now - timedelta(days=days_ago))
    check_donation_cooldown(donor, now)


def test_cooldown_allows_first_time_donors(donor):
    check_donation_cooldown(donor, datetime.utcnow())


def test_create_rejected_during_cooldown(client, make_user):
    donor = make_user(last_donation_date=datetime.utcnow() - timedelta(days=30))

    response = client.post("/appointments", json=_payload(), headers=auth_headers(donor))

    assert response.status_code == 400
    body = response.json()
    assert body["daysRemaining"] == 90
    assert body["message"] == "You must wait 90 more days before donating again"


# ----------------------------------------------------------------------------
# Create
# ----------------------------------------------------------------------------


def test_create_snapshots_donor_and_derives_hospital_id(db, donor):
    service = AppointmentService(db)
    appointment = _book(service, donor)

    assert appointment.status == "SCHEDULED"
    assert appointment.donor_name == donor.name
    assert appointment.donor_phone == donor.phone
    assert appointment.donor_blood_group == donor.blood_group
    assert appointment.hospital_id.startswith("city-hospital-")

    donor.name = "Renamed Donor"
    db.commit()
    db.refresh(appointment)
    assert appointment.donor_name != "Renamed Donor"


def test_create_keeps_supplied_hospital_id(db, donor):
    appointment = _book(AppointmentService(db), donor, hospitalId="dmch")
    assert appointment.hospital_id == "dmch"


def test_derive_hospital_id():
    now = datetime(2026, 1, 1)
    hospital_id = derive_hospital_id("  Square   Hospital Ltd ", now)
    assert hospital_id == f"square-hospital-ltd-{int(now.timestamp() * 1000)}"


@pytest.mark.parametrize("missing", ["hospitalName", "bloodGroup", "appointmentDate", "appointmentTime"])
def test_create_requires_fields(db, donor, missing):
    with pytest.raises(ValidationError, match="Missing required fields"):
        _book(AppointmentService(db), donor, **{missing: None})


def test_create_for_unknown_donor(db):
    with pytest.raises(NotFoundError):
        AppointmentService(db).create_appointment(AppointmentCreate(**_payload()), 404)


def test_create_accepts_today_and_rejects_yesterday(db, donor):
    service = AppointmentService(db)
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0).isoformat()

    assert _book(service, donor, appointmentDate=today).status == "SCHEDULED"

    with pytest.raises(ValidationError, match="Appointment date must be in the future"):
        _book(service, donor, appointmentDate=_when(-1))


def test_create_keeps_notes_as_plain_text(db, donor):
    service = AppointmentService(db)

    appointment = _book(service, donor, notes="  Tom & Jerry <b>both</b>\x07 ")
    assert appointment.notes == "Tom & Jerry <b>both</b>"

    with pytest.raises(ValidationError, match="maximum length"):
        _book(service, donor, notes="x" * 1001)


def test_create_via_api(client, donor):
    response = client.post("/appointments", json=_payload(), headers=auth_headers(donor))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Appointment created successfully"
    assert body["appointment"]["donor"] == donor.id
    assert body["appointment"]["status"] == "SCHEDULED"


def test_appointments_require_authentication(client, db):
    assert client.post("/appointments", json=_payload()).status_code == 401
    assert client.get("/appointments/my-appointments").status_code == 401

    response = client.get("/appointments/my-appointments", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}


# ----------------------------------------------------------------------------
# Complete
# ----------------------------------------------------------------------------


def test_complete_credits_points_cooldown_and_inventory(db, make_user, make_inventory):
    donor = make_user(points=10)
    existing = make_inventory(hospital_name="City Hospital", blood_type="O+", quantity=9)
    service = AppointmentService(db)
    appointment = _book(service, donor)

    result = service.complete_appointment(appointment.id, donor.id)

    assert result.appointment.status == "COMPLETED"
    assert result.appointment.completed_at is not None
    assert result.points_earned == 50
    assert result.inventory_created is False
    assert result.inventory.id == existing.id
    assert result.inventory.quantity == 10
    assert result.inventory.status == "LOW"

    db.refresh(donor)
    assert donor.points == 60
    assert abs(donor.last_donation_date - result.appointment.completed_at) < timedelta(seconds=1)


def test_complete_checks_ownership(db, make_user):
    owner = make_user()
    other = make_user()
    service = AppointmentService(db)
    appointment = _book(service, owner)

    with pytest.raises(AuthorizationError):
        service.complete_appointment(appointment.id, other.id)
    with pytest.raises(NotFoundError):
        service.complete_appointment(9999, owner.id)


def test_completed_and_cancelled_are_terminal(db, donor):
    service = AppointmentService(db)
    completed = _book(service, donor)
    service.complete_appointment(completed.id, donor.id)

    with pytest.raises(StateError, match="Appointment already processed"):
        service.complete_appointment(completed.id, donor.id)
    with pytest.raises(StateError):
        service.cancel_appointment(completed.id, donor.id)
    with pytest.raises(StateError):
        service.update_appointment(completed.id, AppointmentUpdate(notes="late"), donor.id)

    cancelled = _book(service, donor)
    service.cancel_appointment(cancelled.id, donor.id)

    with pytest.raises(StateError):
        service.complete_appointment(cancelled.id, donor.id)
    with pytest.raises(StateError, match="Can only cancel scheduled appointments"):
        service.cancel_appointment(cancelled.id, donor.id)
    with pytest.raises(StateError, match="Can only update scheduled appointments"):
        service.update_appointment(cancelled.id, AppointmentUpdate(appointmentTime="2 PM"), donor.id)

    # Only the first completion touched stock and points
    assert db.query(BloodInventory).one().quantity == 1
    db.refresh(donor)
    assert donor.points == 50


# ----------------------------------------------------------------------------
# Update / cancel
# ----------------------------------------------------------------------------


def test_update_changes_only_supplied_fields(db, donor):
    service = AppointmentService(db)
    appointment = _book(service, donor)
    original_date = appointment.appointment_date

    updated = service.update_appointment(
        appointment.id, AppointmentUpdate(appointmentTime="3:30 PM"), donor.id
    )

    assert updated.appointment_time == "3:30 PM"
    assert updated.appointment_date == original_date
    assert updated.notes == "First time donor"


def test_update_rechecks_date(db, donor):
    service = AppointmentService(db)
    appointment = _book(service, donor)

    with pytest.raises(ValidationError):
        service.update_appointment(
            appointment.id, AppointmentUpdate(appointmentDate=_when(-2)), donor.id
        )

    new_date = datetime.utcnow() + timedelta(days=5)
    updated = service.update_appointment(
        appointment.id, AppointmentUpdate(appointmentDate=new_date), donor.id
    )
    assert updated.appointment_date.date() == new_date.date()


def test_update_accepts_today(db, donor):
    service = AppointmentService(db)
    appointment = _book(service, donor, appointmentDate=_when(3))
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    updated = service.update_appointment(
        appointment.id, AppointmentUpdate(appointmentDate=today.isoformat()), donor.id
    )

    assert updated.appointment_date == today
    assert updated.status == "SCHEDULED"


def test_update_and_cancel_via_api(client, donor):
    headers = auth_headers(donor)
    appointment_id = client.post("/appointments", json=_payload(), headers=headers).json()["appointment"]["id"]

    response = client.put(f"/appointments/{appointment_id}", json={"notes": "Bring ID"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Appointment updated successfully"
    assert response.json()["appointment"]["notes"] == "Bring ID"

    response = client.put(f"/appointments/{appointment_id}/cancel", headers=headers)
    assert response.status_code == 200
    assert response.json()["appointment"]["status"] == "CANCELLED"

    response = client.put(f"/appointments/{appointment_id}/complete", headers=headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Appointment already processed"}


def test_other_donor_cannot_touch_appointment(client, make_user):
    owner = make_user()
    intruder = make_user()
    appointment_id = client.post(
        "/appointments", json=_payload(), headers=auth_headers(owner)
    ).json()["appointment"]["id"]

    for method, path in [
        ("get", f"/appointments/{appointment_id}"),
        ("put", f"/appointments/{appointment_id}/cancel"),
        ("put", f"/appointments/{appointment_id}/complete"),
    ]:
        response = client.request(method, path, headers=auth_headers(intruder))
        assert response.status_code == 403

    assert client.get("/appointments/4242", headers=auth_headers(owner)).status_code == 404


def test_my_appointments_lists_latest_first(client, db, donor, make_user):
    headers = auth_headers(donor)
    client.post("/appointments", json=_payload(appointmentDate=_when(3)), headers=headers)
    client.post("/appointments", json=_payload(appointmentDate=_when(10)), headers=headers)
    client.post("/appointments", json=_payload(), headers=auth_headers(make_user()))

    response = client.get("/appointments/my-appointments", headers=headers)
    dates = [a["appointmentDate"] for a in response.json()]
    assert len(dates) == 2
    assert dates == sorted(dates, reverse=True)


# ----------------------------------------------------------------------------
# End to end
# ----------------------------------------------------------------------------


def test_first_donation_at_unknown_hospital(client, db, donor):
    headers = auth_headers(donor)
    assert db.query(BloodInventory).filter_by(hospital_name="City Hospital").count() == 0

    created = client.post("/appointments", json=_payload(), headers=headers)
    appointment_id = created.json()["appointment"]["id"]

    response = client.put(f"/appointments/{appointment_id}/complete", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Donation completed successfully"
    assert body["appointment"]["status"] == "COMPLETED"
    assert body["pointsEarned"] == 50
    assert body["inventoryCreated"] is True
    assert body["inventory"]["hospitalName"] == "City Hospital"
    assert body["inventory"]["bloodType"] == "O+"
    assert body["inventory"]["quantity"] == 1
    assert body["inventory"]["status"] == "CRITICAL"
    assert body["inventory"]["hospitalType"] == "GOVERNMENT"
    assert body["inventory"]["city"] == "Mirpur 10"

    db.expire_all()
    user = db.get(User, donor.id)
    assert user.points == 50
    assert datetime.utcnow() - user.last_donation_date < timedelta(minutes=1)
    assert db.get(Appointment, appointment_id).status == "COMPLETED"

    # The donor is now inside the cooldown window
    response = client.post("/appointments", json=_payload(), headers=headers)
    assert response.status_code == 400
    assert response.json()["daysRemaining"] == 120
