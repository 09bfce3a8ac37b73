from datetime import datetime, timedelta

import pytest

from app import config
from app.constants import MONTH_NAMES
from app.domain.dashboard.service import DashboardService, placeholder_trends, shift_months
from app.models import BloodRequest


@pytest.fixture
def make_request(db):
    def _make_request(status="OPEN", created_at=None, **overrides):
        data = {
            "hospital_name": "Dhaka Medical College Hospital",
            "blood_group": "B+",
            "units_needed": 1,
            "urgency": "URGENT",
            "location_lat": 23.7,
            "location_lng": 90.4,
            "location_address": "Dhaka",
            "contact_phone": "01712345678",
            "status": status,
            "created_at": created_at or datetime.utcnow(),
        }
        data.update(overrides)
        blood_request = BloodRequest(**data)
        db.add(blood_request)
        db.commit()
        return blood_request

    return _make_request


def test_stats(client, make_user, make_request):
    make_user()
    make_user()
    make_user(role="ADMIN", email="admin@example.com")

    now = datetime.utcnow()
    make_request()
    make_request(created_at=now - timedelta(days=6))
    make_request(created_at=now - timedelta(days=8))
    make_request(status="CANCELLED")
    make_request(status="FULFILLED")
    make_request(status="FULFILLED", created_at=now - timedelta(days=400))

    response = client.get("/dashboard/stats")
    assert response.status_code == 200
    assert response.json() == {
        "totalDonors": 2,
        "livesSaved": 6,
        "recentRequestsCount": 2,
        "points": 0,
    }


def test_shift_months_clamps_day():
    assert shift_months(datetime(2026, 8, 31, 9, 30), -6) == datetime(2026, 2, 28, 9, 30)
    assert shift_months(datetime(2026, 3, 15), -6) == datetime(2025, 9, 15)
    assert shift_months(datetime(2025, 12, 1), 1) == datetime(2026, 1, 1)


def test_trends_group_fulfilled_requests_by_month(db, make_request):
    now = datetime.utcnow()
    this_month = now.replace(day=1, hour=12)
    last_month = shift_months(this_month, -1)

    make_request(status="FULFILLED", created_at=this_month)
    make_request(status="FULFILLED", created_at=this_month)
    make_request(status="FULFILLED", created_at=last_month)
    make_request(status="OPEN", created_at=last_month)
    make_request(status="FULFILLED", created_at=shift_months(now, -8))

    trends = DashboardService(db).get_trends()

    assert trends == [
        {"month": MONTH_NAMES[last_month.month - 1], "count": 1},
        {"month": MONTH_NAMES[this_month.month - 1], "count": 2},
    ]


def test_trends_without_data_are_empty(client, db, monkeypatch):
    monkeypatch.setattr(config, "DASHBOARD_PLACEHOLDER_TRENDS", False)
    assert client.get("/dashboard/trends").json() == []


def test_trends_placeholder_when_enabled(client, db, monkeypatch):
    monkeypatch.setattr(config, "DASHBOARD_PLACEHOLDER_TRENDS", True)

    trends = client.get("/dashboard/trends").json()

    assert len(trends) == 6
    assert trends[-1]["month"] == MONTH_NAMES[datetime.utcnow().month - 1]
    assert all(300 <= point["count"] <= 799 for point in trends)


def test_placeholder_months_end_with_current_month():
    months = [point["month"] for point in placeholder_trends(datetime(2026, 2, 10))]
    assert months == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]


def test_inventory_summary(client, make_inventory):
    make_inventory(blood_type="O+", quantity=5)
    make_inventory(hospital_name="Square Hospital Ltd", blood_type="O+", quantity=7)
    make_inventory(blood_type="A+", quantity=120)

    response = client.get("/dashboard/inventory")
    assert response.json() == [{"group": "A+", "value": 120}, {"group": "O+", "value": 12}]


def test_dashboard_with_empty_database(client, db):
    assert client.get("/dashboard/inventory").json() == []
    assert client.get("/dashboard/stats").json()["totalDonors"] == 0
