from fastapi.testclient import TestClient

from app import main
from app.models import BloodInventory, BloodRequest
from app.seed import seed_demo_data


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "BloodConnect API is running"}
    assert client.get("/health").json() == {"status": "healthy"}


def test_seed_fills_empty_tables_once(db):
    seed_demo_data(db)
    seed_demo_data(db)

    stock = {row.hospital_name: row for row in db.query(BloodInventory).all()}
    assert set(stock) == {"Dhaka Medical College Hospital", "Square Hospital Ltd"}
    assert stock["Dhaka Medical College Hospital"].status == "OPTIMAL"
    assert stock["Square Hospital Ltd"].status == "CRITICAL"

    request = db.query(BloodRequest).one()
    assert request.urgency == "EMERGENCY"
    assert request.status == "OPEN"
    assert request.location_address == "Bakshibazar, Dhaka"


def test_startup_seeds_demo_data_when_enabled(db, monkeypatch):
    monkeypatch.setattr(main, "SEED_DEMO_DATA", True)

    with TestClient(main.app) as client:
        hospitals = client.get("/inventory/hospitals").json()
        summary = client.get("/dashboard/inventory").json()

    assert [h["hospitalName"] for h in hospitals] == [
        "Dhaka Medical College Hospital",
        "Square Hospital Ltd",
    ]
    assert summary == [
        {"group": "A+", "value": 120},
        {"group": "O-", "value": 8},
    ]
