import os

# Configure the app for an isolated in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RESEND_API_KEY"] = ""

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import BloodInventory, User  # noqa: E402
from app.security_utils import create_access_token, hash_password  # noqa: E402

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    # No lifespan: tables come from the db fixture and nothing is seeded
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Donor {counter['n']}",
            "email": f"donor{counter['n']}@example.com",
            "password": PASSWORD_HASH,
            "phone": f"+88017{counter['n']:08d}",
            "blood_group": "O+",
            "dob": datetime(1995, 5, 10),
            "district": "Dhaka",
            "gender": "Male",
            "weight": 65,
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def donor(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="admin@example.com", role="ADMIN")


@pytest.fixture
def make_inventory(db):
    def _make_inventory(**overrides):
        data = {
            "hospital_name": "Dhaka Medical College Hospital",
            "hospital_type": "GOVERNMENT",
            "city": "Dhaka",
            "division": "Dhaka",
            "phone": "+880-2-55165088",
            "email": "info@dmch.gov.bd",
            "is_247": True,
            "blood_type": "A+",
            "quantity": 40,
            "expiry_date": datetime.utcnow() + timedelta(days=30),
        }
        data.update(overrides)
        item = BloodInventory(**data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make_inventory


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
