import os

# Must be set before worklog reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_SCHEME"] = "pbkdf2_sha256"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LEAVE_POLICY"] = "ceiling"
os.environ["DUPLICATE_POLICY"] = "upsert"

import pytest
from fastapi.testclient import TestClient

from worklog.auth import get_password_hash
from worklog.database import SessionLocal, engine
from worklog.main import app
from worklog.models import Base
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.user_repo import UserRepository
from worklog.services.daily_log_service import DailyLogService
from worklog.services.leave_accrual_service import LeaveAccrualService
from worklog.services.leave_policy import get_leave_policy


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make(email="user@example.com", leave_allowed=0, earned=0):
        repo = UserRepository(db)
        user = repo.create(email, get_password_hash("secret123"), salary=10000, salary_credited_day=7)
        return repo.update_fields(user, {"leave_allowed_per_month": leave_allowed, "earned_leave": earned})
    return _make


@pytest.fixture
def add_log(db):
    """Insert a daily log directly, bypassing validation and accrual"""
    def _add(user_id, day, attendance="Present", working_hour="0.00", in_time="00:00", out_time="00:00"):
        log = DailyLogRepository(db).create(user_id, day, {
            "attendance": attendance,
            "in_time": in_time,
            "out_time": out_time,
            "working_hour": working_hour,
            "standup": "N/A",
            "report": "N/A",
        })
        db.commit()
        return log
    return _add


@pytest.fixture
def accrual_service_factory(db):
    def _build(policy="ceiling"):
        return LeaveAccrualService(
            DailyLogRepository(db), UserRepository(db), LeaveAccrualRepository(db), get_leave_policy(policy), db
        )
    return _build


@pytest.fixture
def daily_log_service_factory(db, accrual_service_factory):
    def _build(policy="ceiling", duplicate_policy="upsert"):
        return DailyLogService(
            DailyLogRepository(db), accrual_service_factory(policy), db, duplicate_policy=duplicate_policy
        )
    return _build


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    credentials = {"email": "api@example.com", "password": "secret123"}
    client.post("/api/auth/register", json=credentials)
    token = client.post("/api/auth/login", json=credentials).json()["token"]
    return {"Authorization": f"Bearer {token}"}
