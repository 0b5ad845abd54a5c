"""
Pytest 설정 및 픽스처
"""
import os

# 설정 모듈 로드 전에 테스트용 환경 변수 지정
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-case-portal-0123456789")
os.environ.setdefault("LOG_FILE_PATH", "")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from config.settings import AuthConfig, DashboardConfig
from src.api.main import app
from src.api import dependencies
from src.api.rate_limit_middleware import login_limiter
from src.db.record_store import InMemoryRecordStore
from src.services.security import hash_password

TEST_SECRET = os.environ["JWT_SECRET_KEY"]
FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)

PASSWORDS = {
    "FM-1001": "Secret#1001",
    "FM-2002": "Secret#2002",
    "FM-3003": "Secret#3003",
}


class FakeClock:
    """테스트용 시계 (시간 이동 가능)"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="session")
def password_hashes():
    """사건별 Argon2 해시 (세션 단위로 한 번만 생성)"""
    return {case: hash_password(pw) for case, pw in PASSWORDS.items()}


@pytest.fixture
def tables(password_hashes):
    """두 개 이상의 사건이 섞인 샘플 테이블"""
    return {
        "users": [
            {
                "id": 1, "case_number": "FM-1001", "last_name": "Smith", "first_name": "John",
                "status": "Active", "total_amount": 10000, "password_hash": password_hashes["FM-1001"],
                "email": "john.smith@example.com"
            },
            {
                "id": 2, "case_number": "FM-2002", "last_name": "Garcia", "first_name": "Maria",
                "status": "Active", "total_amount": 1500, "password_hash": password_hashes["FM-2002"]
            },
            {
                "id": 3, "case_number": "FM-3003", "last_name": "O'Neil", "first_name": "Pat",
                "status": "Pending", "total_amount": 0, "password_hash": password_hashes["FM-3003"]
            },
            {
                "id": 4, "case_number": "FM-4004", "last_name": "Legacy", "first_name": "Lee",
                "status": "Active", "total_amount": 500, "password": "plaintext"
            },
        ],
        "payments": [
            {"case_number": "FM-1001", "amount": 2000, "payment_date": "2025-03-10",
             "status": "Completed", "reference_id": "PAY-1"},
            {"case_number": "FM-1001", "amount": 3000, "payment_date": "2025-05-01",
             "status": "Completed", "reference_id": "PAY-2"},
            {"case_number": "FM-1001", "amount": 1500, "payment_date": "2024-11-01",
             "status": "Completed", "reference_id": "PAY-3"},
            {"case_number": "FM-2002", "amount": 1000, "payment_date": "2025-04-01",
             "status": "Completed", "reference_id": "PAY-4"},
            {"case_number": "FM-2002", "amount": 800, "payment_date": "2025-06-01",
             "status": "Completed", "reference_id": "PAY-5"},
        ],
        "lawyers": [
            {"case_number": "FM-1001", "name": "Ann Counsel", "email": "ann@lawfirm.example",
             "phone": "555-0100", "bar_number": "BAR-77"},
        ],
        "court_visits": [
            {"case_number": "FM-1001", "date": f"2025-0{month}-05", "type": "Hearing",
             "location": "County Court"}
            for month in range(1, 6)
        ] + [
            {"case_number": "FM-1001", "date": "2024-12-01", "type": "Filing"},
            {"case_number": "FM-1001", "date": "2025-05-20", "type": "Mediation"},
            {"case_number": "FM-2002", "date": "2025-02-02", "type": "Hearing"},
        ],
    }


@pytest.fixture
def record_store(tables):
    """메모리 레코드 저장소 픽스처"""
    return InMemoryRecordStore(tables)


@pytest.fixture
def clock():
    """고정 시계 픽스처"""
    return FakeClock()


@pytest.fixture
def auth_config():
    """인증 설정 픽스처"""
    return AuthConfig(secret_key=TEST_SECRET)


@pytest.fixture
def dashboard_config():
    """대시보드 설정 픽스처"""
    return DashboardConfig()


@pytest.fixture
def client(record_store, clock, auth_config, dashboard_config):
    """의존성을 테스트용으로 교체한 테스트 클라이언트 픽스처"""
    app.dependency_overrides[dependencies.get_record_store] = lambda: record_store
    app.dependency_overrides[dependencies.get_clock] = lambda: clock
    app.dependency_overrides[dependencies.get_auth_config] = lambda: auth_config
    app.dependency_overrides[dependencies.get_dashboard_config] = lambda: dashboard_config
    login_limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
    login_limiter.reset()


@pytest.fixture
def login(client):
    """로그인 요청 헬퍼 픽스처"""
    def _login(case_number="FM-1001", last_name="Smith", password=None):
        return client.post(
            "/api/login",
            json={
                "case_number": case_number,
                "last_name": last_name,
                "password": password if password is not None else PASSWORDS.get(case_number, "x"),
            }
        )
    return _login


@pytest.fixture
def auth_headers(login):
    """FM-1001 로그인 후 Authorization 헤더"""
    token = login().json()["token"]
    return {"Authorization": f"Bearer {token}"}
