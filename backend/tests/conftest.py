import os

# Test configuration must be in place before the application modules load.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DB_INIT_MODE"] = "create_all"
os.environ["AUTH_BACKEND"] = "jwt"
os.environ["JWT_SECRET"] = "test-shared-secret-for-testing-only-0123456789"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-for-testing-only-0123456789"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-for-testing-only-012345678"
os.environ["LOGIN_RATE_LIMIT_PER_MINUTE"] = "1000"
os.environ["REFRESH_RATE_LIMIT_PER_MINUTE"] = "1000"
os.environ["ADMIN_EMAIL"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from starlette.requests import Request  # noqa: E402

from spark_rentals.core.database import Base, SessionLocal, engine  # noqa: E402
from spark_rentals.core.roles import Role  # noqa: E402
from spark_rentals.main import app  # noqa: E402
from spark_rentals.schemas.user import UserCreate  # noqa: E402
from spark_rentals.services.rate_limiter import rate_limiter  # noqa: E402
from spark_rentals.services.user_service import user_service  # noqa: E402

PASSWORD = "Password123!"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()
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
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(email="customer@example.com", role=Role.CUSTOMER, password=PASSWORD, name="Test User"):
        return user_service.create_user(
            db, UserCreate(name=name, email=email, password=password, role=role)
        )

    return _make


def make_request(headers=None, path="/"):
    """Bare Starlette request for exercising the gates directly."""
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": raw,
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 12345),
    }
    return Request(scope)
