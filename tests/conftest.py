import os
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_production.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["JWT_SECRET"] = "test-access-secret-min-32-characters-long"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-min-32-characters-long"
os.environ["JWT_EXPIRES_IN"] = "15m"
os.environ["JWT_REFRESH_EXPIRES_IN"] = "7d"
os.environ["APP_ENV"] = "development"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
for _smtp_key in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASSWORD", "SMTP_USE_TLS", "SMTP_FROM_EMAIL", "FRONTEND_URL"):
    os.environ.pop(_smtp_key, None)

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from app.main import app
from app.core.security import get_password_hash
from app.core.tokens import TokenService
from app.db.models.user import User as UserModel
from app.domain.roles import UserRole, UserType

ROOT_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()

        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def tokens() -> TokenService:
    """The token service the application was built with."""
    return app.state.token_service


@pytest.fixture(scope="function")
def make_user(db: Session):
    """Factory creating users directly in the database."""

    def _make_user(
        email: str,
        role: UserRole = UserRole.PRODUCER,
        password: str = "CorrectHorse42",
        full_name: str = "Test User",
        active: bool = True,
    ) -> dict:
        user = UserModel(
            email=email,
            full_name=full_name,
            password_hash=get_password_hash(password),
            role=role,
            user_type=UserType.INTERNAL_STAFF,
            active=active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return {
            "id": user.id,
            "email": user.email,
            "password": password,
            "role": user.role,
        }

    return _make_user


@pytest.fixture(scope="function")
def admin_user(make_user) -> dict:
    return make_user("admin@example.com", role=UserRole.ADMIN_PRODUCER, full_name="Ada Admin")


@pytest.fixture(scope="function")
def producer_user(make_user) -> dict:
    return make_user("producer@example.com", role=UserRole.PRODUCER, full_name="Pat Producer")


@pytest.fixture(scope="function")
def coordinator_user(make_user) -> dict:
    return make_user("coordinator@example.com", role=UserRole.COORDINATOR, full_name="Cory Coordinator")


@pytest.fixture(scope="function")
def accountant_user(make_user) -> dict:
    return make_user("accountant@example.com", role=UserRole.ACCOUNTANT, full_name="Alex Accountant")


def _access_token(tokens: TokenService, user: dict) -> str:
    return tokens.sign_access(user["id"], user["email"], user["role"])


@pytest.fixture(scope="function")
def admin_token(tokens, admin_user: dict) -> str:
    return _access_token(tokens, admin_user)


@pytest.fixture(scope="function")
def producer_token(tokens, producer_user: dict) -> str:
    return _access_token(tokens, producer_user)


@pytest.fixture(scope="function")
def coordinator_token(tokens, coordinator_user: dict) -> str:
    return _access_token(tokens, coordinator_user)


@pytest.fixture(scope="function")
def accountant_token(tokens, accountant_user: dict) -> str:
    return _access_token(tokens, accountant_user)
