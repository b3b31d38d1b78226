import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.database import get_db
from app.auth.dependencies import get_current_user
from app.models import Base
from app.models.user import User, UserRole


@pytest.fixture
def now():
    return datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_db():
    """Mock database session"""
    db = MagicMock()
    db.query.return_value = db
    db.filter.return_value = db
    db.options.return_value = db
    db.order_by.return_value = db
    db.join.return_value = db
    db.group_by.return_value = db
    db.first.return_value = None
    db.all.return_value = []
    db.count.return_value = 0
    return db


@pytest.fixture
def mock_member():
    """Mock member with an active subscription"""
    user = Mock(spec=User)
    user.id = 2
    user.name = "Member"
    user.email = "member@test.com"
    user.phone = "+258840000000"
    user.role = UserRole.MEMBER
    user.password_hash = "$2b$12$test_hash"
    user.created_at = datetime.now(timezone.utc) - timedelta(days=10)
    user.expires_at = datetime.now(timezone.utc) + timedelta(days=20)
    user.previous_expires_at = None
    user.paused = False
    user.password_setup_token = None
    user.password_setup_expires = None
    return user


@pytest.fixture
def mock_admin():
    """Mock admin user"""
    user = Mock(spec=User)
    user.id = 3
    user.name = "Admin"
    user.email = "admin@test.com"
    user.phone = None
    user.role = UserRole.ADMIN
    user.password_hash = "$2b$12$test_hash"
    user.created_at = datetime.now(timezone.utc) - timedelta(days=100)
    user.expires_at = None
    user.previous_expires_at = None
    user.paused = False
    user.password_setup_token = None
    user.password_setup_expires = None
    return user


@pytest.fixture
def client_with_member(mock_db, mock_member):
    """TestClient with member auth and mocked DB"""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: mock_member
    client = TestClient(app)
    yield client, mock_db, mock_member
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_admin(mock_db, mock_admin):
    """TestClient with admin auth and mocked DB"""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: mock_admin
    client = TestClient(app)
    yield client, mock_db, mock_admin
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client(mock_db):
    """TestClient with mocked DB but no auth"""
    app.dependency_overrides[get_db] = lambda: mock_db
    client = TestClient(app)
    yield client, mock_db
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with the full schema and working SAVEPOINTs"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(sqlite_engine):
    """Real ORM session bound to the in-memory database"""
    session = sessionmaker(autocommit=False, autoflush=False, bind=sqlite_engine)()
    yield session
    session.close()
