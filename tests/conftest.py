"""
Shared fixtures: sqlite test database, sample users/events and an API client
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from attendance.core.db import Base, configure_sqlite, get_db
from attendance.models import Event, EventType, Role, User
from attendance.services.repositories import UserRepo
from attendance.services.session_store import get_session_store
from attendance.utils import security

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_attendance.db"
engine = configure_sqlite(create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

EVENT_START = datetime(2026, 3, 7, 17, 0)
EVENT_END = datetime(2026, 3, 7, 20, 0)
DURING_EVENT = datetime(2026, 3, 7, 18, 0)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

def make_user(db, user_id, roles=None, **fields):
    user = User(
        id=user_id,
        username=fields.pop("username", f"user{user_id}"),
        first_name=fields.pop("first_name", "Test"),
        last_name=fields.pop("last_name", f"User{user_id}"),
        roles=roles or [Role.MEMBER.value],
        **fields
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def make_event(db, title="Build Night", start=EVENT_START, end=EVENT_END, type=EventType.REGULAR, secret="JBSWY3DPEHPK3PXP"):
    event = Event(title=title, description="", start_date=start, end_date=end, type=type, secret=secret)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event

@pytest.fixture
def member(db_session):
    return make_user(db_session, "100", first_name="Ada", last_name="Lovelace")

@pytest.fixture
def other_member(db_session):
    return make_user(db_session, "200", first_name="Alan", last_name="Turing")

@pytest.fixture
def mentor(db_session):
    return make_user(db_session, "900", roles=[Role.MEMBER.value, Role.MENTOR.value], first_name="Grace", last_name="Hopper")

@pytest.fixture
def event(db_session):
    return make_event(db_session)

@pytest.fixture
def other_event(db_session):
    return make_event(db_session, title="Outreach Day", secret="KRSXG5CTMVRXEZLU")

@pytest.fixture(autouse=True)
def reset_rate_limiter():
    security.rate_limiter.clear()
    yield
    security.rate_limiter.clear()

class FakeSessionStore:
    """In-memory stand-in for the Redis session store"""

    def __init__(self):
        self.sessions = {}

    def create(self, user_id, **data):
        session_id = f"session-{len(self.sessions) + 1}"
        self.sessions[session_id] = {"user_id": user_id, **data}
        return session_id

    def get(self, session_id):
        return self.sessions.get(session_id) if session_id else None

    def destroy(self, session_id):
        self.sessions.pop(session_id, None)

class CurrentUser:
    """Which user the API client is signed in as"""

    def __init__(self):
        self.user_id = None

    def sign_in(self, user):
        self.user_id = user.id if user else None

@pytest.fixture
def current_user():
    return CurrentUser()

@pytest.fixture
def client(db_session, current_user):
    """API client with the database and session lookup overridden"""
    from main import app
    from attendance.core.errors import UnauthorizedError

    def override_get_db():
        yield db_session

    def override_get_current_user():
        user = UserRepo.get(db_session, current_user.user_id) if current_user.user_id else None
        if not user:
            raise UnauthorizedError("Not signed in")
        return user

    store = FakeSessionStore()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[security.get_current_user] = override_get_current_user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
