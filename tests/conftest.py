import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.dependencies import get_decision_cache
from app.models.base import Base
from app.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.organization import Organization
from app.models.organization_role import OrganizationRole
from app.models.organization_owner import OrganizationOwner, OrganizationDelegate
from app.models.organization_member import OrganizationMember
from app.models.platform_admin import PlatformAdmin
from app.models.permission import Permission
from app.models.permission_group import PermissionGroup, PermissionGroupPermission, PermissionGroupMember
from app.services.decision_cache import DecisionCache
from app.services.permission_catalog_service import PermissionCatalogService
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER_USER = "owner-user"
DELEGATE_USER = "delegate-user"
MEMBER_USER = "member-user"
PLATFORM_ADMIN_USER = "platform-admin-user"
OUTSIDER_USER = "outsider-user"


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Fresh decision cache with a controllable clock"""
    return DecisionCache(ttl_seconds=300.0, clock=clock)


@pytest.fixture(scope="function")
def client(db_session, cache):
    """FastAPI test client with test database and an isolated decision cache"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_decision_cache] = lambda: cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token(user_id=user_id)}"}


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def owner_headers():
    return headers_for(OWNER_USER)


@pytest.fixture
def delegate_headers():
    return headers_for(DELEGATE_USER)


@pytest.fixture
def member_headers():
    return headers_for(MEMBER_USER)


@pytest.fixture
def platform_admin_headers():
    return headers_for(PLATFORM_ADMIN_USER)


@pytest.fixture
def outsider_headers():
    return headers_for(OUTSIDER_USER)


# Domain fixtures


@pytest.fixture
def organization(db_session):
    """The organization most tests run in"""
    org = Organization(name="Riverside Community Center")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def other_organization(db_session):
    org = Organization(name="Hillside Community Center")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture
def catalog(db_session):
    """Default permission catalog, keyed by code"""
    PermissionCatalogService(db_session).seed_catalog()
    return {p.code: p for p in db_session.query(Permission).all()}


@pytest.fixture
def finance_role(db_session, organization):
    """Legacy role granting dashboard and finance"""
    role = OrganizationRole(
        organization_id=organization.id,
        role_name="finance_admin",
        default_permissions={
            "dashboard": True,
            "finance": True,
            "education": False,
            "services": False,
            "umrah": False,
            "people": False,
            "settings": False,
        },
    )
    db_session.add(role)
    db_session.commit()
    db_session.refresh(role)
    return role


@pytest.fixture
def owner(db_session, organization):
    record = OrganizationOwner(organization_id=organization.id, user_id=OWNER_USER)
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


@pytest.fixture
def delegate(db_session, organization):
    record = OrganizationDelegate(organization_id=organization.id, user_id=DELEGATE_USER, is_active=True)
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


@pytest.fixture
def member(db_session, organization, finance_role):
    """Member with the finance role and no group assignments"""
    record = OrganizationMember(
        organization_id=organization.id,
        user_id=MEMBER_USER,
        role_id=finance_role.id,
        first_name="Amina",
        last_name="Yusuf",
        email="amina@example.org",
    )
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


@pytest.fixture
def platform_admin(db_session):
    record = PlatformAdmin(user_id=PLATFORM_ADMIN_USER)
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


def add_member(db_session, organization_id: int, user_id: str, first_name: str = "Test", role_id=None):
    record = OrganizationMember(
        organization_id=organization_id,
        user_id=user_id,
        role_id=role_id,
        first_name=first_name,
        last_name="Member",
    )
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


def add_group(db_session, organization_id: int, name: str, codes=(), catalog=None, is_system=False):
    """Create a group directly in the database with the given catalog codes"""
    group = PermissionGroup(organization_id=organization_id, name=name, is_system=is_system)
    db_session.add(group)
    db_session.commit()
    for code in codes:
        db_session.add(PermissionGroupPermission(permission_group_id=group.id, permission_id=catalog[code].id))
    db_session.commit()
    db_session.refresh(group)
    return group


def assign(db_session, group, member):
    db_session.add(PermissionGroupMember(permission_group_id=group.id, member_id=member.id))
    db_session.commit()
