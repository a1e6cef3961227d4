"""
School Management API - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Optional
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment (before anything imports settings)
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-access-secret-for-testing-only'
os.environ['JWT_REFRESH_SECRET_KEY'] = 'test-refresh-secret-for-testing-only'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'

from app.main import app
from app.core.database import Base, get_db, create_engine_for_url
from app.db.seed_data import ensure_roles
from app.models.role import RoleName
from app.schemas.auth import RegisterRequest, AuthData
from app.services.auth_service import auth_service

fake = Faker()

PASSWORD = 'Passw0rd1'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_engine_for_url(TEST_DATABASE_URL)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


def make_email() -> str:
    return f"{fake.unique.user_name()}@school.edu"


def student_profile(**overrides) -> dict:
    profile = {
        'student_id': fake.unique.bothify('STU-####'),
        'admission_number': fake.unique.bothify('ADM-#####'),
        'admission_date': '2024-01-15',
        'first_name': fake.first_name(),
        'last_name': fake.last_name(),
        'date_of_birth': '2012-05-20',
        'gender': 'Female',
    }
    profile.update(overrides)
    return profile


def teacher_profile(**overrides) -> dict:
    profile = {
        'employee_id': fake.unique.bothify('EMP-####'),
        'first_name': fake.first_name(),
        'last_name': fake.last_name(),
        'gender': 'Male',
        'hire_date': '2020-08-01',
        'qualification': 'M.Ed',
    }
    profile.update(overrides)
    return profile


def parent_profile(**overrides) -> dict:
    profile = {
        'first_name': fake.first_name(),
        'last_name': fake.last_name(),
        'phone': '555-0100',
        'relationship': 'Mother',
    }
    profile.update(overrides)
    return profile


PROFILE_BUILDERS = {
    RoleName.ADMIN: lambda: None,
    RoleName.TEACHER: teacher_profile,
    RoleName.PARENT: parent_profile,
    RoleName.STUDENT: student_profile,
}


def bearer(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


async def register_account(
    db: AsyncSession,
    role: RoleName,
    profile: Optional[dict] = None,
    email: Optional[str] = None
) -> AuthData:
    """Provision an account through the real registration flow"""
    data = RegisterRequest(
        email=email or make_email(),
        password=PASSWORD,
        role=role,
        profile=profile if profile is not None else PROFILE_BUILDERS[role](),
    )
    return await auth_service.register(db, data)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database, with roles seeded, for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        await ensure_roles(session)
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_auth(db_session: AsyncSession) -> AuthData:
    return await register_account(db_session, RoleName.ADMIN)


@pytest.fixture
async def teacher_auth(db_session: AsyncSession) -> AuthData:
    return await register_account(db_session, RoleName.TEACHER)


@pytest.fixture
async def parent_auth(db_session: AsyncSession) -> AuthData:
    return await register_account(db_session, RoleName.PARENT)


@pytest.fixture
async def student_auth(db_session: AsyncSession) -> AuthData:
    return await register_account(db_session, RoleName.STUDENT)


@pytest.fixture
def admin_headers(admin_auth: AuthData) -> dict:
    return bearer(admin_auth.access_token)


@pytest.fixture
def teacher_headers(teacher_auth: AuthData) -> dict:
    return bearer(teacher_auth.access_token)


@pytest.fixture
def parent_headers(parent_auth: AuthData) -> dict:
    return bearer(parent_auth.access_token)


@pytest.fixture
def student_headers(student_auth: AuthData) -> dict:
    return bearer(student_auth.access_token)
