"""
Test configuration and fixtures for the AgriFinAI backend tests.
"""
import pytest
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.core.database import Base, get_db
from main import app


# ============================================================
# Database Fixtures
# ============================================================

# Use SQLite for testing (in-memory, fresh per test)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for each test"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================
# User Fixtures
# ============================================================

async def _make_user(db_session, email, role, password="password123", is_active=True):
    from app.core.security import get_password_hash
    from app.modules.users.models import User

    user = User(
        name=email.split("@")[0].title(),
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
        is_active=is_active
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session):
    """Create a regular user"""
    from app.modules.users.models import UserRole
    return await _make_user(db_session, "john@example.com", UserRole.USER)


@pytest.fixture
async def admin_user(db_session):
    """Create an admin user"""
    from app.modules.users.models import UserRole
    return await _make_user(db_session, "admin@example.com", UserRole.ADMIN, password="admin123")


@pytest.fixture
async def auth_headers(test_user):
    """Generate auth headers for the regular user"""
    from app.modules.users.services import UserService

    token = UserService.issue_token(test_user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_headers(admin_user):
    """Generate auth headers for the admin user"""
    from app.modules.users.services import UserService

    token = UserService.issue_token(admin_user)
    return {"Authorization": f"Bearer {token}"}


# ============================================================
# Farmer / Loan Fixtures
# ============================================================

def _farmer_payload(**overrides):
    payload = {
        "name": "Ramesh Patel",
        "email": "ramesh@example.com",
        "phone": "9876543210",
        "address": {"village": "Kotda", "district": "Rajkot", "state": "Gujarat", "pincode": "360001"},
        "landSize": 4,
        "cropType": "Wheat",
        "creditScore": 720
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def test_farmer(db_session):
    """Create a test farmer (creditScore 720, landSize 4)"""
    from app.modules.farmers.models import Farmer, CropType

    farmer = Farmer(
        name="Ramesh Patel",
        email="ramesh@example.com",
        phone="9876543210",
        address={"village": "Kotda", "district": "Rajkot", "state": "Gujarat", "pincode": "360001"},
        land_size=4,
        crop_type=CropType.WHEAT,
        credit_score=720
    )
    db_session.add(farmer)
    await db_session.commit()
    await db_session.refresh(farmer)
    return farmer


@pytest.fixture
async def test_loan(db_session, test_farmer):
    """Create a pending loan through the workflow"""
    from app.modules.loans.models import LoanPurpose
    from app.modules.loans.schemas import LoanCreate
    from app.modules.loans.services import LoanService

    return await LoanService(db_session).apply_loan(LoanCreate(
        farmer_id=test_farmer.id,
        loan_amount=80000,
        interest_rate=8,
        tenure=12,
        purpose=LoanPurpose.SEEDS
    ))


# ============================================================
# Product Fixtures
# ============================================================

def _product_payload(**overrides):
    payload = {
        "productName": "Fresh Tomatoes",
        "category": "Vegetables",
        "quantity": 100,
        "unit": "kg",
        "price": 40,
        "description": "Fresh organic tomatoes directly from farm",
        "location": "Rajkot",
        "district": "Rajkot",
        "state": "Gujarat",
        "pincode": "360001",
        "contactName": "Ramesh Patel",
        "contactPhone": "9876543210",
        "contactEmail": "Ramesh@Example.com",
        "deliveryOptions": ["farm-pickup", "local-delivery"],
        "organicCertified": True,
        "images": ["https://images.example.com/tomatoes.jpg"]
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def farmer_payload():
    """Factory for farmer request bodies"""
    return _farmer_payload


@pytest.fixture
def product_payload():
    """Factory for product request bodies"""
    return _product_payload
