"""
Test configuration and fixtures for the marketplace API.
Provides an in-memory database per test, service fixtures, data factories and an HTTP client.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SMTP_HOST"] = ""
os.environ.setdefault("JWT_SECRET_KEY", "marketplace-test-secret-key-0123456789abcdef")

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

import marketplace.models  # noqa: F401
from marketplace.config import settings
from marketplace.main import app
from marketplace.database import Base, get_db
from marketplace.models.user import User, UserType
from marketplace.models.property import Property, PropertyStatus, ApprovalStatus, PriceType
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.services import (
    AuthService,
    PropertyService,
    ModerationService,
    ListingLimitService,
    CategoryService,
    BlogService,
    AdvertisementService,
    NotificationService,
    UploadService,
)
from marketplace.utils.auth import create_access_token
from marketplace.utils.dependencies import get_upload_service

TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def upload_service(tmp_path, monkeypatch) -> UploadService:
    """Upload service writing into a temporary directory."""
    monkeypatch.setattr(settings, "app_apk_dir", str(tmp_path / "app"))
    return UploadService(str(tmp_path / "uploads"))


@pytest.fixture
async def async_client(db_session: AsyncSession, upload_service: UploadService) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_service] = lambda: upload_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def moderation_service(db_session: AsyncSession) -> ModerationService:
    return ModerationService(db_session)


@pytest.fixture
def listing_limit_service(db_session: AsyncSession) -> ListingLimitService:
    return ListingLimitService(db_session)


@pytest.fixture
def category_service(db_session: AsyncSession) -> CategoryService:
    return CategoryService(db_session)


@pytest.fixture
def blog_service(db_session: AsyncSession) -> BlogService:
    return BlogService(db_session)


@pytest.fixture
def advertisement_service(db_session: AsyncSession) -> AdvertisementService:
    return AdvertisementService(db_session)


@pytest.fixture
def notification_service(db_session: AsyncSession) -> NotificationService:
    return NotificationService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: Optional[str] = None,
        name: str = "Test User",
        user_type: UserType = UserType.SELLER,
        is_active: bool = True,
        password: str = TEST_PASSWORD
    ) -> User:
        return await user_repo.create_user({
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "name": name,
            "phone": "9876543210",
            "user_type": user_type,
            "is_active": is_active,
        })


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: uuid.UUID,
        title: str = "Spacious family house",
        description: str = "A bright house close to the market and schools",
        price: Decimal = Decimal("2500000.00"),
        price_type: PriceType = PriceType.SALE,
        property_type: str = "residential",
        sub_category: Optional[str] = None,
        bedrooms: Optional[int] = 3,
        area: Optional[int] = 1200,
        sector: Optional[str] = "Sector 14",
        status: PropertyStatus = PropertyStatus.ACTIVE,
        approval_status: ApprovalStatus = ApprovalStatus.APPROVED,
        **extra
    ) -> dict:
        data = {
            "owner_id": owner_id,
            "title": title,
            "description": description,
            "price": price,
            "price_type": price_type,
            "property_type": property_type,
            "sub_category": sub_category,
            "bedrooms": bedrooms,
            "area": area,
            "sector": sector,
            "status": status,
            "approval_status": approval_status,
            "is_approved": approval_status == ApprovalStatus.APPROVED,
        }
        data.update(extra)
        return data

    @staticmethod
    async def create_property(property_repo: PropertyRepository, owner_id: uuid.UUID, **kwargs) -> Property:
        return await property_repo.create_property(PropertyFactory.create_property_data(owner_id, **kwargs))

    @staticmethod
    async def age(property_repo: PropertyRepository, property_obj: Property, days: int) -> Property:
        """Move a listing's creation time into the past."""
        created_at = datetime.now(timezone.utc) - timedelta(days=days)
        return await property_repo.save(property_obj, {"created_at": created_at})


def property_payload(**overrides) -> dict:
    """Request body for POST /properties."""
    payload = {
        "title": "Two bedroom flat near the park",
        "description": "Well kept flat with covered parking and a balcony",
        "price": 4500000,
        "price_type": "sale",
        "property_type": "apartment",
        "location": {"sector": "Sector 7", "mohalla": "Green Park", "city": "Karnal"},
        "specifications": {"bedrooms": 2, "bathrooms": 2, "area": 950},
        "contact": {"name": "Seller", "phone": "9876543210"},
        "amenities": ["parking", "lift"],
    }
    payload.update(overrides)
    return payload


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user.id, user.email, user.user_type.value)
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def test_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="seller@example.com", name="Test Seller")


@pytest.fixture
async def other_seller(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="other.seller@example.com", name="Other Seller")


@pytest.fixture
async def test_buyer(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="buyer@example.com", name="Test Buyer", user_type=UserType.BUYER
    )


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository, email="admin@example.com", name="Test Admin", user_type=UserType.ADMIN
    )


@pytest.fixture
async def approved_property(property_repository: PropertyRepository, test_seller: User) -> Property:
    """Live listing owned by test_seller."""
    return await PropertyFactory.create_property(property_repository, test_seller.id)


@pytest.fixture
async def pending_property(property_repository: PropertyRepository, test_seller: User) -> Property:
    """Freshly submitted listing owned by test_seller."""
    return await PropertyFactory.create_property(
        property_repository,
        test_seller.id,
        title="Pending corner plot",
        property_type="plot",
        status=PropertyStatus.INACTIVE,
        approval_status=ApprovalStatus.PENDING,
    )
