"""
Tests for models and small helpers: visibility, type aliases, slugs, tokens and listing periods.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal
from jose import JWTError

from marketplace.models.user import User, UserType, ListingPeriod
from marketplace.models.property import (
    Property,
    PropertyStatus,
    ApprovalStatus,
    PriceType,
    normalize_property_type,
)
from marketplace.utils.auth import create_access_token, create_refresh_token, verify_token
from marketplace.utils.slugs import normalize_slug, slugify, unique_slug
from marketplace.schemas.common import PaginationMeta, page_offset


def make_property(**overrides) -> Property:
    data = {
        "title": "Corner plot",
        "description": "Plot near the main road",
        "price": Decimal("100000"),
        "price_type": PriceType.SALE,
        "property_type": "plot",
        "owner_id": uuid.uuid4(),
        "status": PropertyStatus.ACTIVE,
        "approval_status": ApprovalStatus.APPROVED,
        "is_deleted": False,
    }
    data.update(overrides)
    return Property(**data)


class TestUserModel:
    """Test User model validation and permissions."""

    def test_email_normalized(self):
        assert User.validate_email_format("Seller@Example.COM") == "seller@example.com"

    def test_email_invalid(self):
        with pytest.raises(ValueError):
            User.validate_email_format("not-an-email")

    def test_password_hashing(self):
        user = User(email="a@example.com", name="A", user_type=UserType.SELLER)
        user.set_password("secret-pass")
        assert user.hashed_password != "secret-pass"
        assert user.verify_password("secret-pass")
        assert not user.verify_password("other-pass")

    def test_posting_permissions(self):
        assert User(user_type=UserType.SELLER).can_post_properties
        assert User(user_type=UserType.AGENT).can_post_properties
        assert User(user_type=UserType.ADMIN).can_post_properties
        assert not User(user_type=UserType.BUYER).can_post_properties

    def test_admin_manages_any_property(self):
        admin = User(id=uuid.uuid4(), user_type=UserType.ADMIN)
        seller = User(id=uuid.uuid4(), user_type=UserType.SELLER)
        owner_id = uuid.uuid4()
        assert admin.can_manage_property(owner_id)
        assert not seller.can_manage_property(owner_id)
        assert seller.can_manage_property(seller.id)

    def test_listing_period_days(self):
        assert ListingPeriod.MONTHLY.days == 30
        assert ListingPeriod.YEARLY.days == 365


class TestPropertyModel:
    """Visibility and validation rules."""

    def test_public_requires_active_approved_not_deleted(self):
        assert make_property().is_public
        assert not make_property(status=PropertyStatus.INACTIVE).is_public
        assert not make_property(approval_status=ApprovalStatus.PENDING).is_public
        assert not make_property(is_deleted=True).is_public

    def test_negative_price_invalid(self):
        with pytest.raises(ValueError):
            make_property(price=Decimal("-1")).validate_all()

    def test_latitude_out_of_range(self):
        with pytest.raises(ValueError):
            make_property(latitude=Decimal("95"), longitude=Decimal("10")).validate_all()

    @pytest.mark.parametrize("alias, expected", [
        ("apartment", "flat"),
        ("Co-Living", "pg"),
        ("agricultural-land", "agricultural"),
        ("showroom", "commercial"),
        ("residential", "residential"),
    ])
    def test_type_aliases(self, alias, expected):
        assert normalize_property_type(alias) == expected

    def test_to_dict_nests_location(self):
        data = make_property(sector="Sector 9", bedrooms=3, contact_phone="9876543210").to_dict()
        assert data["location"]["sector"] == "Sector 9"
        assert data["specifications"]["bedrooms"] == 3
        assert data["contact"]["phone"] == "9876543210"


class TestSlugs:
    """Slug helpers."""

    def test_normalize_slug(self):
        assert normalize_slug("  Independent House ") == "independent-house"
        assert normalize_slug("PG / Co-living") == "pg--co-living"

    def test_slugify_squeezes_dashes(self):
        assert slugify("Buying Your First Home: A Guide!") == "buying-your-first-home-a-guide"
        assert slugify("PG / Co-living") == "pg-co-living"

    async def test_unique_slug(self):
        taken = {"villa", "villa-2"}

        async def exists(candidate: str) -> bool:
            return candidate in taken

        assert await unique_slug("villa", exists) == "villa-3"
        assert await unique_slug("kothi", exists) == "kothi"


class TestTokens:
    """JWT helpers."""

    def test_access_token_round_trip(self):
        user_id = uuid.uuid4()
        payload = verify_token(create_access_token(user_id, "a@example.com", "seller"))
        assert payload.user_id == str(user_id)
        assert payload.user_type == "seller"

    def test_refresh_token_not_accepted_as_access(self):
        token = create_refresh_token(uuid.uuid4(), "a@example.com")
        with pytest.raises(JWTError):
            verify_token(token, token_type="access")

    def test_expired_token(self):
        token = create_access_token(uuid.uuid4(), "a@example.com", "buyer", expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            verify_token(token)


class TestPagination:

    def test_pages(self):
        assert PaginationMeta.build(1, 20, 41).pages == 3
        assert PaginationMeta.build(1, 20, 0).pages == 0

    def test_offset(self):
        assert page_offset(3, 10) == 20
        assert page_offset(0, 10) == 0
