"""
Tests for repository queries: public visibility, free listing counts and category tree deletes.
"""

import pytest
from datetime import datetime, timedelta, timezone

from marketplace.models.user import User, UserType
from marketplace.models.property import PropertyStatus, ApprovalStatus, PriceType
from marketplace.repositories.property import PropertyRepository, PropertySearchFilters
from marketplace.repositories.user import UserRepository
from marketplace.repositories.category import (
    CategoryRepository,
    SubcategoryRepository,
    MiniSubcategoryRepository,
)
from marketplace.repositories.engagement import AdminSettingRepository
from tests.conftest import UserFactory, PropertyFactory


class TestUserRepository:
    """User lookups."""

    async def test_create_user_hashes_password(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="Hash.Me@example.com")
        assert user.email == "hash.me@example.com"
        assert user.hashed_password != "testpassword123"

    async def test_duplicate_email_rejected(self, user_repository: UserRepository, test_seller: User):
        with pytest.raises(ValueError):
            await UserFactory.create_user(user_repository, email=test_seller.email)

    async def test_search_users_by_type(
        self, user_repository: UserRepository, test_seller: User, test_buyer: User, test_admin: User
    ):
        users, total = await user_repository.search_users(user_types=[UserType.BUYER])
        assert total == 1
        assert users[0].id == test_buyer.id

    async def test_count_by_type(self, user_repository: UserRepository, test_seller: User, test_buyer: User):
        counts = await user_repository.count_by_type()
        assert counts["seller"] == 1
        assert counts["buyer"] == 1
        assert counts["admin"] == 0


class TestPropertyRepository:
    """Listing queries."""

    async def test_public_search_excludes_hidden(
        self, property_repository: PropertyRepository, test_seller: User
    ):
        live = await PropertyFactory.create_property(property_repository, test_seller.id)
        await PropertyFactory.create_property(
            property_repository, test_seller.id, approval_status=ApprovalStatus.PENDING
        )
        await PropertyFactory.create_property(
            property_repository, test_seller.id, status=PropertyStatus.SOLD
        )
        deleted = await PropertyFactory.create_property(property_repository, test_seller.id)
        await property_repository.soft_delete(deleted)

        properties, total = await property_repository.search_public(PropertySearchFilters())
        assert total == 1
        assert properties[0].id == live.id

    async def test_sorting_by_price(self, property_repository: PropertyRepository, test_seller: User):
        await PropertyFactory.create_property(property_repository, test_seller.id, price=300, title="Mid house")
        await PropertyFactory.create_property(property_repository, test_seller.id, price=100, title="Cheap house")
        await PropertyFactory.create_property(property_repository, test_seller.id, price=900, title="Dear house")

        properties, _ = await property_repository.search_public(PropertySearchFilters(sort_by="price_asc"))
        assert [p.title for p in properties] == ["Cheap house", "Mid house", "Dear house"]

    async def test_search_text_matches_wildcards_literally(
        self, property_repository: PropertyRepository, test_seller: User
    ):
        await PropertyFactory.create_property(property_repository, test_seller.id, title="100% vastu house")
        await PropertyFactory.create_property(property_repository, test_seller.id, title="1000 sqft corner house")

        properties, total = await property_repository.search_public(PropertySearchFilters(search_text="100%"))
        assert total == 1
        assert properties[0].title == "100% vastu house"

        _, total = await property_repository.search_public(PropertySearchFilters(search_text="_"))
        assert total == 0

    async def test_rent_section(self, property_repository: PropertyRepository, test_seller: User):
        await PropertyFactory.create_property(property_repository, test_seller.id, price_type=PriceType.RENT,
                                              property_type="flat", title="Rental flat")
        await PropertyFactory.create_property(property_repository, test_seller.id, title="House for sale")

        properties, total = await property_repository.search_public(PropertySearchFilters(category="rent"))
        assert total == 1
        assert properties[0].title == "Rental flat"

    async def test_free_listing_count_window(self, property_repository: PropertyRepository, test_seller: User):
        recent = await PropertyFactory.create_property(property_repository, test_seller.id)
        old = await PropertyFactory.create_property(property_repository, test_seller.id)
        await PropertyFactory.age(property_repository, old, days=31)

        since = datetime.now(timezone.utc) - timedelta(days=30)
        assert await property_repository.count_free_listings(test_seller.id, since) == 1

        await property_repository.soft_delete(recent)
        assert await property_repository.count_free_listings(test_seller.id, since) == 1

    async def test_pending_count_excludes_paid_package_review(
        self, property_repository: PropertyRepository, test_seller: User
    ):
        await PropertyFactory.create_property(
            property_repository, test_seller.id, approval_status=ApprovalStatus.PENDING
        )
        await PropertyFactory.create_property(
            property_repository, test_seller.id,
            approval_status=ApprovalStatus.PENDING_APPROVAL, package_id="premium-30"
        )

        since = datetime.now(timezone.utc) - timedelta(days=30)
        assert await property_repository.count_free_listings(test_seller.id, since) == 2
        assert await property_repository.count_free_listings(test_seller.id, since, pending_only=True) == 1

    async def test_increment_counter(self, property_repository: PropertyRepository, approved_property):
        updated = await property_repository.increment_counter(approved_property, "inquiries")
        assert updated.inquiries == 1


class TestCategoryRepositories:
    """Category tree persistence."""

    async def test_delete_tree_removes_children(self, db_session):
        categories = CategoryRepository(db_session)
        subcategories = SubcategoryRepository(db_session)
        minis = MiniSubcategoryRepository(db_session)

        category = await categories.create({"name": "Buy", "slug": "buy"})
        subcategory = await subcategories.create({"category_id": category.id, "name": "Plot", "slug": "plot"})
        mini = await minis.create({"subcategory_id": subcategory.id, "name": "Corner", "slug": "corner"})

        assert await categories.delete_tree(category.id)
        assert await subcategories.get_by_id(subcategory.id) is None
        assert await minis.get_by_id(mini.id) is None

    async def test_mini_slug_scoped_to_subcategory(self, db_session):
        categories = CategoryRepository(db_session)
        subcategories = SubcategoryRepository(db_session)
        minis = MiniSubcategoryRepository(db_session)

        category = await categories.create({"name": "Buy", "slug": "buy"})
        first = await subcategories.create({"category_id": category.id, "name": "Plot", "slug": "plot"})
        second = await subcategories.create({"category_id": category.id, "name": "Flat", "slug": "flat"})
        await minis.create({"subcategory_id": first.id, "name": "Corner", "slug": "corner"})

        assert await minis.slug_exists(first.id, "corner")
        assert not await minis.slug_exists(second.id, "corner")


class TestAdminSettingRepository:

    async def test_upsert(self, db_session):
        settings_repo = AdminSettingRepository(db_session)
        await settings_repo.upsert("free_listing_limits", {"default_limit": 3})
        await settings_repo.upsert("free_listing_limits", {"default_limit": 8})

        assert await settings_repo.get_value("free_listing_limits") == {"default_limit": 8}
        assert await settings_repo.count() == 1
