"""
Tests for service classes.
Covers listing rules, free listing limits, moderation, the category tree, blogs and leads.
"""

import pytest
import uuid
from decimal import Decimal

from marketplace.models.user import User, UserType, ListingPeriod
from marketplace.models.property import PropertyStatus, ApprovalStatus
from marketplace.models.engagement import SubmissionStatus, NotificationType
from marketplace.models.content import PublishStatus
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.user import UserRepository
from marketplace.services import (
    AuthService,
    PropertyService,
    ModerationService,
    ListingLimitService,
    CategoryService,
    BlogService,
    AdvertisementService,
    NotificationService,
)
from marketplace.services.property import parse_bedrooms
from marketplace.schemas.user import RegisterRequest
from marketplace.schemas.property import PropertyCreate, PropertyUpdate, PropertyApprovalUpdate
from marketplace.schemas.category import (
    CategoryCreate,
    SubcategoryCreate,
    MiniSubcategoryCreate,
    MiniSubcategoryUpdate,
)
from marketplace.schemas.content import BlogCreate
from marketplace.schemas.engagement import AdvertisementSubmissionCreate, FreeListingSettings
from marketplace.utils.exceptions import (
    BadRequestError,
    DuplicateResourceError,
    InvalidCredentialsError,
    InsufficientPermissionsError,
    ListingLimitExceededError,
    NotFoundError,
    PropertyOwnershipError,
    ValidationError,
)
from tests.conftest import UserFactory, PropertyFactory, property_payload, TEST_PASSWORD


class TestAuthService:
    """Test AuthService functionality."""

    async def test_register_and_login(self, auth_service: AuthService):
        """A registered seller can log in and receives the session object."""
        user = await auth_service.register(RegisterRequest(
            name="New Seller",
            email="New.Seller@Example.com",
            password="supersecret1",
            user_type="seller",
        ))
        assert user.email == "new.seller@example.com"
        assert user.user_type == UserType.SELLER

        session = await auth_service.login("new.seller@example.com", "supersecret1")
        assert session.token_type == "bearer"
        assert session.user_type == UserType.SELLER
        assert session.user.id == user.id

    async def test_register_duplicate_email(self, auth_service: AuthService, test_seller: User):
        with pytest.raises(DuplicateResourceError):
            await auth_service.register(RegisterRequest(
                name="Someone", email=test_seller.email, password="supersecret1"
            ))

    async def test_login_wrong_password(self, auth_service: AuthService, test_seller: User):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.authenticate_user(test_seller.email, "wrong-password")

    async def test_inactive_user_cannot_login(self, auth_service: AuthService, user_repository: UserRepository):
        inactive = await UserFactory.create_user(user_repository, is_active=False)
        with pytest.raises(InvalidCredentialsError):
            await auth_service.authenticate_user(inactive.email, TEST_PASSWORD)

    async def test_refresh_session(self, auth_service: AuthService, test_seller: User):
        _, refresh_token = auth_service.create_tokens(test_seller)
        session = await auth_service.refresh_session(refresh_token)
        assert session.user.email == test_seller.email

    async def test_admin_cannot_deactivate_self(self, auth_service: AuthService, test_admin: User):
        with pytest.raises(BadRequestError):
            await auth_service.set_user_status(test_admin.id, False, test_admin)


class TestParseBedrooms:
    """Bedrooms filter parsing."""

    def test_exact(self):
        assert parse_bedrooms("3") == (3, None)

    def test_minimum(self):
        assert parse_bedrooms("4+") == (None, 4)

    def test_empty(self):
        assert parse_bedrooms(None) == (None, None)
        assert parse_bedrooms("") == (None, None)

    def test_invalid(self):
        with pytest.raises(ValidationError):
            parse_bedrooms("many")


class TestListingLimitService:
    """Free listing allowance resolution and enforcement."""

    async def test_defaults_from_config(self, listing_limit_service: ListingLimitService):
        defaults = await listing_limit_service.get_default_settings()
        assert defaults.default_limit == 5
        assert defaults.default_period == ListingPeriod.MONTHLY
        assert defaults.default_limit_type == 30

    async def test_admin_setting_overrides_config(
        self, listing_limit_service: ListingLimitService, test_admin: User, test_seller: User
    ):
        await listing_limit_service.update_default_settings(
            FreeListingSettings(default_limit=2, default_period=ListingPeriod.YEARLY), test_admin
        )
        limit, period = await listing_limit_service.resolve_limit(test_seller)
        assert limit == 2
        assert period == ListingPeriod.YEARLY

    async def test_user_override_wins(
        self, listing_limit_service: ListingLimitService, test_admin: User, test_seller: User
    ):
        await listing_limit_service.update_default_settings(
            FreeListingSettings(default_limit=2, default_period=ListingPeriod.MONTHLY), test_admin
        )
        await listing_limit_service.set_user_limit(test_seller.id, 7, ListingPeriod.YEARLY, test_admin)

        limit, period = await listing_limit_service.resolve_limit(test_seller)
        assert limit == 7
        assert period == ListingPeriod.YEARLY

    async def test_set_user_limit_notifies(
        self,
        listing_limit_service: ListingLimitService,
        notification_service: NotificationService,
        test_admin: User,
        test_seller: User
    ):
        result = await listing_limit_service.set_user_limit(test_seller.id, 3, ListingPeriod.MONTHLY, test_admin)
        assert result["free_listing_limit"] == {"limit": 3, "period": "monthly", "limit_type": 30}

        notifications, total = await notification_service.list_for_user(test_seller)
        assert total == 1
        assert notifications[0].type == NotificationType.LISTING_LIMIT

    async def test_set_limit_unknown_user(self, listing_limit_service: ListingLimitService, test_admin: User):
        with pytest.raises(NotFoundError):
            await listing_limit_service.set_user_limit(uuid.uuid4(), 3, ListingPeriod.MONTHLY, test_admin)

    async def test_window_counts_only_recent_unpaid_listings(
        self,
        listing_limit_service: ListingLimitService,
        property_repository: PropertyRepository,
        test_seller: User
    ):
        """Listings older than the window and paid listings do not count; deleted ones do."""
        await PropertyFactory.create_property(property_repository, test_seller.id)
        deleted = await PropertyFactory.create_property(property_repository, test_seller.id)
        await property_repository.soft_delete(deleted)
        old = await PropertyFactory.create_property(property_repository, test_seller.id)
        await PropertyFactory.age(property_repository, old, days=45)
        await PropertyFactory.create_property(
            property_repository, test_seller.id, package_id="gold", is_paid=True
        )

        stats = await listing_limit_service.get_stats(test_seller)
        assert stats.free_listings_used == 2
        assert stats.free_listing_limit == 5
        assert stats.remaining_free_listings == 3
        assert stats.total_listings == 3

    async def test_yearly_window_includes_older_listings(
        self,
        listing_limit_service: ListingLimitService,
        property_repository: PropertyRepository,
        test_admin: User,
        test_seller: User
    ):
        await listing_limit_service.set_user_limit(test_seller.id, 5, ListingPeriod.YEARLY, test_admin)
        old = await PropertyFactory.create_property(property_repository, test_seller.id)
        await PropertyFactory.age(property_repository, old, days=100)

        stats = await listing_limit_service.get_stats(test_seller)
        assert stats.free_listings_used == 1
        assert stats.free_listing_limit_type == 365

    async def test_limit_reached_raises(
        self,
        listing_limit_service: ListingLimitService,
        property_repository: PropertyRepository,
        test_admin: User,
        test_seller: User
    ):
        await listing_limit_service.set_user_limit(test_seller.id, 1, ListingPeriod.MONTHLY, test_admin)
        await PropertyFactory.create_property(property_repository, test_seller.id)

        with pytest.raises(ListingLimitExceededError) as exc_info:
            await listing_limit_service.ensure_can_post_free(test_seller)
        assert exc_info.value.status_code == 403
        assert "1 free posts allowed per 30 days" in exc_info.value.detail

    async def test_list_user_stats_only_sellers_and_agents(
        self,
        listing_limit_service: ListingLimitService,
        test_seller: User,
        test_buyer: User,
        test_admin: User
    ):
        rows, total = await listing_limit_service.list_user_stats()
        assert total == 1
        assert rows[0].email == test_seller.email
        assert rows[0].has_custom_limit is False


class TestPropertyService:
    """Listing submission, visibility and owner edits."""

    async def test_create_property_starts_pending(self, property_service: PropertyService, test_seller: User):
        property_obj = await property_service.create_property(PropertyCreate(**property_payload()), test_seller)

        assert property_obj.status == PropertyStatus.INACTIVE
        assert property_obj.approval_status == ApprovalStatus.PENDING
        assert property_obj.is_approved is False
        assert property_obj.property_type == "flat"
        assert property_obj.sector == "Sector 7"
        assert property_obj.owner_id == test_seller.id

    async def test_create_with_package_skips_free_limit(
        self,
        property_service: PropertyService,
        listing_limit_service: ListingLimitService,
        test_admin: User,
        test_seller: User
    ):
        await listing_limit_service.set_user_limit(test_seller.id, 0, ListingPeriod.MONTHLY, test_admin)

        property_obj = await property_service.create_property(
            PropertyCreate(**property_payload(package_id="premium-30")), test_seller
        )
        assert property_obj.approval_status == ApprovalStatus.PENDING_APPROVAL

    async def test_buyer_cannot_create(self, property_service: PropertyService, test_buyer: User):
        with pytest.raises(InsufficientPermissionsError):
            await property_service.create_property(PropertyCreate(**property_payload()), test_buyer)

    async def test_limit_blocks_creation(
        self,
        property_service: PropertyService,
        listing_limit_service: ListingLimitService,
        test_admin: User,
        test_seller: User
    ):
        await listing_limit_service.set_user_limit(test_seller.id, 1, ListingPeriod.MONTHLY, test_admin)
        await property_service.create_property(PropertyCreate(**property_payload()), test_seller)

        with pytest.raises(ListingLimitExceededError):
            await property_service.create_property(PropertyCreate(**property_payload()), test_seller)

    async def test_public_read_counts_views(self, property_service: PropertyService, approved_property):
        await property_service.get_property(approved_property.id)
        viewed = await property_service.get_property(approved_property.id)
        assert viewed.views == 2

    async def test_pending_hidden_from_public(self, property_service: PropertyService, pending_property):
        with pytest.raises(NotFoundError):
            await property_service.get_property(pending_property.id)

    async def test_owner_sees_pending_without_view(
        self, property_service: PropertyService, pending_property, test_seller: User
    ):
        property_obj = await property_service.get_property(pending_property.id, test_seller)
        assert property_obj.id == pending_property.id
        assert property_obj.views == 0

    async def test_owner_edit_resets_approval(
        self, property_service: PropertyService, approved_property, test_seller: User
    ):
        updated = await property_service.update_property(
            approved_property.id, PropertyUpdate(price=Decimal("2600000")), test_seller
        )
        assert updated.approval_status == ApprovalStatus.PENDING
        assert updated.status == PropertyStatus.INACTIVE
        assert updated.is_approved is False
        assert updated.price == Decimal("2600000")

    async def test_non_owner_cannot_edit(
        self, property_service: PropertyService, approved_property, other_seller: User
    ):
        with pytest.raises(PropertyOwnershipError):
            await property_service.update_property(
                approved_property.id, PropertyUpdate(title="Someone else's house"), other_seller
            )

    async def test_search_filters(
        self, property_service: PropertyService, property_repository: PropertyRepository, test_seller: User
    ):
        await PropertyFactory.create_property(property_repository, test_seller.id, bedrooms=2, title="Small house")
        await PropertyFactory.create_property(property_repository, test_seller.id, bedrooms=5, title="Large house")
        await PropertyFactory.create_property(
            property_repository, test_seller.id, bedrooms=5, title="Hidden large house",
            status=PropertyStatus.INACTIVE, approval_status=ApprovalStatus.PENDING
        )

        filters = property_service.build_filters(category="buy", bedrooms="4+")
        properties, total = await property_service.search_properties(filters)
        assert total == 1
        assert properties[0].title == "Large house"

    async def test_invalid_price_range(self, property_service: PropertyService):
        with pytest.raises(ValidationError):
            property_service.build_filters(min_price=Decimal("10"), max_price=Decimal("5"))

    async def test_owner_soft_delete_hides_listing(
        self, property_service: PropertyService, approved_property, test_seller: User
    ):
        await property_service.delete_own_property(approved_property.id, test_seller)
        with pytest.raises(NotFoundError):
            await property_service.get_property(approved_property.id)


class TestModerationService:
    """Approval workflow."""

    async def test_approve_publishes(
        self,
        moderation_service: ModerationService,
        property_service: PropertyService,
        pending_property,
        test_admin: User,
        test_seller: User
    ):
        property_obj, owner = await moderation_service.decide(
            pending_property.id, PropertyApprovalUpdate(approval_status="approved"), test_admin
        )
        assert property_obj.status == PropertyStatus.ACTIVE
        assert property_obj.is_approved is True
        assert property_obj.approved_by == test_admin.id
        assert owner.id == test_seller.id

        properties, total = await property_service.search_properties(property_service.build_filters())
        assert total == 1

    async def test_reject_stores_reason_and_notifies(
        self,
        moderation_service: ModerationService,
        notification_service: NotificationService,
        pending_property,
        test_admin: User,
        test_seller: User
    ):
        property_obj, _ = await moderation_service.decide(
            pending_property.id,
            PropertyApprovalUpdate(approval_status="rejected", rejection_reason="Blurry photos"),
            test_admin
        )
        assert property_obj.approval_status == ApprovalStatus.REJECTED
        assert property_obj.rejection_reason == "Blurry photos"

        notifications, _ = await notification_service.list_for_user(test_seller)
        assert notifications[0].type == NotificationType.REJECTION

    async def test_rejection_requires_reason(self):
        with pytest.raises(ValueError):
            PropertyApprovalUpdate(approval_status="rejected")

    async def test_list_pending(self, moderation_service: ModerationService, pending_property, approved_property):
        properties, total = await moderation_service.list_pending()
        assert total == 1
        assert properties[0].id == pending_property.id


class TestCategoryService:
    """Category tree rules."""

    async def _subcategory(self, category_service: CategoryService):
        category = await category_service.create_category(CategoryCreate(name="Buy"))
        return await category_service.create_subcategory(
            SubcategoryCreate(category_id=category.id, name="Residential")
        )

    async def test_duplicate_category_slug(self, category_service: CategoryService):
        await category_service.create_category(CategoryCreate(name="Rent"))
        with pytest.raises(DuplicateResourceError):
            await category_service.create_category(CategoryCreate(name="rent"))

    async def test_mini_slug_gets_suffix(self, category_service: CategoryService):
        subcategory = await self._subcategory(category_service)

        first = await category_service.create_mini_subcategory(
            MiniSubcategoryCreate(subcategory_id=subcategory.id, name="Independent House")
        )
        second = await category_service.create_mini_subcategory(
            MiniSubcategoryCreate(subcategory_id=subcategory.id, name="Independent House")
        )
        third = await category_service.create_mini_subcategory(
            MiniSubcategoryCreate(subcategory_id=subcategory.id, name="independent house")
        )
        assert first.slug == "independent-house"
        assert second.slug == "independent-house-2"
        assert third.slug == "independent-house-3"

    async def test_mini_empty_name_rejected(self, category_service: CategoryService):
        subcategory = await self._subcategory(category_service)
        with pytest.raises(BadRequestError):
            await category_service.create_mini_subcategory(
                MiniSubcategoryCreate(subcategory_id=subcategory.id, name="   ")
            )

    async def test_mini_unknown_parent(self, category_service: CategoryService):
        with pytest.raises(NotFoundError):
            await category_service.create_mini_subcategory(
                MiniSubcategoryCreate(subcategory_id=uuid.uuid4(), name="Villa")
            )

    async def test_mini_update_duplicate_slug(self, category_service: CategoryService):
        subcategory = await self._subcategory(category_service)
        await category_service.create_mini_subcategory(
            MiniSubcategoryCreate(subcategory_id=subcategory.id, name="Villa")
        )
        other = await category_service.create_mini_subcategory(
            MiniSubcategoryCreate(subcategory_id=subcategory.id, name="Kothi")
        )
        with pytest.raises(BadRequestError):
            await category_service.update_mini_subcategory(other.id, MiniSubcategoryUpdate(slug="villa"))

    async def test_delete_blocked_by_linked_listing(
        self,
        category_service: CategoryService,
        property_repository: PropertyRepository,
        test_seller: User
    ):
        category = await category_service.create_category(CategoryCreate(name="Commercial"))
        await PropertyFactory.create_property(
            property_repository, test_seller.id, property_type="commercial", category_id=category.id
        )

        with pytest.raises(BadRequestError, match="1 linked properties"):
            await category_service.delete_category(category.id)
        assert await category_service.get_category(category.id)

    async def test_toggle_hides_from_public_list(self, category_service: CategoryService):
        category = await category_service.create_category(CategoryCreate(name="Agricultural"))
        await category_service.toggle_category(category.id)

        public = await category_service.list_categories(active_only=True)
        everything = await category_service.list_categories(active_only=False)
        assert category.id not in [c.id for c in public]
        assert category.id in [c.id for c in everything]

    async def test_initialize_seeds_once(self, category_service: CategoryService):
        result = await category_service.initialize()
        assert result.skipped is False
        assert result.categories == 5
        assert result.banners == 4

        again = await category_service.initialize()
        assert again.skipped is True


class TestBlogService:
    """Blog slugs and publishing."""

    async def test_slug_suffix_and_defaults(self, blog_service: BlogService, test_admin: User):
        first = await blog_service.create_blog(
            BlogCreate(title="Buying Your First Home!", content="Start with a budget. " * 20,
                       publish_status=PublishStatus.PUBLISHED),
            test_admin
        )
        second = await blog_service.create_blog(
            BlogCreate(title="Buying your first home", content="Another take."), test_admin
        )

        assert first.slug == "buying-your-first-home"
        assert second.slug == "buying-your-first-home-2"
        assert first.published_at is not None
        assert second.published_at is None
        assert len(first.excerpt) == 200
        assert first.meta_title == first.title

    async def test_draft_not_public(self, blog_service: BlogService, test_admin: User):
        draft = await blog_service.create_blog(BlogCreate(title="Draft post", content="Not yet"), test_admin)
        with pytest.raises(NotFoundError):
            await blog_service.read_published(draft.slug)

    async def test_read_counts_views(self, blog_service: BlogService, test_admin: User):
        blog = await blog_service.create_blog(
            BlogCreate(title="Market update", content="Prices are up",
                       publish_status=PublishStatus.PUBLISHED),
            test_admin
        )
        read = await blog_service.read_published(blog.slug)
        assert read.views == 1


class TestAdvertisementService:
    """Advertise-with-us leads."""

    def _form(self, **overrides) -> AdvertisementSubmissionCreate:
        data = {
            "full_name": "Ravi Builder",
            "email": "ravi@example.com",
            "phone": "+91 98765 43210",
            "project_name": "Green Heights",
            "location": "Sector 32",
            "banner_type": "homepage_banner",
            "description": "Promote our new residential towers",
        }
        data.update(overrides)
        return AdvertisementSubmissionCreate(**data)

    async def test_open_marks_viewed_once(self, advertisement_service: AdvertisementService):
        submission = await advertisement_service.submit(self._form())
        assert submission.status == SubmissionStatus.NEW

        opened = await advertisement_service.get_submission(submission.id)
        assert opened.status == SubmissionStatus.VIEWED

        await advertisement_service.set_status(submission.id, SubmissionStatus.CONTACTED)
        reopened = await advertisement_service.get_submission(submission.id)
        assert reopened.status == SubmissionStatus.CONTACTED

    async def test_stats(self, advertisement_service: AdvertisementService):
        await advertisement_service.submit(self._form())
        await advertisement_service.submit(self._form(banner_type="sidebar_banner"))

        stats = await advertisement_service.get_stats()
        assert stats.total == 2
        assert stats.new == 2
        assert stats.by_banner_type == {"homepage_banner": 1, "sidebar_banner": 1}

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValueError):
            self._form(phone="12345")


class TestNotificationService:
    """Notification ownership."""

    async def test_cannot_read_someone_elses(
        self,
        notification_service: NotificationService,
        listing_limit_service: ListingLimitService,
        test_admin: User,
        test_seller: User,
        other_seller: User
    ):
        await listing_limit_service.set_user_limit(test_seller.id, 3, ListingPeriod.MONTHLY, test_admin)
        notifications, _ = await notification_service.list_for_user(test_seller)

        with pytest.raises(NotFoundError):
            await notification_service.mark_read(notifications[0].id, other_seller)

        marked = await notification_service.mark_read(notifications[0].id, test_seller)
        assert marked.is_read is True
        assert await notification_service.unread_count(test_seller) == 0
