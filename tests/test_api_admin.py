"""
Integration tests for admin and content endpoints: taxonomy, banners, blogs,
advertisement leads, notifications, listing limits and the Android app.
"""

import io
import uuid
from httpx import AsyncClient
from PIL import Image

from marketplace.models.user import User
from marketplace.models.property import Property
from marketplace.repositories.property import PropertyRepository
from tests.conftest import PropertyFactory, auth_headers, property_payload


def ad_payload(**overrides) -> dict:
    payload = {
        "full_name": "Ravi Developer",
        "email": "Ravi@Builders.example.com",
        "phone": "+91 98765 43210",
        "company_name": "Ravi Builders",
        "project_name": "Green Meadows",
        "location": "Sector 32",
        "budget": "50000",
        "banner_type": "homepage_banner",
        "description": "Launching a new township and want homepage visibility",
    }
    payload.update(overrides)
    return payload


class TestAdminAccess:

    async def test_seller_forbidden(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.get("/api/admin/stats", headers=auth_headers(test_seller))

        assert response.status_code == 403

    async def test_stats(
        self, async_client: AsyncClient, test_admin: User, approved_property: Property, pending_property: Property
    ):
        response = await async_client.get("/api/admin/stats", headers=auth_headers(test_admin))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["users_by_type"]["admin"] == 1
        assert data["properties_by_approval_status"]["approved"] == 1
        assert data["properties_by_approval_status"]["pending"] == 1

    async def test_deactivate_user_blocks_login(
        self, async_client: AsyncClient, test_admin: User, test_seller: User
    ):
        response = await async_client.put(
            f"/api/admin/users/{test_seller.id}/status",
            json={"is_active": False},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False

        response = await async_client.get("/api/auth/me", headers=auth_headers(test_seller))
        assert response.status_code in (401, 403)

    async def test_admin_cannot_deactivate_self(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.put(
            f"/api/admin/users/{test_admin.id}/status",
            json={"is_active": False},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == 400


class TestCategoryAdmin:
    """Category tree management."""

    async def create_category(self, client: AsyncClient, admin: User, name: str = "Buy") -> dict:
        response = await client.post("/api/admin/categories", json={"name": name}, headers=auth_headers(admin))
        assert response.status_code == 201
        return response.json()["data"]

    async def create_subcategory(self, client: AsyncClient, admin: User, category_id: str, name: str) -> dict:
        response = await client.post(
            "/api/admin/subcategories",
            json={"category_id": category_id, "name": name},
            headers=auth_headers(admin)
        )
        assert response.status_code == 201
        return response.json()["data"]

    async def test_category_tree(self, async_client: AsyncClient, test_admin: User):
        category = await self.create_category(async_client, test_admin, "Buy")
        await self.create_subcategory(async_client, test_admin, category["id"], "Independent House")

        response = await async_client.get("/api/categories/buy")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == "buy"
        assert [sub["slug"] for sub in data["subcategories"]] == ["independent-house"]

    async def test_duplicate_category_slug(self, async_client: AsyncClient, test_admin: User):
        await self.create_category(async_client, test_admin, "Rent")

        response = await async_client.post(
            "/api/admin/categories", json={"name": "rent"}, headers=auth_headers(test_admin)
        )

        assert response.status_code == 409

    async def test_toggle_hides_category(self, async_client: AsyncClient, test_admin: User):
        category = await self.create_category(async_client, test_admin, "Commercial")

        response = await async_client.put(
            f"/api/admin/categories/{category['id']}/toggle", headers=auth_headers(test_admin)
        )
        assert response.json()["data"]["is_active"] is False

        assert (await async_client.get("/api/categories/commercial")).status_code == 404
        public = await async_client.get("/api/categories")
        assert public.json()["data"] == []

        admin_list = await async_client.get("/api/admin/categories", headers=auth_headers(test_admin))
        assert len(admin_list.json()["data"]) == 1

    async def test_mini_subcategory_slug_suffix(self, async_client: AsyncClient, test_admin: User):
        category = await self.create_category(async_client, test_admin)
        subcategory = await self.create_subcategory(async_client, test_admin, category["id"], "Plot")

        slugs = []
        for _ in range(2):
            response = await async_client.post(
                "/api/admin/mini-subcategories",
                json={"subcategory_id": subcategory["id"], "name": "Corner Plot"},
                headers=auth_headers(test_admin)
            )
            assert response.status_code == 201
            slugs.append(response.json()["data"]["slug"])

        assert slugs == ["corner-plot", "corner-plot-2"]

    async def test_mini_subcategory_empty_name(self, async_client: AsyncClient, test_admin: User):
        category = await self.create_category(async_client, test_admin)
        subcategory = await self.create_subcategory(async_client, test_admin, category["id"], "Plot")

        response = await async_client.post(
            "/api/admin/mini-subcategories",
            json={"subcategory_id": subcategory["id"], "name": "   "},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == 400

    async def test_delete_blocked_by_listing(
        self,
        async_client: AsyncClient,
        property_repository: PropertyRepository,
        test_admin: User,
        test_seller: User
    ):
        category = await self.create_category(async_client, test_admin)
        property_obj = await PropertyFactory.create_property(property_repository, test_seller.id)
        await property_repository.save(property_obj, {"category_id": uuid.UUID(category["id"])})

        response = await async_client.delete(
            f"/api/admin/categories/{category['id']}", headers=auth_headers(test_admin)
        )
        assert response.status_code == 400

        await property_repository.soft_delete(property_obj)
        response = await async_client.delete(
            f"/api/admin/categories/{category['id']}", headers=auth_headers(test_admin)
        )
        assert response.status_code == 200

    async def test_initialize(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post("/api/admin/categories/initialize", headers=auth_headers(test_admin))
        assert response.status_code == 200
        assert response.json()["data"]["categories"] == 5

        again = await async_client.post("/api/admin/categories/initialize", headers=auth_headers(test_admin))
        assert again.json()["data"]["skipped"] is True

        public = await async_client.get("/api/categories", params={"with_subcategories": False})
        assert len(public.json()["data"]) == 5
        assert all(item["subcategories"] is None for item in public.json()["data"])


class TestContentAdmin:
    """Banners, maps and blogs."""

    async def test_banner_lifecycle(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post(
            "/api/admin/banners",
            json={"title": "Festive offer", "image_url": "/uploads/banners/offer.jpg", "position": "homepage"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 201
        banner_id = response.json()["data"]["id"]

        public = await async_client.get("/api/banners", params={"position": "homepage"})
        assert [item["id"] for item in public.json()["data"]] == [banner_id]

        await async_client.put(
            f"/api/admin/banners/{banner_id}", json={"is_active": False}, headers=auth_headers(test_admin)
        )
        public = await async_client.get("/api/banners", params={"position": "homepage"})
        assert public.json()["data"] == []

        response = await async_client.delete(f"/api/admin/banners/{banner_id}", headers=auth_headers(test_admin))
        assert response.status_code == 200

    async def test_banner_image_upload(self, async_client: AsyncClient, test_admin: User):
        buffer = io.BytesIO()
        Image.new("RGB", (16, 9)).save(buffer, format="JPEG")

        response = await async_client.post(
            "/api/admin/banners/upload",
            files={"file": ("banner.jpg", buffer.getvalue(), "image/jpeg")},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["url"].startswith("/uploads/banners/")
        assert data["url"].endswith(".jpg")

    async def test_area_maps(self, async_client: AsyncClient, test_admin: User):
        await async_client.post(
            "/api/admin/maps",
            json={"title": "Sector 14 map", "area": "Sector 14", "image_url": "/uploads/maps/s14.png"},
            headers=auth_headers(test_admin)
        )

        response = await async_client.get("/api/maps")

        assert [item["title"] for item in response.json()["data"]] == ["Sector 14 map"]

    async def test_blog_publish_flow(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post(
            "/api/admin/blogs",
            json={"title": "Buying Your First Home", "content": "Start with the budget. " * 20},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 201
        blog = response.json()["data"]
        assert blog["slug"] == "buying-your-first-home"
        assert blog["publish_status"] == "draft"

        assert (await async_client.get("/api/blogs/buying-your-first-home")).status_code == 404

        response = await async_client.put(
            f"/api/admin/blogs/{blog['id']}",
            json={"publish_status": "published"},
            headers=auth_headers(test_admin)
        )
        assert response.json()["data"]["published_at"] is not None

        listing = await async_client.get("/api/blogs")
        assert listing.json()["pagination"]["total"] == 1

        response = await async_client.get("/api/blogs/buying-your-first-home")
        assert response.status_code == 200
        assert response.json()["data"]["views"] == 1


class TestAdvertisementSubmissions:
    """Advertise-with-us leads."""

    async def test_submit_and_review(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post("/api/advertisement-submissions", json=ad_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Thank you! Our team will contact you shortly."
        assert body["data"]["email"] == "ravi@builders.example.com"
        submission_id = body["data"]["id"]

        response = await async_client.get(
            f"/api/admin/advertisement-submissions/{submission_id}", headers=auth_headers(test_admin)
        )
        assert response.json()["data"]["status"] == "viewed"

        response = await async_client.put(
            f"/api/admin/advertisement-submissions/{submission_id}/status",
            json={"status": "contacted"},
            headers=auth_headers(test_admin)
        )
        assert response.json()["data"]["status"] == "contacted"

        stats = await async_client.get(
            "/api/admin/advertisement-submissions/stats", headers=auth_headers(test_admin)
        )
        assert stats.json()["data"]["contacted"] == 1
        assert stats.json()["data"]["by_banner_type"] == {"homepage_banner": 1}

    async def test_missing_field_rejected(self, async_client: AsyncClient, test_admin: User):
        payload = ad_payload()
        del payload["project_name"]

        response = await async_client.post("/api/advertisement-submissions", json=payload)
        assert response.status_code == 422

        listing = await async_client.get("/api/admin/advertisement-submissions", headers=auth_headers(test_admin))
        assert listing.json()["pagination"]["total"] == 0

    async def test_invalid_phone(self, async_client: AsyncClient):
        response = await async_client.post("/api/advertisement-submissions", json=ad_payload(phone="12345"))

        assert response.status_code == 422

    async def test_listing_requires_admin(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.get(
            "/api/admin/advertisement-submissions", headers=auth_headers(test_seller)
        )

        assert response.status_code == 403


class TestNotifications:

    async def test_broadcast_and_read(self, async_client: AsyncClient, test_admin: User, test_seller: User):
        response = await async_client.post(
            "/api/admin/notifications",
            json={"title": "Maintenance", "message": "Back in an hour", "user_type": "seller"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 201

        count = await async_client.get("/api/notifications/unread-count", headers=auth_headers(test_seller))
        assert count.json()["data"]["unread"] == 1

        listing = await async_client.get("/api/notifications", headers=auth_headers(test_seller))
        notification_id = listing.json()["data"][0]["id"]

        response = await async_client.put(
            f"/api/notifications/{notification_id}/read", headers=auth_headers(test_seller)
        )
        assert response.json()["data"]["is_read"] is True

        count = await async_client.get("/api/notifications/unread-count", headers=auth_headers(test_seller))
        assert count.json()["data"]["unread"] == 0

    async def test_broadcast_needs_audience(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post(
            "/api/admin/notifications",
            json={"title": "Hello", "message": "Nobody"},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == 422


class TestListingLimitAdmin:
    """Defaults and per-user overrides."""

    async def test_override_applies(
        self,
        async_client: AsyncClient,
        property_repository: PropertyRepository,
        test_admin: User,
        test_seller: User
    ):
        await PropertyFactory.create_property(property_repository, test_seller.id)

        response = await async_client.put(
            f"/api/admin/users/{test_seller.id}/free-listing-limit",
            json={"limit": 1, "period": "yearly"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 200

        stats = await async_client.get("/api/user/listing-stats", headers=auth_headers(test_seller))
        data = stats.json()["data"]
        assert data["free_listing_limit"] == 1
        assert data["free_listing_limit_type"] == 365
        assert data["remaining_free_listings"] == 0

        response = await async_client.post(
            "/api/properties", json=property_payload(), headers=auth_headers(test_seller)
        )
        assert response.status_code == 403

    async def test_default_settings(self, async_client: AsyncClient, test_admin: User, test_seller: User):
        response = await async_client.put(
            "/api/admin/free-listing-settings",
            json={"default_limit": 2, "default_period": "monthly"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["default_limit_type"] == 30

        response = await async_client.get("/api/admin/free-listing-settings", headers=auth_headers(test_admin))
        assert response.json()["data"]["default_limit"] == 2

        stats = await async_client.get("/api/user/listing-stats", headers=auth_headers(test_seller))
        assert stats.json()["data"]["free_listing_limit"] == 2

    async def test_users_listing_stats(self, async_client: AsyncClient, test_admin: User, test_seller: User, test_buyer: User):
        response = await async_client.get("/api/admin/users/listing-stats", headers=auth_headers(test_admin))

        rows = response.json()["data"]
        assert [row["email"] for row in rows] == [test_seller.email]
        assert rows[0]["has_custom_limit"] is False


class TestAppDistribution:

    async def test_info_without_apk(self, async_client: AsyncClient):
        response = await async_client.get("/api/app/info")

        assert response.json()["data"]["available"] is False
        assert (await async_client.get("/api/app/download")).status_code == 404

    async def test_upload_and_download(self, async_client: AsyncClient, test_admin: User):
        apk = b"PK\x03\x04 fake android package"
        response = await async_client.post(
            "/api/admin/app/upload",
            files={"file": ("marketplace.apk", apk, "application/vnd.android.package-archive")},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["size"] == len(apk)

        response = await async_client.get("/api/app/download")
        assert response.status_code == 200
        assert response.content == apk
        assert response.headers["content-type"] == "application/vnd.android.package-archive"

    async def test_upload_rejects_other_files(self, async_client: AsyncClient, test_admin: User):
        response = await async_client.post(
            "/api/admin/app/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == 400


class TestHealth:

    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == 200
        assert response.json()["api_prefix"] == "/api"

    async def test_unknown_route_envelope(self, async_client: AsyncClient):
        response = await async_client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json()["success"] is False
