"""
Integration tests for listing submission, search, moderation and owner management.
"""

import io
import uuid
from httpx import AsyncClient
from PIL import Image

from marketplace.models.user import User
from marketplace.models.property import Property
from marketplace.repositories.property import PropertyRepository
from tests.conftest import PropertyFactory, auth_headers, property_payload


def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestPropertySubmission:
    """POST /properties."""

    async def test_create_property_pending(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/properties", json=property_payload(), headers=auth_headers(test_seller)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["approval_status"] == "pending"
        assert data["status"] == "inactive"
        assert data["property_type"] == "flat"
        assert data["location"]["sector"] == "Sector 7"
        assert data["specifications"]["bedrooms"] == 2

    async def test_create_property_with_package(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/properties",
            json=property_payload(package_id="gold-30"),
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 201
        assert response.json()["data"]["approval_status"] == "pending_approval"

    async def test_buyer_cannot_post(self, async_client: AsyncClient, test_buyer: User):
        response = await async_client.post(
            "/api/properties", json=property_payload(), headers=auth_headers(test_buyer)
        )

        assert response.status_code == 403

    async def test_anonymous_cannot_post(self, async_client: AsyncClient):
        response = await async_client.post("/api/properties", json=property_payload())

        assert response.status_code == 401

    async def test_free_limit_exceeded(
        self, async_client: AsyncClient, property_repository: PropertyRepository, test_seller: User
    ):
        for i in range(5):
            await PropertyFactory.create_property(property_repository, test_seller.id, title=f"Listing number {i}")

        response = await async_client.post(
            "/api/properties", json=property_payload(), headers=auth_headers(test_seller)
        )

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "LISTING_LIMIT_EXCEEDED"
        assert "5 free posts allowed per 30 days" in body["error"]

    async def test_paid_listing_skips_limit(
        self, async_client: AsyncClient, property_repository: PropertyRepository, test_seller: User
    ):
        for i in range(5):
            await PropertyFactory.create_property(property_repository, test_seller.id, title=f"Listing number {i}")

        response = await async_client.post(
            "/api/properties",
            json=property_payload(package_id="gold-30"),
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 201

    async def test_invalid_price(self, async_client: AsyncClient, test_seller: User):
        response = await async_client.post(
            "/api/properties", json=property_payload(price=-10), headers=auth_headers(test_seller)
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_unsupported_content_type(self, async_client: AsyncClient, test_seller: User):
        headers = {**auth_headers(test_seller), "Content-Type": "text/plain"}
        response = await async_client.post("/api/properties", content="title=x", headers=headers)

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestPublicListing:
    """Search and detail for anonymous visitors."""

    async def test_list_excludes_pending(
        self, async_client: AsyncClient, approved_property: Property, pending_property: Property
    ):
        response = await async_client.get("/api/properties")

        assert response.status_code == 200
        body = response.json()
        ids = [item["id"] for item in body["data"]]
        assert ids == [str(approved_property.id)]
        assert body["pagination"]["total"] == 1
        assert "X-Request-ID" in response.headers

    async def test_filters(
        self, async_client: AsyncClient, property_repository: PropertyRepository, test_seller: User
    ):
        await PropertyFactory.create_property(property_repository, test_seller.id, bedrooms=2, title="Two bed home")
        await PropertyFactory.create_property(property_repository, test_seller.id, bedrooms=5, title="Five bed home")

        response = await async_client.get("/api/properties", params={"bedrooms": "4+"})

        titles = [item["title"] for item in response.json()["data"]]
        assert titles == ["Five bed home"]

    async def test_bad_price_range(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties", params={"min_price": 500, "max_price": 100})

        assert response.status_code == 422

    async def test_detail_counts_view(self, async_client: AsyncClient, approved_property: Property):
        await async_client.get(f"/api/properties/{approved_property.id}")
        response = await async_client.get(f"/api/properties/{approved_property.id}")

        assert response.status_code == 200
        assert response.json()["data"]["views"] == 2

    async def test_pending_hidden_from_public(self, async_client: AsyncClient, pending_property: Property):
        response = await async_client.get(f"/api/properties/{pending_property.id}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_owner_sees_pending(
        self, async_client: AsyncClient, pending_property: Property, test_seller: User
    ):
        response = await async_client.get(
            f"/api/properties/{pending_property.id}", headers=auth_headers(test_seller)
        )

        assert response.status_code == 200

    async def test_invalid_id(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties/not-a-uuid")

        assert response.status_code == 422

    async def test_unknown_id(self, async_client: AsyncClient):
        response = await async_client.get(f"/api/properties/{uuid.uuid4()}")

        assert response.status_code == 404

    async def test_inquiry(self, async_client: AsyncClient, approved_property: Property):
        response = await async_client.post(f"/api/properties/{approved_property.id}/inquire")

        assert response.status_code == 200
        assert response.json()["data"]["inquiries"] == 1


class TestModerationFlow:
    """Submit, approve and edit."""

    async def test_approval_makes_listing_public(
        self, async_client: AsyncClient, test_seller: User, test_admin: User
    ):
        created = await async_client.post(
            "/api/properties", json=property_payload(), headers=auth_headers(test_seller)
        )
        property_id = created.json()["data"]["id"]

        pending = await async_client.get("/api/admin/properties/pending", headers=auth_headers(test_admin))
        assert [item["id"] for item in pending.json()["data"]] == [property_id]

        response = await async_client.put(
            f"/api/admin/properties/{property_id}/approval",
            json={"approval_status": "approved"},
            headers=auth_headers(test_admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["is_approved"] is True

        listing = await async_client.get("/api/properties")
        assert [item["id"] for item in listing.json()["data"]] == [property_id]

        notifications = await async_client.get("/api/notifications", headers=auth_headers(test_seller))
        assert notifications.json()["data"][0]["type"] == "approval"

    async def test_rejection_requires_reason(
        self, async_client: AsyncClient, pending_property: Property, test_admin: User
    ):
        response = await async_client.put(
            f"/api/admin/properties/{pending_property.id}/approval",
            json={"approval_status": "rejected"},
            headers=auth_headers(test_admin)
        )

        assert response.status_code == 422

    async def test_seller_cannot_moderate(
        self, async_client: AsyncClient, pending_property: Property, test_seller: User
    ):
        response = await async_client.put(
            f"/api/admin/properties/{pending_property.id}/approval",
            json={"approval_status": "approved"},
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 403

    async def test_owner_edit_resets_approval(
        self, async_client: AsyncClient, approved_property: Property, test_seller: User
    ):
        response = await async_client.put(
            f"/api/properties/{approved_property.id}",
            json={"price": 2600000},
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["approval_status"] == "pending"
        assert data["status"] == "inactive"
        assert data["price"] == 2600000

    async def test_partial_specifications_edit_keeps_other_fields(
        self, async_client: AsyncClient, approved_property: Property, test_seller: User
    ):
        response = await async_client.put(
            f"/api/properties/{approved_property.id}",
            json={"specifications": {"bathrooms": 2}},
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 200
        specifications = response.json()["data"]["specifications"]
        assert specifications["bathrooms"] == 2
        assert specifications["bedrooms"] == 3
        assert specifications["area"] == 1200

        location = response.json()["data"]["location"]
        assert location["sector"] == "Sector 14"

    async def test_other_user_cannot_edit(
        self, async_client: AsyncClient, approved_property: Property, other_seller: User
    ):
        response = await async_client.put(
            f"/api/properties/{approved_property.id}",
            json={"price": 1},
            headers=auth_headers(other_seller)
        )

        assert response.status_code == 403


class TestPropertyImages:
    """Image upload and removal."""

    async def test_upload_and_remove(
        self, async_client: AsyncClient, approved_property: Property, test_seller: User, upload_service
    ):
        response = await async_client.post(
            f"/api/properties/{approved_property.id}/images",
            files=[("files", ("front.png", png_bytes(), "image/png"))],
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 200
        images = response.json()["data"]["images"]
        assert len(images) == 1
        assert images[0].startswith(f"/uploads/properties/{approved_property.id}/")

        stored = upload_service.upload_dir / images[0][len("/uploads/"):]
        assert stored.is_file()

        response = await async_client.delete(
            f"/api/properties/{approved_property.id}/images",
            params={"url": images[0]},
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 200
        assert response.json()["data"]["images"] == []
        assert not stored.exists()

    async def test_rejects_non_image(
        self, async_client: AsyncClient, approved_property: Property, test_seller: User
    ):
        response = await async_client.post(
            f"/api/properties/{approved_property.id}/images",
            files=[("files", ("notes.txt", b"plain text", "text/plain"))],
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 400

    async def test_rejects_mismatched_content(
        self, async_client: AsyncClient, approved_property: Property, test_seller: User
    ):
        response = await async_client.post(
            f"/api/properties/{approved_property.id}/images",
            files=[("files", ("fake.png", b"not really a png", "image/png"))],
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 400

    async def test_failed_batch_leaves_no_files(
        self, async_client: AsyncClient, approved_property: Property, test_seller: User, upload_service
    ):
        response = await async_client.post(
            f"/api/properties/{approved_property.id}/images",
            files=[
                ("files", ("front.png", png_bytes(), "image/png")),
                ("files", ("broken.png", b"not really a png", "image/png")),
            ],
            headers=auth_headers(test_seller)
        )

        assert response.status_code == 400
        folder = upload_service.upload_dir / "properties" / str(approved_property.id)
        assert not folder.exists() or list(folder.iterdir()) == []

        listing = await async_client.get(f"/api/properties/{approved_property.id}")
        assert listing.json()["data"]["images"] == []


class TestSellerDashboard:
    """Seller routes and listing stats."""

    async def test_my_properties_and_delete(
        self,
        async_client: AsyncClient,
        approved_property: Property,
        pending_property: Property,
        test_seller: User
    ):
        response = await async_client.get("/api/seller/properties", headers=auth_headers(test_seller))
        assert len(response.json()["data"]) == 2

        response = await async_client.delete(
            f"/api/seller/properties/{pending_property.id}", headers=auth_headers(test_seller)
        )
        assert response.status_code == 200

        response = await async_client.get("/api/seller/properties", headers=auth_headers(test_seller))
        assert [item["id"] for item in response.json()["data"]] == [str(approved_property.id)]

    async def test_cannot_delete_others(
        self, async_client: AsyncClient, approved_property: Property, other_seller: User
    ):
        response = await async_client.delete(
            f"/api/seller/properties/{approved_property.id}", headers=auth_headers(other_seller)
        )

        assert response.status_code == 403

    async def test_analytics(self, async_client: AsyncClient, approved_property: Property, test_seller: User):
        await async_client.get(f"/api/properties/{approved_property.id}")

        response = await async_client.get("/api/seller/analytics", headers=auth_headers(test_seller))

        data = response.json()["data"]
        assert data["total_properties"] == 1
        assert data["total_views"] == 1
        assert data["top_property"]["id"] == str(approved_property.id)

    async def test_listing_stats(self, async_client: AsyncClient, pending_property: Property, test_seller: User):
        response = await async_client.get("/api/user/listing-stats", headers=auth_headers(test_seller))

        data = response.json()["data"]
        assert data["free_listings_used"] == 1
        assert data["free_listing_limit"] == 5
        assert data["remaining_free_listings"] == 4
        assert data["pending_free_listings"] == 1
        assert data["free_listing_limit_type"] == 30
