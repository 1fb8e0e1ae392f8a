"""Tests for categories API endpoints."""

from datetime import date
from decimal import Decimal
import uuid

from ledger.models import EntryType, Transaction


class TestCategoriesAPI:
    """Test categories CRUD endpoints."""

    def test_create_category(self, client, user):
        """Should create a new category with camelCase fields."""
        response = client.post("/api/categories", json={
            "userId": user.id,
            "name": "New Category",
            "type": "expense",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "New Category"
        assert data["userId"] == user.id
        assert {"id", "createdAt", "updatedAt"} <= set(data)

    def test_create_category_validation_errors(self, client, user):
        """Should report business-rule failures as 422 with messages."""
        response = client.post("/api/categories", json={
            "userId": user.id,
            "name": "x" * 101,
            "type": "expense",
        })
        assert response.status_code == 422
        assert response.json()["errors"] == ["name must be at most 100 characters"]

    def test_create_category_bad_type(self, client, user):
        response = client.post("/api/categories", json={
            "userId": user.id,
            "name": "Food",
            "type": "transfer",
        })
        assert response.status_code == 422

    def test_create_category_blank_name(self, client, user):
        response = client.post("/api/categories", json={
            "userId": user.id,
            "name": "   ",
            "type": "expense",
        })
        assert response.status_code == 422
        assert response.json()["errors"] == ["name is required"]

    def test_create_category_missing_fields(self, client):
        response = client.post("/api/categories", json={"type": "expense"})
        assert response.status_code == 422
        assert response.json() == {
            "detail": "Validation failed",
            "errors": ["userId is required", "name is required"],
        }

    def test_storage_error_is_500_and_session_recovers(self, client, user, caplog):
        """A rejected write reports 500 and leaves the request session usable."""
        response = client.post("/api/categories", json={
            "userId": "ghost-user",
            "name": "Food",
            "type": "expense",
        })
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
        assert "Storage error" in caplog.text

        response = client.get("/api/categories", params={"userId": user.id})
        assert response.status_code == 200
        assert response.json() == []

    def test_list_categories(self, client, user, sample_category):
        """Should return the user's categories."""
        response = client.get("/api/categories", params={"userId": user.id})
        assert response.status_code == 200
        data = response.json()
        assert [c["id"] for c in data] == [sample_category.id]

    def test_list_requires_user(self, client):
        response = client.get("/api/categories")
        assert response.status_code == 422

    def test_get_category(self, client, user, sample_category):
        response = client.get(f"/api/categories/{sample_category.id}", params={"userId": user.id})
        assert response.status_code == 200
        assert response.json()["name"] == "Groceries"

    def test_update_category_put_and_patch(self, client, user, sample_category):
        response = client.put(
            f"/api/categories/{sample_category.id}",
            params={"userId": user.id},
            json={"name": "Food"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Food"
        assert response.json()["type"] == "expense"

        response = client.patch(
            f"/api/categories/{sample_category.id}",
            params={"userId": user.id},
            json={"type": "income"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Food"
        assert response.json()["type"] == "income"

    def test_delete_category(self, client, user, sample_category):
        response = client.delete(f"/api/categories/{sample_category.id}", params={"userId": user.id})
        assert response.status_code == 204
        assert response.content == b""

        response = client.get(f"/api/categories/{sample_category.id}", params={"userId": user.id})
        assert response.status_code == 404

    def test_delete_category_in_use_conflicts(self, client, user, sample_transaction, sample_category):
        response = client.delete(f"/api/categories/{sample_category.id}", params={"userId": user.id})
        assert response.status_code == 409

        response = client.get(f"/api/categories/{sample_category.id}", params={"userId": user.id})
        assert response.status_code == 200


class TestCategoryOwnership:
    """Not-owned is reported exactly like not-found."""

    def test_not_owned_is_404_not_403(self, client, other_user, sample_category):
        url = f"/api/categories/{sample_category.id}"
        params = {"userId": other_user.id}

        missing = client.get("/api/categories/does-not-exist", params=params)
        assert missing.status_code == 404

        for response in (
            client.get(url, params=params),
            client.put(url, params=params, json={"name": "Mine now"}),
            client.delete(url, params=params),
        ):
            assert response.status_code == 404
            assert response.json() == missing.json()
