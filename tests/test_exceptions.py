"""
Tests for error-to-response mapping.
"""
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.exceptions import (
    ConflictError,
    DuplicateRecordError,
    NotFoundError,
    StorageError,
    UploadRejected,
    ValidationFailed,
)
from storefront.exceptions.handlers import setup_exception_handlers


@pytest.fixture
def client():
    """Bare app whose routes raise each error kind."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/not-found")
    def not_found():
        raise NotFoundError("Product abc not found")

    @app.get("/invalid")
    def invalid():
        raise ValidationFailed("Invalid print options", [{"field": "material", "msg": "bad", "type": "enum"}])

    @app.get("/duplicate")
    def duplicate():
        raise DuplicateRecordError("User", "email")

    @app.get("/too-large")
    def too_large():
        raise UploadRejected("File too large", status_code=413)

    @app.get("/storage")
    def storage():
        raise StorageError("connection refused on 10.0.0.5")

    @app.get("/boom")
    def boom():
        raise RuntimeError("unexpected")

    @app.get("/items/{item_id}")
    def item(item_id: int):
        return {"id": item_id}

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    def test_not_found_maps_to_404(self, client):
        response = client.get("/not-found")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Not found"
        assert body["detail"] == "Product abc not found"
        assert body["path"] == "/not-found"
        assert body["method"] == "GET"

    def test_validation_failed_carries_field_errors(self, client):
        response = client.get("/invalid")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "material"

    def test_duplicate_maps_to_409(self, client):
        response = client.get("/duplicate")

        assert response.status_code == 409
        assert response.json()["detail"] == "User with this email already exists"

    def test_upload_rejected_uses_its_status(self, client):
        assert client.get("/too-large").status_code == 413

    def test_storage_error_hides_driver_detail(self, client, caplog):
        """Test that storage failures return 500 without leaking internals, and are logged."""
        with caplog.at_level(logging.ERROR, logger="storefront.exceptions.handlers"):
            response = client.get("/storage")

        assert response.status_code == 500
        assert "10.0.0.5" not in response.text
        assert response.json()["error"] == "Database error"
        assert any("connection refused" in r.getMessage() for r in caplog.records)

    def test_unhandled_exception_maps_to_500(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"

    def test_request_validation_maps_to_422(self, client):
        response = client.get("/items/not-a-number")

        assert response.status_code == 422
        assert response.json()["error"] == "Validation error"
        assert any("item_id" in e for e in response.json()["errors"])


class TestErrorTypes:
    def test_status_codes(self):
        assert NotFoundError("x").status_code == 404
        assert ConflictError("x").status_code == 409
        assert ValidationFailed("x").status_code == 400
        assert StorageError("x").status_code == 500

    def test_duplicate_is_a_conflict(self):
        error = DuplicateRecordError("User", "username", "alice")
        assert isinstance(error, ConflictError)
        assert error.detail == "User with username 'alice' already exists"
