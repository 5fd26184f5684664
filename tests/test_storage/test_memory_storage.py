"""
Tests specific to the in-memory backend.
"""
import threading
from decimal import Decimal

from storefront.models import ProductCreate
from storefront.storage import MemoryStorage


def _product(name="Desk Lamp"):
    return ProductCreate(name=name, description="LED lamp", price=Decimal("25.00"), category="Home", stock=5)


class TestIsolation:
    """Stored records must not alias caller-held objects."""

    def test_mutating_returned_record_does_not_change_store(self):
        """Test that edits to a returned record are not visible in storage."""
        storage = MemoryStorage()
        product = storage.products.create(_product())

        fetched = storage.products.get_by_id(product.id)
        fetched.images.append("https://img.example/x.jpg")
        fetched.stock = 0

        again = storage.products.get_by_id(product.id)
        assert again.images == []
        assert again.stock == 5

    def test_mutating_raw_document_after_insert_does_not_change_store(self):
        """Test that the collection copies documents on insert."""
        storage = MemoryStorage()
        collection = storage.products.collection
        document = {
            "id": "p-1",
            "name": "Lamp",
            "description": "LED lamp",
            "price": "25.00",
            "category": "Home",
            "images": [],
            "stock": 5,
            "variants": [],
            "created_at": "2024-01-01T00:00:00Z",
        }
        collection.insert(document)

        document["images"].append("changed")

        assert collection.get("p-1")["images"] == []


class TestConcurrency:
    """Concurrent writers must not lose records."""

    def test_parallel_creates_are_all_stored(self):
        """Test that creates from many threads all land."""
        storage = MemoryStorage()

        def worker(n):
            for i in range(20):
                storage.products.create(_product(f"Lamp {n}-{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert storage.products.count() == 100


class TestHealth:
    def test_health_check_lists_collection_sizes(self):
        """Test that health reports per-collection counts."""
        storage = MemoryStorage()
        storage.products.create(_product())

        health = storage.health_check()

        assert health["status"] == "healthy"
        assert health["backend"] == "memory"
        assert health["collections"]["products"] == 1
        assert health["collections"]["users"] == 0
