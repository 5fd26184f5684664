"""
Tests for OrderService.
"""
from decimal import Decimal

import pytest

from storefront.exceptions import NotFoundError, ValidationFailed
from storefront.models import (
    CartItemRequest,
    OrderLineRequest,
    OrderRequest,
    OrderStatus,
    ProductCreate,
)
from storefront.services import CartService, OrderService


@pytest.fixture
def order_service(memory_storage):
    return OrderService(memory_storage)


@pytest.fixture
def cart_service(memory_storage):
    return CartService(memory_storage)


def make_product(storage, name, price, stock):
    return storage.products.create(ProductCreate(
        name=name, description=f"{name} description", price=Decimal(price), category="Misc", stock=stock,
    ))


class TestPlaceOrder:
    """Tests for place_order method."""

    def test_order_from_cart(self, order_service, cart_service, memory_storage):
        """Test that an empty request orders the cart, decrements stock and clears the cart."""
        # Setup
        watch = make_product(memory_storage, "Watch", "299.99", 30)
        lens = make_product(memory_storage, "Lens", "799.99", 15)
        cart_service.add_item("u1", CartItemRequest(product_id=watch.id, quantity=2))
        cart_service.add_item("u1", CartItemRequest(product_id=lens.id, quantity=1))

        # Execute
        order = order_service.place_order("u1", OrderRequest())

        # Verify
        assert order.status == OrderStatus.PENDING
        assert order.total == Decimal("1399.97")
        assert {(i.name, i.quantity, i.price) for i in order.items} == {
            ("Watch", 2, Decimal("299.99")),
            ("Lens", 1, Decimal("799.99")),
        }
        assert memory_storage.products.get_by_id(watch.id).stock == 28
        assert memory_storage.products.get_by_id(lens.id).stock == 14
        assert cart_service.list_cart("u1") == []

    def test_explicit_lines_are_aggregated(self, order_service, memory_storage):
        """Test that repeated lines for one product become one order line."""
        watch = make_product(memory_storage, "Watch", "10.00", 5)

        order = order_service.place_order("u1", OrderRequest(items=[
            OrderLineRequest(product_id=watch.id, quantity=1),
            OrderLineRequest(product_id=watch.id, quantity=2),
        ]))

        assert len(order.items) == 1
        assert order.items[0].quantity == 3
        assert order.total == Decimal("30.00")

    def test_explicit_order_still_clears_cart(self, order_service, cart_service, memory_storage):
        watch = make_product(memory_storage, "Watch", "10.00", 5)
        cart_service.add_item("u1", CartItemRequest(product_id=watch.id))

        order_service.place_order("u1", OrderRequest(items=[OrderLineRequest(product_id=watch.id)]))

        assert cart_service.list_cart("u1") == []

    def test_empty_cart_rejected(self, order_service, memory_storage):
        with pytest.raises(ValidationFailed, match="no items"):
            order_service.place_order("u1", OrderRequest())
        assert memory_storage.orders.count() == 0

    def test_insufficient_stock_changes_nothing(self, order_service, cart_service, memory_storage):
        """Test that a rejected order leaves stock, cart and orders untouched."""
        watch = make_product(memory_storage, "Watch", "10.00", 5)
        lens = make_product(memory_storage, "Lens", "20.00", 1)
        cart_service.add_item("u1", CartItemRequest(product_id=watch.id, quantity=1))
        cart_service.add_item("u1", CartItemRequest(product_id=lens.id, quantity=2))

        with pytest.raises(ValidationFailed, match="Insufficient stock for 'Lens'"):
            order_service.place_order("u1", OrderRequest())

        assert memory_storage.products.get_by_id(watch.id).stock == 5
        assert memory_storage.products.get_by_id(lens.id).stock == 1
        assert len(cart_service.list_cart("u1")) == 2
        assert memory_storage.orders.count() == 0

    def test_unknown_product_rejected(self, order_service):
        with pytest.raises(NotFoundError):
            order_service.place_order("u1", OrderRequest(items=[OrderLineRequest(product_id="gone")]))

    def test_price_snapshot_survives_product_edit(self, order_service, memory_storage):
        """Test that order lines keep the price paid after the product changes."""
        watch = make_product(memory_storage, "Watch", "10.00", 5)
        order = order_service.place_order("u1", OrderRequest(items=[OrderLineRequest(product_id=watch.id)]))

        memory_storage.products.update(watch.id, {"price": Decimal("99.00"), "name": "Watch v2"})

        stored = order_service.get_order("u1", order.id)
        assert stored.items[0].price == Decimal("10.00")
        assert stored.items[0].name == "Watch"


class TestOrderQueries:
    def test_orders_are_owner_scoped(self, order_service, memory_storage):
        watch = make_product(memory_storage, "Watch", "10.00", 5)
        order = order_service.place_order("u1", OrderRequest(items=[OrderLineRequest(product_id=watch.id)]))

        assert [o.id for o in order_service.list_orders("u1")] == [order.id]
        assert order_service.list_orders("u2") == []
        with pytest.raises(NotFoundError):
            order_service.get_order("u2", order.id)

    def test_update_status(self, order_service, memory_storage):
        watch = make_product(memory_storage, "Watch", "10.00", 5)
        order = order_service.place_order("u1", OrderRequest(items=[OrderLineRequest(product_id=watch.id)]))

        updated = order_service.update_status(order.id, "shipped")

        assert updated.status == OrderStatus.SHIPPED
        assert updated.updated_at >= order.updated_at

    def test_update_status_unknown_order(self, order_service):
        with pytest.raises(NotFoundError):
            order_service.update_status("missing", OrderStatus.CANCELLED)
