"""
Order service - placing orders and tracking their status.
This layer contains no HTTP framework dependencies.
"""
import logging
from decimal import Decimal
from typing import Dict, List

from storefront.exceptions import NotFoundError, ValidationFailed
from storefront.models import (
    Order,
    OrderCreate,
    OrderItem,
    OrderRequest,
    OrderStatus,
    Product,
)
from storefront.models.common import round_money
from storefront.storage import StorageInterface

logger = logging.getLogger(__name__)


class OrderService:
    """Service for orders."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def _requested_quantities(self, user_id: str, request: OrderRequest) -> Dict[str, int]:
        """Quantities per product, from the request lines or else from the cart."""
        if request.items:
            lines = [(line.product_id, line.quantity) for line in request.items]
        else:
            lines = [(item.product_id, item.quantity) for item in self.storage.cart_items.list_by_owner(user_id)]
        if not lines:
            raise ValidationFailed("Cannot place an order with no items: the cart is empty")

        quantities: Dict[str, int] = {}
        for product_id, quantity in lines:
            quantities[product_id] = quantities.get(product_id, 0) + quantity
        return quantities

    def place_order(self, user_id: str, request: OrderRequest) -> Order:
        """
        Place an order.

        Every product is looked up and its stock checked before anything is
        written, so a rejected order leaves stock and cart unchanged. Each
        line snapshots the product name and price at purchase time.

        Args:
            user_id: Ordering user
            request: Explicit lines, or no lines to order the cart

        Returns:
            The stored order

        Raises:
            ValidationFailed: Empty order, or a quantity exceeds stock
            NotFoundError: A product does not exist
        """
        quantities = self._requested_quantities(user_id, request)

        products: Dict[str, Product] = {}
        for product_id, quantity in quantities.items():
            product = self.storage.products.get_by_id(product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            if quantity > product.stock:
                raise ValidationFailed(
                    f"Insufficient stock for '{product.name}': "
                    f"requested {quantity}, available {product.stock}"
                )
            products[product_id] = product

        items = [
            OrderItem(
                product_id=product_id,
                name=products[product_id].name,
                quantity=quantity,
                price=products[product_id].price,
            )
            for product_id, quantity in quantities.items()
        ]
        total = round_money(sum((item.price * item.quantity for item in items), Decimal("0")))

        order = self.storage.orders.create(OrderCreate(user_id=user_id, total=total, items=items))

        for item in items:
            product = products[item.product_id]
            self.storage.products.update(product.id, {"stock": product.stock - item.quantity})
        cleared = self.storage.cart_items.clear_by_owner(user_id)

        logger.info(
            f"Placed order {order.id} for user {user_id}: "
            f"{len(items)} line(s), total {total}, {cleared} cart line(s) cleared"
        )
        return order

    def list_orders(self, user_id: str) -> List[Order]:
        return self.storage.orders.list_by_owner(user_id)

    def get_order(self, user_id: str, order_id: str) -> Order:
        order = self.storage.orders.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Set an order's status (any order, by id)."""
        updated = self.storage.orders.update(order_id, {"status": OrderStatus(status)})
        if updated is None:
            raise NotFoundError(f"Order {order_id} not found")
        logger.info(f"Order {order_id} status changed to {updated.status.value}")
        return updated
