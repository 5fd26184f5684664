"""
Cart service - a user's cart lines.
"""
import logging
from typing import List

from storefront.exceptions import NotFoundError, ValidationFailed
from storefront.models import CartItem, CartItemCreate, CartItemRequest, CartLine
from storefront.storage import StorageInterface

logger = logging.getLogger(__name__)


class CartService:
    """Service for shopping carts."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def _owned_item(self, user_id: str, item_id: str) -> CartItem:
        item = self.storage.cart_items.get_by_id(item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError(f"Cart item {item_id} not found")
        return item

    def list_cart(self, user_id: str) -> List[CartLine]:
        """List the user's cart lines, each joined with its current product."""
        lines = []
        for item in self.storage.cart_items.list_by_owner(user_id):
            product = self.storage.products.get_by_id(item.product_id)
            lines.append(CartLine(**item.model_dump(), product=product))
        return lines

    def add_item(self, user_id: str, request: CartItemRequest) -> CartItem:
        """
        Add a product to the cart.

        Adding a product that is already in the cart increases that line's
        quantity instead of creating a second line.

        Raises:
            NotFoundError: If the product does not exist
        """
        if self.storage.products.get_by_id(request.product_id) is None:
            raise NotFoundError(f"Product {request.product_id} not found")

        for item in self.storage.cart_items.list_by_owner(user_id):
            if item.product_id == request.product_id:
                updated = self.storage.cart_items.update(
                    item.id, {"quantity": item.quantity + request.quantity}
                )
                if updated is not None:
                    logger.info(f"Increased cart line {item.id} to quantity {updated.quantity}")
                    return updated

        return self.storage.cart_items.create(CartItemCreate(
            user_id=user_id,
            product_id=request.product_id,
            quantity=request.quantity,
        ))

    def update_quantity(self, user_id: str, item_id: str, quantity: int) -> CartItem:
        if quantity < 1:
            raise ValidationFailed("Quantity must be at least 1")
        self._owned_item(user_id, item_id)
        updated = self.storage.cart_items.update(item_id, {"quantity": quantity})
        if updated is None:
            raise NotFoundError(f"Cart item {item_id} not found")
        return updated

    def remove_item(self, user_id: str, item_id: str) -> None:
        self._owned_item(user_id, item_id)
        if not self.storage.cart_items.delete(item_id):
            raise NotFoundError(f"Cart item {item_id} not found")

    def clear_cart(self, user_id: str) -> int:
        """Remove every line from the user's cart; returns how many were removed."""
        return self.storage.cart_items.clear_by_owner(user_id)
