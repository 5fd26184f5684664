"""
Shopping cart API routes. Every route acts on the current user's cart.
"""
from typing import Any, Dict, List
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.dependencies.services import get_cart_service, get_current_user_id
from storefront.models import CartItem, CartItemRequest, CartItemUpdate, CartLine
from storefront.services import CartService

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Depends = http_adapter.Depends
Response = http_adapter.Response

router_adapter = http_adapter.create_router(prefix="/cart", tags=["cart"])
router = router_adapter.router

logger = logging.getLogger(__name__)


@router.get("", response_model=List[CartLine])
def get_cart(
    user_id: str = Depends(get_current_user_id),
    cart: CartService = Depends(get_cart_service),
) -> List[CartLine]:
    """List cart lines, each with its product."""
    return cart.list_cart(user_id)


@router.post("", response_model=CartItem, status_code=201)
def add_to_cart(
    item: CartItemRequest,
    user_id: str = Depends(get_current_user_id),
    cart: CartService = Depends(get_cart_service),
) -> CartItem:
    """Add a product; an existing line for the same product has its quantity increased."""
    return cart.add_item(user_id, item)


@router.delete("")
def clear_cart(
    user_id: str = Depends(get_current_user_id),
    cart: CartService = Depends(get_cart_service),
) -> Dict[str, Any]:
    removed = cart.clear_cart(user_id)
    return {"success": True, "removed": removed}


@router.put("/{item_id}", response_model=CartItem)
def update_cart_item(
    item_id: str,
    update: CartItemUpdate,
    user_id: str = Depends(get_current_user_id),
    cart: CartService = Depends(get_cart_service),
) -> CartItem:
    """Set the quantity of one cart line."""
    return cart.update_quantity(user_id, item_id, update.quantity)


@router.delete("/{item_id}", status_code=204)
def remove_cart_item(
    item_id: str,
    user_id: str = Depends(get_current_user_id),
    cart: CartService = Depends(get_cart_service),
) -> Response:
    cart.remove_item(user_id, item_id)
    return Response(status_code=204)
