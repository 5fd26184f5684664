"""
Order API routes.
"""
from typing import List, Optional
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.dependencies.services import get_current_user_id, get_order_service
from storefront.models import Order, OrderRequest, OrderStatusUpdate
from storefront.services import OrderService

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Depends = http_adapter.Depends

router_adapter = http_adapter.create_router(prefix="/orders", tags=["orders"])
router = router_adapter.router

logger = logging.getLogger(__name__)


@router.get("", response_model=List[Order])
def list_orders(
    user_id: str = Depends(get_current_user_id),
    orders: OrderService = Depends(get_order_service),
) -> List[Order]:
    return orders.list_orders(user_id)


@router.post("", response_model=Order, status_code=201)
def place_order(
    request: Optional[OrderRequest] = None,
    user_id: str = Depends(get_current_user_id),
    orders: OrderService = Depends(get_order_service),
) -> Order:
    """
    Place an order from explicit items, or from the cart when no items are
    given. Stock is decremented and the cart is cleared.
    """
    return orders.place_order(user_id, request or OrderRequest())


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
    orders: OrderService = Depends(get_order_service),
) -> Order:
    return orders.get_order(user_id, order_id)


@router.put("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    orders: OrderService = Depends(get_order_service),
) -> Order:
    return orders.update_status(order_id, update.status)
