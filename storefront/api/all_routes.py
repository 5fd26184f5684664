"""
Aggregates every resource router under the /api prefix.
Route handlers are thin - they just call service layer methods.
"""
from fastapi import APIRouter

from storefront.api.routes.products import router as products_router
from storefront.api.routes.cart import router as cart_router
from storefront.api.routes.orders import router as orders_router
from storefront.api.routes.prototyping import router as prototyping_router
from storefront.api.routes.printing import router as printing_router
from storefront.api.routes.users import router as users_router

# Initialize router
router = APIRouter(prefix="/api")

router.include_router(products_router)
router.include_router(cart_router)
router.include_router(orders_router)
router.include_router(prototyping_router)
router.include_router(printing_router)
router.include_router(users_router)
