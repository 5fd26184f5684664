"""
User API routes.
"""
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.dependencies.services import get_user_service
from storefront.models import UserRegister, UserResponse
from storefront.services import UserService

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Depends = http_adapter.Depends

router_adapter = http_adapter.create_router(prefix="/users", tags=["users"])
router = router_adapter.router

logger = logging.getLogger(__name__)


@router.post("", response_model=UserResponse, status_code=201)
def register_user(
    data: UserRegister,
    users: UserService = Depends(get_user_service),
) -> UserResponse:
    """Register a customer account. Username and email must be unused."""
    return UserResponse.from_user(users.register(data))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse.from_user(users.get_user(user_id))
