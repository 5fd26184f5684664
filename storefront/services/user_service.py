"""
User service - registration, lookup and password checks.
This layer contains no HTTP framework dependencies.
"""
import logging
import secrets
from typing import Optional

import bcrypt

from storefront.exceptions import DuplicateRecordError, NotFoundError, ValidationFailed
from storefront.models import Role, User, UserCreate, UserRegister
from storefront.storage import StorageInterface

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    encoded = password.encode('utf-8')
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationFailed(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash
        return False


class UserService:
    """Service for user accounts."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def register(self, data: UserRegister, role: Role = Role.CUSTOMER) -> User:
        """
        Register a new user.

        Args:
            data: Validated registration data (plain password)
            role: Role of the new account

        Returns:
            The stored user

        Raises:
            DuplicateRecordError: If the username or email is taken
        """
        if self.storage.users.get_by_username(data.username):
            raise DuplicateRecordError("User", "username", data.username)
        if self.storage.users.get_by_email(data.email):
            raise DuplicateRecordError("User", "email", data.email)

        user = self.storage.users.create(UserCreate(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            full_name=data.full_name,
            address=data.address,
            role=role,
        ))
        logger.info(f"Registered user {user.id} with username '{user.username}'")
        return user

    def get_user(self, user_id: str) -> User:
        user = self.storage.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user if ``password`` matches, else None."""
        user = self.storage.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed password check for username '{username}'")
            return None
        return user

    def ensure_user(self, username: str, email: str, full_name: str) -> User:
        """Get the user named ``username``, creating it with a random password if absent."""
        existing = self.storage.users.get_by_username(username)
        if existing is not None:
            return existing
        return self.register(UserRegister(
            username=username,
            email=email,
            password=secrets.token_urlsafe(24),
            full_name=full_name,
        ))
