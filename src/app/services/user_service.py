"""Identity store operations - registration and lookup."""

from uuid import UUID

from src.app.core.exceptions import ConflictError
from src.app.core.logging import get_logger
from src.app.core.security import hash_password
from src.app.models import User
from src.app.storage import Storage

logger = get_logger(__name__)


class UserService:
    """User management service."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self.storage.users.get_by_id(user_id)

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a user. Username and email must both be unused."""
        try:
            if await self.storage.users.get_by_username(username) is not None:
                raise ConflictError("Username is already taken")
            if await self.storage.users.get_by_email(email) is not None:
                raise ConflictError("Email is already registered")

            user = User(
                username=username,
                email=email,
                hashed_password=hash_password(password),
            )
            self.storage.users.add(user)
            # The unique indexes settle concurrent registrations
            await self.storage.commit()
        except ConflictError:
            await self.storage.rollback()
            raise
        except Exception as e:
            await self.storage.rollback()
            logger.error("Failed to register user", error=str(e))
            raise

        logger.info("User registered", user_id=str(user.id), username=username)
        return user
