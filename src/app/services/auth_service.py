"""Authentication service - credential check and token issuance."""

from src.app.core.logging import get_logger
from src.app.core.security import DUMMY_PASSWORD_HASH, create_access_token, verify_password
from src.app.schemas.auth import LoginResponse
from src.app.storage import Storage

logger = get_logger(__name__)


class AuthService:
    def __init__(self, storage: Storage):
        self.storage = storage

    async def authenticate(self, email: str, password: str) -> LoginResponse | None:
        """Authenticate user and return an access token.

        Returns None if authentication fails for any reason, without saying
        which check failed.
        """
        user = await self.storage.users.get_by_email(email)

        # Always verify a hash so unknown emails take as long as wrong passwords
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid or not user.is_active:
            logger.info("Login failed")
            return None

        logger.info("Login succeeded", user_id=str(user.id))
        return LoginResponse(access_token=create_access_token(user.id))
