import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import Settings
from app.core.errors import DuplicateEmail, InvalidCredentials
from app.core.security import create_access_token, hash_password, verify_password
from app.models import User
from app.schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    async def get_user_by_email(email: str, db: AsyncSession):
        result = await db.exec(select(User).where(User.email == email))
        return result.first()

    @staticmethod
    async def get_user(user_id: str, db: AsyncSession):
        return await db.get(User, user_id)

    @staticmethod
    async def register(data: RegisterRequest, db: AsyncSession, settings: Settings):
        """Create a user and return ``(user, token)``."""
        if await AuthService.get_user_by_email(data.email, db):
            raise DuplicateEmail()

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same e-mail
            await db.rollback()
            raise DuplicateEmail()
        await db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user, create_access_token(user.id, settings)

    @staticmethod
    async def login(data: LoginRequest, db: AsyncSession, settings: Settings):
        """Return ``(user, token)``; unknown e-mail and wrong password fail alike."""
        user = await AuthService.get_user_by_email(data.email, db)
        stored_hash = user.password_hash if user else None
        if not verify_password(data.password, stored_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()
        return user, create_access_token(user.id, settings)
