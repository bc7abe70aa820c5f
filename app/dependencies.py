import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlmodel.ext.asyncio.session import AsyncSession
from typing_extensions import Annotated

from app.core.config import SettingsDep
from app.core.errors import TooManyRequests, Unauthorized
from app.core.security import InvalidToken, verify_token
from app.database import get_db
from app.models import User
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def enforce_rate_limit(request: Request):
    """Count the request against the per-IP limit of the API router."""
    limiter: Limiter = request.app.state.limiter
    client = get_remote_address(request)
    if not limiter.limiter.hit(request.app.state.rate_limit, "api", client):
        logger.warning(f"Rate limit exceeded for {client}")
        raise TooManyRequests()


async def get_current_user(
    db: DbSession,
    settings: SettingsDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """Resolve the bearer token on the request to a stored user."""
    if credentials is None:
        raise Unauthorized("Not authorized, no token")

    try:
        user_id = verify_token(credentials.credentials, settings)
    except InvalidToken as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise Unauthorized("Not authorized, token failed")

    user = await AuthService.get_user(user_id, db)
    if user is None:
        raise Unauthorized("Not authorized, user not found")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
