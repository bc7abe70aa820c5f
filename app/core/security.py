from datetime import datetime, timedelta, timezone

import jwt
from pwdlib import PasswordHash

from app.core.config import Settings

password_hash = PasswordHash.recommended()

# Verified against when the e-mail is unknown so both login failures cost the same.
_DUMMY_HASH = password_hash.hash("dummy-password-for-timing")


class InvalidToken(Exception):
    """Token is expired, malformed, or signed with another key."""


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if hashed_password is None:
        password_hash.verify(plain_password, _DUMMY_HASH)
        return False
    return password_hash.verify(plain_password, hashed_password)


def create_access_token(
    subject: str, settings: Settings, expires_delta: timedelta | None = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> str:
    """Return the user id encoded in ``token``."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidToken("Invalid token") from e

    subject = payload["sub"]
    if not isinstance(subject, str) or not subject:
        raise InvalidToken("Invalid token subject")
    return subject
