# pos_api/core/jwt.py
# Signed, time-limited operator credentials.

from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from pos_api.core.config import settings

TOKEN_TYPE = "access"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    claims = dict(data)
    claims["exp"] = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims["type"] = TOKEN_TYPE

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_operator_token(user) -> str:
    return create_access_token(
        {"sub": str(user.id), "username": user.username, "role": user.role}
    )


def decode_access_token(token: str) -> dict | None:
    """Return the claims of a valid access token, None for anything else."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if claims.get("type") != TOKEN_TYPE or not claims.get("sub"):
        return None

    return claims
