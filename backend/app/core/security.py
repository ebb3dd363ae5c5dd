from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from app.core.config import settings

ACCESS_TOKEN_EXPIRE_MINUTES = 15


def _secret_key() -> str:
    if not settings.JWT_SECRET_KEY:
        raise ValueError("JWT_SECRET_KEY is required when AUTH_MODE is 'token'.")
    return settings.JWT_SECRET_KEY

def create_access_token(email: str, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    """Mint the `access_token` cookie value that TokenIdentityResolver accepts (for the login front end or scripts)."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    payload = {"sub": email, "email": email, "exp": expire, "type": "access"}
    return jwt.encode(payload, _secret_key(), algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[settings.JWT_ALGORITHM])
        if payload.get("type") != "access":
            return None
        return payload
    except JWTError:
        return None
