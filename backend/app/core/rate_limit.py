from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


def user_rate_limit_key(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return f"anon:{get_remote_address(request)}"


limiter = Limiter(key_func=user_rate_limit_key, enabled=settings.RATE_LIMIT_ENABLED)
