from __future__ import annotations

from typing import Protocol

from fastapi import Depends, Request

from app.core.config import settings
from app.core.errors import NotAuthenticatedError
from app.core.security import decode_access_token


class IdentityResolver(Protocol):
    def resolve(self, request: Request) -> str | None: ...


class HeaderIdentityResolver:
    """Trusts an identity header set by an authenticating reverse proxy."""

    def __init__(self, header_name: str):
        self.header_name = header_name

    def resolve(self, request: Request) -> str | None:
        value = request.headers.get(self.header_name)
        if value and value.strip():
            return value.strip()
        return None


class TokenIdentityResolver:
    def __init__(self, cookie_name: str = "access_token"):
        self.cookie_name = cookie_name

    def resolve(self, request: Request) -> str | None:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        payload = decode_access_token(token)
        if not payload:
            return None
        return payload.get("email") or payload.get("sub")


class StaticIdentityResolver:
    """Development resolver: every request is the same user."""

    def __init__(self, identity: str):
        self.identity = identity

    def resolve(self, request: Request) -> str | None:
        return self.identity


def build_identity_resolver(mode: str) -> IdentityResolver:
    if mode == "header":
        return HeaderIdentityResolver(settings.AUTH_HEADER_NAME)
    if mode == "token":
        return TokenIdentityResolver()
    if mode == "static":
        return StaticIdentityResolver(settings.DEV_USER_EMAIL)
    raise ValueError(f"Unsupported AUTH_MODE: {mode}")


def get_identity_resolver() -> IdentityResolver:
    return build_identity_resolver(settings.AUTH_MODE)


async def require_current_user(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> str:
    user_id = resolver.resolve(request)
    if not user_id:
        raise NotAuthenticatedError()
    request.state.user_id = user_id
    return user_id
