import time
from typing import Dict, Any, Literal

import jwt
from fastapi import HTTPException, Request

from settings import settings

TokenType = Literal["access", "refresh"]


def _now() -> int:
    return int(time.time())


def create_token(*, token_type: TokenType, subject: str, ttl_seconds: int) -> str:
    payload: Dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "iat": _now(),
        "exp": _now() + int(ttl_seconds),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def _get_access_token(request: Request) -> str | None:
    auth = request.headers.get("authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip()
    return request.cookies.get("access_token")


def get_current_admin(request: Request) -> str:
    """FastAPI dependency: the admin username from a valid access token."""
    token = _get_access_token(request)
    if not token:
        raise HTTPException(401, "Missing access token")

    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise HTTPException(401, "Invalid access token")

    if payload.get("type") != "access":
        raise HTTPException(401, "Not an access token")

    sub = payload.get("sub")
    if not sub or sub != settings.admin_user:
        raise HTTPException(401, "Invalid sub")

    return sub
