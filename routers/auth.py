import hmac
import logging

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from auth_tokens import create_token, decode_token, get_current_admin
from schemas.auth import LoginPayload
from settings import settings

log = logging.getLogger("hotelmol")

auth_router = APIRouter()


def _token_response(subject: str) -> JSONResponse:
    access_token = create_token(token_type="access", subject=subject, ttl_seconds=settings.access_token_ttl_seconds)
    refresh_token = create_token(token_type="refresh", subject=subject, ttl_seconds=settings.refresh_token_ttl_seconds)

    resp = JSONResponse({
        "ok": True,
        "user": subject,
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "expires_in": settings.access_token_ttl_seconds,
    })

    # Set HttpOnly cookies
    resp.set_cookie(
        "access_token",
        access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.access_token_ttl_seconds,
        path="/",
    )
    resp.set_cookie(
        "refresh_token",
        refresh_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.refresh_token_ttl_seconds,
        path="/",
    )
    return resp


def _credentials_match(username: str, password: str) -> bool:
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.admin_user.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
    return user_ok and password_ok


@auth_router.post("/auth/login")
async def login(payload: LoginPayload):
    if not _credentials_match(payload.username, payload.password):
        log.warning("AUTH_FAILED user=%s", payload.username)
        raise HTTPException(401, "Invalid credentials")

    log.info("AUTH_OK user=%s", payload.username)
    return _token_response(settings.admin_user)


@auth_router.post("/auth/refresh")
async def refresh_tokens(request: Request):
    # Refresh using HttpOnly cookie
    refresh_token = request.cookies.get("refresh_token")
    if not refresh_token:
        raise HTTPException(401, "No refresh_token cookie")

    try:
        payload = decode_token(refresh_token)
    except jwt.PyJWTError:
        raise HTTPException(401, "Invalid refresh token")

    if payload.get("type") != "refresh":
        raise HTTPException(401, "Not a refresh token")

    subject = str(payload.get("sub"))
    if subject != settings.admin_user:
        raise HTTPException(401, "Invalid sub")

    return _token_response(subject)


@auth_router.post("/auth/logout")
async def logout():
    resp = JSONResponse({"ok": True})
    resp.delete_cookie("access_token", path="/")
    resp.delete_cookie("refresh_token", path="/")
    return resp


@auth_router.get("/me")
async def me(admin: str = Depends(get_current_admin)):
    return {"user": admin}
