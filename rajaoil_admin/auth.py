"""
Single admin authentication.

The credentials come from the environment. A successful login sets a signed
cookie that carries only its expiry timestamp: `<payload_b64>.<hmac_sha256_b64>`.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import base64
import hashlib
import hmac
import json

from fastapi import HTTPException, Request

from rajaoil_admin import config

AUTH_COOKIE = "auth_token"


def authenticate_admin(username: str, password: str) -> bool:
    return (
        hmac.compare_digest((username or "").encode(), config.ADMIN_USERNAME.encode())
        and hmac.compare_digest((password or "").encode(), config.ADMIN_PASSWORD.encode())
    )


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _b64decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _sign(payload_b64: str) -> str:
    digest = hmac.new(config.SECRET_KEY.encode(), payload_b64.encode(), hashlib.sha256).digest()
    return _b64encode(digest)


def create_signed_cookie(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    expiry = now + timedelta(hours=config.SESSION_DURATION_HOURS)
    payload = json.dumps({"exp": int(expiry.timestamp())}, separators=(",", ":"))
    payload_b64 = _b64encode(payload.encode())
    return f"{payload_b64}.{_sign(payload_b64)}"


def verify_signed_cookie(cookie_value: str, now: Optional[datetime] = None) -> bool:
    if not cookie_value or cookie_value.count(".") != 1:
        return False
    payload_b64, signature_b64 = cookie_value.split(".")
    if not hmac.compare_digest(signature_b64.encode(), _sign(payload_b64).encode()):
        return False
    try:
        payload = json.loads(_b64decode(payload_b64))
        expiry = int(payload["exp"])
    except (ValueError, KeyError, TypeError):
        return False
    now = now or datetime.now(timezone.utc)
    return int(now.timestamp()) <= expiry


def get_cookie_settings(request: Request, is_delete: bool = False) -> dict:
    """Cookie flags depending on where the API is served from."""
    hostname = request.url.hostname or ""
    is_production = hostname not in ("localhost", "127.0.0.1", "testserver")
    settings = {
        "httponly": True,
        "secure": is_production,
        "samesite": "none" if is_production else "lax",
    }
    settings["max_age"] = 0 if is_delete else config.SESSION_DURATION_HOURS * 3600
    return settings


async def require_admin_auth(request: Request) -> bool:
    """
    FastAPI dependency guarding every admin route.
    """
    auth_token = request.cookies.get(AUTH_COOKIE)
    if not auth_token:
        raise HTTPException(status_code=401, detail="Authentication required")
    if not verify_signed_cookie(auth_token):
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return True
