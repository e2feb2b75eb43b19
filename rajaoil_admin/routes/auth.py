from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel
import logging

from rajaoil_admin import config
from rajaoil_admin.auth import (
    AUTH_COOKIE,
    authenticate_admin,
    create_signed_cookie,
    get_cookie_settings,
    require_admin_auth,
)

logger = logging.getLogger(__name__)
router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


@router.post("/login")
async def login(request: Request, response: Response, creds: LoginRequest):
    if not authenticate_admin(creds.username, creds.password):
        logger.warning(f"Failed admin login from {request.client.host if request.client else 'unknown'}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    response.set_cookie(key=AUTH_COOKIE, value=create_signed_cookie(), **get_cookie_settings(request))
    logger.info("✅ Admin logged in")
    return {"success": True, "message": "Logged in"}


@router.get("/verify")
async def verify(response: Response, _: bool = Depends(require_admin_auth)):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
    response.headers["Pragma"] = "no-cache"
    return {"success": True, "valid": True, "username": config.ADMIN_USERNAME}


@router.post("/logout")
async def logout(request: Request, response: Response):
    response.set_cookie(key=AUTH_COOKIE, value="", **get_cookie_settings(request, is_delete=True))
    return {"success": True, "message": "Logged out"}
