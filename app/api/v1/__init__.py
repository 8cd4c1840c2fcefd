"""API v1 routes."""

from typing import Any

from fastapi import APIRouter, Request

from app.api.v1 import auth, health, proposals

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(proposals.router, prefix="/proposals", tags=["proposals"])


@router.get("", tags=["index"])
def api_index(request: Request) -> dict[str, Any]:
    """Discovery document listing the available endpoints."""
    settings = request.app.state.settings
    prefix = settings.API_V1_PREFIX
    body: dict[str, Any] = {
        "name": request.app.title,
        "version": request.app.version,
        "description": "Budget Management System API",
        "environment": settings.APP_ENV,
        "endpoints": {
            "health": f"GET {prefix}/health",
            "auth": {
                "login": f"POST {prefix}/auth/login",
                "register": f"POST {prefix}/auth/register",
                "profile": f"GET {prefix}/auth/profile",
                "refresh": f"POST {prefix}/auth/refresh",
            },
            "proposals": {"list": f"GET {prefix}/proposals"},
        },
    }
    if settings.DEMO_LOGIN_ENABLED:
        body["demo_credentials"] = {"email": auth.DEMO_EMAIL, "password": auth.DEMO_PASSWORD}
    return body
