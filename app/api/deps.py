"""Dependencies that expose objects created at startup (held on app.state)."""

from fastapi import Request

from app.core.cache import Cache
from app.core.config import Settings
from app.core.database import Database
from app.core.security import TokenIssuer


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_cache(request: Request) -> Cache | None:
    return request.app.state.cache
