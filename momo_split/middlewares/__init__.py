"""Middlewares package."""

from momo_split.middlewares.database import DatabaseMiddleware
from momo_split.middlewares.auth import AuthMiddleware

__all__ = ["DatabaseMiddleware", "AuthMiddleware"]
