"""Database package."""

from momo_split.database.base import Base
from momo_split.database.session import sessionmanager, get_db_session
from momo_split.database import models

__all__ = ["Base", "sessionmanager", "get_db_session", "models"]
