"""Middleware that opens one database session per update."""

import logging
from typing import Callable, Dict, Any, Awaitable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from sqlalchemy.exc import SQLAlchemyError

from momo_split.database.session import DatabaseSessionManager, sessionmanager

logger = logging.getLogger(__name__)


class DatabaseMiddleware(BaseMiddleware):
    """
    Inject a session as ``session`` into handler data.

    The session commits after the handler returns and rolls back if it
    raises, so each command is one transaction.
    """

    def __init__(self, manager: DatabaseSessionManager = sessionmanager):
        self.manager = manager

    async def __call__(
            self,
            handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
            event: TelegramObject,
            data: Dict[str, Any],
    ) -> Any:
        async with self.manager.session() as session:
            data["session"] = session
            try:
                return await handler(event, data)
            except SQLAlchemyError:
                logger.exception(
                    "Database error in %s from user %s, rolling back",
                    type(event).__name__, data.get("user_id")
                )
                raise
