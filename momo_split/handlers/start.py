"""Handlers for start and help commands."""

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from momo_split.utils.constants import MSG_WELCOME, MSG_HELP, CMD_HELP

router = Router()


@router.message(CommandStart())
async def cmd_start(message: Message):
    """Handle /start command."""
    await message.answer(MSG_WELCOME)


@router.message(Command(CMD_HELP))
async def cmd_help(message: Message):
    """Handle /help command."""
    await message.answer(MSG_HELP, parse_mode="HTML")
