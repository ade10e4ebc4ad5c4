"""Handlers for group management."""

from html import escape

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.config.settings import settings
from momo_split.services.group_service import GroupService
from momo_split.handlers.common import member_group
from momo_split.utils.constants import (
    CMD_NEW_GROUP, CMD_JOIN, CMD_GROUPS, CMD_LEAVE, CMD_DELETE_GROUP,
    ERR_NO_GROUP, ERR_NO_PERMISSION,
)
from momo_split.utils.formatters import format_groups_list, format_usage
from momo_split.utils.validators import validate_group_name, validate_currency, parse_id

router = Router()


@router.message(Command(CMD_NEW_GROUP))
async def cmd_new_group(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int,
        full_name: str
):
    """Create a group: /new_group <name> [currency]."""
    if not command.args:
        await message.answer(format_usage("/new_group <name> [currency]"))
        return

    name = command.args.strip()
    currency = settings.default_currency

    # Trailing currency code is optional
    head, _, tail = name.rpartition(" ")
    if head:
        is_currency, code, _ = validate_currency(tail)
        if is_currency:
            name, currency = head.strip(), code

    is_valid, error = validate_group_name(name)
    if not is_valid:
        await message.answer(error)
        return

    group = await GroupService(session).create_group(
        name=name,
        creator_id=user_id,
        creator_name=full_name,
        currency=currency
    )

    await message.answer(
        f"✅ Group <b>{escape(group.name)}</b> created.\n"
        f"ID: <code>{group.id}</code>, currency: {group.currency}\n\n"
        f"Others can join with /join {group.id}",
        parse_mode="HTML"
    )


@router.message(Command(CMD_JOIN))
async def cmd_join(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int,
        full_name: str
):
    """Join a group: /join <group_id>."""
    group_id = parse_id(command.args)
    if group_id is None:
        await message.answer(format_usage("/join <group_id>"))
        return

    group_service = GroupService(session)
    group = await group_service.get_group(group_id)
    if not group:
        await message.answer(ERR_NO_GROUP)
        return

    await group_service.add_member(group.id, user_id, full_name)
    await message.answer(f"✅ You joined <b>{escape(group.name)}</b>", parse_mode="HTML")


@router.message(Command(CMD_GROUPS))
async def cmd_groups(
        message: Message,
        session: AsyncSession,
        user_id: int
):
    """List the user's groups."""
    groups = await GroupService(session).get_user_groups(user_id)
    await message.answer(format_groups_list(groups), parse_mode="HTML")


@router.message(Command(CMD_LEAVE))
async def cmd_leave(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Leave a group: /leave <group_id>. The creator stays."""
    group_id = parse_id(command.args)
    if group_id is None:
        await message.answer(format_usage("/leave <group_id>"))
        return

    group, error = await member_group(session, group_id, user_id)
    if error:
        await message.answer(error)
        return
    if group.creator_id == user_id:
        await message.answer("❌ The creator cannot leave the group. Use /delete_group instead")
        return

    await GroupService(session).remove_member(group.id, user_id)
    await message.answer(f"✅ You left <b>{escape(group.name)}</b>", parse_mode="HTML")


@router.message(Command(CMD_DELETE_GROUP))
async def cmd_delete_group(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Delete a group: /delete_group <group_id>. Creator only."""
    group_id = parse_id(command.args)
    if group_id is None:
        await message.answer(format_usage("/delete_group <group_id>"))
        return

    group_service = GroupService(session)
    group = await group_service.get_group(group_id)
    if not group:
        await message.answer(ERR_NO_GROUP)
        return
    if not await group_service.is_creator(group.id, user_id):
        await message.answer(ERR_NO_PERMISSION)
        return

    await group_service.delete_group(group.id)
    await message.answer(f"🗑 Group <b>{escape(group.name)}</b> deleted", parse_mode="HTML")
