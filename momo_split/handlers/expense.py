"""Handlers for adding and listing expenses."""

import logging
from html import escape

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.handlers.common import member_group, member_names
from momo_split.services.expense_service import ExpenseService
from momo_split.utils.constants import (
    CMD_ADD_EXPENSE, CMD_EXPENSES, CMD_DELETE_EXPENSE,
    ERR_NO_EXPENSE, ERR_NO_PERMISSION,
    SplitType,
)
from momo_split.utils.formatters import format_amount, format_expenses_list, format_usage
from momo_split.utils.splits import SplitError
from momo_split.utils.validators import validate_amount, validate_description, parse_id

logger = logging.getLogger(__name__)

router = Router()

USAGE = "/add_expense <group_id> <amount> <description>"


@router.message(Command(CMD_ADD_EXPENSE))
async def cmd_add_expense(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Add an expense paid by the sender, split equally between all members."""
    parts = (command.args or "").split(maxsplit=2)
    if len(parts) < 3:
        await message.answer(format_usage(USAGE))
        return

    group_id = parse_id(parts[0])
    if group_id is None:
        await message.answer(format_usage(USAGE))
        return

    is_valid, amount, error = validate_amount(parts[1])
    if not is_valid:
        await message.answer(error)
        return

    description = parts[2].strip()
    is_valid, error = validate_description(description)
    if not is_valid:
        await message.answer(error)
        return

    group, error = await member_group(session, group_id, user_id)
    if error:
        await message.answer(error)
        return

    try:
        expense = await ExpenseService(session).create_expense(
            group_id=group.id,
            payer_id=user_id,
            amount=amount,
            currency=group.currency,
            description=description,
            split_type=SplitType.EQUAL,
            splits=[{"member_id": member_id} for member_id in group.member_ids]
        )
    except SplitError as e:
        logger.warning("Rejected expense for group %s: %s", group.id, e)
        await message.answer(f"❌ {e}")
        return

    await message.answer(
        f"✅ Added <b>{escape(expense.description)}</b>: {format_amount(expense.amount, expense.currency)}, "
        f"split between {len(group.member_ids)} members",
        parse_mode="HTML"
    )


@router.message(Command(CMD_EXPENSES))
async def cmd_expenses(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """List active expenses: /expenses <group_id>."""
    group_id = parse_id(command.args)
    if group_id is None:
        await message.answer(format_usage("/expenses <group_id>"))
        return

    group, error = await member_group(session, group_id, user_id)
    if error:
        await message.answer(error)
        return

    expenses = await ExpenseService(session).get_group_expenses(group.id)
    await message.answer(
        format_expenses_list(group, expenses, member_names(group)),
        parse_mode="HTML"
    )


@router.message(Command(CMD_DELETE_EXPENSE))
async def cmd_delete_expense(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Delete an expense: /delete_expense <expense_id>. Payer or group creator only."""
    expense_id = parse_id(command.args)
    if expense_id is None:
        await message.answer(format_usage("/delete_expense <expense_id>"))
        return

    expense_service = ExpenseService(session)
    expense = await expense_service.get_expense(expense_id)
    if not expense:
        await message.answer(ERR_NO_EXPENSE)
        return

    group, error = await member_group(session, expense.group_id, user_id)
    if error:
        await message.answer(error)
        return

    can_delete = await expense_service.can_delete_expense(
        expense.id,
        user_id,
        is_group_creator=group.creator_id == user_id
    )
    if not can_delete:
        await message.answer(ERR_NO_PERMISSION)
        return

    await expense_service.delete_expense(expense.id, user_id)
    await message.answer(
        f"🗑 Expense <b>{escape(expense.description)}</b> deleted",
        parse_mode="HTML"
    )
