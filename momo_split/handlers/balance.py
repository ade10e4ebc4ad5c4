"""Handlers for balances and settling up."""

import logging
from html import escape

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.config.settings import settings
from momo_split.handlers.common import member_group, member_names, parse_transfer, transfer_group
from momo_split.schemas import Debt
from momo_split.services.calculation_service import CalculationService
from momo_split.services.payment_service import PaymentService
from momo_split.utils.constants import (
    CMD_BALANCES, CMD_SIMPLIFY, CMD_SETTLE,
    ERR_CALCULATION,
    PaymentMethod,
)
from momo_split.utils.debts import apply_debts, simplify_debts
from momo_split.utils.formatters import format_balances, format_debts, format_amount, format_usage
from momo_split.utils.validators import parse_id

logger = logging.getLogger(__name__)

router = Router()


@router.message(Command(CMD_BALANCES))
async def cmd_balances(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Show net balance of every member: /balances <group_id>."""
    group_id = parse_id(command.args)
    if group_id is None:
        await message.answer(format_usage("/balances <group_id>"))
        return

    group, error = await member_group(session, group_id, user_id)
    if error:
        await message.answer(error)
        return

    try:
        balances = await CalculationService(session).get_group_balances(group.id)
    except (SQLAlchemyError, ValueError):
        logger.exception("Failed to calculate balances for group %s", group.id)
        await message.answer(ERR_CALCULATION)
        return

    await message.answer(
        format_balances(group, balances, member_names(group)),
        parse_mode="HTML"
    )


@router.message(Command(CMD_SIMPLIFY))
async def cmd_simplify(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Show who pays whom: /simplify <group_id>."""
    group_id = parse_id(command.args)
    if group_id is None:
        await message.answer(format_usage("/simplify <group_id>"))
        return

    group, error = await member_group(session, group_id, user_id)
    if error:
        await message.answer(error)
        return

    try:
        debts = await CalculationService(session).get_simplified_debts(group.id)
    except (SQLAlchemyError, ValueError):
        logger.exception("Failed to simplify debts for group %s", group.id)
        await message.answer(ERR_CALCULATION)
        return

    await message.answer(
        format_debts(group, debts, member_names(group)),
        parse_mode="HTML"
    )


@router.message(Command(CMD_SETTLE))
async def cmd_settle(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """
    Record a completed payment to another member and show what is left to settle:
    /settle <group_id> <user_id> <amount>.
    """
    transfer, error = parse_transfer(command.args, "/settle <group_id> <user_id> <amount>")
    if error:
        await message.answer(error)
        return
    group_id, to_user_id, amount = transfer

    group, error = await transfer_group(session, group_id, user_id, to_user_id)
    if error:
        await message.answer(error)
        return

    # Balances before this payment; the payment is applied on top of them
    try:
        balances = await CalculationService(session).get_group_balances(group.id)
    except (SQLAlchemyError, ValueError):
        logger.exception("Failed to calculate balances for group %s", group.id)
        await message.answer(ERR_CALCULATION)
        return

    await PaymentService(session).create_payment(
        from_user_id=user_id,
        to_user_id=to_user_id,
        amount=amount,
        currency=group.currency,
        group_id=group.id,
        payment_method=PaymentMethod.CASH,
        completed=True
    )

    paid = Debt(from_user_id=user_id, to_user_id=to_user_id, amount=amount, currency=group.currency)
    remaining = apply_debts({b.user_id: b.balance for b in balances}, [paid])
    debts = simplify_debts(
        remaining,
        currency=group.currency,
        group_id=group.id,
        strategy=settings.settlement_strategy
    )

    names = member_names(group)
    await message.answer(
        f"✅ Recorded {format_amount(amount, group.currency)} "
        f"from {escape(str(names.get(user_id, user_id)))} to {escape(str(names.get(to_user_id, to_user_id)))}\n\n"
        f"{format_debts(group, debts, names)}",
        parse_mode="HTML"
    )
