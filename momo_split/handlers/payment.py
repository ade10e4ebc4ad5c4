"""Handlers for payments that wait for the recipient's confirmation."""

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.handlers.common import parse_transfer, transfer_group
from momo_split.services.payment_service import PaymentService
from momo_split.utils.constants import (
    CMD_PAY, CMD_REQUEST, CMD_CONFIRM, CMD_CANCEL,
    ERR_NO_PAYMENT, ERR_NO_PERMISSION,
    PaymentType,
)
from momo_split.utils.formatters import format_amount, format_usage
from momo_split.utils.validators import parse_id

router = Router()


@router.message(Command(CMD_PAY))
async def cmd_pay(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Send a payment to a member: /pay <group_id> <user_id> <amount>."""
    transfer, error = parse_transfer(command.args, "/pay <group_id> <user_id> <amount>")
    if error:
        await message.answer(error)
        return
    group_id, to_user_id, amount = transfer

    group, error = await transfer_group(session, group_id, user_id, to_user_id)
    if error:
        await message.answer(error)
        return

    payment = await PaymentService(session).create_payment(
        from_user_id=user_id,
        to_user_id=to_user_id,
        amount=amount,
        currency=group.currency,
        group_id=group.id,
        payment_type=PaymentType.SETTLEMENT
    )

    await message.answer(
        f"⏳ Payment <code>{payment.id}</code> of {format_amount(amount, group.currency)} is pending.\n"
        f"The recipient confirms it with /confirm {payment.id}",
        parse_mode="HTML"
    )


@router.message(Command(CMD_REQUEST))
async def cmd_request(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Ask a member to pay you: /request <group_id> <user_id> <amount>."""
    transfer, error = parse_transfer(command.args, "/request <group_id> <user_id> <amount>")
    if error:
        await message.answer(error)
        return
    group_id, from_user_id, amount = transfer

    group, error = await transfer_group(session, group_id, user_id, from_user_id)
    if error:
        await message.answer(error)
        return

    payment = await PaymentService(session).create_payment(
        from_user_id=from_user_id,
        to_user_id=user_id,
        amount=amount,
        currency=group.currency,
        group_id=group.id,
        payment_type=PaymentType.REQUEST
    )

    await message.answer(
        f"📨 Request <code>{payment.id}</code> for {format_amount(amount, group.currency)} created.\n"
        f"Confirm it with /confirm {payment.id} once the money arrives",
        parse_mode="HTML"
    )


@router.message(Command(CMD_CONFIRM))
async def cmd_confirm(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Confirm a payment you received: /confirm <payment_id>."""
    payment_id = parse_id(command.args)
    if payment_id is None:
        await message.answer(format_usage("/confirm <payment_id>"))
        return

    payment_service = PaymentService(session)
    payment = await payment_service.get_payment(payment_id)
    if not payment:
        await message.answer(ERR_NO_PAYMENT)
        return
    if payment.to_user_id != user_id:
        await message.answer(ERR_NO_PERMISSION)
        return

    if not await payment_service.complete_payment(payment.id):
        await message.answer(f"❌ Payment {payment.id} is already {payment.status}")
        return

    await message.answer(
        f"✅ Payment {payment.id} of {format_amount(payment.amount, payment.currency)} confirmed"
    )


@router.message(Command(CMD_CANCEL))
async def cmd_cancel(
        message: Message,
        command: CommandObject,
        session: AsyncSession,
        user_id: int
):
    """Cancel a pending payment: /cancel <payment_id>. Either party may cancel."""
    payment_id = parse_id(command.args)
    if payment_id is None:
        await message.answer(format_usage("/cancel <payment_id>"))
        return

    payment_service = PaymentService(session)
    payment = await payment_service.get_payment(payment_id)
    if not payment:
        await message.answer(ERR_NO_PAYMENT)
        return
    if user_id not in (payment.from_user_id, payment.to_user_id):
        await message.answer(ERR_NO_PERMISSION)
        return

    if not await payment_service.cancel_payment(payment.id):
        await message.answer("❌ Completed payments cannot be cancelled")
        return

    await message.answer(f"🚫 Payment {payment.id} cancelled")
