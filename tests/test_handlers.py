"""Tests for bot command handlers."""

import logging
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from aiogram.filters import CommandObject
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from momo_split.database.models import Payment
from momo_split.handlers.balance import cmd_balances, cmd_settle, cmd_simplify
from momo_split.handlers.expense import cmd_add_expense, cmd_delete_expense, cmd_expenses
from momo_split.handlers.group import cmd_delete_group, cmd_join, cmd_leave, cmd_new_group
from momo_split.handlers.payment import cmd_cancel, cmd_confirm, cmd_pay, cmd_request
from momo_split.services.calculation_service import CalculationService
from momo_split.services.expense_service import ExpenseService
from momo_split.services.group_service import GroupService
from momo_split.services.payment_service import PaymentService
from momo_split.utils.constants import (
    ERR_CALCULATION, ERR_NO_EXPENSE, ERR_NO_GROUP, ERR_NO_PAYMENT,
    ERR_NO_PERMISSION, ERR_NOT_MEMBER, ERR_NOT_RECIPIENT,
    PaymentStatus, PaymentType,
)


def make_message():
    message = MagicMock()
    message.answer = AsyncMock()
    return message


def command(name, args=None):
    return CommandObject(prefix="/", command=name, args=args)


def answer_text(message):
    return message.answer.await_args.args[0]


async def run(handler, name, args, session, user_id, **kwargs):
    """Call a handler and return its reply."""
    message = make_message()
    await handler(message, command(name, args), session, user_id=user_id, **kwargs)
    return answer_text(message)


async def all_payments(session):
    result = await session.execute(select(Payment).order_by(Payment.id))
    return list(result.scalars().all())


async def balance_map(session, group_id):
    balances = await CalculationService(session).get_group_balances(group_id)
    return {b.user_id: b.balance for b in balances}


class TestGroupHandlers:
    """Group creation, joining and leaving."""

    async def test_new_group_with_currency(self, session):
        reply = await run(cmd_new_group, "new_group", "Road trip kes", session, 5, full_name="Eve")

        groups = await GroupService(session).get_user_groups(5)
        assert [(g.name, g.currency) for g in groups] == [("Road trip", "KES")]
        assert "Road trip" in reply

    async def test_new_group_without_args(self, session):
        reply = await run(cmd_new_group, "new_group", None, session, 5, full_name="Eve")

        assert "Usage" in reply
        assert await GroupService(session).get_user_groups(5) == []

    async def test_join(self, session, group):
        await run(cmd_join, "join", str(group.id), session, 8, full_name="Hal")

        assert await GroupService(session).is_member(group.id, 8)

    async def test_join_missing_group(self, session):
        reply = await run(cmd_join, "join", "999", session, 8, full_name="Hal")

        assert reply == ERR_NO_GROUP

    async def test_leave(self, session, group):
        """A member leaves; the creator cannot."""
        reply = await run(cmd_leave, "leave", str(group.id), session, 2)

        assert "You left" in reply
        assert not await GroupService(session).is_member(group.id, 2)

        reply = await run(cmd_leave, "leave", str(group.id), session, 1)

        assert "creator cannot leave" in reply
        assert await GroupService(session).is_member(group.id, 1)

    async def test_leave_twice(self, session, group):
        await run(cmd_leave, "leave", str(group.id), session, 2)

        assert await run(cmd_leave, "leave", str(group.id), session, 2) == ERR_NOT_MEMBER

    async def test_delete_group_by_creator_only(self, session, group):
        assert await run(cmd_delete_group, "delete_group", str(group.id), session, 2) == ERR_NO_PERMISSION
        assert await GroupService(session).get_group(group.id) is not None

        reply = await run(cmd_delete_group, "delete_group", str(group.id), session, 1)

        assert "deleted" in reply
        assert await GroupService(session).get_group(group.id) is None
        assert await run(cmd_balances, "balances", str(group.id), session, 1) == ERR_NO_GROUP

    async def test_delete_group_usage(self, session):
        assert "Usage" in await run(cmd_delete_group, "delete_group", "x", session, 1)


class TestExpenseHandlers:
    """Adding, listing and deleting expenses."""

    async def test_add_expense_invalid_amount(self, session, group):
        reply = await run(cmd_add_expense, "add_expense", f"{group.id} -5 Taxi", session, 1)

        assert "greater than zero" in reply

    async def test_add_expense_smaller_than_member_count_in_cents(self, session, group):
        """Two cents between three members still records the expense."""
        reply = await run(cmd_add_expense, "add_expense", f"{group.id} 0.02 Gum", session, 1)

        assert "Added" in reply
        expense = (await ExpenseService(session).get_group_expenses(group.id))[0]
        assert [s.amount for s in expense.splits] == [Decimal("0.01"), Decimal("0.01"), Decimal("0")]

    async def test_add_expense_non_member(self, session, group):
        assert await run(cmd_add_expense, "add_expense", f"{group.id} 10 Taxi", session, 99) == ERR_NOT_MEMBER

    async def test_expenses_list(self, session, group):
        await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner out", session, 1)
        await run(cmd_add_expense, "add_expense", f"{group.id} 60 Taxi", session, 2)

        reply = await run(cmd_expenses, "expenses", str(group.id), session, 3)

        assert "Dinner out: 300.00 RWF, paid by Alice" in reply
        assert "Taxi: 60.00 RWF, paid by Bob" in reply
        assert "360.00 RWF" in reply

    async def test_expenses_empty(self, session, group):
        assert "No expenses yet" in await run(cmd_expenses, "expenses", str(group.id), session, 1)

    async def test_expenses_non_member(self, session, group):
        assert await run(cmd_expenses, "expenses", str(group.id), session, 99) == ERR_NOT_MEMBER

    async def test_delete_expense_permissions(self, session, group):
        """Payer and creator may delete, other members may not."""
        await run(cmd_add_expense, "add_expense", f"{group.id} 60 Taxi", session, 2)
        await run(cmd_add_expense, "add_expense", f"{group.id} 90 Lunch", session, 3)
        taxi, lunch = await ExpenseService(session).get_group_expenses(group.id)

        assert await run(cmd_delete_expense, "delete_expense", str(taxi.id), session, 3) == ERR_NO_PERMISSION

        assert "deleted" in await run(cmd_delete_expense, "delete_expense", str(taxi.id), session, 2)
        assert "deleted" in await run(cmd_delete_expense, "delete_expense", str(lunch.id), session, 1)

        assert await ExpenseService(session).get_group_expenses(group.id) == []
        assert await run(cmd_delete_expense, "delete_expense", str(taxi.id), session, 2) == ERR_NO_EXPENSE

    async def test_delete_expense_changes_balances(self, session, group):
        await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner", session, 1)
        expense = (await ExpenseService(session).get_group_expenses(group.id))[0]

        await run(cmd_delete_expense, "delete_expense", str(expense.id), session, 1)

        assert set((await balance_map(session, group.id)).values()) == {Decimal("0")}


class TestBalanceHandlers:
    """Balances, simplification and settling up."""

    async def test_flow(self, session, group):
        """Add an expense, settle part of it and read the plan."""
        reply = await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner out", session, 1)
        assert "Dinner out" in reply

        reply = await run(cmd_settle, "settle", f"{group.id} 1 100", session, 2)
        assert "Recorded 100.00 RWF from Bob to Alice" in reply

        reply = await run(cmd_balances, "balances", str(group.id), session, 3)
        assert "Alice: +100.00 RWF" in reply
        assert "Carol: -100.00 RWF" in reply
        assert "Bob" in reply

        reply = await run(cmd_simplify, "simplify", str(group.id), session, 3)
        assert "1. Carol → Alice: 100.00 RWF" in reply

        debts = await CalculationService(session).get_simplified_debts(group.id)
        assert [(d.from_user_id, d.to_user_id, d.amount) for d in debts] == [(3, 1, Decimal("100"))]

    async def test_settle_shows_remaining_plan(self, session, group):
        """The reply lists the transfers still needed after the payment."""
        await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner", session, 1)

        reply = await run(cmd_settle, "settle", f"{group.id} 1 100", session, 2)

        assert "1. Carol → Alice: 100.00 RWF" in reply
        assert "Bob →" not in reply
        assert "Transfers:</b> 1" in reply

    async def test_last_settlement_clears_plan(self, session, group):
        await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner", session, 1)
        await run(cmd_settle, "settle", f"{group.id} 1 100", session, 2)

        reply = await run(cmd_settle, "settle", f"{group.id} 1 100", session, 3)

        assert "Everyone is settled up" in reply

    async def test_non_member_is_refused(self, session, group):
        assert await run(cmd_balances, "balances", str(group.id), session, 99) == ERR_NOT_MEMBER

    async def test_bad_group_id(self, session):
        assert "Usage" in await run(cmd_simplify, "simplify", "abc", session, 1)

    async def test_settle_to_self_is_refused(self, session, group):
        assert await run(cmd_settle, "settle", f"{group.id} 2 10", session, 2) == ERR_NOT_RECIPIENT

    async def test_balances_failure_is_reported(self, session, group, monkeypatch, caplog):
        """Calculation errors are logged and answered with a short message."""
        monkeypatch.setattr(
            CalculationService, "get_group_balances",
            AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("gone")))
        )

        with caplog.at_level(logging.ERROR, logger="momo_split.handlers.balance"):
            reply = await run(cmd_balances, "balances", str(group.id), session, 1)

        assert reply == ERR_CALCULATION
        assert f"group {group.id}" in caplog.text

    async def test_simplify_failure_is_reported(self, session, group, monkeypatch, caplog):
        monkeypatch.setattr(
            CalculationService, "get_simplified_debts",
            AsyncMock(side_effect=ValueError("bad strategy"))
        )

        with caplog.at_level(logging.ERROR, logger="momo_split.handlers.balance"):
            reply = await run(cmd_simplify, "simplify", str(group.id), session, 1)

        assert reply == ERR_CALCULATION
        assert "Failed to simplify" in caplog.text

    async def test_settle_failure_records_nothing(self, session, group, monkeypatch):
        monkeypatch.setattr(
            CalculationService, "get_group_balances",
            AsyncMock(side_effect=ValueError("broken"))
        )

        reply = await run(cmd_settle, "settle", f"{group.id} 1 100", session, 2)

        assert reply == ERR_CALCULATION
        assert await all_payments(session) == []


class TestPaymentHandlers:
    """Pending payments, requests, confirmation and cancellation."""

    async def test_pay_then_confirm(self, session, group):
        """A pending payment counts only once the recipient confirms."""
        await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner", session, 1)

        reply = await run(cmd_pay, "pay", f"{group.id} 1 100", session, 2)
        payment = (await all_payments(session))[0]

        assert f"/confirm {payment.id}" in reply
        assert payment.status == PaymentStatus.PENDING.value
        assert payment.payment_type == PaymentType.SETTLEMENT.value
        assert (await balance_map(session, group.id))[2] == Decimal("-100")

        assert await run(cmd_confirm, "confirm", str(payment.id), session, 2) == ERR_NO_PERMISSION

        reply = await run(cmd_confirm, "confirm", str(payment.id), session, 1)

        assert "confirmed" in reply
        assert (await balance_map(session, group.id))[2] == Decimal("0")

        reply = await run(cmd_confirm, "confirm", str(payment.id), session, 1)
        assert "already completed" in reply

    async def test_pay_outside_group_is_refused(self, session, group):
        assert await run(cmd_pay, "pay", f"{group.id} 77 10", session, 2) == ERR_NOT_RECIPIENT
        assert await all_payments(session) == []

    async def test_pay_invalid_amount(self, session, group):
        assert "Invalid amount" in await run(cmd_pay, "pay", f"{group.id} 1 lots", session, 2)

    async def test_request(self, session, group):
        """A request is a pending payment towards the requester."""
        await run(cmd_add_expense, "add_expense", f"{group.id} 300 Dinner", session, 1)

        reply = await run(cmd_request, "request", f"{group.id} 3 100", session, 1)
        payment = (await all_payments(session))[0]

        assert "Request" in reply
        assert (payment.from_user_id, payment.to_user_id) == (3, 1)
        assert payment.payment_type == PaymentType.REQUEST.value

        await run(cmd_confirm, "confirm", str(payment.id), session, 1)

        assert (await balance_map(session, group.id))[3] == Decimal("0")

    async def test_cancel(self, session, group):
        """Either party may cancel; cancelled payments never complete."""
        await run(cmd_pay, "pay", f"{group.id} 1 100", session, 2)
        payment = (await all_payments(session))[0]

        assert await run(cmd_cancel, "cancel", str(payment.id), session, 3) == ERR_NO_PERMISSION

        assert "cancelled" in await run(cmd_cancel, "cancel", str(payment.id), session, 1)
        assert payment.status == PaymentStatus.CANCELLED.value

        assert "already cancelled" in await run(cmd_confirm, "confirm", str(payment.id), session, 1)

    async def test_completed_payment_cannot_be_cancelled(self, session, group):
        await run(cmd_pay, "pay", f"{group.id} 1 100", session, 2)
        payment = (await all_payments(session))[0]
        await run(cmd_confirm, "confirm", str(payment.id), session, 1)

        reply = await run(cmd_cancel, "cancel", str(payment.id), session, 2)

        assert "cannot be cancelled" in reply
        assert (await PaymentService(session).get_payment(payment.id)).status == PaymentStatus.COMPLETED.value

    async def test_unknown_payment(self, session):
        assert await run(cmd_confirm, "confirm", "404", session, 1) == ERR_NO_PAYMENT
        assert await run(cmd_cancel, "cancel", "404", session, 1) == ERR_NO_PAYMENT
