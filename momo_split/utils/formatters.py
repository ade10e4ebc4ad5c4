"""Formatters for displaying data in messages."""

from decimal import Decimal
from html import escape
from typing import Dict, List

from momo_split.database.models import Expense, Group
from momo_split.schemas import Debt, MemberBalance
from momo_split.utils.constants import ERR_USAGE, SETTLEMENT_TOLERANCE


def format_amount(amount: Decimal, currency: str) -> str:
    """Format money with thousands separators."""
    return f"{amount:,.2f} {currency}"


def format_usage(usage: str) -> str:
    """Format a command usage hint."""
    return ERR_USAGE.format(usage=escape(usage))


def format_groups_list(groups: List[Group]) -> str:
    """Format list of groups."""
    if not groups:
        return "❌ You are not in any group yet. Create one with /new_group"

    message = "<b>👥 Your groups:</b>\n\n"

    for group in groups:
        message += f"• <code>{group.id}</code> {escape(group.name)} ({group.currency})\n"

    return message


def format_balances(
        group: Group,
        balances: List[MemberBalance],
        names: Dict[int, str]
) -> str:
    """Format member balances of a group."""
    message = f"<b>⚖️ Balances: {escape(group.name)}</b>\n\n"

    if not balances:
        return message + "No members yet"

    def name_of(item: MemberBalance) -> str:
        return escape(names.get(item.user_id, str(item.user_id)))

    creditors = [b for b in balances if b.balance > SETTLEMENT_TOLERANCE]
    debtors = [b for b in balances if b.balance < -SETTLEMENT_TOLERANCE]
    settled = [b for b in balances if abs(b.balance) <= SETTLEMENT_TOLERANCE]

    if creditors:
        message += "<b>✅ Owed:</b>\n"
        for item in creditors:
            message += f"  • {name_of(item)}: +{format_amount(item.balance, item.currency)}\n"
        message += "\n"

    if debtors:
        message += "<b>💸 Owes:</b>\n"
        for item in debtors:
            message += f"  • {name_of(item)}: -{format_amount(abs(item.balance), item.currency)}\n"
        message += "\n"

    if settled:
        message += "<b>🤝 Settled up:</b>\n"
        for item in settled:
            message += f"  • {name_of(item)}\n"

    return message


def format_debts(
        group: Group,
        debts: List[Debt],
        names: Dict[int, str]
) -> str:
    """Format settlement plan of a group."""
    message = f"<b>🧮 Settle up: {escape(group.name)}</b>\n\n"

    if not debts:
        return message + "✅ Everyone is settled up!"

    for i, debt in enumerate(debts, 1):
        debtor = escape(names.get(debt.from_user_id, str(debt.from_user_id)))
        creditor = escape(names.get(debt.to_user_id, str(debt.to_user_id)))
        message += f"{i}. {debtor} → {creditor}: {format_amount(debt.amount, debt.currency)}\n"

    message += f"\n<b>Transfers:</b> {len(debts)}"
    return message


def format_expenses_list(
        group: Group,
        expenses: List[Expense],
        names: Dict[int, str]
) -> str:
    """Format active expenses of a group, oldest first."""
    message = f"<b>🧾 Expenses: {escape(group.name)}</b>\n\n"

    if not expenses:
        return message + "No expenses yet"

    total = Decimal(0)
    for expense in expenses:
        payer = escape(names.get(expense.payer_id, str(expense.payer_id)))
        message += (
            f"• <code>{expense.id}</code> {escape(expense.description)}: "
            f"{format_amount(expense.amount, expense.currency)}, paid by {payer}\n"
        )
        total += expense.amount

    message += f"\n<b>Total:</b> {format_amount(total, group.currency)}"
    return message
