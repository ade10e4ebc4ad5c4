"""Net balance calculation from expense and payment history."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from momo_split.schemas import ExpenseRecord, MemberId, PaymentRecord
from momo_split.utils.constants import CENT, PaymentStatus


def compute_balances(
        members: Iterable[MemberId],
        expenses: Iterable[ExpenseRecord],
        payments: Iterable[PaymentRecord] = (),
        group_id: Optional[int] = None
) -> Dict[MemberId, Decimal]:
    """
    Calculate net balance for each member.

    Balance = Total paid - Total owed + Payments sent - Payments received
    Positive balance = member is owed money
    Negative balance = member owes money

    Args:
        members: Member IDs of the group; each gets an entry even without activity
        expenses: Expenses of the group, splits already resolved to amounts
        payments: Payments scoped to the group or to no group
        group_id: When given, payments tied to another group are ignored

    Returns:
        Dict of member_id -> balance rounded to 2 decimal places
    """
    balances: Dict[MemberId, Decimal] = {member_id: Decimal(0) for member_id in members}

    for expense in expenses:
        # Payer fronted the whole amount
        balances[expense.payer_id] = balances.get(expense.payer_id, Decimal(0)) + expense.amount

        # Every share is owed back, the payer's own share included
        for split in expense.splits:
            balances[split.member_id] = balances.get(split.member_id, Decimal(0)) - split.amount

    for payment in payments:
        if payment.status != PaymentStatus.COMPLETED:
            continue
        if group_id is not None and payment.group_id not in (None, group_id):
            continue

        # Sender's debt shrinks, recipient's credit shrinks
        balances[payment.from_user_id] = balances.get(payment.from_user_id, Decimal(0)) + payment.amount
        balances[payment.to_user_id] = balances.get(payment.to_user_id, Decimal(0)) - payment.amount

    return {
        member_id: balance.quantize(CENT, rounding=ROUND_HALF_UP)
        for member_id, balance in balances.items()
    }


def balances_total(balances: Dict[MemberId, Decimal]) -> Decimal:
    """Sum of all balances; anything beyond 0.01 per member points to bad split data."""
    return sum(balances.values(), Decimal(0))
