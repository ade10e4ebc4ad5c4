"""Reduce member balances to a short list of transfers."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from momo_split.schemas import Debt, MemberId
from momo_split.utils.constants import (
    CENT,
    DEFAULT_CURRENCY,
    SETTLEMENT_TOLERANCE,
    SettlementStrategy,
)


def simplify_debts(
        balances: Dict[MemberId, Decimal],
        currency: str = DEFAULT_CURRENCY,
        group_id: Optional[int] = None,
        strategy: SettlementStrategy = SettlementStrategy.SORTED
) -> List[Debt]:
    """
    Turn balances into settlement instructions.

    Args:
        balances: Dict of member_id -> balance (positive = owed, negative = owes)
        currency: Currency stamped on every debt
        group_id: Group stamped on every debt
        strategy: SORTED matches largest first, NESTED keeps balance order

    Returns:
        Debts in the order they were matched
    """
    creditors, debtors = _partition(balances)

    if SettlementStrategy(strategy) is SettlementStrategy.NESTED:
        matches = _match_nested(creditors, debtors)
    else:
        matches = _match_sorted(creditors, debtors)

    return [
        Debt(
            from_user_id=debtor_id,
            to_user_id=creditor_id,
            amount=amount.quantize(CENT, rounding=ROUND_HALF_UP),
            currency=currency,
            group_id=group_id
        )
        for debtor_id, creditor_id, amount in matches
    ]


def apply_debts(
        balances: Dict[MemberId, Decimal],
        debts: Iterable[Debt]
) -> Dict[MemberId, Decimal]:
    """Return the balances left after every debt is paid."""
    remaining = dict(balances)
    for debt in debts:
        remaining[debt.from_user_id] = remaining.get(debt.from_user_id, Decimal(0)) + debt.amount
        remaining[debt.to_user_id] = remaining.get(debt.to_user_id, Decimal(0)) - debt.amount
    return remaining


def _partition(
        balances: Dict[MemberId, Decimal]
) -> Tuple[List[List], List[List]]:
    """Split balances into [member_id, magnitude] pairs; settled members are dropped."""
    creditors = []
    debtors = []

    for member_id, balance in balances.items():
        balance = Decimal(balance)
        if balance > SETTLEMENT_TOLERANCE:
            creditors.append([member_id, balance])
        elif balance < -SETTLEMENT_TOLERANCE:
            debtors.append([member_id, -balance])

    return creditors, debtors


def _match_sorted(
        creditors: List[List],
        debtors: List[List]
) -> List[Tuple[MemberId, MemberId, Decimal]]:
    """
    Greedy match of the largest creditor against the largest debtor.

    Algorithm:
    1. Sort both sides by amount (descending)
    2. Settle the minimum of the current credit and debt
    3. Move past whichever side is settled
    4. Repeat until one side runs out
    """
    matches = []

    # Sort is stable, equal amounts keep balance order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        creditor_id, credit = creditors[i]
        debtor_id, debt = debtors[j]

        amount = min(credit, debt)

        if amount > SETTLEMENT_TOLERANCE:
            matches.append((debtor_id, creditor_id, amount))

        creditors[i][1] = credit - amount
        debtors[j][1] = debt - amount

        if creditors[i][1] <= SETTLEMENT_TOLERANCE:
            i += 1
        if debtors[j][1] <= SETTLEMENT_TOLERANCE:
            j += 1

    return matches


def _match_nested(
        creditors: List[List],
        debtors: List[List]
) -> List[Tuple[MemberId, MemberId, Decimal]]:
    """Every creditor, in balance order, collects from every debtor that still owes."""
    matches = []

    for creditor in creditors:
        for debtor in debtors:
            if creditor[1] > SETTLEMENT_TOLERANCE and debtor[1] > SETTLEMENT_TOLERANCE:
                amount = min(creditor[1], debtor[1])
                if amount > SETTLEMENT_TOLERANCE:
                    matches.append((debtor[0], creditor[0], amount))
                    creditor[1] -= amount
                    debtor[1] -= amount

    return matches
