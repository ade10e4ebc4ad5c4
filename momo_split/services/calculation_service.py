"""Service for calculating balances and settlements."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.config.settings import settings
from momo_split.database.models import Group
from momo_split.schemas import Debt, ExpenseRecord, MemberBalance, PaymentRecord
from momo_split.services.expense_service import ExpenseService
from momo_split.services.group_service import GroupService
from momo_split.services.payment_service import PaymentService
from momo_split.utils.balances import balances_total, compute_balances
from momo_split.utils.constants import SETTLEMENT_TOLERANCE, SettlementStrategy
from momo_split.utils.debts import simplify_debts

logger = logging.getLogger(__name__)


class CalculationService:
    """Service for balance and debt calculations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_group_balances(
            self,
            group_id: int
    ) -> Optional[List[MemberBalance]]:
        """
        Calculate the net balance of every member of a group.

        Args:
            group_id: Group ID

        Returns:
            One MemberBalance per member (positive = owed, negative = owes),
            or None if the group does not exist
        """
        group = await GroupService(self.session).get_group(group_id)
        if not group:
            return None

        balances = await self._calculate_balances(group)

        return [
            MemberBalance(
                user_id=user_id,
                balance=balance,
                currency=group.currency,
                group_id=group.id
            )
            for user_id, balance in balances.items()
        ]

    async def get_simplified_debts(
            self,
            group_id: int,
            strategy: Optional[SettlementStrategy] = None
    ) -> Optional[List[Debt]]:
        """
        Calculate who pays whom to settle a group.

        Args:
            group_id: Group ID
            strategy: Matching policy; defaults to the configured one

        Returns:
            List of debts, or None if the group does not exist
        """
        group = await GroupService(self.session).get_group(group_id)
        if not group:
            return None

        if strategy is None:
            strategy = SettlementStrategy(settings.settlement_strategy)

        balances = await self._calculate_balances(group)
        debts = simplify_debts(
            balances,
            currency=group.currency,
            group_id=group.id,
            strategy=strategy
        )

        logger.debug(
            "Group %s: %d debts with %s strategy",
            group.id, len(debts), SettlementStrategy(strategy).value
        )
        return debts

    async def _calculate_balances(self, group: Group):
        """Load a snapshot of the group's records and fold it into balances."""
        member_ids = group.member_ids

        expenses = await ExpenseService(self.session).get_group_expenses(group.id)
        payments = await PaymentService(self.session).get_completed_payments(group.id)

        # Direct payments only count between members of this group
        payments = [
            p for p in payments
            if p.group_id is not None
            or (p.from_user_id in member_ids and p.to_user_id in member_ids)
        ]

        balances = compute_balances(
            member_ids,
            [ExpenseRecord.model_validate(e) for e in expenses],
            [PaymentRecord.model_validate(p) for p in payments],
            group_id=group.id
        )

        total = balances_total(balances)
        if abs(total) > SETTLEMENT_TOLERANCE * max(len(balances), 1):
            logger.warning(
                "Group %s balances sum to %s; split totals do not match expense totals",
                group.id, total
            )

        return balances
