"""Service for managing expenses."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Dict

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from momo_split.database.models import Expense, ExpenseSplit
from momo_split.utils.constants import SplitType
from momo_split.utils.splits import resolve_splits

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for expense operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_expense(
            self,
            group_id: int,
            payer_id: int,
            amount: Decimal,
            currency: str,
            description: str,
            split_type: SplitType,
            splits: List[Dict]
    ) -> Expense:
        """
        Create a new expense.

        Args:
            group_id: Group ID
            payer_id: User ID who paid
            amount: Amount paid
            currency: Currency code
            description: Expense description
            split_type: How to split (equal, percentage, exact)
            splits: List of split dicts with keys:
                - member_id
                - amount (for exact)
                - percentage (for percentage)

        Returns:
            Created expense

        Raises:
            SplitError: Shares do not add up to the amount
        """
        resolved = resolve_splits(amount, split_type, splits)

        expense = Expense(
            group_id=group_id,
            payer_id=payer_id,
            amount=amount,
            currency=currency,
            description=description,
            split_type=SplitType(split_type).value
        )

        self.session.add(expense)
        await self.session.flush()

        for split in resolved:
            self.session.add(ExpenseSplit(
                expense_id=expense.id,
                member_id=split.member_id,
                amount=split.amount,
                percentage=split.percentage
            ))
        await self.session.flush()

        logger.info(
            "Expense %s of %s %s added to group %s by %s",
            expense.id, amount, currency, group_id, payer_id
        )
        return expense

    async def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get active expense by ID with splits loaded."""
        result = await self.session.execute(
            select(Expense)
            .where(and_(
                Expense.id == expense_id,
                Expense.is_active == True
            ))
            .options(selectinload(Expense.splits))
        )
        return result.scalar_one_or_none()

    async def get_group_expenses(
            self,
            group_id: int,
            include_deleted: bool = False
    ) -> List[Expense]:
        """Get all expenses for a group, oldest first, with splits loaded."""
        query = select(Expense).where(Expense.group_id == group_id)

        if not include_deleted:
            query = query.where(Expense.is_active == True)

        query = query.order_by(Expense.id)
        query = query.options(selectinload(Expense.splits))
        query = query.execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_expense(
            self,
            expense_id: int,
            user_id: int
    ) -> bool:
        """Soft delete an expense."""
        expense = await self.get_expense(expense_id)
        if not expense:
            return False

        expense.is_active = False
        expense.deleted_at = datetime.utcnow()
        expense.deleted_by = user_id

        logger.info("Expense %s deleted by %s", expense_id, user_id)
        return True

    async def can_delete_expense(
            self,
            expense_id: int,
            user_id: int,
            is_group_creator: bool = False
    ) -> bool:
        """
        Check if user can delete an expense.

        Rules:
        - Payer can delete their own expenses
        - Group creator can delete any expense
        """
        if is_group_creator:
            return True

        expense = await self.get_expense(expense_id)
        return expense is not None and expense.payer_id == user_id
