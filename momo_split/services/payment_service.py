"""Service for recording payments between members."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.database.models import Payment
from momo_split.utils.constants import PaymentMethod, PaymentStatus, PaymentType

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for payment operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_payment(
            self,
            from_user_id: int,
            to_user_id: int,
            amount: Decimal,
            currency: str,
            group_id: Optional[int] = None,
            payment_type: Optional[PaymentType] = None,
            payment_method: PaymentMethod = PaymentMethod.MOBILE_MONEY,
            description: Optional[str] = None,
            completed: bool = False
    ) -> Payment:
        """
        Record a payment.

        Args:
            from_user_id: User ID who sends money
            to_user_id: User ID who receives money
            amount: Amount sent
            currency: Currency code
            group_id: Group the payment settles, None for direct payments
            payment_type: settlement, request or direct_payment; defaults to
                settlement inside a group and direct_payment outside one
            payment_method: mobile_money, bank_transfer, cash or other
            description: Optional note
            completed: Record as already completed (e.g. cash handed over)

        Returns:
            Created payment
        """
        if payment_type is None:
            payment_type = PaymentType.SETTLEMENT if group_id is not None else PaymentType.DIRECT_PAYMENT

        payment = Payment(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            amount=amount,
            currency=currency,
            group_id=group_id,
            payment_type=PaymentType(payment_type).value,
            payment_method=PaymentMethod(payment_method).value,
            description=description,
            status=PaymentStatus.PENDING.value
        )

        if completed:
            payment.status = PaymentStatus.COMPLETED.value
            payment.completed_at = datetime.utcnow()

        self.session.add(payment)
        await self.session.flush()

        logger.info(
            "Payment %s of %s %s from %s to %s recorded (%s)",
            payment.id, amount, currency, from_user_id, to_user_id, payment.status
        )
        return payment

    async def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get active payment by ID."""
        result = await self.session.execute(
            select(Payment)
            .where(and_(Payment.id == payment_id, Payment.is_active == True))
        )
        return result.scalar_one_or_none()

    async def complete_payment(self, payment_id: int) -> Optional[Payment]:
        """Mark a pending payment as completed."""
        payment = await self.get_payment(payment_id)
        if not payment or payment.status in (
                PaymentStatus.COMPLETED.value,
                PaymentStatus.CANCELLED.value
        ):
            return None

        payment.status = PaymentStatus.COMPLETED.value
        payment.completed_at = datetime.utcnow()

        logger.info("Payment %s completed", payment_id)
        return payment

    async def cancel_payment(self, payment_id: int) -> bool:
        """Cancel a payment that has not completed yet."""
        payment = await self.get_payment(payment_id)
        if not payment or payment.status == PaymentStatus.COMPLETED.value:
            return False

        payment.status = PaymentStatus.CANCELLED.value

        logger.info("Payment %s cancelled", payment_id)
        return True

    async def get_completed_payments(self, group_id: int) -> List[Payment]:
        """Get completed payments of a group together with direct payments outside any group."""
        result = await self.session.execute(
            select(Payment)
            .where(and_(
                or_(Payment.group_id == group_id, Payment.group_id.is_(None)),
                Payment.status == PaymentStatus.COMPLETED.value,
                Payment.is_active == True
            ))
            .order_by(Payment.id)
        )
        return list(result.scalars().all())
