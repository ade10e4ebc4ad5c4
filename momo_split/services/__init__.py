"""Services package."""

from momo_split.services.group_service import GroupService
from momo_split.services.expense_service import ExpenseService
from momo_split.services.payment_service import PaymentService
from momo_split.services.calculation_service import CalculationService

__all__ = [
    "GroupService",
    "ExpenseService",
    "PaymentService",
    "CalculationService"
]
