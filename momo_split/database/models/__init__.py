"""Database models for the expense splitting bot."""

from momo_split.database.models.group import Group, GroupMember
from momo_split.database.models.expense import Expense, ExpenseSplit
from momo_split.database.models.payment import Payment

__all__ = [
    "Group",
    "GroupMember",
    "Expense",
    "ExpenseSplit",
    "Payment",
]
