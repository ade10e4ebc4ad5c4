from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy import BigInteger, Boolean, String, Text, Numeric, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from momo_split.database.base import Base, BigIntPK, TimestampMixin


class Expense(Base, TimestampMixin):
    """Expense paid by one member on behalf of the group."""

    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    group_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    payer_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    split_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False
    )  # equal, percentage, exact
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)
    deleted_by: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    # Relationships
    group: Mapped["Group"] = relationship(back_populates="expenses")
    splits: Mapped[List["ExpenseSplit"]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseSplit.id"
    )

    __table_args__ = (
        Index("idx_group_expense", "group_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, amount={self.amount}, description='{self.description}')>"


class ExpenseSplit(Base):
    """Resolved share of an expense owed by one member."""

    __tablename__ = "expense_splits"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    expense_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    member_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    # Relationships
    expense: Mapped["Expense"] = relationship(back_populates="splits")

    def __repr__(self) -> str:
        return f"<ExpenseSplit(expense_id={self.expense_id}, member={self.member_id}, amount={self.amount})>"
