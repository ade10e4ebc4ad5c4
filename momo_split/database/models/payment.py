from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, String, Numeric, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from momo_split.database.base import Base, BigIntPK, TimestampMixin


class Payment(Base, TimestampMixin):
    """Transfer between two users, optionally inside a group."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    from_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    to_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    group_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("groups.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    payment_type: Mapped[str] = mapped_column(
        String(20),
        default="settlement",
        nullable=False
    )  # settlement, request, direct_payment
    status: Mapped[str] = mapped_column(
        String(20),
        default="pending",
        nullable=False
    )  # pending, sent, received, completed, failed, cancelled
    payment_method: Mapped[str] = mapped_column(
        String(20),
        default="mobile_money",
        nullable=False
    )  # mobile_money, bank_transfer, cash, other
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_payment_group_status", "group_id", "status", "is_active"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(from={self.from_user_id}, to={self.to_user_id}, "
            f"amount={self.amount}, status='{self.status}')>"
        )
