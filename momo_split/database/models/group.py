from datetime import datetime
from typing import List

from sqlalchemy import BigInteger, Boolean, String, Index, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from momo_split.database.base import Base, BigIntPK, TimestampMixin


class Group(Base, TimestampMixin):
    """Group of members sharing expenses in one currency."""

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="RWF", nullable=False)
    creator_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    members: Mapped[List["GroupMember"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.id"
    )
    expenses: Mapped[List["Expense"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_group_active", "is_deleted"),
    )

    @property
    def member_ids(self) -> List[int]:
        """User IDs of active members, in joining order."""
        return [m.user_id for m in self.members if m.is_active]

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name='{self.name}', currency='{self.currency}')>"


class GroupMember(Base, TimestampMixin):
    """Membership of a user in a group."""

    __tablename__ = "group_members"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    group_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    group: Mapped["Group"] = relationship(back_populates="members")

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )

    def __repr__(self) -> str:
        return f"<GroupMember(group_id={self.group_id}, user_id={self.user_id})>"
