"""Plain records exchanged between the store and the settlement core."""

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

MemberId = Union[int, str]


class SplitRecord(BaseModel):
    """One member's resolved share of an expense."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    member_id: MemberId
    amount: Decimal = Field(ge=0)
    percentage: Optional[Decimal] = None


class ExpenseRecord(BaseModel):
    """Expense with its splits already resolved to amounts."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    payer_id: MemberId
    amount: Decimal = Field(gt=0)
    currency: str = "RWF"
    description: str = ""
    splits: List[SplitRecord] = Field(default_factory=list)


class PaymentRecord(BaseModel):
    """Money moved from one member to another."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    from_user_id: MemberId
    to_user_id: MemberId
    amount: Decimal = Field(gt=0)
    currency: str = "RWF"
    status: str = "completed"
    group_id: Optional[int] = None


class MemberBalance(BaseModel):
    """Net position of a member, serialized as {userId, balance, currency, groupId}."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: MemberId = Field(alias="userId")
    balance: Decimal
    currency: str
    group_id: Optional[int] = Field(default=None, alias="groupId")

    @field_serializer("balance", when_used="json")
    def _balance_as_number(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("group_id", when_used="json")
    def _group_id_as_string(self, value: Optional[int]) -> Optional[str]:
        return None if value is None else str(value)


class Debt(BaseModel):
    """Settlement instruction, serialized as {from, to, amount, currency, groupId}."""

    model_config = ConfigDict(populate_by_name=True)

    from_user_id: MemberId = Field(alias="from")
    to_user_id: MemberId = Field(alias="to")
    amount: Decimal
    currency: str
    group_id: Optional[int] = Field(default=None, alias="groupId")

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("group_id", when_used="json")
    def _group_id_as_string(self, value: Optional[int]) -> Optional[str]:
        return None if value is None else str(value)
