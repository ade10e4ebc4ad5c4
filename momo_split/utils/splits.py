"""Resolve equal, percentage and exact splits into per-member amounts."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from momo_split.schemas import SplitRecord
from momo_split.utils.constants import CENT, SETTLEMENT_TOLERANCE, SplitType


class SplitError(ValueError):
    """Split data does not add up to the expense."""


def resolve_splits(
        amount: Decimal,
        split_type: SplitType,
        splits: List[Dict]
) -> List[SplitRecord]:
    """
    Resolve split definitions to amounts.

    Args:
        amount: Expense total
        split_type: equal, percentage or exact
        splits: List of dicts with keys:
            - member_id
            - amount (exact only)
            - percentage (percentage only)

    Returns:
        One SplitRecord per entry, amounts summing to the total

    Raises:
        SplitError: No members, or shares that do not match the total
    """
    if not splits:
        raise SplitError("An expense needs at least one split")

    amount = Decimal(amount)
    split_type = SplitType(split_type)

    if split_type == SplitType.EQUAL:
        return _equal(amount, splits)
    if split_type == SplitType.PERCENTAGE:
        return _percentage(amount, splits)
    return _exact(amount, splits)


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _equal(amount: Decimal, splits: List[Dict]) -> List[SplitRecord]:
    # Whole cents; the first `extra` members pay one cent more
    cents = int(_round(amount) * 100)
    base, extra = divmod(cents, len(splits))

    return [
        SplitRecord(
            member_id=split["member_id"],
            amount=Decimal(base + (1 if i < extra else 0)) / 100
        )
        for i, split in enumerate(splits)
    ]


def _percentage(amount: Decimal, splits: List[Dict]) -> List[SplitRecord]:
    total_percentage = sum(
        (Decimal(str(split.get("percentage") or 0)) for split in splits),
        Decimal(0)
    )
    if abs(total_percentage - 100) > SETTLEMENT_TOLERANCE:
        raise SplitError(f"Percentages must add up to 100, got {total_percentage}")

    result = []
    for split in splits:
        percentage = Decimal(str(split.get("percentage") or 0))
        result.append(SplitRecord(
            member_id=split["member_id"],
            amount=_round(amount * percentage / 100),
            percentage=percentage
        ))
    return result


def _exact(amount: Decimal, splits: List[Dict]) -> List[SplitRecord]:
    if any(Decimal(str(split.get("amount") or 0)) < 0 for split in splits):
        raise SplitError("Split amounts cannot be negative")

    result = [
        SplitRecord(member_id=split["member_id"], amount=Decimal(str(split.get("amount") or 0)))
        for split in splits
    ]

    total_split = sum((split.amount for split in result), Decimal(0))
    if abs(total_split - amount) > SETTLEMENT_TOLERANCE:
        raise SplitError(f"Split amounts must equal the total expense amount ({total_split} != {amount})")

    return result
