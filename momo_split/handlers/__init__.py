"""Handlers package."""

from momo_split.handlers import (
    start,
    group,
    expense,
    balance,
    payment
)

__all__ = [
    "start",
    "group",
    "expense",
    "balance",
    "payment"
]
