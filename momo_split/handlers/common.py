"""Lookups and argument parsing shared by command handlers."""

from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from momo_split.database.models import Group
from momo_split.services.group_service import GroupService
from momo_split.utils.constants import ERR_NO_GROUP, ERR_NOT_MEMBER, ERR_NOT_RECIPIENT
from momo_split.utils.formatters import format_usage
from momo_split.utils.validators import validate_amount, parse_id


async def member_group(
        session: AsyncSession,
        group_id: Optional[int],
        user_id: int
) -> Tuple[Optional[Group], Optional[str]]:
    """Load a group the user belongs to, or an error message."""
    group = await GroupService(session).get_group(group_id) if group_id is not None else None
    if not group:
        return None, ERR_NO_GROUP
    if user_id not in group.member_ids:
        return None, ERR_NOT_MEMBER
    return group, None


def member_names(group: Group) -> Dict[int, str]:
    """Display names by user ID, former members included."""
    return {m.user_id: m.display_name for m in group.members}


def parse_transfer(
        args: Optional[str],
        usage: str
) -> Tuple[Optional[Tuple[int, int, Decimal]], Optional[str]]:
    """
    Parse "<group_id> <user_id> <amount>".

    Returns:
        Tuple of ((group_id, user_id, amount), error_message)
    """
    parts = (args or "").split()
    if len(parts) != 3:
        return None, format_usage(usage)

    group_id, other_id = parse_id(parts[0]), parse_id(parts[1])
    if group_id is None or other_id is None:
        return None, format_usage(usage)

    is_valid, amount, error = validate_amount(parts[2])
    if not is_valid:
        return None, error

    return (group_id, other_id, amount), None


async def transfer_group(
        session: AsyncSession,
        group_id: int,
        user_id: int,
        other_id: int
) -> Tuple[Optional[Group], Optional[str]]:
    """Load a group both users belong to, or an error message."""
    group, error = await member_group(session, group_id, user_id)
    if error:
        return None, error
    if other_id not in group.member_ids or other_id == user_id:
        return None, ERR_NOT_RECIPIENT
    return group, None
