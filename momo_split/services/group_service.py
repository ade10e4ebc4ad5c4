"""Service for managing groups and their members."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from momo_split.database.models import Group, GroupMember
from momo_split.utils.constants import DEFAULT_CURRENCY

logger = logging.getLogger(__name__)


class GroupService:
    """Service for group operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_group(
            self,
            name: str,
            creator_id: int,
            creator_name: str,
            currency: str = DEFAULT_CURRENCY
    ) -> Group:
        """
        Create a new group with its creator as the first member.

        Args:
            name: Group name
            creator_id: Telegram user ID of creator
            creator_name: Display name of creator
            currency: Currency code (default: RWF)

        Returns:
            Created group
        """
        group = Group(
            name=name,
            creator_id=creator_id,
            currency=currency
        )

        self.session.add(group)
        await self.session.flush()

        await self.add_member(group.id, creator_id, creator_name)

        logger.info("Group %s created by %s", group.id, creator_id)
        return group

    async def get_group(self, group_id: int) -> Optional[Group]:
        """Get group by ID with members loaded."""
        result = await self.session.execute(
            select(Group)
            .where(and_(Group.id == group_id, Group.is_deleted == False))
            .options(selectinload(Group.members))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_user_groups(self, user_id: int) -> List[Group]:
        """Get all groups where user is an active member."""
        result = await self.session.execute(
            select(Group)
            .where(and_(
                Group.is_deleted == False,
                Group.id.in_(
                    select(GroupMember.group_id)
                    .where(and_(
                        GroupMember.user_id == user_id,
                        GroupMember.is_active == True
                    ))
                )
            ))
            .order_by(Group.id)
        )
        return list(result.scalars().all())

    async def get_member(
            self,
            group_id: int,
            user_id: int
    ) -> Optional[GroupMember]:
        """Get membership record regardless of its active flag."""
        result = await self.session.execute(
            select(GroupMember)
            .where(and_(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id
            ))
        )
        return result.scalar_one_or_none()

    async def add_member(
            self,
            group_id: int,
            user_id: int,
            display_name: str
    ) -> GroupMember:
        """Add a user to a group, reactivating a removed membership."""
        existing = await self.get_member(group_id, user_id)
        if existing and existing.is_active:
            return existing
        elif existing:
            existing.is_active = True
            existing.display_name = display_name
            return existing

        member = GroupMember(
            group_id=group_id,
            user_id=user_id,
            display_name=display_name
        )
        self.session.add(member)
        await self.session.flush()

        logger.info("User %s joined group %s", user_id, group_id)
        return member

    async def remove_member(self, group_id: int, user_id: int) -> bool:
        """Deactivate a membership."""
        member = await self.get_member(group_id, user_id)
        if not member or not member.is_active:
            return False

        member.is_active = False

        logger.info("User %s left group %s", user_id, group_id)
        return True

    async def is_member(self, group_id: int, user_id: int) -> bool:
        """Check if user is an active member of the group."""
        member = await self.get_member(group_id, user_id)
        return bool(member and member.is_active)

    async def delete_group(self, group_id: int) -> bool:
        """Soft delete a group."""
        group = await self.get_group(group_id)
        if not group:
            return False

        group.is_deleted = True
        group.deleted_at = datetime.utcnow()

        logger.info("Group %s deleted", group_id)
        return True

    async def is_creator(self, group_id: int, user_id: int) -> bool:
        """Check if user created the group."""
        group = await self.get_group(group_id)
        return group is not None and group.creator_id == user_id
