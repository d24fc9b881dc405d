from __future__ import annotations

from typing import Dict, List, Optional

from loguru import logger

from src.backend.client import BackendError
from src.backend.repository import LeagueRepository
from src.models import ResolvedMember, User


class MemberResolver:
    """Resolve a group's active members to their effective contact details.

    One resolver lives for one tick; the user list is fetched at most once.
    """

    def __init__(self, repository: LeagueRepository, default_display_name: str = "Player"):
        self.repository = repository
        self.default_display_name = default_display_name
        self._users: Optional[Dict[str, User]] = None

    def _users_by_id(self) -> Dict[str, User]:
        if self._users is None:
            self._users = {user.id: user for user in self.repository.list_users()}
        return self._users

    def resolve(self, group_id: str) -> List[ResolvedMember]:
        try:
            memberships = self.repository.list_active_members(group_id)
            users = self._users_by_id()
        except BackendError as e:
            logger.error(f"Could not resolve members of group {group_id}: {e}")
            return []

        resolved = []
        for membership in memberships:
            if not membership.is_active:
                continue
            user = users.get(membership.user_id)
            phone = (user.phone if user and user.phone else None) or membership.phone
            if not phone:
                logger.debug(f"Member {membership.user_id} in group {group_id} has no phone")
                continue
            display_name = (
                (user.display_name if user else None)
                or membership.display_name
                or self.default_display_name
            )
            resolved.append(
                ResolvedMember(
                    user_id=membership.user_id,
                    phone=phone,
                    display_name=display_name,
                )
            )

        logger.debug(f"Resolved {len(resolved)}/{len(memberships)} members for group {group_id}")
        return resolved
