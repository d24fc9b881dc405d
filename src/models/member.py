from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.models.base import EntityModel


class User(EntityModel):
    id: str
    phone: Optional[str] = None
    display_name: Optional[str] = None


class GroupMember(EntityModel):
    id: Optional[str] = None
    group_id: str
    user_id: str
    is_active: bool = True
    phone: Optional[str] = None
    display_name: Optional[str] = None


@dataclass(frozen=True)
class ResolvedMember:
    """A group member joined with its user record, ready for fan-out."""

    user_id: str
    phone: str
    display_name: str
