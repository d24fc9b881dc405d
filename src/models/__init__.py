from src.models.game import Game, GameStatus, Seat
from src.models.group import Group, GroupSettings
from src.models.member import GroupMember, ResolvedMember, User
from src.models.notification import NotificationType

__all__ = [
    "Game",
    "GameStatus",
    "Group",
    "GroupMember",
    "GroupSettings",
    "NotificationType",
    "ResolvedMember",
    "Seat",
    "User",
]
