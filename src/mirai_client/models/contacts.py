"""
Contacts, settings records and response enums.
"""

from enum import Enum, IntEnum
from typing import Optional

from mirai_client.models.base import WireModel


class Permission(str, Enum):
    OWNER = "OWNER"
    ADMINISTRATOR = "ADMINISTRATOR"
    MEMBER = "MEMBER"


class TargetType(str, Enum):
    """Where an uploaded image is going to be sent."""
    FRIEND = "friend"
    GROUP = "group"
    TEMP = "temp"


class NewFriendResponse(IntEnum):
    ACCEPT = 0
    REFUSE = 1
    REFUSE_AND_BLACKLIST = 2


class MemberJoinResponse(IntEnum):
    ACCEPT = 0
    REFUSE = 1
    IGNORE = 2
    REFUSE_AND_BLACKLIST = 3
    IGNORE_AND_BLACKLIST = 4


class BotInvitedJoinGroupResponse(IntEnum):
    ACCEPT = 0
    REFUSE = 1


class Friend(WireModel):
    id: int
    nickname: str = ""
    remark: str = ""


class Group(WireModel):
    id: int
    name: str = ""
    permission: Permission = Permission.MEMBER


class Member(WireModel):
    id: int
    member_name: str = ""
    permission: Permission = Permission.MEMBER
    group: Group


class GroupConfig(WireModel):
    """Only the fields that are set are written back by /groupConfig."""
    name: Optional[str] = None
    announcement: Optional[str] = None
    confess_talk: Optional[bool] = None
    allow_member_invite: Optional[bool] = None
    auto_approve: Optional[bool] = None
    anonymous_chat: Optional[bool] = None


class MemberInfo(WireModel):
    name: Optional[str] = None
    special_title: Optional[str] = None


class SessionConfig(WireModel):
    cache_size: Optional[int] = None
    enable_websocket: Optional[bool] = None
