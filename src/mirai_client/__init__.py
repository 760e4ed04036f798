"""
mirai-client — Python client for the mirai HTTP API.

Blocking REST session plus an optional WebSocket push connection.
"""

from mirai_client.session import Session
from mirai_client.errors import (
    MiraiError,
    AuthError,
    BindError,
    RequestError,
    TransportError,
    DecodeError,
    SessionError,
)
from mirai_client.models.segments import (
    MessageChain,
    Segment,
    Source,
    Quote,
    At,
    AtAll,
    Face,
    Plain,
    Image,
    FlashImage,
    Voice,
    Xml,
    Json,
    App,
    Poke,
    decode_segment,
    decode_chain,
)
from mirai_client.models.message import ReceivedMessage, decompose
from mirai_client.models.events import (
    Event,
    FriendMessage,
    GroupMessage,
    TempMessage,
    NewFriendRequestEvent,
    MemberJoinRequestEvent,
    decode_event,
    decode_events,
)
from mirai_client.models.contacts import (
    Friend,
    Group,
    Member,
    GroupConfig,
    MemberInfo,
    SessionConfig,
    Permission,
    TargetType,
    NewFriendResponse,
    MemberJoinResponse,
)

__version__ = "0.1.0"
__all__ = [
    "Session",
    "MiraiError",
    "AuthError",
    "BindError",
    "RequestError",
    "TransportError",
    "DecodeError",
    "SessionError",
    "MessageChain",
    "Segment",
    "Source",
    "Quote",
    "At",
    "AtAll",
    "Face",
    "Plain",
    "Image",
    "FlashImage",
    "Voice",
    "Xml",
    "Json",
    "App",
    "Poke",
    "decode_segment",
    "decode_chain",
    "ReceivedMessage",
    "decompose",
    "Event",
    "FriendMessage",
    "GroupMessage",
    "TempMessage",
    "NewFriendRequestEvent",
    "MemberJoinRequestEvent",
    "decode_event",
    "decode_events",
    "Friend",
    "Group",
    "Member",
    "GroupConfig",
    "MemberInfo",
    "SessionConfig",
    "Permission",
    "TargetType",
    "NewFriendResponse",
    "MemberJoinResponse",
]
