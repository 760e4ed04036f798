"""
Events returned by /fetchMessage & co. and pushed over the WebSocket.

Decoding dispatches on the "type" field through EVENT_TYPES. Unknown types are
rejected with DecodeError, the same policy as message segments.
"""

from typing import Any, Literal, Optional, Union

from pydantic import Field, ValidationError, field_serializer, field_validator

from mirai_client.errors import DecodeError
from mirai_client.models.base import WireModel
from mirai_client.models.contacts import Friend, Group, Member
from mirai_client.models.message import ReceivedMessage
from mirai_client.models.segments import chain_to_wire


class _MessageEvent(WireModel):
    message: ReceivedMessage = Field(alias="messageChain")

    @field_serializer("message")
    def _chain(self, message: ReceivedMessage) -> list[dict[str, Any]]:
        return chain_to_wire(message.to_chain())


# Message events

class FriendMessage(_MessageEvent):
    type: Literal["FriendMessage"] = "FriendMessage"
    sender: Friend


class GroupMessage(_MessageEvent):
    type: Literal["GroupMessage"] = "GroupMessage"
    sender: Member


class TempMessage(_MessageEvent):
    type: Literal["TempMessage"] = "TempMessage"
    sender: Member


# Request events

class NewFriendRequestEvent(WireModel):
    type: Literal["NewFriendRequestEvent"] = "NewFriendRequestEvent"
    event_id: int
    from_id: int
    group_id: Optional[int] = None
    nick: str = ""
    message: str = ""

    @field_validator("group_id", mode="before")
    @classmethod
    def _no_group(cls, value: Any) -> Any:
        # 0 means the request did not come through a group
        return None if value == 0 else value


class MemberJoinRequestEvent(WireModel):
    type: Literal["MemberJoinRequestEvent"] = "MemberJoinRequestEvent"
    event_id: int
    from_id: int
    group_id: int
    group_name: str = ""
    nick: str = ""
    message: str = ""


class BotInvitedJoinGroupRequestEvent(WireModel):
    type: Literal["BotInvitedJoinGroupRequestEvent"] = "BotInvitedJoinGroupRequestEvent"
    event_id: int
    from_id: int
    group_id: int
    group_name: str = ""
    nick: str = ""
    message: str = ""


# Bot account events

class BotOnlineEvent(WireModel):
    type: Literal["BotOnlineEvent"] = "BotOnlineEvent"
    qq: int


class BotOfflineEventActive(WireModel):
    type: Literal["BotOfflineEventActive"] = "BotOfflineEventActive"
    qq: int


class BotOfflineEventForce(WireModel):
    type: Literal["BotOfflineEventForce"] = "BotOfflineEventForce"
    qq: int


class BotOfflineEventDropped(WireModel):
    type: Literal["BotOfflineEventDropped"] = "BotOfflineEventDropped"
    qq: int


class BotReloginEvent(WireModel):
    type: Literal["BotReloginEvent"] = "BotReloginEvent"
    qq: int


# Recall events

class FriendRecallEvent(WireModel):
    type: Literal["FriendRecallEvent"] = "FriendRecallEvent"
    author_id: int
    message_id: int
    time: int
    operator: int


class GroupRecallEvent(WireModel):
    type: Literal["GroupRecallEvent"] = "GroupRecallEvent"
    author_id: int
    message_id: int
    time: int
    group: Group
    operator: Optional[Member] = None


# Group membership events

class BotJoinGroupEvent(WireModel):
    type: Literal["BotJoinGroupEvent"] = "BotJoinGroupEvent"
    group: Group


class BotLeaveEventActive(WireModel):
    type: Literal["BotLeaveEventActive"] = "BotLeaveEventActive"
    group: Group


class BotLeaveEventKick(WireModel):
    type: Literal["BotLeaveEventKick"] = "BotLeaveEventKick"
    group: Group


class MemberJoinEvent(WireModel):
    type: Literal["MemberJoinEvent"] = "MemberJoinEvent"
    member: Member


class MemberLeaveEventKick(WireModel):
    type: Literal["MemberLeaveEventKick"] = "MemberLeaveEventKick"
    member: Member
    operator: Optional[Member] = None


class MemberLeaveEventQuit(WireModel):
    type: Literal["MemberLeaveEventQuit"] = "MemberLeaveEventQuit"
    member: Member


# Mute events

class BotMuteEvent(WireModel):
    type: Literal["BotMuteEvent"] = "BotMuteEvent"
    duration_seconds: int
    operator: Member


class BotUnmuteEvent(WireModel):
    type: Literal["BotUnmuteEvent"] = "BotUnmuteEvent"
    operator: Member


class MemberMuteEvent(WireModel):
    type: Literal["MemberMuteEvent"] = "MemberMuteEvent"
    duration_seconds: int
    member: Member
    operator: Optional[Member] = None


class MemberUnmuteEvent(WireModel):
    type: Literal["MemberUnmuteEvent"] = "MemberUnmuteEvent"
    member: Member
    operator: Optional[Member] = None


MessageEvent = Union[FriendMessage, GroupMessage, TempMessage]

Event = Union[
    FriendMessage, GroupMessage, TempMessage,
    NewFriendRequestEvent, MemberJoinRequestEvent, BotInvitedJoinGroupRequestEvent,
    BotOnlineEvent, BotOfflineEventActive, BotOfflineEventForce, BotOfflineEventDropped, BotReloginEvent,
    FriendRecallEvent, GroupRecallEvent,
    BotJoinGroupEvent, BotLeaveEventActive, BotLeaveEventKick,
    MemberJoinEvent, MemberLeaveEventKick, MemberLeaveEventQuit,
    BotMuteEvent, BotUnmuteEvent, MemberMuteEvent, MemberUnmuteEvent,
]

EVENT_TYPES: dict[str, type[WireModel]] = {
    "FriendMessage": FriendMessage,
    "GroupMessage": GroupMessage,
    "TempMessage": TempMessage,
    "NewFriendRequestEvent": NewFriendRequestEvent,
    "MemberJoinRequestEvent": MemberJoinRequestEvent,
    "BotInvitedJoinGroupRequestEvent": BotInvitedJoinGroupRequestEvent,
    "BotOnlineEvent": BotOnlineEvent,
    "BotOfflineEventActive": BotOfflineEventActive,
    "BotOfflineEventForce": BotOfflineEventForce,
    "BotOfflineEventDropped": BotOfflineEventDropped,
    "BotReloginEvent": BotReloginEvent,
    "FriendRecallEvent": FriendRecallEvent,
    "GroupRecallEvent": GroupRecallEvent,
    "BotJoinGroupEvent": BotJoinGroupEvent,
    "BotLeaveEventActive": BotLeaveEventActive,
    "BotLeaveEventKick": BotLeaveEventKick,
    "MemberJoinEvent": MemberJoinEvent,
    "MemberLeaveEventKick": MemberLeaveEventKick,
    "MemberLeaveEventQuit": MemberLeaveEventQuit,
    "BotMuteEvent": BotMuteEvent,
    "BotUnmuteEvent": BotUnmuteEvent,
    "MemberMuteEvent": MemberMuteEvent,
    "MemberUnmuteEvent": MemberUnmuteEvent,
}


def decode_event(node: Any) -> Event:
    if not isinstance(node, dict):
        raise DecodeError(f"Event must be an object, got {type(node).__name__}")
    kind = node.get("type")
    model = EVENT_TYPES.get(kind)  # type: ignore[arg-type]
    if model is None:
        raise DecodeError(f"Unknown event type: {kind!r}", details={"node": node})
    try:
        return model.model_validate(node)  # type: ignore[return-value]
    except ValidationError as e:
        raise DecodeError(f"Invalid {kind}: {e}", details={"node": node}) from e


def decode_events(nodes: Any) -> list[Event]:
    if not isinstance(nodes, list):
        raise DecodeError(f"Event list must be an array, got {type(nodes).__name__}")
    return [decode_event(node) for node in nodes]


def quote_reply_target(event: MessageEvent) -> tuple[str, dict[str, int], int]:
    """Where a quoting reply to `event` goes: (endpoint, recipient fields, quoted message id).

    Friend messages are answered to the friend, temp messages to the member
    within its group, group messages to the group.
    """
    if isinstance(event, FriendMessage):
        path, recipient = "/sendFriendMessage", {"target": event.sender.id}
    elif isinstance(event, TempMessage):
        path, recipient = "/sendTempMessage", {"qq": event.sender.id, "group": event.sender.group.id}
    elif isinstance(event, GroupMessage):
        path, recipient = "/sendGroupMessage", {"target": event.sender.group.id}
    else:
        raise TypeError(f"Cannot quote a {type(event).__name__}")
    if event.message.source is None:
        raise ValueError("Received message carries no Source to quote")
    return path, recipient, event.message.source.id
