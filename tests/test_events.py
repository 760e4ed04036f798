"""Event decoding and quote-reply targets."""

import pytest

from conftest import friend_message_node, group_message_node, member_node, temp_message_node
from mirai_client.errors import DecodeError
from mirai_client.models.contacts import Permission
from mirai_client.models.events import (
    EVENT_TYPES,
    BotOnlineEvent,
    FriendMessage,
    GroupMessage,
    GroupRecallEvent,
    MemberJoinRequestEvent,
    MemberMuteEvent,
    NewFriendRequestEvent,
    TempMessage,
    decode_event,
    decode_events,
    quote_reply_target,
)
from mirai_client.models.segments import Plain, Source


class TestMessageEvents:
    def test_friend_message(self):
        event = decode_event(friend_message_node(qq=42, source_id=100, text="hi"))
        assert isinstance(event, FriendMessage)
        assert event.sender.id == 42
        assert event.message.source == Source(id=100, time=1600000000)
        assert list(event.message.content) == [Plain(text="hi")]

    def test_group_message_sender_carries_group(self):
        event = decode_event(group_message_node(qq=42, group=9000))
        assert isinstance(event, GroupMessage)
        assert event.sender.group.id == 9000
        assert event.sender.group.permission is Permission.ADMINISTRATOR

    def test_message_serializes_back_to_chain(self):
        node = friend_message_node()
        event = decode_event(node)
        assert event.model_dump(by_alias=True)["messageChain"] == node["messageChain"]


class TestRequestEvents:
    def test_new_friend_request_without_group(self):
        event = decode_event({
            "type": "NewFriendRequestEvent", "eventId": 1, "fromId": 42,
            "groupId": 0, "nick": "alice", "message": "add me",
        })
        assert isinstance(event, NewFriendRequestEvent)
        assert event.group_id is None
        assert event.message == "add me"

    def test_new_friend_request_from_group(self):
        event = decode_event({"type": "NewFriendRequestEvent", "eventId": 1, "fromId": 42, "groupId": 9000})
        assert event.group_id == 9000

    def test_member_join_request(self):
        event = decode_event({
            "type": "MemberJoinRequestEvent", "eventId": 2, "fromId": 42,
            "groupId": 9000, "groupName": "test group", "nick": "bob", "message": "",
        })
        assert isinstance(event, MemberJoinRequestEvent)
        assert event.group_name == "test group"


class TestNotificationEvents:
    def test_bot_online(self):
        assert decode_event({"type": "BotOnlineEvent", "qq": 123456}) == BotOnlineEvent(qq=123456)

    def test_group_recall_without_operator(self):
        event = decode_event({
            "type": "GroupRecallEvent", "authorId": 42, "messageId": 100, "time": 1,
            "group": {"id": 9000, "name": "g", "permission": "MEMBER"}, "operator": None,
        })
        assert isinstance(event, GroupRecallEvent)
        assert event.operator is None

    def test_member_mute(self):
        event = decode_event({
            "type": "MemberMuteEvent", "durationSeconds": 600,
            "member": member_node(42), "operator": member_node(7),
        })
        assert isinstance(event, MemberMuteEvent)
        assert event.duration_seconds == 600
        assert event.operator.id == 7


class TestDecodePolicy:
    def test_unknown_event_is_rejected(self):
        with pytest.raises(DecodeError, match="NudgeEvent"):
            decode_event({"type": "NudgeEvent", "fromId": 1})

    def test_unknown_segment_inside_event_is_rejected(self):
        node = friend_message_node()
        node["messageChain"].append({"type": "Dice", "value": 6})
        with pytest.raises(DecodeError):
            decode_event(node)

    def test_missing_sender(self):
        node = friend_message_node()
        del node["sender"]
        with pytest.raises(DecodeError, match="Invalid FriendMessage"):
            decode_event(node)

    def test_decode_events_requires_array(self):
        with pytest.raises(DecodeError):
            decode_events(friend_message_node())

    def test_decode_events_keeps_order(self):
        events = decode_events([friend_message_node(source_id=1), group_message_node(source_id=2)])
        assert [e.message.source.id for e in events] == [1, 2]

    def test_every_registered_kind_has_matching_literal(self):
        for kind, model in EVENT_TYPES.items():
            assert model.model_fields["type"].default == kind


class TestQuoteReplyTarget:
    def test_friend(self):
        event = decode_event(friend_message_node(qq=42, source_id=100))
        assert quote_reply_target(event) == ("/sendFriendMessage", {"target": 42}, 100)

    def test_temp(self):
        event = decode_event(temp_message_node(qq=42, group=9000, source_id=101))
        assert isinstance(event, TempMessage)
        assert quote_reply_target(event) == ("/sendTempMessage", {"qq": 42, "group": 9000}, 101)

    def test_group(self):
        event = decode_event(group_message_node(qq=42, group=9000, source_id=102))
        assert quote_reply_target(event) == ("/sendGroupMessage", {"target": 9000}, 102)

    def test_non_message_event(self):
        with pytest.raises(TypeError):
            quote_reply_target(BotOnlineEvent(qq=1))

    def test_message_without_source(self):
        node = friend_message_node()
        node["messageChain"] = [{"type": "Plain", "text": "x"}]
        with pytest.raises(ValueError):
            quote_reply_target(decode_event(node))
