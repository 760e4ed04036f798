"""
Session: the authenticated, account-bound handle every API call goes through.

Lifecycle:
  Session(auth_key, qq)   /auth then /verify; raises if either is rejected
  close() / `with`        push connection, worker pool, then /release

A Session carries no locks. Calls on one instance must be serialized by the
caller; use one Session per thread otherwise.
"""

import logging
import os
from concurrent.futures import Future
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from mirai_client.errors import AuthError, BindError, DecodeError, SessionError
from mirai_client.models.contacts import (
    BotInvitedJoinGroupResponse,
    Friend,
    Group,
    GroupConfig,
    Member,
    MemberInfo,
    MemberJoinResponse,
    NewFriendResponse,
    SessionConfig,
    TargetType,
)
from mirai_client.models.events import (
    BotInvitedJoinGroupRequestEvent,
    Event,
    MemberJoinRequestEvent,
    MessageEvent,
    NewFriendRequestEvent,
    decode_event,
    decode_events,
    quote_reply_target,
)
from mirai_client.models.segments import Image, Segment, as_chain, chain_to_wire
from mirai_client.transport.envelope import check_response
from mirai_client.transport.http import DEFAULT_BASE_URL, HttpClient
from mirai_client.transport.websocket import PushConnection
from mirai_client.workers import WorkerPool

T = TypeVar("T")
MessageLike = Union[str, Sequence[Segment]]

logger = logging.getLogger(__name__)

_FRIENDS = TypeAdapter(list[Friend])
_GROUPS = TypeAdapter(list[Group])
_MEMBERS = TypeAdapter(list[Member])
_IMAGE_IDS = TypeAdapter(list[str])
_INT = TypeAdapter(int)


def _decode(adapter: TypeAdapter, value: Any) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise DecodeError(f"Unexpected response shape: {e}", details={"body": value}) from e


class Session:
    def __init__(
        self,
        auth_key: str,
        qq: int,
        *,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._reset()
        self._http = HttpClient(base_url=base_url, transport=transport, timeout=timeout)
        try:
            res = self._http.post("/auth", {"authKey": auth_key})
            self._key = check_response(res, "session", error=AuthError)
            res = self._http.post("/verify", {"sessionKey": self._key, "qq": qq})
            check_response(res, error=BindError)
        except Exception:
            self._http.close()
            raise
        # Only a bound session may issue /release on close
        self._bound_account_id = qq
        logger.info("Session bound to account %s", qq)

    def _reset(self) -> None:
        self._key = ""
        self._bound_account_id: Optional[int] = None
        self._worker_pool: Optional[WorkerPool] = None
        self._push_connection: Optional[PushConnection] = None
        self._http: Optional[HttpClient] = None

    # -- state -----------------------------------------------------------

    @property
    def key(self) -> str:
        return self._key

    @property
    def bound_account_id(self) -> Optional[int]:
        return self._bound_account_id

    @property
    def valid(self) -> bool:
        return self._bound_account_id is not None

    def __bool__(self) -> bool:
        return self.valid

    @property
    def worker_pool(self) -> Optional[WorkerPool]:
        return self._worker_pool

    @property
    def push_connection(self) -> Optional[PushConnection]:
        return self._push_connection

    def __repr__(self) -> str:
        return f"Session(bound_account_id={self._bound_account_id!r}, valid={self.valid})"

    def __copy__(self) -> "Session":
        raise TypeError("Session cannot be copied; use move()")

    def __deepcopy__(self, memo: dict[int, Any]) -> "Session":
        raise TypeError("Session cannot be copied; use move()")

    # -- ownership transfer ----------------------------------------------

    def swap(self, other: "Session") -> None:
        self._key, other._key = other._key, self._key
        self._bound_account_id, other._bound_account_id = other._bound_account_id, self._bound_account_id
        self._worker_pool, other._worker_pool = other._worker_pool, self._worker_pool
        self._push_connection, other._push_connection = other._push_connection, self._push_connection
        self._http, other._http = other._http, self._http

    def move(self) -> "Session":
        """Transfer everything this session owns into a new Session.

        The source is left invalid: closing it has no remote effect and any
        API call on it raises SessionError.
        """
        moved = type(self).__new__(type(self))
        moved._reset()
        moved.swap(self)
        return moved

    def assign(self, other: "Session") -> "Session":
        """Take over `other`, closing whatever this session held before."""
        previous = other.move()
        self.swap(previous)
        previous.close()
        return self

    # -- teardown --------------------------------------------------------

    def close(self) -> None:
        """Release the remote session and every owned resource.

        A failure here leaves the remote session in an unknown state, so it
        aborts the process instead of raising.
        """
        if self._bound_account_id is not None:
            try:
                self.close_push_connection()
                self.destroy_worker_pool()
                res = self._client().post("/release", {"sessionKey": self._key, "qq": self._bound_account_id})
                check_response(res)
            except BaseException:
                logger.critical(
                    "Failed to release session bound to account %s; aborting",
                    self._bound_account_id, exc_info=True,
                )
                os.abort()
            else:
                logger.info("Session for account %s released", self._bound_account_id)
            self._bound_account_id = None
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- worker pool -----------------------------------------------------

    def start_worker_pool(self, workers: Optional[int] = None) -> None:
        self._client()
        if self._worker_pool is None:
            self._worker_pool = WorkerPool()
        self._worker_pool.start(workers)

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        """Run `fn` on the worker pool, starting it with default size if needed."""
        self.start_worker_pool()
        return self._worker_pool.submit(fn, *args, **kwargs)  # type: ignore[union-attr]

    def destroy_worker_pool(self) -> None:
        """Block until submitted work drains, then drop the pool. No-op without one."""
        pool, self._worker_pool = self._worker_pool, None
        if pool is not None:
            pool.destroy()

    # -- push connection -------------------------------------------------

    def open_push_connection(self, channel: str = "all", open_timeout: float = 10.0) -> PushConnection:
        if self._push_connection is None:
            connection = PushConnection(self._client().base_url, self._key, channel, open_timeout)
            connection.connect()
            self._push_connection = connection
        return self._push_connection

    def close_push_connection(self) -> None:
        connection, self._push_connection = self._push_connection, None
        if connection is not None:
            connection.close()

    # -- request plumbing ------------------------------------------------

    def _client(self) -> HttpClient:
        if self._http is None:
            raise SessionError("Session has been moved from or closed")
        return self._http

    def _get(self, path: str, **params: Any) -> Any:
        query = {"sessionKey": self._key}
        query.update({name: str(value) for name, value in params.items()})
        return self._client().get(path, query)

    def _post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return self._client().post(path, {"sessionKey": self._key, **(body or {})})

    def _send_chain(self, path: str, recipient: dict[str, int], message: MessageLike, quote: Optional[int]) -> int:
        body: dict[str, Any] = {**recipient, "messageChain": chain_to_wire(as_chain(message))}
        if quote is not None:
            body["quote"] = quote
        return _decode(_INT, check_response(self._post(path, body), "messageId"))

    # -- messages --------------------------------------------------------

    def send_friend_message(self, target: int, message: MessageLike, quote: Optional[int] = None) -> int:
        """Send to a friend; returns the new message id."""
        return self._send_chain("/sendFriendMessage", {"target": target}, message, quote)

    def send_temp_message(self, qq: int, group: int, message: MessageLike, quote: Optional[int] = None) -> int:
        """Send a temporary (group-private) message to a member of `group`."""
        return self._send_chain("/sendTempMessage", {"qq": qq, "group": group}, message, quote)

    def send_group_message(self, target: int, message: MessageLike, quote: Optional[int] = None) -> int:
        return self._send_chain("/sendGroupMessage", {"target": target}, message, quote)

    def send_quote_message(self, event: MessageEvent, message: MessageLike) -> int:
        """Reply to a received message, quoting it, to wherever it came from."""
        path, recipient, quote = quote_reply_target(event)
        return self._send_chain(path, recipient, message, quote)

    def send_image_message(
        self,
        urls: Sequence[str],
        qq: Optional[int] = None,
        group: Optional[int] = None,
    ) -> list[str]:
        """Send images by URL. Returns the image ids the server assigned."""
        body: dict[str, Any] = {"urls": list(urls)}
        if qq is not None:
            body["qq"] = qq
        if group is not None:
            body["group"] = group
        return _decode(_IMAGE_IDS, check_response(self._post("/sendImageMessage", body)))

    def send_friend_image_message(self, friend: int, urls: Sequence[str]) -> list[str]:
        return self.send_image_message(urls, qq=friend)

    def send_group_image_message(self, group: int, urls: Sequence[str]) -> list[str]:
        return self.send_image_message(urls, group=group)

    def send_temp_image_message(self, qq: int, group: int, urls: Sequence[str]) -> list[str]:
        return self.send_image_message(urls, qq=qq, group=group)

    def upload_image(self, target_type: Union[TargetType, str], path: Union[str, Path]) -> Image:
        """Upload a local image file; the returned segment can be sent in a chain."""
        res = self._client().upload(
            "/uploadImage",
            {"sessionKey": self._key, "type": TargetType(target_type).value},
            "img", path,
        )
        return _decode(TypeAdapter(Image), check_response(res))

    def recall(self, message_id: int) -> None:
        check_response(self._post("/recall", {"target": message_id}))

    # -- events ----------------------------------------------------------

    def _events(self, path: str, count: int) -> list[Event]:
        return decode_events(check_response(self._get(path, count=count), "data"))

    def fetch_events(self, count: int = 10) -> list[Event]:
        """Take the oldest `count` queued events off the server queue."""
        return self._events("/fetchMessage", count)

    def fetch_latest_events(self, count: int = 10) -> list[Event]:
        """Take the newest `count` queued events off the server queue."""
        return self._events("/fetchLatestMessage", count)

    def peek_events(self, count: int = 10) -> list[Event]:
        """Like fetch_events() but leaves the events queued."""
        return self._events("/peekMessage", count)

    def peek_latest_events(self, count: int = 10) -> list[Event]:
        return self._events("/peekLatestMessage", count)

    def count_events(self) -> int:
        return _decode(_INT, check_response(self._get("/countMessage"), "data"))

    def message_from_id(self, message_id: int) -> Event:
        return decode_event(check_response(self._get("/messageFromId", id=message_id), "data"))

    # -- contacts --------------------------------------------------------
    # These endpoints answer with a bare array, there is no envelope to check.

    def friend_list(self) -> list[Friend]:
        return _decode(_FRIENDS, self._get("/friendList"))

    def group_list(self) -> list[Group]:
        return _decode(_GROUPS, self._get("/groupList"))

    def member_list(self, target: int) -> list[Member]:
        return _decode(_MEMBERS, self._get("/memberList", target=target))

    # -- moderation ------------------------------------------------------

    def mute_all(self, target: int) -> None:
        check_response(self._post("/muteAll", {"target": target}))

    def unmute_all(self, target: int) -> None:
        check_response(self._post("/unmuteAll", {"target": target}))

    def mute(self, group: int, member: int, duration: Union[int, timedelta]) -> None:
        """Mute a member; `duration` in seconds or as a timedelta."""
        if isinstance(duration, timedelta):
            duration = int(duration.total_seconds())
        check_response(self._post("/mute", {"target": group, "memberId": member, "time": duration}))

    def unmute(self, group: int, member: int) -> None:
        check_response(self._post("/unmute", {"target": group, "memberId": member}))

    def kick(self, group: int, member: int, message: str = "") -> None:
        check_response(self._post("/kick", {"target": group, "memberId": member, "msg": message}))

    def quit(self, group: int) -> None:
        check_response(self._post("/quit", {"target": group}))

    # -- request events --------------------------------------------------

    def respond_new_friend_request(
        self,
        event: NewFriendRequestEvent,
        operate: Union[NewFriendResponse, int],
        message: str = "",
    ) -> None:
        check_response(self._post("/resp/newFriendRequestEvent", {
            "eventId": event.event_id,
            "fromId": event.from_id,
            "groupId": event.group_id or 0,
            "operate": int(NewFriendResponse(operate)),
            "message": message,
        }))

    def respond_member_join_request(
        self,
        event: MemberJoinRequestEvent,
        operate: Union[MemberJoinResponse, int],
        message: str = "",
    ) -> None:
        check_response(self._post("/resp/memberJoinRequestEvent", {
            "eventId": event.event_id,
            "fromId": event.from_id,
            "groupId": event.group_id,
            "operate": int(MemberJoinResponse(operate)),
            "message": message,
        }))

    def respond_bot_invited_join_group_request(
        self,
        event: BotInvitedJoinGroupRequestEvent,
        operate: Union[BotInvitedJoinGroupResponse, int],
        message: str = "",
    ) -> None:
        check_response(self._post("/resp/botInvitedJoinGroupRequestEvent", {
            "eventId": event.event_id,
            "fromId": event.from_id,
            "groupId": event.group_id,
            "operate": int(BotInvitedJoinGroupResponse(operate)),
            "message": message,
        }))

    # -- settings --------------------------------------------------------

    def get_group_config(self, target: int) -> GroupConfig:
        return _decode(TypeAdapter(GroupConfig), check_response(self._get("/groupConfig", target=target)))

    def set_group_config(self, target: int, config: GroupConfig) -> None:
        check_response(self._post("/groupConfig", {"target": target, "config": config.to_wire()}))

    def get_member_info(self, group: int, member: int) -> MemberInfo:
        res = self._get("/memberInfo", target=group, memberId=member)
        return _decode(TypeAdapter(MemberInfo), check_response(res))

    def set_member_info(
        self,
        group: int,
        member: int,
        name: Optional[str] = None,
        special_title: Optional[str] = None,
    ) -> None:
        """Change a member's card name and/or special title; unset fields are left alone."""
        info: dict[str, str] = {}
        if name is not None:
            info["name"] = name
        if special_title is not None:
            info["specialTitle"] = special_title
        check_response(self._post("/memberInfo", {"target": group, "memberId": member, "info": info}))

    def get_config(self) -> SessionConfig:
        return _decode(TypeAdapter(SessionConfig), check_response(self._get("/config")))

    def set_config(self, cache_size: Optional[int] = None, enable_websocket: Optional[bool] = None) -> None:
        body: dict[str, Any] = {}
        if cache_size is not None:
            body["cacheSize"] = cache_size
        if enable_websocket is not None:
            body["enableWebsocket"] = enable_websocket
        check_response(self._post("/config", body))
