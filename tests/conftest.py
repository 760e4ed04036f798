"""Shared fixtures: an in-process fake mirai HTTP API behind httpx.MockTransport."""

import json
from typing import Any, Callable, Union

import httpx
import pytest

from mirai_client import Session

AUTH_KEY = "INITKEY-test"
SESSION_KEY = "SK-abc123"
BOT_QQ = 123456

Route = Union[dict, list, httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeMirai:
    """Answers each (method, path) with a canned response and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {
            ("POST", "/auth"): {"code": 0, "session": SESSION_KEY},
            ("POST", "/verify"): {"code": 0, "msg": "success"},
            ("POST", "/release"): {"code": 0, "msg": "success"},
        }
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, response: Route) -> None:
        self.routes[(method, path)] = response

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, text=f"no route for {request.url.path}")
        if isinstance(response, httpx.Response):
            return response
        if callable(response):
            return response(request)
        return httpx.Response(200, json=response)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def body(self, path: str) -> dict[str, Any]:
        """JSON body of the last POST to `path`."""
        return json.loads(self.calls(path)[-1].content)

    def params(self, path: str) -> dict[str, str]:
        return dict(self.calls(path)[-1].url.params)


@pytest.fixture
def mirai() -> FakeMirai:
    return FakeMirai()


@pytest.fixture
def session(mirai):
    s = Session(AUTH_KEY, BOT_QQ, transport=mirai.transport)
    yield s
    s.close()


def friend_node(qq: int = 42, nickname: str = "alice") -> dict[str, Any]:
    return {"id": qq, "nickname": nickname, "remark": ""}


def member_node(qq: int = 42, group: int = 9000) -> dict[str, Any]:
    return {
        "id": qq,
        "memberName": "bob",
        "permission": "MEMBER",
        "group": {"id": group, "name": "test group", "permission": "ADMINISTRATOR"},
    }


def chain_nodes(source_id: int = 100, text: str = "hello") -> list[dict[str, Any]]:
    return [
        {"type": "Source", "id": source_id, "time": 1600000000},
        {"type": "Plain", "text": text},
    ]


def friend_message_node(qq: int = 42, source_id: int = 100, text: str = "hello") -> dict[str, Any]:
    return {"type": "FriendMessage", "messageChain": chain_nodes(source_id, text), "sender": friend_node(qq)}


def group_message_node(qq: int = 42, group: int = 9000, source_id: int = 100) -> dict[str, Any]:
    return {"type": "GroupMessage", "messageChain": chain_nodes(source_id), "sender": member_node(qq, group)}


def temp_message_node(qq: int = 42, group: int = 9000, source_id: int = 100) -> dict[str, Any]:
    return {"type": "TempMessage", "messageChain": chain_nodes(source_id), "sender": member_node(qq, group)}
