"""
WebSocket push connection.

Connection: ws://{host}/{channel}?sessionKey={key}, channel one of
"message", "event" or "all". Each text frame is one event object.
There is no receive loop and no reconnect here; the caller drives receive().
"""

import json
import logging
from typing import Optional

import httpx
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from mirai_client.errors import DecodeError, TransportError
from mirai_client.models.events import Event, decode_event

CHANNELS = ("message", "event", "all")

logger = logging.getLogger(__name__)


def push_url(base_url: str, channel: str, session_key: str) -> str:
    url = httpx.URL(f"{base_url.rstrip('/')}/{channel}", params={"sessionKey": session_key})
    return str(url.copy_with(scheme="wss" if url.scheme == "https" else "ws"))


class PushConnection:
    def __init__(
        self,
        base_url: str,
        session_key: str,
        channel: str = "all",
        open_timeout: float = 10.0,
    ):
        if channel not in CHANNELS:
            raise ValueError(f"Unknown push channel {channel!r}, expected one of {CHANNELS}")
        self._channel = channel
        self._url = push_url(base_url, channel, session_key)
        self._open_timeout = open_timeout
        self._ws: Optional[ClientConnection] = None

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def connected(self) -> bool:
        return self._ws is not None

    def connect(self) -> None:
        if self._ws is not None:
            return
        try:
            self._ws = connect(self._url, open_timeout=self._open_timeout)
        except (OSError, WebSocketException) as e:
            raise TransportError(f"WebSocket connect to /{self._channel} failed: {e}") from e
        logger.info("Push connection opened on /%s", self._channel)

    def receive(self, timeout: Optional[float] = None) -> Event:
        """Block for the next pushed frame and decode it.

        Raises TimeoutError when `timeout` elapses without a frame.
        """
        if self._ws is None:
            raise TransportError("Push connection is not open")
        try:
            frame = self._ws.recv(timeout)
        except ConnectionClosed as e:
            raise TransportError(f"Push connection closed: {e}") from e
        try:
            node = json.loads(frame)
        except ValueError as e:
            raise DecodeError(f"Pushed frame is not JSON: {str(frame)[:200]}") from e
        return decode_event(node)

    def close(self) -> None:
        ws, self._ws = self._ws, None
        if ws is None:
            return
        ws.close()
        logger.info("Push connection on /%s closed", self._channel)
