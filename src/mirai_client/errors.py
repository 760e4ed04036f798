"""
mirai client error types.

Every failure surfaced to a caller is a MiraiError; the subclasses only say
which step produced it.
"""

from typing import Any, Optional


class MiraiError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class AuthError(MiraiError):
    """Phase 1 of the handshake (/auth) was rejected."""

    def __init__(self, message: str, code: str = "auth_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class BindError(MiraiError):
    """Phase 2 of the handshake (/verify) was rejected."""

    def __init__(self, message: str, code: str = "bind_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class RequestError(MiraiError):
    """The server answered with a nonzero envelope status."""

    def __init__(self, message: str, code: str = "request_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class TransportError(MiraiError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("transport_error", message, details)


class DecodeError(MiraiError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("decode_error", message, details)


class SessionError(MiraiError):
    def __init__(self, message: str):
        super().__init__("session_error", message)
