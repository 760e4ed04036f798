"""
Integration tests for mirai-client — run against a real mirai HTTP API server.

Requires environment variables:
  MIRAI_AUTH_KEY  authKey from the server's setting.yml
  MIRAI_QQ        bot account logged in on the server
  MIRAI_BASE_URL  (optional) defaults to http://localhost:8080

Run: MIRAI_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest

from mirai_client import AuthError, Session

SKIP = not os.environ.get("MIRAI_INTEGRATION")
AUTH_KEY = os.environ.get("MIRAI_AUTH_KEY", "")
QQ = int(os.environ.get("MIRAI_QQ", "0"))
BASE_URL = os.environ.get("MIRAI_BASE_URL", "http://localhost:8080")

pytestmark = pytest.mark.skipif(SKIP, reason="MIRAI_INTEGRATION not set")


def make_session() -> Session:
    return Session(AUTH_KEY, QQ, base_url=BASE_URL)


class TestHandshake:
    def test_bind_and_release(self):
        with make_session() as session:
            assert session.valid
            assert session.key
        assert not session.valid

    def test_rejects_invalid_auth_key(self):
        with pytest.raises(AuthError):
            Session("definitely-not-the-key", QQ, base_url=BASE_URL)


class TestQueries:
    def test_contact_lists(self):
        with make_session() as session:
            assert isinstance(session.friend_list(), list)
            groups = session.group_list()
            if groups:
                assert session.member_list(groups[0].id) is not None

    def test_event_queue(self):
        with make_session() as session:
            pending = session.count_events()
            peeked = session.peek_events(5)
            assert len(peeked) <= max(pending, 5)

    def test_session_config(self):
        with make_session() as session:
            config = session.get_config()
            assert config.cache_size is None or config.cache_size > 0
