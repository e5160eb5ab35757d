"""Tests for the chat senders and the Helix client behind them."""

import json
import subprocess
from unittest.mock import Mock

import pytest

from cloudbot.core.api import TwitchAPI
from cloudbot.core.auth import TwitchAuth
from cloudbot.core.chat import ExecChatSender, HelixChatSender, build_chat_sender
from cloudbot.core.command import Node
from cloudbot.core.errors import CollaboratorError, InvalidTokenError, NoTokenError


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json = json_data or {}
        self.text = text or json.dumps(self._json)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._json


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "auth.json"
    path.write_text(json.dumps({"access_token": "abc", "refresh_token": "def"}))
    return path


@pytest.fixture
def api(token_file):
    return TwitchAPI(TwitchAuth(client_id="cid", client_secret="secret", auth_json=str(token_file)))


@pytest.fixture
def fake_users(monkeypatch):
    ids = {"streamer": "1", "botty": "2"}

    def get(url, params=None, headers=None, timeout=None):
        login = params["login"]
        return FakeResponse(json_data={"data": [{"id": ids[login]}] if login in ids else []})

    monkeypatch.setattr("cloudbot.core.api.requests.get", get)


class TestExecChatSender:
    def test_runs_program(self, monkeypatch):
        run = Mock()
        monkeypatch.setattr("cloudbot.core.shell.subprocess.run", run)
        ExecChatSender("chat")("!rmcommand !foo")
        run.assert_called_once_with(["chat", "!rmcommand !foo"], check=True, cwd=None)

    def test_failed_program(self, monkeypatch):
        run = Mock(side_effect=subprocess.CalledProcessError(1, ["chat"]))
        monkeypatch.setattr("cloudbot.core.shell.subprocess.run", run)
        with pytest.raises(CollaboratorError, match="status 1"):
            ExecChatSender()("hi")

    def test_missing_program(self, monkeypatch):
        run = Mock(side_effect=FileNotFoundError())
        monkeypatch.setattr("cloudbot.core.shell.subprocess.run", run)
        with pytest.raises(CollaboratorError, match="not found"):
            ExecChatSender("nochat")("hi")


class TestBuildChatSender:
    def test_default(self):
        sender = build_chat_sender(Node(name="chat"))
        assert isinstance(sender, ExecChatSender)
        assert sender.program == "chat"

    def test_program(self):
        sender = build_chat_sender(Node(name="chat", config={"program": "say"}))
        assert sender.program == "say"

    def test_helix(self, tmp_path, token_file):
        env_file = tmp_path / ".env"
        env_file.write_text("CLIENT_ID=cid\nCLIENT_SECRET=secret\n")
        node = Node(
            name="chat",
            config={
                "sender": "helix",
                "env_file": str(env_file),
                "token_file": str(token_file),
                "broadcaster_login": "streamer",
                "bot_login": "botty",
            },
        )
        sender = build_chat_sender(node)
        assert isinstance(sender, HelixChatSender)
        assert sender.api.auth.client_id == "cid"
        assert sender.broadcaster_login == "streamer"

    def test_unknown(self):
        with pytest.raises(CollaboratorError):
            build_chat_sender(Node(name="chat", config={"sender": "pigeon"}))


class TestHelixChatSender:
    def test_send(self, api, fake_users, monkeypatch):
        post = Mock(return_value=FakeResponse(json_data={"data": [{"is_sent": True}]}))
        monkeypatch.setattr("cloudbot.core.api.requests.post", post)
        HelixChatSender(api, "streamer", "botty")("hello chat")
        _, kwargs = post.call_args
        assert kwargs["json"] == {
            "broadcaster_id": "1",
            "sender_id": "2",
            "message": "hello chat",
        }
        assert kwargs["headers"]["Authorization"] == "Bearer abc"

    def test_refresh_on_401(self, api, fake_users, monkeypatch, token_file):
        responses = [
            FakeResponse(401, text="invalid token"),
            FakeResponse(json_data={"access_token": "new", "refresh_token": "r2"}),
            FakeResponse(json_data={"data": [{"is_sent": True}]}),
        ]
        post = Mock(side_effect=responses)
        monkeypatch.setattr("cloudbot.core.api.requests.post", post)
        monkeypatch.setattr("cloudbot.core.auth.requests.post", post)
        HelixChatSender(api, "streamer", "botty")("hello")
        assert post.call_count == 3
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer new"
        assert json.loads(token_file.read_text()) == {"token": "new", "refresh": "r2"}

    def test_dropped_message(self, api, fake_users, monkeypatch):
        dropped = {"data": [{"is_sent": False, "drop_reason": {"message": "slow mode"}}]}
        monkeypatch.setattr(
            "cloudbot.core.api.requests.post", Mock(return_value=FakeResponse(json_data=dropped))
        )
        with pytest.raises(CollaboratorError, match="slow mode"):
            HelixChatSender(api, "streamer", "botty")("hello")

    def test_unknown_user(self, api, fake_users):
        with pytest.raises(CollaboratorError, match="nobody"):
            HelixChatSender(api, "nobody", "botty")("hello")

    def test_no_token(self, tmp_path):
        auth = TwitchAuth(auth_json=str(tmp_path / "missing.json"))
        with pytest.raises(NoTokenError):
            auth.token


class TestTokenFile:
    @pytest.mark.parametrize("content", ["{not json", "[]", '{"refresh_token": "r"}'])
    def test_unusable_token_file(self, tmp_path, content):
        path = tmp_path / "auth.json"
        path.write_text(content)
        with pytest.raises(InvalidTokenError):
            TwitchAuth(auth_json=str(path)).token

    def test_saved_shape(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text(json.dumps({"token": "abc", "refresh": "def"}))
        token = TwitchAuth(auth_json=str(path)).token
        assert (token.token, token.refresh) == ("abc", "def")

    def test_refresh_needs_refresh_token(self, tmp_path, monkeypatch):
        path = tmp_path / "auth.json"
        path.write_text(json.dumps({"access_token": "abc"}))
        post = Mock()
        monkeypatch.setattr("cloudbot.core.auth.requests.post", post)
        with pytest.raises(InvalidTokenError):
            TwitchAuth(auth_json=str(path)).refresh_token()
        post.assert_not_called()
