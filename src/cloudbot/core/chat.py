"""Ways of getting a message into Twitch chat."""

import logging
from typing import Callable

from dotenv import dotenv_values

from cloudbot.core.api import TwitchAPI
from cloudbot.core.auth import TwitchAuth
from cloudbot.core.command import Node
from cloudbot.core.errors import CollaboratorError
from cloudbot.core.shell import run

bot_logger = logging.getLogger("cloudbot.chat")

ChatSender = Callable[[str], None]


class ExecChatSender:
    """Hands the message to an external program, ``chat`` by default."""

    def __init__(self, program: str = "chat") -> None:
        self.program = program

    def __call__(self, msg: str) -> None:
        bot_logger.info(f"{self.program}: [{msg}]")
        run([self.program, msg])


class HelixChatSender:
    """Posts the message through the Helix chat/messages endpoint."""

    def __init__(self, api: TwitchAPI, broadcaster_login: str, bot_login: str):
        self.api = api
        self.broadcaster_login = broadcaster_login
        self.bot_login = bot_login

    def __call__(self, msg: str) -> None:
        self.api.send_chat_message(
            self.api.get_id_from_login(self.broadcaster_login),
            self.api.get_id_from_login(self.bot_login),
            msg,
        )


def build_chat_sender(node: Node) -> ChatSender:
    """Build the sender configured on ``node`` (normally the chat command)."""
    sender = node.lookup("sender", "exec")
    match sender:
        case "exec":
            return ExecChatSender(node.lookup("program", "chat"))
        case "helix":
            env = dotenv_values(node.lookup("env_file", ".env"))
            auth = TwitchAuth(
                client_id=env.get("CLIENT_ID") or "",
                client_secret=env.get("CLIENT_SECRET") or "",
                auth_json=node.lookup("token_file", "data/auth.json"),
            )
            return HelixChatSender(
                TwitchAPI(auth),
                node.resolve("broadcaster_login"),
                node.resolve("bot_login"),
            )
    raise CollaboratorError(f"Unknown chat sender: {sender}")
