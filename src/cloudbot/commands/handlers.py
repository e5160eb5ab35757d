"""Handlers behind every node of the ``twitch`` command tree.

Handlers take the node they were dispatched to plus the remaining
arguments. They compose by calling each other directly, e.g. ``add``
sends ``!addcommand`` through ``chat`` and then runs ``sync``.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

import click

from cloudbot.commands.help import render_help
from cloudbot.core import yaml_query
from cloudbot.core.chat import ChatSender, build_chat_sender
from cloudbot.core.command import Node
from cloudbot.core.config import commands_file, is_truthy
from cloudbot.core.errors import CollaboratorError, MessageTooLong, UsageError
from cloudbot.core.shell import Git, edit_file

bot_logger = logging.getLogger("cloudbot.commands")

MESSAGE_LIMIT = 380


def bang(name: str) -> str:
    return name if name.startswith("!") else f"!{name}"


def prompt_line() -> str:
    return click.prompt("", prompt_suffix="> ", default="", show_default=False)


class BotCommands:
    def __init__(
        self,
        chat_sender: Optional[ChatSender] = None,
        yaml_evaluator: Callable[[str, str], str] = yaml_query.evaluate,
        editor: Callable[[str, Optional[str]], None] = edit_file,
        git: Optional[Git] = None,
        out: Callable[[str], None] = click.echo,
        read_line: Callable[[], str] = prompt_line,
    ) -> None:
        self.chat_sender = chat_sender
        self.yaml_evaluator = yaml_evaluator
        self.editor = editor
        self.git = git or Git()
        self.out = out
        self.read_line = read_line

    def sender_for(self, node: Node) -> ChatSender:
        if self.chat_sender is None:
            self.chat_sender = build_chat_sender(node.root.find("chat"))
        return self.chat_sender

    def chat(self, node: Node, *args: str) -> None:
        if not args:
            self.chat_repl(node)
            return
        self.sender_for(node)(" ".join(args))

    def chat_repl(self, node: Node) -> None:
        """Send each line typed until end of input."""
        while True:
            try:
                line = self.read_line()
            except (EOFError, click.Abort):
                return
            if line.strip():
                self.sender_for(node)(line)

    def add(self, node: Node, *args: str) -> None:
        self.chat(node, "!addcommand", args[0], "some")
        self.sync(node, args[0])

    def remove(self, node: Node, *args: str) -> None:
        self.chat(node, "!rmcommand", bang(args[0]))

    def edit(self, node: Node, *args: str) -> None:
        msg = " ".join(args[1:])
        self.chat(node, "!editcommand", bang(args[0]), msg)

    def sync(self, node: Node, *args: str) -> None:
        if len(args) != 1:
            raise UsageError(node.path, node.usage or "<command>")
        msg = self.yaml_evaluator(f".{args[0]}", commands_file(node))
        length = len(msg.encode("utf8"))
        if length > MESSAGE_LIMIT:
            raise MessageTooLong(length, MESSAGE_LIMIT)
        bot_logger.info(f"Message body length: {length}")
        self.edit(node, args[0], msg)

    def list_commands(self, node: Node, *_args: str) -> None:
        buf = self.yaml_evaluator("keys", commands_file(node))
        # a "- " inside a key name is dropped as well
        buf = " !".join(sorted(buf.splitlines())).replace("- ", "")
        self.out(f"!{buf}")

    def file(self, node: Node, *_args: str) -> None:
        self.out(commands_file(node))

    def file_edit(self, node: Node, *_args: str) -> None:
        self.editor(commands_file(node), node.lookup("editor"))
        if is_truthy(node.lookup("autocommit")):
            self.commit(node)

    def commit(self, node: Node, *_args: str) -> None:
        path = Path(commands_file(node))
        bot_logger.info(f"Changing to directory: {path.parent}")
        try:
            os.chdir(path.parent)
        except OSError as exc:
            raise CollaboratorError(f"Unable to change to {path.parent}: {exc}") from exc
        self.git.commit(path.name, f"Update {path.name}")
        self.git.push()

    def conf(self, node: Node, *args: str) -> None:
        target = node.parent or node
        if args:
            self.out(target.resolve(args[0]))
            return
        for configured in target.root.walk():
            for key, value in configured.config.items():
                self.out(f"{configured.section}.{key}={value}")

    def help(self, node: Node, *args: str) -> None:
        target = node.parent or node
        self.out(render_help(target.find(*args)))
