"""Command tree, dispatch and hierarchical configuration lookup."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from cloudbot.core.errors import (
    DuplicateCommandError,
    MissingConfig,
    UnknownCommand,
    UsageError,
)

bot_logger = logging.getLogger("cloudbot.router")

Handler = Callable[..., None]


@dataclass(eq=False)
class Node:
    name: str
    summary: str = ""
    usage: str = ""
    aliases: tuple[str, ...] = ()
    params: frozenset[str] = frozenset()
    min_args: int = 0
    handler: Optional[Handler] = None
    config: dict[str, str] = field(default_factory=dict)
    shortcuts: dict[str, list[str]] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list, init=False)
    parent: Optional["Node"] = field(default=None, init=False, repr=False)

    @property
    def names(self) -> set[str]:
        return {self.name, *self.aliases}

    @property
    def root(self) -> "Node":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def lineage(self) -> list["Node"]:
        """Nodes from the root down to this one."""
        return list(self.ancestors())[::-1]

    @property
    def path(self) -> str:
        return " ".join(node.name for node in self.lineage)

    @property
    def section(self) -> str:
        return ".".join(node.name for node in self.lineage)

    def ancestors(self) -> Iterator["Node"]:
        """Yield this node, then each parent up to the root."""
        node = self
        while node is not None:
            yield node
            node = node.parent

    def walk(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def add(self, *children: "Node") -> "Node":
        for child in children:
            if child.parent is not None:
                raise DuplicateCommandError(
                    f"{child.name} already belongs to {child.parent.path}"
                )
            if any(node is child for node in self.ancestors()):
                raise DuplicateCommandError(
                    f"{child.name} can't be added below itself"
                )
            for sibling in self.children:
                if clash := sibling.names & child.names:
                    raise DuplicateCommandError(
                        f"{self.path}: {', '.join(sorted(clash))} already taken "
                        f"by {sibling.name}"
                    )
            child.parent = self
            self.children.append(child)
        return self

    def child(self, token: str) -> Optional["Node"]:
        for child in self.children:
            if token in child.names:
                return child
        return None

    def find(self, *tokens: str) -> "Node":
        node = self
        for token in tokens:
            if (child := node.child(token)) is None:
                raise UnknownCommand(token)
            node = child
        return node

    def resolve(self, key: str) -> str:
        for node in self.ancestors():
            if value := node.config.get(key):
                return value
        raise MissingConfig(key)

    def lookup(self, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return self.resolve(key)
        except MissingConfig:
            return default

    def match(self, args: list[str]) -> tuple["Node", list[str]]:
        """Find the deepest node named by the leading tokens of ``args``.

        Shortcuts are expanded on the first token only. Returns the node
        and whatever tokens were left over.
        """
        args = list(args)
        if args and args[0] in self.shortcuts:
            args = [*self.shortcuts[args[0]], *args[1:]]
        node = self
        while args and (child := node.child(args[0])) is not None:
            node = child
            args = args[1:]
        return node, args

    def dispatch(self, args: list[str]) -> None:
        node, args = self.match(args)
        bot_logger.debug(f"Dispatching to {node.path} with {args}")
        if len(args) < node.min_args:
            raise UsageError(node.path, node.usage)
        if node.handler is not None:
            node.handler(node, *args)
        elif args:
            raise UnknownCommand(args[0])
        elif (help_node := node.child("help")) is not None and help_node.handler:
            help_node.handler(help_node)
        else:
            raise UsageError(node.path, node.usage or "<command>")
