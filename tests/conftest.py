" generic fixtures "
from dataclasses import dataclass, field

import pytest

from cloudbot.commands.handlers import BotCommands
from cloudbot.commands.tree import build_tree

COMMANDS_YAML = """\
zeta: last one
alpha: first one
project: Working on the twitch bot today.
"""


@dataclass
class Recorder:
    sent: list[str] = field(default_factory=list)
    printed: list[str] = field(default_factory=list)
    edited: list[tuple[str, str | None]] = field(default_factory=list)
    git: list[tuple[str, ...]] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def send(self, msg):
        self.sent.append(msg)

    def editor(self, path, editor=None):
        self.edited.append((path, editor))

    def read_line(self):
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class FakeGit:
    def __init__(self, recorder):
        self.recorder = recorder

    def commit(self, filename, message):
        self.recorder.git.append(("commit", filename, message))

    def push(self):
        self.recorder.git.append(("push",))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def commands_file(tmp_path):
    path = tmp_path / "commands.yaml"
    path.write_text(COMMANDS_YAML, encoding="utf8")
    return path


@pytest.fixture
def commands(recorder):
    return BotCommands(
        chat_sender=recorder.send,
        editor=recorder.editor,
        git=FakeGit(recorder),
        out=recorder.printed.append,
        read_line=recorder.read_line,
    )


@pytest.fixture
def tree(commands, commands_file):
    "Command tree with the commands file configured on the root"
    root = build_tree(commands)
    root.config["file"] = str(commands_file)
    return root
