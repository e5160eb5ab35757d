from cloudbot.commands.handlers import BotCommands
from cloudbot.core.command import Node

SHORTCUTS = {
    "project": ["bot", "commands", "sync", "project"],
    "info": ["bot", "commands", "file", "edit"],
}


def help_node(commands: BotCommands) -> Node:
    return Node(
        name="help",
        summary="display help for a command",
        usage="[command...]",
        handler=commands.help,
    )


def conf_node(commands: BotCommands) -> Node:
    return Node(
        name="conf",
        summary="print configuration, or one value resolved by key",
        usage="[key]",
        handler=commands.conf,
    )


def build_tree(commands: BotCommands) -> Node:
    """Build the ``twitch`` command tree wired to ``commands``."""
    file_cmd = Node(
        name="file",
        summary="print the full path to commands file from configuration",
        params=frozenset({"edit"}),
        handler=commands.file,
    ).add(
        help_node(commands),
        Node(
            name="edit",
            summary="edit bot commands file with configured editor",
            handler=commands.file_edit,
        ),
    )

    commands_cmd = Node(
        name="commands",
        summary="update and list Twitch Streamlabs Cloudbot commands",
        aliases=("c", "cmd"),
    ).add(
        help_node(commands),
        Node(
            name="add",
            summary="add a command by name from file",
            usage="<name>",
            aliases=("a",),
            min_args=1,
            handler=commands.add,
        ),
        Node(
            name="edit",
            summary="edit a command with !editcommand",
            usage="<command> <msg>",
            aliases=("e",),
            min_args=1,
            handler=commands.edit,
        ),
        Node(
            name="list",
            summary="list existing commands from commands file",
            aliases=("l",),
            handler=commands.list_commands,
        ),
        Node(
            name="remove",
            summary="remove a command with !rmcommand",
            usage="<command>",
            aliases=("rm",),
            min_args=1,
            handler=commands.remove,
        ),
        file_cmd,
        Node(
            name="sync",
            summary="sync a command from YAML file to Twitch",
            usage="<command>",
            min_args=1,
            handler=commands.sync,
        ),
        Node(
            name="commit",
            summary="commit and push the commands file",
            handler=commands.commit,
        ),
    )

    bot_cmd = Node(name="bot", summary="bot-related commands").add(
        help_node(commands), conf_node(commands), commands_cmd
    )

    return Node(
        name="twitch",
        summary="collection of twitch helper commands",
        shortcuts=dict(SHORTCUTS),
    ).add(
        help_node(commands),
        conf_node(commands),
        bot_cmd,
        Node(
            name="chat",
            summary="sends all arguments as a single string to Twitch chat",
            usage="[text...]",
            handler=commands.chat,
        ),
    )
