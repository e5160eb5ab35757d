"""CLI for twitch-cloudbot."""

import logging
import sys

import click

from cloudbot.commands.handlers import BotCommands
from cloudbot.commands.tree import build_tree
from cloudbot.core.config import DEFAULT_CONFIG_FILE, apply_config, read_config
from cloudbot.core.errors import CloudbotError

bot_logger = logging.getLogger("cloudbot")


def setup_logging(verbose: int) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level={0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.option(
    "--config",
    "config_file",
    default=DEFAULT_CONFIG_FILE,
    envvar="TWITCH_CONFIG",
    show_default=True,
    type=click.Path(dir_okay=False),
    help="INI file with one [twitch.<command>] section per command.",
)
@click.option("-v", "--verbose", count=True, help="Log more, repeat for debug.")
@click.version_option(package_name="twitch-cloudbot")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(config_file: str, verbose: int, args: tuple[str, ...]) -> None:
    """twitch, a collection of twitch helper commands!

    Run `twitch help` for the command tree.
    """
    setup_logging(verbose)
    root = apply_config(build_tree(BotCommands()), read_config(config_file))
    try:
        root.dispatch(list(args))
    except CloudbotError as exc:
        bot_logger.debug("Command failed", exc_info=True)
        error = click.ClickException(exc.message)
        error.exit_code = exc.exit_code
        raise error from exc
