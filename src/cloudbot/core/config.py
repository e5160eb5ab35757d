import configparser
import logging
import os
from typing import Optional

from cloudbot.core.command import Node

bot_logger = logging.getLogger("cloudbot.config")

DEFAULT_CONFIG_FILE = "twitch.cfg"
TRUTHY = {"1", "yes", "true", "on"}
ROOT_DEFAULTS = "DEFAULT"


def read_config(path: str) -> configparser.ConfigParser:
    # No section inherits from [DEFAULT]; it is read like any other section
    # and applied to the root, so parents still win over it.
    bot_cfg = configparser.ConfigParser(interpolation=None, default_section="")
    if not bot_cfg.read(path, encoding="utf8"):
        bot_logger.info(f"No configuration found at {path}")
    return bot_cfg


def apply_config(root: Node, bot_cfg: configparser.ConfigParser) -> Node:
    """Copy each ``[dotted.node.path]`` section onto the matching node."""
    sections = {node.section: node for node in root.walk()}
    root.config.update(bot_cfg.defaults())
    if bot_cfg.has_section(ROOT_DEFAULTS):
        root.config.update(bot_cfg[ROOT_DEFAULTS])
    for section in bot_cfg.sections():
        if section == ROOT_DEFAULTS:
            continue
        if (node := sections.get(section)) is None:
            bot_logger.warning(f"Ignoring unknown config section [{section}]")
            continue
        node.config.update(bot_cfg[section])
    return root


def commands_file(node: Node) -> str:
    return os.path.expanduser(node.resolve("file").strip())


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY
