"""Small yq-style queries against a YAML file.

Only the two forms the bot commands need are understood: ``keys`` and
dotted paths such as ``.`` or ``.project`` or ``.links.discord``.
Collections come back rendered as YAML, scalars as plain text.
"""

import logging
import re
from typing import Any

import yaml

from cloudbot.core.errors import CollaboratorError

bot_logger = logging.getLogger("cloudbot.yaml")

BOOL_TAG = "tag:yaml.org,2002:bool"


class CommandsLoader(yaml.SafeLoader):
    pass


class CommandsDumper(yaml.SafeDumper):
    pass


def core_booleans(cls) -> None:
    """Only true/false are booleans, as in YAML 1.2; yes/no/on/off stay text."""
    cls.yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
        for first, resolvers in cls.yaml_implicit_resolvers.items()
    }
    cls.add_implicit_resolver(
        BOOL_TAG,
        re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
        list("tTfF"),
    )


core_booleans(CommandsLoader)
core_booleans(CommandsDumper)


def evaluate(expression: str, path: str) -> str:
    return render(query(load_document(path), expression))


def load_document(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf8") as yfh:
            return yaml.load(yfh, Loader=CommandsLoader)
    except OSError as exc:
        raise CollaboratorError(f"Unable to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CollaboratorError(f"Invalid YAML in {path}: {exc}") from exc


def query(document: Any, expression: str) -> Any:
    expression = expression.strip()
    if expression == "keys":
        if isinstance(document, dict):
            return list(document)
        if isinstance(document, list):
            return list(range(len(document)))
        raise CollaboratorError("keys needs a mapping or a sequence")
    if not expression.startswith("."):
        raise CollaboratorError(f"Unsupported expression: {expression}")

    value = document
    for part in filter(None, expression[1:].split(".")):
        if isinstance(value, dict) and part in value:
            value = value[part]
        elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
            value = value[int(part)]
        else:
            raise CollaboratorError(f"Nothing found at {expression}")
    bot_logger.debug(f"{expression} -> {value!r}")
    return value


def render(value: Any) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case dict() | list():
            return yaml.dump(
                value,
                Dumper=CommandsDumper,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            ).rstrip("\n")
    return str(value)
