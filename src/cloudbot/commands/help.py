import click

from cloudbot.core.command import Node


def label(node: Node) -> str:
    if node.aliases:
        return f"{node.name} ({', '.join(node.aliases)})"
    return node.name


def render_help(node: Node) -> str:
    formatter = click.HelpFormatter()
    usage = node.usage or ("<command>" if node.children else "")
    formatter.write_usage(node.path, usage)
    if node.summary:
        formatter.write_paragraph()
        formatter.write_text(node.summary)
    if node.params:
        with formatter.section("Parameters"):
            formatter.write_text(", ".join(sorted(node.params)))
    if node.children:
        with formatter.section("Commands"):
            formatter.write_dl([(label(child), child.summary) for child in node.children])
    return formatter.getvalue().rstrip("\n")
