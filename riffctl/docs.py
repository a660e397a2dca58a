"""Markdown documentation for a command tree."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from riffctl.command import Command, format_flags, inherited_flags, local_flags
from riffctl.config import DIRECTORY_FLAG, NO_COLOR_FLAG, FieldErrors, error_missing_field


def front_matter(filename: str) -> str:
    """Front matter for a generated Markdown document."""
    base = Path(filename).stem
    doc_id = base.replace("_", "-")
    title = base.replace("_", " ")
    return f'---\nid: {doc_id}\ntitle: "{title}"\n---\n'


def _filename(command: Command) -> str:
    return command.command_path().replace(" ", "_") + ".md"


def _markdown(command: Command) -> str:
    lines = [f"## {command.command_path()}", "", command.short, ""]
    if command.long:
        lines += ["### Synopsis", "", command.long, ""]
    if command.run is not None:
        lines += ["```", command.use_line(), "```", ""]
    if command.example:
        lines += ["### Examples", "", "```", command.example, "```", ""]
    local = format_flags(local_flags(command))
    if local:
        lines += ["### Options", "", "```", local.rstrip("\n"), "```", ""]
    inherited = format_flags(inherited_flags(command))
    if inherited:
        lines += ["### Options inherited from parent commands", "", "```", inherited.rstrip("\n"), "```", ""]
    see_also = []
    if command.parent is not None:
        see_also.append(f"* [{command.parent.command_path()}]({_filename(command.parent)})\t - {command.parent.short}")
    for child in sorted(command.visible_commands(), key=lambda c: c.name):
        see_also.append(f"* [{child.command_path()}]({_filename(child)})\t - {child.short}")
    if see_also:
        lines += ["### SEE ALSO", "", *see_also, ""]
    return "\n".join(lines)


def generate_markdown_tree(root: Command, directory) -> list[Path]:
    """Write a Markdown file for ``root`` and each visible descendant."""
    written = []
    directory = Path(directory)

    def visit(command: Command) -> None:
        path = directory / _filename(command)
        path.write_text(front_matter(path.name) + _markdown(command), encoding="utf-8")
        written.append(path)
        for child in command.visible_commands():
            visit(child)

    visit(root)
    return written


@dataclass
class DocsOptions:
    directory: str = "docs"

    def validate(self) -> FieldErrors:
        errors = FieldErrors()
        if not self.directory:
            errors = errors.also(error_missing_field(DIRECTORY_FLAG))
        return errors

    def exec(self, root: Command) -> list[Path]:
        os.makedirs(self.directory, mode=0o744, exist_ok=True)
        for flag in (*root.flags, *root.persistent_flags):
            if flag.name == NO_COLOR_FLAG:
                # documented default must not depend on the environment
                flag.default = False
        return generate_markdown_tree(root, self.directory)