"""A small command tree with help, usage lines and flag parsing."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class UsageError(ValueError):
    """Raised when command-line arguments cannot be parsed."""


@dataclass
class Flag:
    """A command-line flag such as ``--namespace``."""

    name: str
    help: str = ""
    default: Any = ""
    short: str = ""
    takes_value: bool = True
    hidden: bool = False
    deprecated: str = ""

    @property
    def key(self) -> str:
        return self.name.lstrip("-")

    def matches(self, token: str) -> bool:
        return token == self.name or (bool(self.short) and token == f"-{self.short}")


@dataclass(eq=False)
class Command:
    """A command with optional sub-commands, flags and a handler."""

    use: str
    short: str = ""
    long: str = ""
    example: str = ""
    aliases: tuple = ()
    hidden: bool = False
    args: tuple = ()
    flags: list = field(default_factory=list)
    persistent_flags: list = field(default_factory=list)
    run: Optional[Callable[["Command", dict, list], None]] = None
    version: str = ""
    commands: list = field(default_factory=list)
    parent: Optional["Command"] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.use.split()[0]

    def add_command(self, command: "Command") -> "Command":
        command.parent = self
        self.commands.append(command)
        return command

    def command_path(self) -> str:
        return self.name if self.parent is None else f"{self.parent.command_path()} {self.name}"

    def walk(self):
        """Yield this command and every descendant, depth first."""
        yield self
        for command in self.commands:
            yield from command.walk()

    def root(self) -> "Command":
        return self if self.parent is None else self.parent.root()

    def visible_commands(self) -> list:
        return [command for command in self.commands if not command.hidden]

    def find(self, args) -> tuple:
        """Find the sub-command named by ``args``; return it and the remaining arguments."""
        command, rest, tokens, descending = self, [], iter(args), True
        for token in tokens:
            if token == "--":
                rest += [token, *tokens]
                break
            rest.append(token)
            if token.startswith("-"):
                flag = next((f for f in all_flags(command) if f.matches(token.split("=", 1)[0])), None)
                if flag is not None and flag.takes_value and "=" not in token:
                    rest.extend(v for v in [next(tokens, None)] if v is not None)
                continue
            child = next((c for c in command.commands if token == c.name or token in c.aliases), None)
            if descending and child is not None:
                rest.pop()
                command = child
            else:
                descending = False
        return command, rest

    def use_line(self) -> str:
        prefix = f"{self.parent.command_path()} " if self.parent is not None else ""
        return " ".join([prefix + self.use, *self.args, "[flags]"])

    def help_text(self) -> str:
        parts = []
        description = (self.long or self.short).strip()
        if description:
            parts.append(description + "\n\n")
        visible = self.visible_commands()
        usage = ["Usage:"]
        if self.run is not None:
            usage.append(f"  {self.use_line()}")
        if visible:
            usage.append(f"  {self.command_path()} [command]")
        parts.append("\n".join(usage) + "\n")
        if self.aliases:
            parts.append("\nAliases:\n  " + ", ".join((self.name, *self.aliases)) + "\n")
        if self.example:
            parts.append("\nExamples:\n" + textwrap.indent(self.example, "  ") + "\n")
        if visible:
            width = max(len(c.name) for c in visible)
            parts.append("\nAvailable Commands:\n")
            parts.extend(f"  {c.name.ljust(width)}   {c.short}\n" for c in visible)
        for title, flags in (("Flags", local_flags(self)), ("Global Flags", inherited_flags(self))):
            text = format_flags(flags)
            if text:
                parts.append(f"\n{title}:\n{text}")
        if visible:
            parts.append(f'\nUse "{self.command_path()} [command] --help" for more information about a command.\n')
        return "".join(parts)


def local_flags(command: Command) -> list:
    """Flags defined on the command itself, including ``--help``."""
    help_flag = Flag("--help", f"help for {command.name}", default=False, short="h", takes_value=False)
    return [*command.flags, *command.persistent_flags, help_flag]


def inherited_flags(command: Command) -> list:
    """Persistent flags defined on the command's ancestors."""
    parent = command.parent
    return [] if parent is None else [*parent.persistent_flags, *inherited_flags(parent)]


def all_flags(command: Command) -> list:
    return local_flags(command) + inherited_flags(command)


def format_flags(flags) -> str:
    """Render flags as aligned help lines."""
    entries = []
    for flag in flags:
        if flag.hidden or flag.deprecated:
            continue
        left = (f"-{flag.short}, " if flag.short else "    ") + flag.name
        text = flag.help
        if flag.takes_value:
            left += " string"
            if flag.default:
                text += f' (default "{flag.default}")'
        entries.append((left, text))
    width = max((len(left) for left, _ in entries), default=0)
    return "".join(f"  {left.ljust(width)}   {text}\n" for left, text in entries)


def parse_flags(command: Command, args) -> tuple:
    """Parse flag values for ``command``; return them with the positional arguments."""
    flags = all_flags(command)
    values = {flag.key: flag.default for flag in flags}
    positional: list = []
    tokens = iter(args)
    for token in tokens:
        if token == "--":
            positional.extend(tokens)
            break
        if not token.startswith("-") or token == "-":
            positional.append(token)
            continue
        name, eq, inline = token.partition("=")
        flag = next((f for f in flags if f.matches(name)), None)
        if flag is None:
            raise UsageError(f"unknown flag: {name}")
        if not flag.takes_value:
            value: Any = inline.lower() in ("true", "t", "1") if eq else True
        elif eq:
            value = inline
        else:
            value = next(tokens, None)
            if value is None:
                raise UsageError(f"flag needs an argument: {name}")
        values[flag.key] = value
    return values, positional