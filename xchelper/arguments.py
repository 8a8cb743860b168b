"""
arguments.py

Responsibility: Turn raw process arguments, the process environment and the
optional config file into an `ArgumentIndex` for one command.

The command line is parsed with argparse: one subparser per registered
command, built from `options.py`. Every option is parsed with `default=None`
so "not given" stays visible, and the remaining sources are layered on top:
1) explicit flag on the command line
2) the option's uppercase environment variable
3) the same uppercase key in the config file
4) the declared default

Nothing here has side effects beyond argparse's own `--help`/`--version`
output; everything else it reads is passed in.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Mapping, NoReturn, Sequence

from xchelper.errors import InvalidArgumentError, MissingArgumentError, UnknownCommandError
from xchelper.options import COMMAND_GROUPS, COMMANDS, CommandOption, find_command

ArgumentIndex = dict[str, list[str]]

_FALSE_STRINGS = {"", "0", "false", "no", "off"}
_TRUE_STRINGS = {"1", "true", "yes", "on"}

_COMMAND_DEST = "_command"


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises InvalidArgumentError instead of exiting on bad input."""

    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentError(f"{self.prog}: {message}")


def _metavar(option: CommandOption) -> str:
    long_flags = [f for f in option.flags if f.startswith("--")]
    return long_flags[0].lstrip("-").replace("-", "_").upper() if long_flags else "VALUE"


def _option_help(option: CommandOption) -> str:
    text = option.description
    if option.default is not None:
        text += f" (default: {option.default})"
    elif option.default_environment:
        text += f" (default: ${option.default_environment})"
    if option.environment_key:
        text += f" [env: {option.environment_key}]"
    return text


def _add_command_parser(subparsers: Any, command: CommandOption) -> None:
    p = subparsers.add_parser(
        command.name,
        aliases=[k for k in command.keys[1:] if k != command.name],
        help=command.description,
        description=command.description,
        epilog=command.usage,
        allow_abbrev=False,
    )
    if command.positional:
        p.add_argument(command.environment_key, metavar=command.positional, nargs=command.positional_nargs)

    for option in command.arguments:
        kwargs: dict[str, Any] = {"dest": option.environment_key, "default": None, "help": _option_help(option)}
        if option.requires_value:
            kwargs["metavar"] = _metavar(option)
        elif option.accepts_value:
            kwargs.update(nargs="?", const="", metavar=_metavar(option))
        else:
            kwargs["action"] = "store_true"
        p.add_argument(*option.flags, **kwargs)

    p.set_defaults(**{_COMMAND_DEST: command})


def build_parser(
    prog: str = "xchelper",
    description: str | None = None,
    version: str | None = None,
) -> ArgumentParser:
    parser = ArgumentParser(prog=prog, description=description, allow_abbrev=False)
    if version:
        parser.add_argument("--version", action="version", version=version)
    sub = parser.add_subparsers(title="commands", metavar="COMMAND")
    for group in COMMAND_GROUPS:
        for command in group.options:
            _add_command_parser(sub, command)
    return parser


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def _default_values(option: CommandOption, environ: Mapping[str, str]) -> list[str] | None:
    if option.default is not None:
        return [option.default]
    if option.default_environment and environ.get(option.default_environment):
        return [environ[option.default_environment]]
    return None


def _switch_values(option: CommandOption, raw: str, environ: Mapping[str, str]) -> list[str] | None:
    """Values for a switch set through the environment or config, None when it is off."""
    text = raw.strip()
    if text.lower() in _FALSE_STRINGS:
        return None
    if option.accepts_value and text.lower() not in _TRUE_STRINGS:
        return [text]
    return _default_values(option, environ) or []


def _resolve_option(
    option: CommandOption,
    parsed: Any,
    environ: Mapping[str, str],
    config: Mapping[str, list[str]],
) -> list[str] | None:
    if parsed is not None:
        if option.requires_value:
            return [str(parsed)]
        if option.accepts_value and parsed:
            return [str(parsed)]
        return _default_values(option, environ) or []

    env_key = option.environment_key
    raw: list[str] | None = None
    if env_key and env_key in environ:
        raw = [environ[env_key]]
    elif env_key and env_key in config:
        raw = list(config[env_key])

    if raw is not None:
        if option.requires_value:
            return raw
        return _switch_values(option, raw[0] if raw else "", environ)

    if option.requires_value:
        return _default_values(option, environ)
    return None


def resolve_arguments(
    command: CommandOption,
    namespace: argparse.Namespace,
    environ: Mapping[str, str],
    config: Mapping[str, list[str]] | None = None,
) -> ArgumentIndex:
    """
    Build the ArgumentIndex for `command` from its parsed Namespace.

    The command's own key is always present and holds its positional values
    in order.
    """
    config = config or {}
    env_key = command.environment_key
    positional = _as_list(getattr(namespace, env_key, None)) if command.positional else []

    if command.positional and not positional and env_key:
        if env_key in environ:
            positional = environ[env_key].split()
        elif env_key in config:
            positional = list(config[env_key])

    index: ArgumentIndex = {command.name: positional}
    for option in command.arguments:
        values = _resolve_option(option, getattr(namespace, option.environment_key, None), environ, config)
        if values is not None:
            index[option.name] = values
    return index


def parse_arguments(
    argv: Sequence[str],
    environ: Mapping[str, str],
    config: Mapping[str, list[str]] | None = None,
    parser: ArgumentParser | None = None,
) -> tuple[CommandOption, ArgumentIndex]:
    """
    Parse a full command line (`COMMAND [OPTIONS]`) into the matched command
    and its ArgumentIndex.

    An unrecognised command raises UnknownCommandError listing the commands.
    """
    available = [c.name for c in COMMANDS]
    if argv and not argv[0].startswith("-") and find_command(argv[0]) is None:
        raise UnknownCommandError(argv[0], available)

    namespace = (parser or build_parser()).parse_args(list(argv))
    command = getattr(namespace, _COMMAND_DEST, None)
    if command is None:
        raise UnknownCommandError(None, available)
    return command, resolve_arguments(command, namespace, environ, config)


def validate_required(command: CommandOption, index: ArgumentIndex) -> None:
    """Raise one MissingArgumentError naming every required option that is absent."""
    missing = [option.keys for option in command.required if not index.get(option.name)]
    if missing:
        raise MissingArgumentError(missing)


def resolve_source_path(index: ArgumentIndex, option_key: str | None) -> str:
    """Return the change-directory value when given, otherwise the current directory."""
    if option_key:
        values = index.get(option_key)
        if values:
            return str(Path(values[0]).expanduser().resolve())
    return os.getcwd()
