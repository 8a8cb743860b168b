"""
cli.py

Responsibility: CLI entrypoint and command dispatch for xchelper.

High-level flow:
1) Parse `COMMAND [OPTIONS]` with the argparse subparsers built from the
   command registry (`arguments.build_parser`)
2) Layer environment, config and defaults over the parsed flags
3) Validate required options, all at once
4) Run the handler for the command's kind (`commands.py`) against `XcodeHelper`
5) Print the handler's result line, if any

Every XcHelperError ends here: one `ERROR:` line on stderr and its exit code.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Sequence

from xchelper import __version__
from xchelper.arguments import ArgumentParser, build_parser, parse_arguments, validate_required
from xchelper.commands import HANDLERS
from xchelper.config import configure_logging, load_config
from xchelper.errors import XcHelperError
from xchelper.helper import XcodeHelper
from xchelper.options import environment_keys

logger = logging.getLogger(__name__)

APP_NAME = "xchelper"
APP_DESCRIPTION = (
    "xchelper keeps you in Xcode and off the command line. You can build and run tests on Linux "
    "through Docker, fetch Swift packages, keep your \"Dependencies\" group in Xcode referencing "
    "the correct paths and tar and upload your Linux binary to AWS S3 buckets."
)


def _build_parser() -> ArgumentParser:
    return build_parser(prog=APP_NAME, description=APP_DESCRIPTION, version=f"{APP_NAME} {__version__}")


def dispatch(
    argv: Sequence[str],
    environ: Mapping[str, str],
    helper: XcodeHelper,
    config: Mapping[str, list[str]] | None = None,
) -> str | None:
    """
    Run one command. Returns the handler's result line, or None.

    Raises an ArgumentError before touching `helper` when the command line
    cannot be parsed or a required option is missing.
    """
    command, index = parse_arguments(argv, environ, config, parser=_build_parser())
    validate_required(command, index)
    logger.debug("Dispatching %s with %s", command.name, index)
    return HANDLERS[command.kind](index, helper)


def main(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    helper: XcodeHelper | None = None,
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    env = os.environ if environ is None else environ
    configure_logging(env)

    if not args or args[0] == "help":
        print(_build_parser().format_help())
        return 0

    try:
        config = load_config(env, os.getcwd(), environment_keys())
        result = dispatch(args, env, helper or XcodeHelper(), config)
    except XcHelperError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code

    if result is not None:
        print(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
