# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for relpack.

Every operation is a subcommand of `relpack`. `relpack-build` and
`relpack-release` are shortcuts for the two pipeline subcommands so they can
be wired into a project's scripts without arguments.

The global options (--config, --log-level, --dry-run) are inherited by every
subcommand through argparse's parent parser mechanism.

Usage:
    relpack build
    relpack release --log-level DEBUG
    relpack verify --config ci/relpack.yaml
"""

import argparse
import sys

from relpack.cli.commands import handle_build, handle_release, handle_verify
from relpack.cli.exit_codes import USER_ERROR


def _build_global_parser(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """
    Options shared by the root parser and every subcommand.

    The subcommand copy is built with suppress_defaults=True: its options
    then only touch the namespace when actually given, so an option placed
    before the subcommand is not reset by the subparser's defaults.
    add_help=False avoids a duplicate -h.
    """

    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_defaults else value

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=default(None),
        help="Path to a relpack YAML file (default: ./relpack.yaml when present).",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=default(None),
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured logging verbosity.",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=default(False),
        dest="dry_run",
        help="Show what would happen without writing files or contacting GitHub.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    commands = [
        ("build", "Zip asset directories and write info.json.", handle_build),
        ("release", "Upload a build to a draft GitHub release.", handle_release),
        ("verify", "Check a build's archives against info.json.", handle_verify),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)


def main(argv: list[str] | None = None) -> None:
    """Run one subcommand and exit with its code; no subcommand prints help and exits 1."""
    root_parser = argparse.ArgumentParser(
        prog="relpack",
        description="relpack: package build artifacts and publish GitHub releases.",
        parents=[_build_global_parser()],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, _build_global_parser(suppress_defaults=True))

    args = root_parser.parse_args(argv)

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


def build_main() -> None:
    """Entry point for `relpack-build`."""
    main(["build", *sys.argv[1:]])


def release_main() -> None:
    """Entry point for `relpack-release`."""
    main(["release", *sys.argv[1:]])


if __name__ == "__main__":
    main()
