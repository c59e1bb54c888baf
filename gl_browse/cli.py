"""CLI entry point for gl-browse."""

from __future__ import annotations

import argparse
import sys

# Ensure all commands are registered by importing the commands package
import gl_browse.commands  # noqa: F401
from gl_browse.commands import Context, get_command_registry
from gl_browse.config import CredentialStore
from gl_browse.errors import DomainInputError, GLBrowseError, NoBrowserError
from gl_browse.git import GitClient
from gl_browse.launcher import Launcher
from gl_browse.logging_utils import setup_logging
from gl_browse.models import CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH
from gl_browse.remotes import RemoteRegistry, RemoteResolver


def ask_domain(domains: list[str]) -> str:
    """Let the user pick one of several GitLab domains found among the remotes."""
    for i, domain in enumerate(domains, start=1):
        print(f"{i}) {domain}", file=sys.stderr)
    while True:
        try:
            answer = input("Please choice target domain : ").strip()
        except EOFError as e:
            raise DomainInputError("no input") from e
        if answer in domains:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(domains):
            return domains[int(answer) - 1]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl-browse",
        description="Open GitLab pages for the repository in the current directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Resolves the GitLab remote of the current clone and turns short references
into web URLs, then opens them in a browser.

Environment:
    {CONFIG_PATH_ENV} - Credential store path (default: {DEFAULT_CONFIG_PATH})

Examples:
    # Repository top page (or the current branch when not on master)
    gl-browse browse

    # Issue list, issue 12, merge request 3, pipeline 42
    gl-browse browse i
    gl-browse browse '#12'
    gl-browse browse '!3'
    gl-browse browse p42

    # A file on the current remote branch
    gl-browse browse --path src/main.py

    # Another project on the same server
    gl-browse browse --project myorg/other-project m

    # Token for the current server (asks once, then stored)
    gl-browse token
""",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output log records as JSON lines (to stderr)"
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Credential store path (default: from {CONFIG_PATH_ENV} or {DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    registry = get_command_registry()
    for name, cmd_cls in sorted(registry.items()):
        sub = subparsers.add_parser(name, help=cmd_cls.__doc__)
        cmd_cls.add_arguments(sub)

    return parser


def build_context(args: argparse.Namespace) -> Context:
    store = CredentialStore(path=args.config)
    store.init()
    store.load()
    git = GitClient()
    resolver = RemoteResolver(RemoteRegistry(git), store, choose=ask_domain)
    return Context(store=store, git=git, resolver=resolver, launcher=Launcher())


def main(argv: list[str] | None = None, context: Context | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    try:
        if context is None:
            context = build_context(args)
        cmd_cls = get_command_registry()[args.command]
        return cmd_cls(context=context, args=args).run()
    except NoBrowserError as e:
        logger.error(f"{e}. Open it manually.")
        return 1
    except GLBrowseError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
