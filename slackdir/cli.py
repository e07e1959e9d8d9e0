# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Slack directory CLI: multi-command entry point.

Provides ``slackdir <command>`` for running single directory operations
from scripts and automation hosts.  Found values are printed to stdout
as JSON.

Subcommands:

* ``create-channel NAME``  create a channel (or return the existing one)
* ``find-channel NAME``    look up a channel by name
* ``archive-channel NAME`` archive a channel
* ``history NAME``         print a channel's message history
* ``find-user NAME``       look up a user by display name or handle
* ``get-user ID``          look up a user by ID
* ``invite USER CHANNEL``  invite a user to a channel
* ``post CHANNEL TEXT``    post a message
* ``team``                 print workspace info

Exit codes:
    0 - Found / succeeded
    1 - Not found, or lookup stopped at the page cap
    2 - Slack rejected the call
    3 - Configuration or transport error
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any

from slackdir.api import SlackTransportError
from slackdir.client import SlackDirectory
from slackdir.config import (
    ConfigError,
    SlackDirectoryConfig,
    get_config_path,
)
from slackdir.logging import configure_logging
from slackdir.models import MessagePayload
from slackdir.result import Failed, Found, Result, describe


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_FAILED = 2
EXIT_ERROR = 3


def _to_jsonable(value: Any) -> Any:
    """Convert records to plain JSON data, preferring the raw API dict."""
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        raw = getattr(value, "raw", None)
        if raw:
            return raw
        return {
            f.name: _to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.name != "raw"
        }
    if isinstance(value, Enum):
        return value.value
    return value


def _report(result: Result[Any]) -> int:
    """Print a result and return the matching exit code."""
    if isinstance(result, Found):
        print(json.dumps(_to_jsonable(result.value), indent=2))
        return EXIT_OK
    print(f"Error: {describe(result)}", file=sys.stderr)
    if isinstance(result, Failed):
        return EXIT_FAILED
    return EXIT_NOT_FOUND


# ── Commands ────────────────────────────────────────────────────────


def cmd_create_channel(
    directory: SlackDirectory, args: argparse.Namespace
) -> int:
    return _report(directory.create_channel(args.name))


def cmd_find_channel(
    directory: SlackDirectory, args: argparse.Namespace
) -> int:
    return _report(directory.find_channel(args.name))


def cmd_archive_channel(
    directory: SlackDirectory, args: argparse.Namespace
) -> int:
    return _report(directory.archive_channel(args.name))


def cmd_history(directory: SlackDirectory, args: argparse.Namespace) -> int:
    result = directory.get_room_history(
        args.name, count=args.count, latest=args.latest, oldest=args.oldest
    )
    if isinstance(result, Found) and args.chronological:
        result = Found(sorted(result.value, key=lambda m: m.timestamp))
    return _report(result)


def cmd_find_user(directory: SlackDirectory, args: argparse.Namespace) -> int:
    return _report(directory.find_user(args.name))


def cmd_get_user(directory: SlackDirectory, args: argparse.Namespace) -> int:
    return _report(directory.get_user(args.user_id))


def cmd_invite(directory: SlackDirectory, args: argparse.Namespace) -> int:
    """Invite a user; ``--user-id`` / ``--channel-id`` mark IDs."""
    user_is_id = args.user_id
    channel_is_id = args.channel_id
    return _report(
        directory.invite_to_channel(
            user_name=None if user_is_id else args.user,
            channel_name=None if channel_is_id else args.channel,
            user_id=args.user if user_is_id else None,
            channel_id=args.channel if channel_is_id else None,
        )
    )


def cmd_post(directory: SlackDirectory, args: argparse.Namespace) -> int:
    payload = MessagePayload(
        channel=args.channel,
        text=args.text,
        username=args.username,
        icon_url=args.icon_url,
        icon_emoji=args.icon_emoji,
    )
    return _report(directory.post_message(payload))


def cmd_team(directory: SlackDirectory, args: argparse.Namespace) -> int:
    return _report(directory.get_team())


_DISPATCH: dict[str, str] = {
    "create-channel": "cmd_create_channel",
    "find-channel": "cmd_find_channel",
    "archive-channel": "cmd_archive_channel",
    "history": "cmd_history",
    "find-user": "cmd_find_user",
    "get-user": "cmd_get_user",
    "invite": "cmd_invite",
    "post": "cmd_post",
    "team": "cmd_team",
}


# ── CLI plumbing ────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="slackdir",
        description="Slack channel, user and message operations",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: ~/.config/slackdir/slackdir.yaml; "
        "falls back to $SLACK_TOKEN when no file exists)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("create-channel", "Create a channel (or return the existing one)"),
        ("find-channel", "Look up a channel by name"),
        ("archive-channel", "Archive a channel"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("name", help="Channel name")

    history = subparsers.add_parser("history", help="Print channel history")
    history.add_argument("name", help="Channel name")
    history.add_argument("--count", type=int, help="Maximum messages")
    history.add_argument("--latest", help="End of time range (timestamp)")
    history.add_argument("--oldest", help="Start of time range (timestamp)")
    history.add_argument(
        "--chronological",
        action="store_true",
        help="Sort oldest first",
    )

    find_user = subparsers.add_parser(
        "find-user", help="Look up a user by display name or handle"
    )
    find_user.add_argument("name", help="Display name or handle")

    get_user = subparsers.add_parser("get-user", help="Look up a user by ID")
    get_user.add_argument("user_id", help="User ID (e.g. U1234567890)")

    invite = subparsers.add_parser("invite", help="Invite a user to a channel")
    invite.add_argument("user", help="User name (or ID with --user-id)")
    invite.add_argument(
        "channel", help="Channel name (or ID with --channel-id)"
    )
    invite.add_argument(
        "--user-id",
        action="store_true",
        help="Treat USER as a user ID",
    )
    invite.add_argument(
        "--channel-id",
        action="store_true",
        help="Treat CHANNEL as a channel ID",
    )

    post = subparsers.add_parser("post", help="Post a message")
    post.add_argument("channel", help="Channel ID or #name")
    post.add_argument("text", help="Message text")
    post.add_argument("--username", help="Display name override")
    post.add_argument("--icon-url", help="Avatar URL override")
    post.add_argument("--icon-emoji", help="Avatar emoji override")

    subparsers.add_parser("team", help="Print workspace info")

    return parser


def load_config(config_path: Path | None) -> SlackDirectoryConfig:
    """Load config from YAML, or from ``SLACK_TOKEN`` if no file exists.

    Raises:
        ConfigError: If no usable configuration is found.
    """
    if config_path is not None or get_config_path().exists():
        return SlackDirectoryConfig.from_yaml(config_path)
    return SlackDirectoryConfig.from_env()


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Arguments (default: ``sys.argv[1:]``).

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format_string="%(levelname)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except (ConfigError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        return EXIT_ERROR

    directory = SlackDirectory(config)

    # Look up handler by name so tests can mock individual commands.
    import slackdir.cli as _self

    handler = getattr(_self, _DISPATCH[args.command])
    try:
        return handler(directory, args)
    except SlackTransportError as e:
        logger.error("Slack request failed: %s", e)
        return EXIT_ERROR
    except ValueError as e:
        logger.error("%s", e)
        return EXIT_ERROR


def cli() -> None:
    """Entry point for the ``slackdir`` console script."""
    sys.exit(main())
