# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for slackdir/cli.py."""

import argparse
import json
import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from slackdir.api import SlackTransportError
from slackdir.cli import (
    EXIT_ERROR,
    EXIT_FAILED,
    EXIT_NOT_FOUND,
    EXIT_OK,
    _report,
    _to_jsonable,
    build_parser,
    cmd_history,
    cmd_invite,
    cmd_post,
    load_config,
    main,
)
from slackdir.client import InviteOutcome, InviteStatus
from slackdir.config import ConfigError, SlackDirectoryConfig
from slackdir.models import Channel, Message
from slackdir.result import Failed, Found, NotFound, SearchExhausted


# ── _report ───────────────────────────────────────────────────────────


class TestReport:
    def test_found_prints_raw_json(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        channel = Channel.from_api({"id": "C1", "name": "inc-42"})

        assert _report(Found(channel)) == EXIT_OK

        assert json.loads(capsys.readouterr().out) == {
            "id": "C1",
            "name": "inc-42",
        }

    def test_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _report(NotFound("channel")) == EXIT_NOT_FOUND
        assert "channel not found" in capsys.readouterr().err

    def test_exhausted(self) -> None:
        assert _report(SearchExhausted(50)) == EXIT_NOT_FOUND

    def test_failed(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = Failed("not_authed", method="team.info")
        assert _report(result) == EXIT_FAILED
        assert "team.info failed: not_authed" in capsys.readouterr().err


class TestToJsonable:
    def test_record_without_raw_uses_fields(self) -> None:
        assert _to_jsonable(Channel(id="C1", name="x")) == {
            "id": "C1",
            "name": "x",
            "is_archived": False,
        }

    def test_enum_and_nested(self) -> None:
        outcome = InviteOutcome(InviteStatus.NOTIFIED, {"ok": True})
        assert _to_jsonable(outcome) == {
            "status": "notified",
            "response": {"ok": True},
        }

    def test_list(self) -> None:
        assert _to_jsonable([Message.from_api({"ts": "1.0"})]) == [
            {"ts": "1.0"}
        ]


# ── Commands ──────────────────────────────────────────────────────────


def _args(argv: list[str]) -> argparse.Namespace:
    return build_parser().parse_args(argv)


class TestCommands:
    def test_history_chronological(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        directory = MagicMock()
        directory.get_room_history.return_value = Found(
            [
                Message.from_api({"ts": "10.0", "text": "b"}),
                Message.from_api({"ts": "9.5", "text": "a"}),
            ]
        )

        code = cmd_history(
            directory, _args(["history", "room", "--chronological"])
        )

        assert code == EXIT_OK
        out = json.loads(capsys.readouterr().out)
        assert [m["text"] for m in out] == ["a", "b"]
        directory.get_room_history.assert_called_once_with(
            "room", count=None, latest=None, oldest=None
        )

    def test_history_passes_bounds(self) -> None:
        directory = MagicMock()
        directory.get_room_history.return_value = Found([])

        cmd_history(
            directory,
            _args(["history", "room", "--count", "5", "--oldest", "1.0"]),
        )

        directory.get_room_history.assert_called_once_with(
            "room", count=5, latest=None, oldest="1.0"
        )

    def test_invite_by_name(self) -> None:
        directory = MagicMock()
        directory.invite_to_channel.return_value = Found({"ok": True})

        cmd_invite(directory, _args(["invite", "troy", "room"]))

        directory.invite_to_channel.assert_called_once_with(
            user_name="troy",
            channel_name="room",
            user_id=None,
            channel_id=None,
        )

    def test_invite_by_id(self) -> None:
        directory = MagicMock()
        directory.invite_to_channel.return_value = Found({"ok": True})

        cmd_invite(
            directory,
            _args(["invite", "U1", "C1", "--user-id", "--channel-id"]),
        )

        directory.invite_to_channel.assert_called_once_with(
            user_name=None,
            channel_name=None,
            user_id="U1",
            channel_id="C1",
        )

    def test_post(self) -> None:
        directory = MagicMock()
        directory.post_message.return_value = Found({"ok": True})

        cmd_post(
            directory,
            _args(["post", "#general", "hello", "--icon-emoji", ":x:"]),
        )

        payload = directory.post_message.call_args.args[0]
        assert payload.channel == "#general"
        assert payload.text == "hello"
        assert payload.icon_emoji == ":x:"
        assert payload.username is None


# ── load_config ───────────────────────────────────────────────────────


class TestLoadConfig:
    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        with patch.object(SlackDirectoryConfig, "from_yaml") as from_yaml:
            load_config(path)
        from_yaml.assert_called_once_with(path)

    def test_falls_back_to_env(self, tmp_path: Path) -> None:
        with (
            patch(
                "slackdir.cli.get_config_path",
                return_value=tmp_path / "missing.yaml",
            ),
            patch.object(SlackDirectoryConfig, "from_env") as from_env,
        ):
            load_config(None)
        from_env.assert_called_once_with()

    def test_default_file_used_when_present(self, tmp_path: Path) -> None:
        default = tmp_path / "slackdir.yaml"
        default.touch()
        with (
            patch("slackdir.cli.get_config_path", return_value=default),
            patch.object(SlackDirectoryConfig, "from_yaml") as from_yaml,
        ):
            load_config(None)
        from_yaml.assert_called_once_with(None)


# ── main ──────────────────────────────────────────────────────────────


@pytest.fixture
def mock_logging() -> Iterator[MagicMock]:
    with patch("slackdir.cli.configure_logging") as configure:
        yield configure


@pytest.fixture
def mock_directory(mock_logging: MagicMock) -> Iterator[MagicMock]:
    config = SlackDirectoryConfig(token="xoxb-cli")
    with (
        patch("slackdir.cli.load_config", return_value=config),
        patch("slackdir.cli.SlackDirectory") as directory_cls,
    ):
        yield directory_cls.return_value


class TestMain:
    def test_find_channel(
        self,
        mock_directory: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_directory.find_channel.return_value = Found(
            Channel.from_api({"id": "C1", "name": "inc-42"})
        )

        assert main(["find-channel", "inc-42"]) == EXIT_OK

        mock_directory.find_channel.assert_called_once_with("inc-42")
        assert json.loads(capsys.readouterr().out)["id"] == "C1"

    def test_not_found_exit_code(self, mock_directory: MagicMock) -> None:
        mock_directory.find_user.return_value = NotFound("user")
        assert main(["find-user", "nobody"]) == EXIT_NOT_FOUND

    def test_failed_exit_code(self, mock_directory: MagicMock) -> None:
        mock_directory.get_team.return_value = Failed("not_authed")
        assert main(["team"]) == EXIT_FAILED

    def test_transport_error(self, mock_directory: MagicMock) -> None:
        mock_directory.archive_channel.side_effect = SlackTransportError(
            "conversations.list", "timed out"
        )
        assert main(["archive-channel", "inc-42"]) == EXIT_ERROR

    def test_invalid_name(self, mock_directory: MagicMock) -> None:
        mock_directory.create_channel.side_effect = ValueError(
            "Channel name must not be empty"
        )
        assert main(["create-channel", " "]) == EXIT_ERROR

    def test_config_error(self, mock_logging: MagicMock) -> None:
        with patch(
            "slackdir.cli.load_config",
            side_effect=ConfigError("Config file not found"),
        ):
            assert main(["team"]) == EXIT_ERROR

    def test_debug_flag(
        self, mock_directory: MagicMock, mock_logging: MagicMock
    ) -> None:
        mock_directory.get_team.return_value = Found({"ok": True})

        main(["--debug", "team"])

        assert mock_logging.call_args.kwargs["level"] == logging.DEBUG

    def test_default_log_level(
        self, mock_directory: MagicMock, mock_logging: MagicMock
    ) -> None:
        mock_directory.get_team.return_value = Found({"ok": True})

        main(["team"])

        assert mock_logging.call_args.kwargs["level"] == logging.WARNING

    def test_dispatch_by_name(self, mock_directory: MagicMock) -> None:
        with patch("slackdir.cli.cmd_get_user", return_value=0) as handler:
            assert main(["get-user", "U1"]) == 0
        handler.assert_called_once()
        assert handler.call_args.args[1].user_id == "U1"

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            main([])
