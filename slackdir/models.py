# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Records mirroring Slack API objects.

Records are built fresh from every API response and never cached.  Each
keeps the raw API dict in ``raw`` so callers can reach fields that are
not modelled explicitly; ``raw`` takes no part in equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from slackdir.encoding import serialize_attachments


#: User mention embedded in a join message: ``<@U123|name>`` or ``<@U123>``.
_JOIN_MENTION_PATTERN = re.compile(r"<@([UW][A-Z0-9]+)(?:\|([^>]*))?>")


@dataclass(frozen=True)
class Channel:
    """A Slack channel.

    Attributes:
        id: Channel ID (``C``-prefixed).
        name: Channel name (lowercase, hyphenated).
        is_archived: Whether the channel is archived.
    """

    id: str
    name: str
    is_archived: bool = False
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Channel:
        """Build from a ``conversations.*`` channel object."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            is_archived=bool(data.get("is_archived", False)),
            raw=data,
        )

    def matches(self, name: str) -> bool:
        """Return True if the channel name equals *name*, ignoring case."""
        return self.name.lower() == name.lower()


@dataclass(frozen=True)
class User:
    """A Slack workspace member.

    Attributes:
        id: User ID (``U``-prefixed).
        name: User handle.
        display_name: Profile display name (may be empty).
        real_name: Profile real name (may be empty).
        is_bot: Whether the user is a bot.
    """

    id: str
    name: str
    display_name: str = ""
    real_name: str = ""
    is_bot: bool = False
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> User:
        """Build from a ``users.*`` member object."""
        profile = data.get("profile") or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            display_name=profile.get("display_name", "") or "",
            real_name=profile.get("real_name") or data.get("real_name", ""),
            is_bot=bool(data.get("is_bot", False)),
            raw=data,
        )

    def matches(self, name: str) -> bool:
        """Return True if *name* equals the display name or the handle.

        The display name is checked first.  Comparison ignores case.
        """
        wanted = name.lower()
        if self.display_name and self.display_name.lower() == wanted:
            return True
        return self.name.lower() == wanted

    @property
    def mention(self) -> str:
        """Mention token that notifies the user (``<@U123>``)."""
        return f"<@{self.id}>"


@dataclass(frozen=True)
class Team:
    """A Slack workspace."""

    id: str
    name: str
    domain: str = ""
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Team:
        """Build from a ``team.info`` team object."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            domain=data.get("domain", ""),
            raw=data,
        )

    def messages_url(self, channel_name: str) -> str:
        """Return the browser link to a channel in this workspace.

        Args:
            channel_name: Channel name (already canonical).

        Returns:
            URL such as ``https://acme.slack.com/messages/inc-42``.
        """
        subdomain = self.domain or self.name
        return f"https://{subdomain}.slack.com/messages/{channel_name}"


@dataclass(frozen=True)
class Message:
    """A channel message.

    Attributes:
        ts: Message timestamp (decimal string).  Unique within a channel
            and usable as a sort key.
        user: Author user ID (empty for some bot messages).
        text: Message body.
        subtype: Message subtype (e.g. ``channel_join``), or None.
    """

    ts: str
    user: str = ""
    text: str = ""
    subtype: str | None = None
    raw: dict[str, Any] = field(
        default_factory=dict, repr=False, compare=False
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Message:
        """Build from a ``conversations.history`` message object."""
        return cls(
            ts=str(data.get("ts", "")),
            user=data.get("user", ""),
            text=data.get("text", ""),
            subtype=data.get("subtype"),
            raw=data,
        )

    @property
    def timestamp(self) -> float:
        """Timestamp as seconds since the epoch."""
        return float(self.ts)

    def join_event(self) -> tuple[str, str] | None:
        """Return ``(user_id, user_name)`` for a channel join message.

        Join messages embed the joining user as ``<@U123|name>``.  The
        name part is absent in newer messages and returned as ``""``.

        Returns:
            The embedded pair, or None if this is not a join message.
        """
        if self.subtype != "channel_join":
            return None
        match = _JOIN_MENTION_PATTERN.search(self.text)
        if match is None:
            return (self.user, "") if self.user else None
        return match.group(1), match.group(2) or ""


@dataclass(frozen=True)
class MessagePayload:
    """Fields accepted by ``chat.postMessage``.

    Attributes:
        channel: Channel ID or ``#name``.
        text: Message text.
        username: Display name override for the posting bot.
        icon_url: Avatar URL override.
        icon_emoji: Avatar emoji override (e.g. ``:robot_face:``).
        attachments: Legacy attachments; sent as a JSON string.
        thread_ts: Parent message timestamp to reply in a thread.
    """

    channel: str
    text: str | None = None
    username: str | None = None
    icon_url: str | None = None
    icon_emoji: str | None = None
    attachments: list[dict[str, Any]] | str | None = None
    thread_ts: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Return the set fields as request parameters."""
        params: dict[str, Any] = {
            "channel": self.channel,
            "text": self.text,
            "username": self.username,
            "icon_url": self.icon_url,
            "icon_emoji": self.icon_emoji,
            "thread_ts": self.thread_ts,
        }
        if self.attachments is not None:
            params["attachments"] = serialize_attachments(self.attachments)
        return {k: v for k, v in params.items() if v is not None}
