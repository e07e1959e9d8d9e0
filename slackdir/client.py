# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Slack directory client.

``SlackDirectory`` exposes the channel, user, history, invite and
message operations.  It holds no state besides its configuration and
transport; every call re-fetches what it needs from Slack.

Every operation returns a ``Result`` (see :mod:`slackdir.result`).
Channel names are canonicalized before use, so ``"Incident 42"`` and
``"incident-42"`` address the same channel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from slack_sdk import WebClient

from slackdir.api import SlackApi, failure
from slackdir.config import SlackDirectoryConfig
from slackdir.models import Channel, Message, MessagePayload, Team, User
from slackdir.names import canonicalize_channel_name
from slackdir.pagination import CHANNELS, USERS, find_by_name
from slackdir.result import Failed, Found, NotFound, Result


logger = logging.getLogger(__name__)

#: Text appended to the mention when an invitee is already a member.
ALREADY_IN_CHANNEL_NOTICE = " already in channel"


class InviteStatus(Enum):
    """How a ``channel_invite`` call ended."""

    INVITED = "invited"
    ALREADY_MEMBER = "already_member"
    NOTIFIED = "notified"


@dataclass(frozen=True)
class InviteOutcome:
    """Outcome of ``channel_invite``.

    Attributes:
        status: What happened.
        response: Envelope of the invite call, or of the notification
            post when ``status`` is ``NOTIFIED``.
    """

    status: InviteStatus
    response: dict[str, Any]


class SlackDirectory:
    """Channel, user and message operations against one workspace.

    Args:
        config: Credential and lookup settings.
        client: ``WebClient`` used as transport.  Built from *config*
            when omitted.
    """

    def __init__(
        self,
        config: SlackDirectoryConfig,
        client: WebClient | None = None,
    ) -> None:
        self._config = config
        self._api = SlackApi(config, client)

    @property
    def config(self) -> SlackDirectoryConfig:
        """Configuration this directory was built with."""
        return self._config

    # -- lookups ---------------------------------------------------------

    def find_channel(self, name: str) -> Result[Channel]:
        """Find a channel by name.

        Args:
            name: Channel name; canonicalized before matching.

        Returns:
            ``Found(Channel)``, ``NotFound``, ``Failed`` or
            ``SearchExhausted``.
        """
        return find_by_name(
            self._api,
            CHANNELS,
            canonicalize_channel_name(name),
            max_pages=self._config.max_pages,
            page_limit=self._config.page_limit,
        )

    def find_user(self, name: str) -> Result[User]:
        """Find a user by display name or handle (case-insensitive)."""
        return find_by_name(
            self._api,
            USERS,
            name,
            max_pages=self._config.max_pages,
            page_limit=self._config.page_limit,
        )

    def get_user(self, user_id: str) -> Result[User]:
        """Fetch a user by ID.

        History messages carry user IDs only; this resolves them.

        Args:
            user_id: Slack user ID (e.g. ``U1234567890``).

        Returns:
            ``Found(User)``, ``NotFound`` for an unknown ID, or
            ``Failed``.
        """
        envelope = self._api.call("users.info", {"user": user_id})
        if envelope.get("ok"):
            return Found(User.from_api(envelope.get("user") or {}))
        if envelope.get("error") == "user_not_found":
            logger.info("User %s not found", user_id)
            return NotFound("user")
        return failure("users.info", envelope)

    def get_team(self) -> Result[Team]:
        """Fetch the workspace info (useful for building channel links)."""
        envelope = self._api.call("team.info")
        if not envelope.get("ok"):
            return failure("team.info", envelope)
        return Found(Team.from_api(envelope.get("team") or {}))

    # -- channels --------------------------------------------------------

    def create_channel(self, name: str) -> Result[Channel]:
        """Create a channel, or return the existing one with that name.

        Args:
            name: Desired name; canonicalized before the create call.

        Returns:
            ``Found`` with the new channel, or with the existing channel
            when the name is taken.  Lookup results other than ``Found``
            are passed through on the name-taken path; other create
            errors are ``Failed``.
        """
        channel_name = canonicalize_channel_name(name)
        envelope = self._api.call(
            "conversations.create", {"name": channel_name}
        )
        if envelope.get("ok"):
            channel = Channel.from_api(envelope.get("channel") or {})
            logger.info("Created channel %s (%s)", channel.name, channel.id)
            return Found(channel)

        if envelope.get("error") == "name_taken":
            logger.info(
                "Channel '%s' already exists, looking it up", channel_name
            )
            return self.find_channel(channel_name)

        return failure("conversations.create", envelope)

    def archive_channel(self, name: str) -> Result[dict[str, Any]]:
        """Archive a channel by name.

        Returns:
            ``Found`` with the archive envelope, the lookup result if the
            channel could not be resolved, or ``Failed``.
        """
        lookup = self.find_channel(name)
        if not isinstance(lookup, Found):
            return lookup

        channel = lookup.value
        envelope = self._api.call(
            "conversations.archive", {"channel": channel.id}
        )
        if not envelope.get("ok"):
            return failure("conversations.archive", envelope)
        logger.info("Archived channel %s (%s)", channel.name, channel.id)
        return Found(envelope)

    def get_room_history(
        self,
        name: str,
        count: int | None = None,
        latest: str | None = None,
        oldest: str | None = None,
    ) -> Result[list[Message]]:
        """Fetch a channel's message history.

        Messages are returned in the order the API delivers them (newest
        first); sort by ``ts`` if chronological order is needed.

        Args:
            name: Channel name.
            count: Maximum number of messages (API default when unset).
            latest: End of the time range (message timestamp).
            oldest: Start of the time range (message timestamp).

        Returns:
            ``Found(list[Message])``; ``NotFound`` if no such channel
            exists (no history request is made); ``Failed`` if either
            the lookup or the history call is rejected.
        """
        lookup = self.find_channel(name)
        if not isinstance(lookup, Found):
            if isinstance(lookup, NotFound):
                logger.info("Channel '%s' not found", name)
            return lookup

        envelope = self._api.call(
            "conversations.history",
            {
                "channel": lookup.value.id,
                "limit": count or None,
                "latest": latest or None,
                "oldest": oldest or None,
            },
        )
        if not envelope.get("ok"):
            return failure("conversations.history", envelope)
        messages = [Message.from_api(m) for m in envelope.get("messages") or []]
        return Found(messages)

    # -- invitations -----------------------------------------------------

    def invite_to_channel(
        self,
        user_name: str | None = None,
        channel_name: str | None = None,
        *,
        user_id: str | None = None,
        channel_id: str | None = None,
    ) -> Result[dict[str, Any]]:
        """Invite a user to a channel, each given by name or ID.

        Names are only resolved when the matching ID is not supplied.

        Returns:
            ``Found`` with the invite envelope, the first unresolved
            lookup result, or ``Failed``.

        Raises:
            ValueError: If neither name nor ID is given for a side.
        """
        if not channel_id:
            if not channel_name:
                raise ValueError("channel_name or channel_id is required")
            channel_lookup = self.find_channel(channel_name)
            if not isinstance(channel_lookup, Found):
                return channel_lookup
            channel_id = channel_lookup.value.id

        if not user_id:
            if not user_name:
                raise ValueError("user_name or user_id is required")
            user_lookup = self.find_user(user_name)
            if not isinstance(user_lookup, Found):
                return user_lookup
            user_id = user_lookup.value.id

        envelope = self._invite(channel_id, user_id)
        if not envelope.get("ok"):
            return failure("conversations.invite", envelope)
        return Found(envelope)

    def channel_invite(
        self, user: User, channel: Channel
    ) -> Result[InviteOutcome]:
        """Invite an already-resolved user to an already-resolved channel.

        If the user is already a member, a message mentioning them is
        posted to the channel so they get a notification.  The
        configured service account is exempt: its existing membership
        counts as success and nothing is posted.

        Returns:
            ``Found(InviteOutcome)``, or ``Failed`` for any other invite
            error or a failed notification post.
        """
        envelope = self._invite(channel.id, user.id)
        if envelope.get("ok"):
            logger.info("Invited %s to %s", user.name, channel.name)
            return Found(InviteOutcome(InviteStatus.INVITED, envelope))

        if envelope.get("error") != "already_in_channel":
            return failure("conversations.invite", envelope)

        if self._config.is_service_account(user.name):
            # TODO: confirm against the channel member list instead of
            # trusting the error code for the service account.
            logger.info(
                "Service account %s already in %s", user.name, channel.name
            )
            return Found(InviteOutcome(InviteStatus.ALREADY_MEMBER, envelope))

        posted = self.post_mention(ALREADY_IN_CHANNEL_NOTICE, channel, user)
        if not isinstance(posted, Found):
            return posted
        return Found(InviteOutcome(InviteStatus.NOTIFIED, posted.value))

    def _invite(self, channel_id: str, user_id: str) -> dict[str, Any]:
        return self._api.call(
            "conversations.invite",
            {"channel": channel_id, "users": user_id},
        )

    # -- messages --------------------------------------------------------

    def post_message(self, payload: MessagePayload) -> Result[dict[str, Any]]:
        """Post a message.

        Attachments are sent as their JSON string form.

        Returns:
            ``Found`` with the ``chat.postMessage`` envelope, or
            ``Failed``.

        Raises:
            ValueError: If the payload has no channel.
        """
        if not payload.channel:
            raise ValueError("Message payload requires a channel")
        envelope = self._api.call("chat.postMessage", payload.to_params())
        if not envelope.get("ok"):
            return failure("chat.postMessage", envelope)
        return Found(envelope)

    def post_mention(
        self,
        text: str | None,
        channel: Channel,
        user: User | None = None,
    ) -> Result[dict[str, Any]]:
        """Post *text* to *channel*, prefixed with a mention of *user*.

        The mention notifies the user.  Without a user the text is
        posted as is.

        Raises:
            ValueError: If there is neither a user nor any text.
        """
        body = user.mention if user is not None else ""
        if text:
            body += text
        if not body:
            raise ValueError("Mention post requires a user or text")
        return self.post_message(MessagePayload(channel=channel.id, text=body))
