# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Slack directory client.

Convenience operations over the Slack Web API:
- SlackDirectory: channel, user, history, invite and message operations
- SlackDirectoryConfig: credential and lookup settings
- Found / NotFound / Failed / SearchExhausted: operation results
"""

from slackdir.api import SlackTransportError
from slackdir.client import InviteOutcome, InviteStatus, SlackDirectory
from slackdir.config import ConfigError, SlackDirectoryConfig
from slackdir.models import Channel, Message, MessagePayload, Team, User
from slackdir.names import canonicalize_channel_name
from slackdir.result import (
    Failed,
    Found,
    NotFound,
    Result,
    SearchExhausted,
    unwrap,
    value_or_none,
)


__all__ = [
    "Channel",
    "ConfigError",
    "Failed",
    "Found",
    "InviteOutcome",
    "InviteStatus",
    "Message",
    "MessagePayload",
    "NotFound",
    "Result",
    "SearchExhausted",
    "SlackDirectory",
    "SlackDirectoryConfig",
    "SlackTransportError",
    "Team",
    "User",
    "canonicalize_channel_name",
    "unwrap",
    "value_or_none",
]
