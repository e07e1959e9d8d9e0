# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Channel name canonicalization.

Slack rejects channel names that are too long, contain whitespace, or use
uppercase letters.  Every operation that takes a channel name passes it
through :func:`canonicalize_channel_name` first so that two spellings of
the same name always resolve to the same channel.
"""

from __future__ import annotations

import re


#: Maximum channel name length accepted before a create or lookup call.
MAX_CHANNEL_NAME_LENGTH = 21

_WHITESPACE_RUN = re.compile(r"\s+")


def canonicalize_channel_name(name: str) -> str:
    """Return the canonical form of a channel name.

    The name is truncated to :data:`MAX_CHANNEL_NAME_LENGTH` characters,
    each run of whitespace is collapsed to a single hyphen, and the
    result is lowercased.  Truncation happens first, so the result never
    exceeds the limit.

    Args:
        name: Human-supplied channel name (e.g. an incident title).

    Returns:
        Canonical channel name.

    Raises:
        ValueError: If the name is empty or its first
            :data:`MAX_CHANNEL_NAME_LENGTH` characters are all whitespace.
    """
    if not name or not name.strip():
        raise ValueError("Channel name must not be empty")
    truncated = name[:MAX_CHANNEL_NAME_LENGTH]
    if not truncated.strip():
        raise ValueError(
            "Channel name must not be empty within its first "
            f"{MAX_CHANNEL_NAME_LENGTH} characters: {name!r}"
        )
    canonical = _WHITESPACE_RUN.sub("-", truncated).lower()
    # Lowercasing can lengthen some characters, so clamp again.
    return canonical[:MAX_CHANNEL_NAME_LENGTH]
