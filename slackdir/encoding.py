# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Request parameter encoding.

All API calls carry their parameters in the URL query string, never in
the request body.  Values are flattened to strings and each key and
value is percent-encoded here; the transport only joins the resulting
request target onto its base URL.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote


#: Characters ``encodeURIComponent``-style encoding leaves untouched.
_QUERY_SAFE = "-_.!~*'()"


def serialize_attachments(attachments: Any) -> str:
    """Serialize message attachments to their wire-format string.

    Strings are assumed to be serialized already and pass through.

    Args:
        attachments: List of attachment dicts, or a pre-serialized string.

    Returns:
        Compact JSON string.
    """
    if isinstance(attachments, str):
        return attachments
    return json.dumps(attachments, separators=(",", ":"))


def encode_value(value: Any) -> str:
    """Encode a single parameter value as a query-string value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def encode_params(params: Mapping[str, Any]) -> dict[str, str]:
    """Encode request parameters for the query string.

    Parameters whose value is ``None`` are omitted rather than sent
    empty.  Insertion order is preserved.

    Args:
        params: Raw parameter mapping.

    Returns:
        Mapping of parameter name to string value.
    """
    return {
        str(key): encode_value(value)
        for key, value in params.items()
        if value is not None
    }


def encode_query(params: Mapping[str, str]) -> str:
    """Join encoded parameters into a query string.

    Each key and value is percent-encoded individually, leaving only the
    RFC 3986 unreserved characters and ``!*'()`` as is.
    """
    return "&".join(
        f"{quote(key, safe=_QUERY_SAFE)}={quote(value, safe=_QUERY_SAFE)}"
        for key, value in params.items()
    )


def request_target(api_method: str, params: Mapping[str, str]) -> str:
    """Return the method name with its query string appended.

    Args:
        api_method: Slack method name (e.g. ``conversations.list``).
        params: Already encoded parameters.

    Returns:
        Target such as ``conversations.list?token=...&cursor=...``,
        relative to the API base URL.
    """
    if not params:
        return api_method
    return f"{api_method}?{encode_query(params)}"

