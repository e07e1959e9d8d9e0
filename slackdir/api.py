# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Single Slack API call with envelope handling.

``SlackApi`` wraps a ``slack_sdk.WebClient`` and issues exactly one HTTP
request per :meth:`SlackApi.call`.  Parameters always travel in the URL
query string: they are encoded onto the method name, which ``WebClient``
joins onto its base URL, and no request body is sent.  The credential is
the ``token`` query parameter unless the configuration asks for a bearer
header instead.

``WebClient`` sends every Web API request as a POST regardless of the
verb it is given, so no verb is configurable here.

The return value is always the decoded API envelope, ``ok: false``
included.  Only transport-level problems raise.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

from slackdir.config import SlackDirectoryConfig
from slackdir.encoding import encode_params, request_target
from slackdir.result import Failed


logger = logging.getLogger(__name__)

#: Error text ``slack_sdk`` puts in the envelope it synthesizes for a
#: body that is not JSON.
_NON_JSON_ERROR_PREFIX = "Received a response in a non-JSON format"


class SlackTransportError(Exception):
    """The API could not be reached or answered with a non-envelope body.

    Attributes:
        method: API method being called.
    """

    def __init__(self, method: str, message: str) -> None:
        super().__init__(f"{method}: {message}")
        self.method = method


def build_web_client(config: SlackDirectoryConfig) -> WebClient:
    """Create the ``WebClient`` used as transport.

    Built without retry handlers: every operation issues each request
    exactly once.  The client only carries the token (as a bearer
    header) when it is not sent in the query string.

    Args:
        config: Directory configuration.

    Returns:
        Configured ``WebClient``.
    """
    return WebClient(
        token=None if config.token_in_query else config.token,
        base_url=config.base_url,
        timeout=config.timeout,
        retry_handlers=[],
    )


class SlackApi:
    """Authenticated access to Slack API methods.

    Args:
        config: Directory configuration (credential and transport
            settings).
        client: Transport.  Defaults to a ``WebClient`` built from
            *config*.
    """

    def __init__(
        self,
        config: SlackDirectoryConfig,
        client: WebClient | None = None,
    ) -> None:
        self._config = config
        if client is None:
            client = build_web_client(config)
        self._client = client

    @property
    def config(self) -> SlackDirectoryConfig:
        """Configuration this API was built with."""
        return self._config

    def call(
        self,
        api_method: str,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue one API request and return its envelope.

        Args:
            api_method: Slack method name (e.g. ``conversations.list``).
            params: Request parameters.  ``None`` values are omitted.

        Returns:
            Decoded JSON envelope with an ``ok`` field.

        Raises:
            SlackTransportError: On network failure or a body that is not
                a Slack API envelope.
        """
        query: dict[str, Any] = {}
        if self._config.token_in_query:
            query["token"] = self._config.token
        query.update(params or {})
        target = request_target(api_method, encode_params(query))

        logger.debug("POST /api/%s", target)

        try:
            response = self._client.api_call(target)
            data = response.data
            status = response.status_code
        except SlackApiError as e:
            # Raised for ok: false, for non-200 statuses and for bodies
            # that are not JSON.
            data = getattr(e.response, "data", None)
            status = getattr(e.response, "status_code", None)
            if not _is_envelope(data):
                raise SlackTransportError(
                    api_method, f"unexpected response: {e}"
                ) from e
        except (SlackClientError, OSError) as e:
            raise SlackTransportError(api_method, str(e)) from e

        if not _is_envelope(data):
            raise SlackTransportError(
                api_method, f"unexpected response body: {data!r:.200}"
            )
        if _is_undecodable(data):
            raise SlackTransportError(
                api_method, f"HTTP {status}: {data['error']}"
            )
        return dict(data)


def _is_envelope(data: object) -> bool:
    """Return True if *data* looks like a Slack API envelope."""
    return isinstance(data, Mapping) and "ok" in data


def _is_undecodable(envelope: Mapping[str, Any]) -> bool:
    """Return True for the envelope slack_sdk synthesizes for non-JSON."""
    error = envelope.get("error")
    return (
        not envelope.get("ok")
        and isinstance(error, str)
        and error.startswith(_NON_JSON_ERROR_PREFIX)
    )


def failure(api_method: str, envelope: Mapping[str, Any]) -> Failed:
    """Log an ``ok: false`` envelope and convert it to ``Failed``.

    Args:
        api_method: Method that produced the envelope.
        envelope: Decoded response.

    Returns:
        ``Failed`` carrying the error code.
    """
    error = str(envelope.get("error") or "unknown_error")
    logger.warning("Slack %s failed: %s", api_method, error)
    return Failed(error=error, method=api_method)
