# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Configuration for the Slack directory client.

Configuration is loaded from a YAML file.  The default location follows
the XDG Base Directory Specification:

    ``$XDG_CONFIG_HOME/slackdir/slackdir.yaml``
    (typically ``~/.config/slackdir/slackdir.yaml``)

``!env`` tags resolve values from environment variables, so the token
never has to live in the file itself::

    slack:
      token: !env SLACK_TOKEN
      token_in_query: true
      timeout: 30
    lookup:
      max_pages: 50
      page_limit: 200
    service_account: xmatters

The configuration is built once and passed to ``SlackDirectory``; no
operation reads credentials from ambient state.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, overload

import yaml
from platformdirs import user_config_path

from slackdir.dotenv_loader import load_dotenv_once
from slackdir.logging import SecretFilter


logger = logging.getLogger(__name__)

#: Application name for XDG path resolution.
_APP_NAME = "slackdir"

#: Environment variable holding the API token for ``from_env``.
TOKEN_ENV_VAR = "SLACK_TOKEN"

DEFAULT_BASE_URL = "https://slack.com/api/"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_PAGES = 50

_BOOL_TRUTHY = frozenset({"true", "1", "yes", "on"})
_BOOL_FALSY = frozenset({"false", "0", "no", "off"})


def get_config_path() -> Path:
    """Return the default config file path.

    Returns:
        ``$XDG_CONFIG_HOME/slackdir/slackdir.yaml``.
    """
    return user_config_path(_APP_NAME) / "slackdir.yaml"


def get_dotenv_path() -> Path:
    """Return the ``.env`` file path inside the XDG config directory."""
    return user_config_path(_APP_NAME) / ".env"


class ConfigError(Exception):
    """Configuration is missing or invalid."""


@dataclass(frozen=True)
class SlackDirectoryConfig:
    """Settings shared by every directory operation.

    Attributes:
        token: Slack API token (auto-redacted in logs).
        base_url: API base URL.
        token_in_query: Send the token as the ``token`` query parameter.
            When False the token is sent as a bearer header instead.
        timeout: Per-request timeout in seconds.
        max_pages: Maximum listing pages scanned per name lookup.
            ``None`` scans until the collection ends.
        page_limit: Page size requested from listing endpoints.
            ``None`` leaves it to the API default.
        service_account: Handle of the integration's own Slack user.
            Inviting it to a channel it already belongs to is not
            reported to the channel.
    """

    token: str
    base_url: str = DEFAULT_BASE_URL
    token_in_query: bool = True
    timeout: int = DEFAULT_TIMEOUT
    max_pages: int | None = DEFAULT_MAX_PAGES
    page_limit: int | None = None
    service_account: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration and register the token as a secret.

        Raises:
            ValueError: If configuration is invalid.
        """
        if not self.token:
            raise ValueError("Slack token must not be empty")
        SecretFilter.register_secret(self.token)
        if self.timeout < 1:
            raise ValueError(f"Timeout must be >= 1s: {self.timeout}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1: {self.max_pages}")
        if self.page_limit is not None and self.page_limit < 1:
            raise ValueError(f"page_limit must be >= 1: {self.page_limit}")

    def is_service_account(self, handle: str) -> bool:
        """Return True if *handle* names the integration's own user."""
        if not self.service_account:
            return False
        return handle.lower() == self.service_account.lower()

    @classmethod
    def from_env(cls, **overrides: Any) -> SlackDirectoryConfig:
        """Build a configuration from the ``SLACK_TOKEN`` variable.

        A ``.env`` file is loaded first if present.

        Args:
            **overrides: Other ``SlackDirectoryConfig`` fields.

        Raises:
            ConfigError: If ``SLACK_TOKEN`` is not set.
        """
        load_dotenv_once()
        token = os.environ.get(TOKEN_ENV_VAR)
        if not token:
            raise ConfigError(
                f"Environment variable '{TOKEN_ENV_VAR}' is not set"
            )
        return cls(token=token, **overrides)

    @classmethod
    def from_yaml(
        cls, config_path: Path | None = None
    ) -> SlackDirectoryConfig:
        """Load configuration from a YAML file.

        Values tagged with ``!env VAR_NAME`` are resolved from the
        environment at load time.  A ``.env`` file is loaded first if
        present.

        Args:
            config_path: Path to YAML config file.  Defaults to
                ``~/.config/slackdir/slackdir.yaml`` (XDG).

        Returns:
            SlackDirectoryConfig instance.

        Raises:
            ConfigError: If the file is missing or required values are
                absent.
        """
        load_dotenv_once()

        if config_path is None:
            config_path = get_config_path()

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            raw = yaml.load(f, Loader=_make_loader())

        if not isinstance(raw, dict):
            raise ConfigError(
                f"Config file must be a YAML mapping: {config_path}"
            )

        config = cls._from_raw(raw)
        logger.debug("Loaded config from %s", config_path)
        return config

    @classmethod
    def _from_raw(cls, raw: dict) -> SlackDirectoryConfig:
        """Build config from parsed (but unresolved) YAML dict."""
        slack = _section(raw, "slack")
        lookup = _section(raw, "lookup")

        try:
            return cls(
                token=_resolve(slack.get("token"), str, required="slack.token"),
                base_url=_resolve(
                    slack.get("base_url"), str, default=DEFAULT_BASE_URL
                ),
                token_in_query=_resolve(
                    slack.get("token_in_query"), bool, default=True
                ),
                timeout=_resolve(
                    slack.get("timeout"), int, default=DEFAULT_TIMEOUT
                ),
                max_pages=_resolve_optional_int(
                    lookup, "max_pages", default=DEFAULT_MAX_PAGES
                ),
                page_limit=_resolve_optional_int(
                    lookup, "page_limit", default=None
                ),
                service_account=_resolve(raw.get("service_account"), str),
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e


# ---------------------------------------------------------------------------
# YAML tag placeholders
# ---------------------------------------------------------------------------


class _EnvVar:
    """Placeholder for an unresolved ``!env VAR_NAME`` tag."""

    def __init__(self, var_name: str) -> None:
        self.var_name = var_name


def _env_constructor(loader: yaml.SafeLoader, node: yaml.Node) -> _EnvVar:
    """Handle ``!env VAR_NAME`` in YAML."""
    value = loader.construct_scalar(node)
    return _EnvVar(str(value))


def _make_loader() -> type[yaml.SafeLoader]:
    """Create a YAML loader that understands ``!env``."""

    class EnvLoader(yaml.SafeLoader):
        pass

    EnvLoader.add_constructor("!env", _env_constructor)
    return EnvLoader


# ---------------------------------------------------------------------------
# Value resolution
# ---------------------------------------------------------------------------


def _section(raw: dict, name: str) -> dict:
    """Return a mapping section, treating absent or null as empty."""
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a YAML mapping")
    return value


def _coerce_bool(value: object) -> bool:
    """Coerce a value to bool, handling string representations."""
    if isinstance(value, bool):
        return value
    s = str(value).lower().strip()
    if s in _BOOL_TRUTHY:
        return True
    if s in _BOOL_FALSY:
        return False
    raise ConfigError(f"Cannot convert {value!r} to bool")


def _raw_resolve(value: object) -> str | None:
    """Resolve an ``_EnvVar`` to its string value, or stringify literals.

    Returns None if the value is None or the env var is not set.
    """
    if isinstance(value, _EnvVar):
        return os.environ.get(value.var_name)
    if value is None:
        return None
    return str(value)


_MISSING = object()


@overload
def _resolve[T](value: object, coerce: type[T], *, default: T) -> T: ...


@overload
def _resolve[T](value: object, coerce: type[T], *, required: str) -> T: ...


@overload
def _resolve[T](value: object, coerce: type[T]) -> T | None: ...


def _resolve(
    value: object,
    coerce: type[Any],
    *,
    default: object = _MISSING,
    required: str = "",
) -> Any:
    """Resolve a YAML value, handling ``!env`` tags and type coercion.

    Args:
        value: Raw value from YAML (may be ``_EnvVar``, None, or a
            literal already parsed by PyYAML).
        coerce: Target type (``str``, ``int``, ``bool``).
        default: Default when value is absent.
        required: Human-readable field name.  When set, raises
            ``ConfigError`` if the value is absent or empty.

    Returns:
        The resolved, coerced value, or None when optional and absent.
    """
    if not isinstance(value, _EnvVar) and value is not None:
        if coerce is bool:
            return _coerce_bool(value)
        if isinstance(value, coerce) and not isinstance(value, bool):
            return value

    resolved = _raw_resolve(value)

    if resolved is None or (required and not resolved):
        if required:
            if isinstance(value, _EnvVar):
                raise ConfigError(
                    f"Required config '{required}': environment variable "
                    f"'{value.var_name}' is not set"
                )
            raise ConfigError(f"Required config '{required}' is missing")
        if default is not _MISSING:
            return default
        return None

    if coerce is bool:
        return _coerce_bool(resolved)
    try:
        return coerce(resolved)
    except ValueError as e:
        raise ConfigError(
            f"Cannot convert {resolved!r} to {coerce.__name__}"
        ) from e


def _resolve_optional_int(
    section: dict, key: str, *, default: int | None
) -> int | None:
    """Resolve an int that may be explicitly disabled with ``null``.

    An absent key yields *default*; a key present with a null value
    yields None.
    """
    if key not in section:
        return default
    return _resolve(section[key], int)
