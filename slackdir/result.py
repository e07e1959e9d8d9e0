# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Uniform operation results.

Every directory operation returns one of four variants so callers can
tell remote absence from remote failure:

- ``Found(value)``: the operation produced a value.
- ``NotFound(what)``: a lookup scanned the whole collection without a
  match.
- ``Failed(error)``: the API answered ``ok: false`` with ``error``.
- ``SearchExhausted(pages)``: a lookup stopped at the page cap before
  the collection ended.

Transport problems are not results; they raise ``SlackTransportError``.

Usage::

    match directory.find_channel("inc-42"):
        case Found(channel):
            print(channel.id)
        case NotFound():
            print("no such channel")
        case Failed(error):
            print(f"Slack said {error}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Found[T]:
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """Lookup completed without a match."""

    what: str = ""


@dataclass(frozen=True)
class Failed:
    """The API rejected the call.

    Attributes:
        error: Slack error code (e.g. ``channel_not_found``).
        method: API method that failed.
    """

    error: str
    method: str = ""


@dataclass(frozen=True)
class SearchExhausted:
    """Lookup gave up after ``pages`` pages without reaching the end."""

    pages: int


type Result[T] = Found[T] | NotFound | Failed | SearchExhausted


def is_found(result: Result[object]) -> bool:
    """Return True if *result* is a ``Found``."""
    return isinstance(result, Found)


def value_or_none[T](result: Result[T]) -> T | None:
    """Return the found value, or None for any other variant."""
    if isinstance(result, Found):
        return result.value
    return None


def unwrap[T](result: Result[T]) -> T:
    """Return the found value.

    Raises:
        LookupError: If *result* is not a ``Found``.
    """
    if isinstance(result, Found):
        return result.value
    raise LookupError(describe(result))


def describe(result: Result[object]) -> str:
    """Return a short human-readable description of a result."""
    if isinstance(result, Found):
        return "found"
    if isinstance(result, NotFound):
        return f"{result.what or 'record'} not found"
    if isinstance(result, Failed):
        if result.method:
            return f"{result.method} failed: {result.error}"
        return f"failed: {result.error}"
    return f"search stopped after {result.pages} pages"
