# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for slackdir/result.py."""

import pytest

from slackdir.result import (
    Failed,
    Found,
    NotFound,
    SearchExhausted,
    describe,
    is_found,
    unwrap,
    value_or_none,
)


class TestHelpers:
    def test_found(self) -> None:
        result = Found("x")
        assert is_found(result)
        assert unwrap(result) == "x"
        assert value_or_none(result) == "x"

    @pytest.mark.parametrize(
        "result",
        [NotFound("channel"), Failed("not_authed"), SearchExhausted(3)],
    )
    def test_non_found(self, result: object) -> None:
        assert not is_found(result)  # type: ignore[arg-type]
        assert value_or_none(result) is None  # type: ignore[arg-type]
        with pytest.raises(LookupError):
            unwrap(result)  # type: ignore[arg-type]

    def test_pattern_matching(self) -> None:
        match Failed("channel_not_found", method="conversations.history"):
            case Found(value):
                pytest.fail(f"unexpected {value}")
            case Failed(error):
                assert error == "channel_not_found"
            case _:
                pytest.fail("unexpected variant")


class TestDescribe:
    def test_not_found(self) -> None:
        assert describe(NotFound("user")) == "user not found"

    def test_not_found_default(self) -> None:
        assert describe(NotFound()) == "record not found"

    def test_failed_with_method(self) -> None:
        assert (
            describe(Failed("not_authed", method="users.list"))
            == "users.list failed: not_authed"
        )

    def test_exhausted(self) -> None:
        assert describe(SearchExhausted(5)) == "search stopped after 5 pages"
