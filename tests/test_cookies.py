"""Tests for warbler.http.cookies: Cookie parsing and Set-Cookie output."""

from warbler.http.cookies import SetCookie, parse_cookies


class TestParseCookies:
    def test_single(self) -> None:
        assert parse_cookies("lastname=Tempest") == {"lastname": "Tempest"}

    def test_multiple(self) -> None:
        assert parse_cookies("a=1; b=2") == {"a": "1", "b": "2"}

    def test_empty_header(self) -> None:
        assert parse_cookies("") == {}

    def test_quoted_value(self) -> None:
        assert parse_cookies('name="Lev Tempest"') == {"name": "Lev Tempest"}

    def test_pair_without_equals_skipped(self) -> None:
        assert parse_cookies("flag; a=1") == {"a": "1"}

    def test_duplicate_name_keeps_last(self) -> None:
        assert parse_cookies("a=1; a=2") == {"a": "2"}

    def test_value_may_contain_equals(self) -> None:
        assert parse_cookies("token=abc==") == {"token": "abc=="}


class TestSetCookie:
    def test_defaults(self) -> None:
        value = SetCookie("session", "abc").to_header_value()
        assert value == "session=abc; Path=/; HttpOnly; SameSite=Lax"

    def test_all_attributes(self) -> None:
        cookie = SetCookie(
            "session",
            "abc",
            max_age=60,
            domain="example.com",
            secure=True,
            httponly=False,
            samesite="Strict",
        )
        assert cookie.to_header_value() == (
            "session=abc; Max-Age=60; Path=/; Domain=example.com; Secure; SameSite=Strict"
        )
