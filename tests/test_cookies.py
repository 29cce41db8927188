"""
Test suite for the session cookie jar.

This module tests:
- Parsing of raw Set-Cookie values
- Overwrite semantics across responses
- Cookie header rendering

Run with: pytest tests/test_cookies.py -v
"""
from __future__ import annotations

from src.survey_crawler.transport.cookies import CookieJar


class TestCookieIngestion:
    """Test suite for Set-Cookie parsing."""

    def test_attributes_after_first_semicolon_are_dropped(self):
        jar = CookieJar()
        jar.ingest(["sid=abc123; Path=/; HttpOnly; Secure"])

        assert jar.get("sid") == "abc123"
        assert jar.serialize() == "sid=abc123"

    def test_value_may_contain_equals_sign(self):
        """Only the first '=' separates name and value."""
        jar = CookieJar()
        jar.ingest(["token=a=b==; Path=/"])

        assert jar.get("token") == "a=b=="

    def test_entries_without_equals_are_ignored(self):
        jar = CookieJar()
        jar.ingest(["garbage; Path=/", "", "   "])

        assert len(jar) == 0
        assert jar.serialize() == ""

    def test_entries_with_empty_name_are_ignored(self):
        jar = CookieJar()
        jar.ingest(["=orphan; Path=/", "ok=1"])

        assert jar.as_dict() == {"ok": "1"}

    def test_empty_value_is_kept(self):
        jar = CookieJar()
        jar.ingest(["cleared=; Max-Age=0"])

        assert "cleared" in jar
        assert jar.serialize() == "cleared="


class TestCookieOverwrite:
    """Test suite for latest-value-wins semantics."""

    def test_later_response_overwrites_value(self):
        jar = CookieJar()
        jar.ingest(["sid=first", "lang=ja"])
        jar.ingest(["sid=second"])

        assert jar.get("sid") == "second"
        assert jar.serialize() == "sid=second; lang=ja"

    def test_later_header_in_same_response_wins(self):
        jar = CookieJar()
        jar.ingest(["sid=1", "sid=2"])

        assert jar.as_dict() == {"sid": "2"}

    def test_clear_empties_jar(self):
        jar = CookieJar()
        jar.ingest(["sid=1"])
        jar.clear()

        assert len(jar) == 0
        assert jar.get("sid") is None
