"""
Regex fallback tests.
"""
import time

import pytest

from leadhook.services.free_text import find_email, find_name, find_phone


class TestFindEmail:
    def test_first_match(self):
        text = "Send it to a.b+deals@broker.co.uk or backup@example.com"
        assert find_email(text) == "a.b+deals@broker.co.uk"

    def test_trailing_period_dropped(self):
        assert find_email("Email: sam@example.com.") == "sam@example.com"

    def test_no_match(self):
        assert find_email("no address here, just @mentions") == ""
        assert find_email("") == ""


class TestFindPhone:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Call me at (555) 123-4567 tomorrow", "(555) 123-4567"),
            ("my cell is +1 555 123 4567", "+1 555 123 4567"),
            ("number 5551234567.", "5551234567"),
            ("reach me on 555.123.4567", "555.123.4567"),
        ],
    )
    def test_phone_shapes(self, text, expected):
        assert find_phone(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "Budget is $3,000,000 for the building",
            "Budget is $3000000000",
            "Extension 555-0100",
            "closing in 2025",
        ],
    )
    def test_rejects_non_phones(self, text):
        assert find_phone(text) == ""


class TestFindName:
    def test_my_name_is(self):
        assert find_name("Hi, my name is john smith and I want to sell") == "John Smith"

    def test_this_is_with_role_word(self):
        assert find_name("Hello, this is buyer Jane Doe.") == "Jane Doe"

    def test_capped_to_three_words(self):
        assert find_name("my name is Mary Ann Lou Jones") == "Mary Ann Lou"

    def test_cut_at_punctuation(self):
        assert find_name("This is Ray Fox, the owner of 12 Main St") == "Ray Fox"

    def test_phrase_without_a_name(self):
        assert find_name("this is a great property") == ""

    def test_prefers_my_name_is(self):
        text = "AI: Hi, this is Sarah. User: my name is Omar Haddad"
        assert find_name(text) == "Omar Haddad"

    def test_no_trigger(self):
        assert find_name("Caller wants a duplex in Queens") == ""


class TestLongInput:
    """Regex scans must stay linear on large summaries."""

    @pytest.mark.parametrize(
        "text",
        [
            "a" * 200_000,
            "a" * 100_000 + "@" + "b" * 100_000,
            "a." * 100_000,
        ],
    )
    def test_find_email_linear(self, text):
        started = time.perf_counter()
        assert find_email(text) == ""
        assert time.perf_counter() - started < 1.0

    def test_find_email_after_long_run(self):
        text = "x" * 100_000 + " contact sam@example.com"
        started = time.perf_counter()
        assert find_email(text) == "sam@example.com"
        assert time.perf_counter() - started < 1.0

    def test_find_phone_linear(self):
        started = time.perf_counter()
        # A digit run longer than any phone number is not a phone.
        assert find_phone("1 " * 100_000) == ""
        assert time.perf_counter() - started < 1.0
