"""Tests for numeric IP range parsing and membership."""

from __future__ import annotations

import pytest

from packages.botmanager_shared.ip_ranges import ip_in_range, parse_ip, parse_ip_range


@pytest.mark.parametrize(
    ("address", "notation", "expected"),
    [
        ("149.154.167.197", "149.154.167.197-149.154.167.233", True),
        ("149.154.167.233", "149.154.167.197-149.154.167.233", True),
        ("149.154.167.234", "149.154.167.197-149.154.167.233", False),
        ("149.154.167.20", "149.154.167.197-149.154.167.233", False),
        ("149.154.161.5", "149.154.160.0/20", True),
        ("149.154.176.1", "149.154.160.0/20", False),
        ("10.1.2.3", "10.1.*.*", True),
        ("10.2.0.0", "10.1.*.*", False),
        ("203.0.113.7", "203.0.113.7", True),
        ("2001:db8::1", "2001:db8::/32", True),
        ("2001:db8::1", "0.0.0.0/0", False),
        ("not-an-ip", "0.0.0.0/0", False),
        (None, "0.0.0.0/0", False),
    ],
)
def test_ip_in_range(address: str | None, notation: str, expected: bool) -> None:
    assert ip_in_range(address, notation) is expected


def test_reversed_span_is_normalized() -> None:
    span = parse_ip_range("10.0.0.9-10.0.0.1")

    assert str(span.first) == "10.0.0.1"
    assert str(span.last) == "10.0.0.9"


@pytest.mark.parametrize(
    "notation",
    ["", "10.0.0.1-::1", "10.*.1", "10.0.0.0/40", "example.com"],
)
def test_invalid_range_notation_raises(notation: str) -> None:
    with pytest.raises(ValueError):
        parse_ip_range(notation)


def test_parse_ip_strips_whitespace() -> None:
    assert str(parse_ip(" 127.0.0.1 ")) == "127.0.0.1"
    assert parse_ip("") is None
