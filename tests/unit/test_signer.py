"""Unit tests for request signing."""

import hashlib
import hmac
import re

import pytest

from sqsrelay.delivery.signer import canonical_string, sign, verify


def reference_tag(key: bytes, message: bytes) -> str:
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def test_canonical_string_strips_trailing_slash():
    """Test the canonical string for the documented example."""
    assert (
        canonical_string("https://example.com/hook/", "payload")
        == b"POST https://example.com/hook\npayload"
    )


def test_canonical_string_strips_every_trailing_slash():
    """Test that repeated trailing slashes are all removed."""
    assert canonical_string("https://example.com/hook///", "x") == b"POST https://example.com/hook\nx"


def test_sign_matches_reference_hmac():
    """Test tag against an independently computed HMAC-SHA256."""
    expected = reference_tag(b"s3cr3t", b"POST https://example.com/hook\npayload")

    assert sign("https://example.com/hook/", "payload", b"s3cr3t") == expected


def test_sign_is_deterministic_lowercase_hex():
    """Test that signing twice yields the same 64 character hex tag."""
    first = sign("https://example.com/hook", "body", b"key")
    second = sign("https://example.com/hook", "body", b"key")

    assert first == second
    assert re.fullmatch(r"[0-9a-f]{64}", first)


def test_sign_ignores_trailing_slash_in_url():
    """Test that URLs differing only by a trailing slash sign identically."""
    assert sign("https://example.com/hook/", "body", b"key") == sign(
        "https://example.com/hook", "body", b"key"
    )


def test_sign_accepts_str_and_bytes():
    """Test that str inputs are UTF-8 encoded."""
    assert sign("https://example.com", "héllo", "key") == sign(
        "https://example.com", "héllo".encode(), b"key"
    )


@pytest.mark.parametrize(
    "url,body,key",
    [
        ("https://example.com/other", "payload", b"s3cr3t"),
        ("https://example.com/hook", "payload2", b"s3cr3t"),
        ("https://example.com/hook", "payload", b"other"),
    ],
)
def test_sign_changes_with_inputs(url, body, key):
    """Test that url, body and key all contribute to the tag."""
    baseline = sign("https://example.com/hook", "payload", b"s3cr3t")

    assert sign(url, body, key) != baseline


def test_verify():
    """Test tag verification."""
    tag = sign("https://example.com/hook", "payload", b"s3cr3t")

    assert verify("https://example.com/hook/", "payload", b"s3cr3t", tag)
    assert not verify("https://example.com/hook", "tampered", b"s3cr3t", tag)
