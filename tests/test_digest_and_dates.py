"""Tests for Digest and Date header helpers."""

from datetime import datetime, timezone

import pytest

from verisig.digest import compute_digest, verify_digest
from verisig.errors import DigestMismatch, MissingOrInvalidDate, SignatureMismatch
from verisig.httpdate import format_http_date, parse_http_date


def test_compute_digest():
    # sha256("") is well known
    assert compute_digest(b"") == "SHA-256=47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU="


def test_verify_digest_accepts_matching_entry():
    body = b"some toot"

    verify_digest(compute_digest(body), body)
    verify_digest(f"MD5=abc, {compute_digest(body).replace('SHA-256', 'sha-256')}", body)


def test_verify_digest_rejects_changed_body():
    with pytest.raises(DigestMismatch) as exc_info:
        verify_digest(compute_digest(b"some toot"), b"some other toot")

    assert isinstance(exc_info.value, SignatureMismatch)


def test_verify_digest_requires_sha256():
    with pytest.raises(DigestMismatch):
        verify_digest("SHA-512=abc", b"some toot")


def test_format_http_date():
    when = datetime(2006, 1, 2, 15, 4, 5, 123456, tzinfo=timezone.utc)

    assert format_http_date(when) == "Mon, 02 Jan 2006 15:04:05 GMT"
    assert format_http_date(when.replace(tzinfo=None)) == "Mon, 02 Jan 2006 15:04:05 GMT"


def test_parse_http_date():
    parsed = parse_http_date("Mon, 02 Jan 2006 15:04:05 GMT")

    assert parsed == datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
    assert parse_http_date(format_http_date()).tzinfo is not None


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "yesterday",
        "2006-01-02T15:04:05Z",
        "Monday, 02-Jan-06 15:04:05 GMT",
        "Mon, 02 Jan 2006 15:04:05 +0000",
        "Mon, 31 Feb 2006 15:04:05 GMT",
    ],
)
def test_parse_http_date_rejects_invalid(value):
    with pytest.raises(MissingOrInvalidDate):
        parse_http_date(value)
