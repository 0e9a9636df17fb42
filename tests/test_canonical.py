"""Tests for signing string construction."""

import pytest

from verisig.canonical import build_signing_string, normalize_header_names, request_target
from verisig.errors import MissingHeader
from verisig.request import HttpRequest


def test_signing_string_follows_header_order():
    request = HttpRequest(
        "POST",
        "https://local.example/inbox",
        {"Host": "local.example", "Date": "Mon, 02 Jan 2006 15:04:05 GMT"},
    )

    result = build_signing_string(request, ["date", "(request-target)", "host"])

    assert result == (
        "date: Mon, 02 Jan 2006 15:04:05 GMT\n"
        "(request-target): post /inbox\n"
        "host: local.example"
    )


def test_request_target_includes_query_and_lowercases_method():
    assert request_target("GET", "https://local.example/users/alice?page=2") == "get /users/alice?page=2"
    assert request_target("POST", "https://local.example") == "post /"
    assert request_target("Post", "/inbox") == "post /inbox"


def test_mixed_case_header_names_are_deterministic():
    request = HttpRequest(
        "POST",
        "https://local.example/inbox",
        {"date": "Mon, 02 Jan 2006 15:04:05 GMT", "HOST": "local.example"},
    )

    first = build_signing_string(request, ["(Request-Target)", "Host", "DATE"])
    second = build_signing_string(request, ["(request-target)", "host", "date"])

    assert first == second
    assert first.encode("utf-8") == second.encode("utf-8")


def test_values_are_taken_verbatim():
    request = HttpRequest("GET", "/", {"X-Custom": "  spaced  value "})

    assert build_signing_string(request, ["x-custom"]) == "x-custom:   spaced  value "


def test_missing_headers_are_all_reported():
    request = HttpRequest("POST", "https://local.example/inbox", {"Host": "local.example"})

    with pytest.raises(MissingHeader) as exc_info:
        build_signing_string(request, ["(request-target)", "date", "host", "digest"])

    assert exc_info.value.names == ["date", "digest"]
    assert exc_info.value.kind == "missing_header"


def test_empty_header_value_is_not_missing():
    request = HttpRequest("GET", "/", {"X-Empty": ""})

    assert build_signing_string(request, ["x-empty"]) == "x-empty: "


def test_plain_dict_headers_with_list_values():
    class Request:
        method = "GET"
        url = "/outbox"
        headers = {"Accept": ["application/activity+json", "application/ld+json"]}

    result = build_signing_string(Request(), ["accept"])

    assert result == "accept: application/activity+json, application/ld+json"


def test_empty_header_list_is_rejected():
    with pytest.raises(ValueError):
        build_signing_string(HttpRequest("GET", "/"), [])


def test_normalize_header_names_keeps_order():
    assert normalize_header_names(["Date", " Host ", "(request-target)"]) == [
        "date",
        "host",
        "(request-target)",
    ]
