"""Shared fixtures for signature tests."""

from datetime import datetime, timedelta, timezone

import pytest

from verisig.httpdate import format_http_date
from verisig.keys import generate_rsa_key_pair
from verisig.request import HttpRequest

KEY_ID = "https://remote.example/users/alice#main-key"


@pytest.fixture(scope="session")
def key_pair():
    return generate_rsa_key_pair(key_size=2048)


@pytest.fixture(scope="session")
def other_key_pair():
    return generate_rsa_key_pair(key_size=2048)


@pytest.fixture
def private_pem(key_pair):
    return key_pair[0]


@pytest.fixture
def public_pem(key_pair):
    return key_pair[1]


def http_date(hours_ago: float = 0) -> str:
    return format_http_date(datetime.now(timezone.utc) - timedelta(hours=hours_ago))


@pytest.fixture
def make_request():
    def _make(method="POST", url="https://local.example/inbox", body="some toot", date=None, **headers):
        request = HttpRequest(method, url, headers, body)
        if date is not None:
            request.headers["Date"] = date
        return request

    return _make
