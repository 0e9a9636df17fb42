"""Tests for signed activity delivery."""

import json

import pytest
import requests

from tests.conftest import KEY_ID
from verisig.activitypub.delivery import HTTPSignatureAuth, deliver_activity
from verisig.config import VerisigConfig
from verisig.errors import DeliveryError
from verisig.verifier import req_has_valid_signature, verify_request

INBOX = "https://local.example/users/bob/inbox"

ACTIVITY = {
    "@context": "https://www.w3.org/ns/activitystreams",
    "type": "Create",
    "actor": "https://remote.example/users/alice",
    "object": {"type": "Note", "content": "some toot"},
}


class Resp:
    def __init__(self, status_code):
        self.status_code = status_code
        self.text = "" if status_code < 400 else "Unauthorized"


class FakeSession:
    """Prepares requests like a real session but never sends them."""

    def __init__(self, status_code=202):
        self.status_code = status_code
        self.sent = []

    def post(self, url, data=None, headers=None, auth=None, timeout=None):
        prepared = requests.Request("POST", url, data=data, headers=headers, auth=auth).prepare()
        self.sent.append(prepared)
        return Resp(self.status_code)


def test_auth_signs_prepared_request(private_pem, public_pem):
    prepared = requests.Request(
        "GET",
        "https://remote.example/users/alice/outbox?page=true",
        auth=HTTPSignatureAuth(KEY_ID, private_pem),
    ).prepare()

    params = verify_request(prepared, public_pem, 12)

    assert params.headers == ["(request-target)", "host", "date"]
    assert prepared.headers["Host"] == "remote.example"


def test_auth_with_explicit_headers(private_pem, public_pem):
    prepared = requests.Request(
        "POST",
        INBOX,
        data=b"some toot",
        auth=HTTPSignatureAuth(KEY_ID, private_pem, ["(request-target)", "date"]),
    ).prepare()

    params = verify_request(prepared, public_pem, 12)

    assert params.headers == ["(request-target)", "date"]
    assert "Digest" not in prepared.headers


def test_deliver_activity(private_pem, public_pem):
    session = FakeSession()

    response = deliver_activity(INBOX, ACTIVITY, KEY_ID, private_pem, session=session)

    assert response.status_code == 202
    prepared = session.sent[0]
    assert prepared.headers["Content-Type"] == "application/activity+json"
    assert json.loads(prepared.body) == ACTIVITY
    assert "digest" in prepared.headers["Signature"]
    assert req_has_valid_signature(prepared, public_pem, 12) == (True, None)


def test_deliver_activity_rejected(private_pem):
    session = FakeSession(status_code=401)

    with pytest.raises(DeliveryError) as exc_info:
        deliver_activity(INBOX, ACTIVITY, KEY_ID, private_pem, session=session)

    assert exc_info.value.status_code == 401
    assert exc_info.value.kind == "delivery_failed"


def test_deliver_activity_uses_configured_headers(private_pem, public_pem):
    session = FakeSession()
    config = VerisigConfig(signed_headers=["(request-target)", "host", "date"])

    deliver_activity(INBOX, ACTIVITY, KEY_ID, private_pem, session=session, config=config)

    params = verify_request(session.sent[0], public_pem, 12)
    assert params.headers == ["(request-target)", "host", "date"]
