"""Tests for identity webhook verification and handling"""

import inspect
import json
import time

import pytest

from hypeshelf.config import settings
from hypeshelf.exceptions import (
    MalformedEventError,
    WebhookNotConfiguredError,
    WebhookVerificationError,
)
from hypeshelf.models import Role, User
from hypeshelf.api.webhooks import receive_identity_event
from hypeshelf.utils.webhook import WebhookVerifier

WEBHOOK_URL = "/api/v1/webhooks/identity"


@pytest.fixture
def verifier():
    return WebhookVerifier(settings.IDENTITY_WEBHOOK_SECRET)


def signed_headers(verifier, body: bytes, msg_id="msg_1", timestamp=None):
    timestamp = int(time.time()) if timestamp is None else timestamp
    return {
        "svix-id": msg_id,
        "svix-timestamp": str(timestamp),
        "svix-signature": verifier.sign(msg_id, timestamp, body),
        "content-type": "application/json",
    }


def created_body(external_id="user_frank", **overrides):
    data = {
        "id": external_id,
        "email_addresses": [{"id": "e1", "email_address": "frank@example.com"}],
        "primary_email_address_id": "e1",
        "first_name": "Frank",
        "last_name": "Black",
        "image_url": "https://img.example.com/frank.png",
    }
    data.update(overrides)
    return json.dumps({"type": "user.created", "object": "event", "data": data}).encode()


def test_verify_accepts_valid_signature(verifier):
    body = b'{"type": "user.created"}'

    payload = verifier.verify(body, signed_headers(verifier, body))

    assert payload == {"type": "user.created"}


def test_verify_accepts_mixed_case_headers(verifier):
    body = b"{}"
    headers = {key.title(): value for key, value in signed_headers(verifier, body).items()}

    assert verifier.verify(body, headers) == {}


def test_verify_accepts_any_listed_signature(verifier):
    body = b"{}"
    headers = signed_headers(verifier, body)
    headers["svix-signature"] = "v1,bm90LWl0 " + headers["svix-signature"]

    verifier.verify(body, headers)


def test_verify_rejects_tampered_body(verifier):
    headers = signed_headers(verifier, b'{"a": 1}')

    with pytest.raises(WebhookVerificationError):
        verifier.verify(b'{"a": 2}', headers)


def test_verify_rejects_old_timestamp(verifier):
    body = b"{}"
    headers = signed_headers(verifier, body, timestamp=int(time.time()) - 3600)

    with pytest.raises(WebhookVerificationError):
        verifier.verify(body, headers)


def test_verify_requires_headers(verifier):
    with pytest.raises(MalformedEventError):
        verifier.verify(b"{}", {"svix-id": "msg_1"})


def test_verify_rejects_signed_non_json(verifier):
    body = b"not json"

    with pytest.raises(MalformedEventError):
        verifier.verify(body, signed_headers(verifier, body))


def test_verifier_rejects_bad_secret():
    with pytest.raises(WebhookNotConfiguredError):
        WebhookVerifier("whsec_abc")


def test_webhook_route_runs_in_threadpool():
    """Database work must not block the event loop"""

    assert not inspect.iscoroutinefunction(receive_identity_event)


def test_created_event_syncs_user(client, db_session, verifier):
    body = created_body()

    response = client.post(WEBHOOK_URL, content=body, headers=signed_headers(verifier, body))

    assert response.status_code == 200
    assert response.json() == {"success": True}
    user = db_session.query(User).filter(User.external_id == "user_frank").one()
    assert user.display_name == "Frank Black"
    assert user.role == Role.USER


def test_replayed_event_creates_one_user(client, db_session, verifier):
    """Duplicate delivery is idempotent"""

    body = created_body()
    headers = signed_headers(verifier, body)

    assert client.post(WEBHOOK_URL, content=body, headers=headers).status_code == 200
    assert client.post(WEBHOOK_URL, content=body, headers=headers).status_code == 200

    assert db_session.query(User).filter(User.external_id == "user_frank").count() == 1


def test_deleted_event(client, db_session, users, verifier):
    body = json.dumps({"type": "user.deleted", "data": {"id": "user_carol", "deleted": True}}).encode()

    response = client.post(WEBHOOK_URL, content=body, headers=signed_headers(verifier, body))

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(User).filter(User.external_id == "user_carol").count() == 0


def test_invalid_signature_rejected(client, db_session, verifier):
    """Nothing is applied when the signature does not match"""

    body = created_body()
    headers = signed_headers(verifier, body)
    headers["svix-signature"] = "v1,AAAA"

    response = client.post(WEBHOOK_URL, content=body, headers=headers)

    assert response.status_code == 401
    assert db_session.query(User).count() == 0


def test_missing_headers_rejected(client):
    response = client.post(WEBHOOK_URL, content=created_body())

    assert response.status_code == 400


def test_unparseable_body_rejected(client, verifier):
    body = b"not json"

    response = client.post(WEBHOOK_URL, content=body, headers=signed_headers(verifier, body))

    assert response.status_code == 400


def test_payload_missing_user_id_rejected(client, db_session, verifier):
    body = json.dumps({"type": "user.created", "data": {"first_name": "Nobody"}}).encode()

    response = client.post(WEBHOOK_URL, content=body, headers=signed_headers(verifier, body))

    assert response.status_code == 400
    assert db_session.query(User).count() == 0


def test_unhandled_event_acknowledged(client, verifier):
    body = json.dumps({"type": "session.created", "data": {"id": "sess_1"}}).encode()

    response = client.post(WEBHOOK_URL, content=body, headers=signed_headers(verifier, body))

    assert response.status_code == 200


def test_missing_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "IDENTITY_WEBHOOK_SECRET", None)

    response = client.post(WEBHOOK_URL, content=b"{}")

    assert response.status_code == 500
