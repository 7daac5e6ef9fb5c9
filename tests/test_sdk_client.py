from __future__ import annotations

import hashlib
import types

import pytest

from cms_sdk.client import CMSClient
from cms_sdk.errors import RequestError, TransportError, UserLookupError
from cms_sdk.schemas import ManageUserRequest


def _response(status_code: int = 200, body=None, headers=None, text: str = ""):
    def _json():
        if body is None:
            raise ValueError("no json")
        return body

    return types.SimpleNamespace(
        status_code=status_code,
        json=_json,
        headers=headers or {},
        text=text,
    )


def _record_requests(monkeypatch, client: CMSClient, responses: dict):
    captured: list[dict] = []

    def fake_request(method, url, *, json=None, params=None, headers=None, timeout=None):
        captured.append(
            {"method": method, "url": url, "json": json, "params": params, "headers": headers}
        )
        return responses[(method, url)]

    monkeypatch.setattr(client._session, "request", fake_request)
    return captured


def test_me_parses_admin_flag(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    _record_requests(
        monkeypatch,
        client,
        {("GET", "http://localhost:4443/api/v1/user/me"): _response(body={"isadmin": True})},
    )

    assert client.me().is_admin is True


def test_user_details_tolerates_null_supervisors(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443/")
    _record_requests(
        monkeypatch,
        client,
        {
            ("GET", "http://localhost:4443/api/v1/user/u-1"): _response(
                body={
                    "user": {
                        "id": "u-1",
                        "domain": 3,
                        "contractortype": 2,
                        "supervisoruserids": None,
                    }
                }
            )
        },
    )

    record = client.cms_user_details("u-1")
    assert (record.domain, record.contractor_type, record.supervisor_user_ids) == (3, 2, [])


def test_user_details_not_found_raises_lookup_error(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    _record_requests(
        monkeypatch,
        client,
        {
            ("GET", "http://localhost:4443/api/v1/user/missing"): _response(
                404, body={"errorcode": 7}
            )
        },
    )

    with pytest.raises(UserLookupError):
        client.cms_user_details("missing")


def test_manage_user_posts_payload_with_csrf_token(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    captured = _record_requests(
        monkeypatch,
        client,
        {
            ("GET", "http://localhost:4443/api/v1/"): _response(
                body={"version": 1}, headers={"X-CSRF-Token": "csrf-1"}
            ),
            ("POST", "http://localhost:4443/api/v1/admin/managecms"): _response(body={}),
        },
    )

    reply = client.cms_manage_user(
        ManageUserRequest(
            user_id="u-1",
            domain=5,
            contractor_type=1,
            supervisor_user_ids=["a"],
        )
    )

    assert reply == {}
    post = captured[-1]
    assert post["headers"] == {"X-CSRF-Token": "csrf-1"}
    assert post["json"] == {
        "userid": "u-1",
        "domain": 5,
        "contractortype": 1,
        "supervisoruserids": ["a"],
    }


def test_new_user_sends_password_digest_and_public_key(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    captured = _record_requests(
        monkeypatch,
        client,
        {
            ("GET", "http://localhost:4443/api/v1/"): _response(
                body={}, headers={"X-CSRF-Token": "csrf-1"}
            ),
            ("POST", "http://localhost:4443/api/v1/user/new"): _response(
                body={
                    "verificationtoken": "tok",
                    "paywalladdress": "Ts1",
                    "paywallamount": 5,
                }
            ),
        },
    )

    result = client.new_user("a@example.com", "secretpass")

    body = captured[-1]["json"]
    assert body["email"] == "a@example.com"
    assert body["password"] == hashlib.sha3_256(b"secretpass").hexdigest()
    assert body["publickey"] == result.identity.public_key_bytes.hex()
    assert result.verification_token == "tok"
    assert (result.paywall_address, result.paywall_amount) == ("Ts1", 5)


def test_verify_new_user_uses_query_params(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    captured = _record_requests(
        monkeypatch,
        client,
        {("GET", "http://localhost:4443/api/v1/user/verify"): _response(body={})},
    )

    client.verify_new_user("a@example.com", "tok", "abcd")

    assert captured[0]["params"] == {
        "email": "a@example.com",
        "verificationtoken": "tok",
        "signature": "abcd",
    }


def test_structured_error_carries_code_and_context(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    _record_requests(
        monkeypatch,
        client,
        {
            ("GET", "http://localhost:4443/api/v1/policy"): _response(
                400, body={"errorcode": 12, "errorcontext": ["bad thing"]}
            )
        },
    )

    with pytest.raises(RequestError) as info:
        client.policy()
    assert info.value.status_code == 400
    assert info.value.error_code == 12
    assert str(info.value) == "server request failed: 400 error code 12: bad thing"


def test_malformed_reply_is_transport_error(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")
    _record_requests(
        monkeypatch,
        client,
        {("GET", "http://localhost:4443/api/v1/policy"): _response(body={"other": 1})},
    )

    with pytest.raises(TransportError):
        client.policy()


def test_connection_failure_is_transport_error(monkeypatch) -> None:
    client = CMSClient(host="http://localhost:4443")

    def fake_request(*args, **kwargs):  # noqa: ANN002, ANN003
        raise ConnectionError("refused")

    monkeypatch.setattr(client._session, "request", fake_request)

    with pytest.raises(TransportError, match="refused"):
        client.me()


def test_session_cookie_is_attached() -> None:
    client = CMSClient(host="http://localhost:4443", session_cookie="sess-1")
    assert client._session.cookies.get("session") == "sess-1"
