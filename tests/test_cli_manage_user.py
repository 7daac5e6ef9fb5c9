from __future__ import annotations

import io
import json

import pytest

from cms_sdk.cli.main import main
from cms_sdk.crypto.identity import Identity
from cms_sdk.errors import RequestError, UserLookupError
from cms_sdk.schemas import LoginReply, UserRecord


@pytest.fixture()
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("CMSCTL_HOST", raising=False)
    monkeypatch.delenv("CMSCTL_SESSION", raising=False)
    identity_path = tmp_path / "identity.json"
    Identity.generate().save(identity_path)
    path = tmp_path / "config.toml"
    path.write_text(
        f'host = "http://localhost:4443"\nidentity_path = "{identity_path.as_posix()}"\n',
        encoding="utf-8",
    )
    return path


def _install_client(monkeypatch, *, is_admin: bool = True, record: UserRecord | None = None):
    calls: dict[str, list] = {"me": [], "details": [], "manage": []}

    class _Client:
        def __init__(self, **kwargs) -> None:
            self.kwargs = kwargs

        def me(self) -> LoginReply:
            calls["me"].append(True)
            return LoginReply(is_admin=is_admin, user_id="admin-1")

        def cms_user_details(self, user_id: str) -> UserRecord:
            calls["details"].append(user_id)
            return record or UserRecord(
                id=user_id,
                domain=2,
                contractor_type=1,
                supervisor_user_ids=["a"],
            )

        def cms_manage_user(self, request) -> dict:
            calls["manage"].append(request)
            return {}

    monkeypatch.setattr("cms_sdk.cli.main.CMSClient", _Client)
    return calls


def test_manage_user_domain_flag_scenario(monkeypatch, config_path) -> None:
    calls = _install_client(monkeypatch)
    out = io.StringIO()
    err = io.StringIO()

    rc = main(
        ["--config", str(config_path), "manageuser", "u-1", "--domain", "5"],
        stdout=out,
        stderr=err,
        stdin=io.StringIO("no\nno\n\n"),
    )

    assert rc == 0, err.getvalue()
    (request,) = calls["manage"]
    assert request.to_payload() == {
        "userid": "u-1",
        "domain": 5,
        "contractortype": 1,
        "supervisoruserids": ["a"],
    }
    assert out.getvalue().rstrip().endswith("{}")


def test_manage_user_requires_identity(monkeypatch, config_path, tmp_path) -> None:
    calls = _install_client(monkeypatch)
    (tmp_path / "identity.json").unlink()
    out = io.StringIO()
    err = io.StringIO()

    rc = main(
        ["--config", str(config_path), "manageuser", "u-1", "--domain", "5"],
        stdout=out,
        stderr=err,
        stdin=io.StringIO(""),
    )

    assert rc == 3
    assert "authorization error: user identity not found" in err.getvalue()
    assert calls["me"] == []


def test_manage_user_rejects_non_admin_before_lookup(monkeypatch, config_path) -> None:
    calls = _install_client(monkeypatch, is_admin=False)
    out = io.StringIO()
    err = io.StringIO()

    rc = main(
        ["--config", str(config_path), "manageuser", "u-1"],
        stdout=out,
        stderr=err,
        stdin=io.StringIO(""),
    )

    assert rc == 3
    assert "must be an administrator" in err.getvalue()
    assert calls["details"] == []
    assert calls["manage"] == []


def test_manage_user_trims_user_id(monkeypatch, config_path) -> None:
    calls = _install_client(monkeypatch)

    rc = main(
        [
            "--config",
            str(config_path),
            "manageuser",
            "  u-1 ",
            "--domain",
            "1",
            "--contractortype",
            "direct",
            "--supervisoruserids",
            "s1,s2",
            "--json",
        ],
        stdout=io.StringIO(),
        stderr=io.StringIO(),
        stdin=io.StringIO(""),
    )

    assert rc == 0
    assert calls["details"] == ["u-1"]
    assert calls["manage"][0].user_id == "u-1"
    assert calls["manage"][0].supervisor_user_ids == ["s1", "s2"]


def test_manage_user_json_reply_is_compact(monkeypatch, config_path) -> None:
    _install_client(monkeypatch)
    out = io.StringIO()

    rc = main(
        [
            "--config",
            str(config_path),
            "manageuser",
            "u-1",
            "--domain",
            "1",
            "--contractortype",
            "1",
            "--supervisoruserids",
            "s1",
            "--json",
        ],
        stdout=out,
        stderr=io.StringIO(),
        stdin=io.StringIO(""),
    )

    assert rc == 0
    assert json.loads(out.getvalue()) == {}


def test_manage_user_lookup_failure_propagates(monkeypatch, config_path) -> None:
    calls = _install_client(monkeypatch)

    def _missing(self, user_id: str) -> UserRecord:  # noqa: ARG001
        raise UserLookupError(f"user not found: {user_id}")

    monkeypatch.setattr("cms_sdk.cli.main.CMSClient.cms_user_details", _missing)
    err = io.StringIO()

    rc = main(
        ["--config", str(config_path), "manageuser", "nobody"],
        stdout=io.StringIO(),
        stderr=err,
        stdin=io.StringIO(""),
    )

    assert rc == 2
    assert "server error: user not found: nobody" in err.getvalue()
    assert calls["manage"] == []


def test_manage_user_submission_error_propagates(monkeypatch, config_path) -> None:
    _install_client(monkeypatch)

    def _reject(self, request) -> dict:  # noqa: ARG001
        raise RequestError("server request failed: 400 error code 11", status_code=400)

    monkeypatch.setattr("cms_sdk.cli.main.CMSClient.cms_manage_user", _reject)
    err = io.StringIO()

    rc = main(
        [
            "--config",
            str(config_path),
            "manageuser",
            "u-1",
            "--domain",
            "2",
            "--contractortype",
            "2",
            "--supervisoruserids",
            "s1",
        ],
        stdout=io.StringIO(),
        stderr=err,
        stdin=io.StringIO(""),
    )

    assert rc == 2
    assert "server error: server request failed: 400 error code 11" in err.getvalue()


def test_manage_user_bad_domain_flag_is_input_error(monkeypatch, config_path) -> None:
    calls = _install_client(monkeypatch)
    err = io.StringIO()

    rc = main(
        [
            "--config",
            str(config_path),
            "manageuser",
            "u-1",
            "--domain",
            "9",
            "--contractortype",
            "1",
            "--supervisoruserids",
            "s1",
        ],
        stdout=io.StringIO(),
        stderr=err,
        stdin=io.StringIO(""),
    )

    assert rc == 1
    assert "input error: invalid domain 9" in err.getvalue()
    assert calls["manage"] == []
