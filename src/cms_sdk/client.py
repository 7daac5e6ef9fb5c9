"""Typed client for the user-administration API."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from pydantic import ValidationError

from cms_sdk.crypto.identity import Identity
from cms_sdk.errors import RequestError, TransportError, UserLookupError
from cms_sdk.schemas import (
    LoginReply,
    ManageUserRequest,
    NewUserReply,
    PolicyReply,
    UserDetailsReply,
    UserRecord,
)

API_ROUTE = "/api/v1"
CSRF_HEADER = "X-CSRF-Token"
SESSION_COOKIE_NAME = "session"


@dataclass(frozen=True)
class NewUserResult:
    verification_token: str
    identity: Identity
    paywall_address: str
    paywall_amount: int


def digest_password(password: str) -> str:
    return hashlib.sha3_256(password.encode("utf-8")).hexdigest()


@dataclass
class CMSClient:
    host: str
    session_cookie: str | None = None
    verify_tls: bool = True
    timeout: float = 10.0

    def __post_init__(self) -> None:
        try:
            import requests
            from requests.adapters import HTTPAdapter
        except Exception as exc:  # pragma: no cover
            raise TransportError(f"requests stack unavailable: {exc}") from exc

        self._session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        self._session.verify = self.verify_tls
        if self.session_cookie:
            self._session.cookies.set(SESSION_COOKIE_NAME, self.session_cookie)
        self._csrf_token: str | None = None

    def _url(self, path: str) -> str:
        return f"{self.host.rstrip('/')}{API_ROUTE}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_payload: dict | None = None,
        params: dict | None = None,
    ) -> dict:
        headers = None
        if method != "GET":
            headers = {CSRF_HEADER: self._ensure_csrf_token()}
        try:
            response = self._session.request(
                method,
                self._url(path),
                json=json_payload,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except Exception as exc:
            raise TransportError(str(exc)) from exc

        if response.status_code >= 400:
            raise _request_error(response)
        try:
            body = response.json()
        except Exception as exc:
            raise TransportError(
                f"invalid response from {method} {path}: expected JSON"
            ) from exc
        return body if isinstance(body, dict) else {}

    def _ensure_csrf_token(self) -> str:
        if self._csrf_token is None:
            self.version()
        return self._csrf_token or ""

    def version(self) -> dict:
        try:
            response = self._session.request(
                "GET", self._url("/"), headers=None, timeout=self.timeout
            )
        except Exception as exc:
            raise TransportError(str(exc)) from exc
        if response.status_code >= 400:
            raise _request_error(response)
        token = response.headers.get(CSRF_HEADER)
        if token:
            self._csrf_token = token
        try:
            body = response.json()
        except Exception:
            body = {}
        return body if isinstance(body, dict) else {}

    def me(self) -> LoginReply:
        return _parse(LoginReply, self._request("GET", "/user/me"))

    def policy(self) -> PolicyReply:
        return _parse(PolicyReply, self._request("GET", "/policy"))

    def cms_user_details(self, user_id: str) -> UserRecord:
        try:
            reply = self._request("GET", f"/user/{user_id}")
        except RequestError as exc:
            if exc.status_code == 404:
                raise UserLookupError(f"user not found: {user_id}") from exc
            raise
        return _parse(UserDetailsReply, reply).user

    def cms_manage_user(self, request: ManageUserRequest) -> dict:
        return self._request("POST", "/admin/managecms", json_payload=request.to_payload())

    def new_user(self, email: str, password: str) -> NewUserResult:
        """Register an account under a freshly generated identity."""
        identity = Identity.generate()
        reply = self._request(
            "POST",
            "/user/new",
            json_payload={
                "email": email,
                "password": digest_password(password),
                "publickey": identity.public_key_hex,
            },
        )
        parsed = _parse(NewUserReply, reply)
        return NewUserResult(
            verification_token=parsed.verification_token,
            identity=identity,
            paywall_address=parsed.paywall_address,
            paywall_amount=parsed.paywall_amount,
        )

    def verify_new_user(self, email: str, verification_token: str, signature: str) -> dict:
        return self._request(
            "GET",
            "/user/verify",
            params={
                "email": email,
                "verificationtoken": verification_token,
                "signature": signature,
            },
        )


def _request_error(response) -> RequestError:
    body: object | None = None
    try:
        body = response.json()
    except Exception:
        body = None
    error_code: int | None = None
    error_context: list[str] = []
    if isinstance(body, dict):
        raw_error_code = body.get("errorcode")
        error_code = raw_error_code if isinstance(raw_error_code, int) else None
        raw_context = body.get("errorcontext")
        if isinstance(raw_context, list):
            error_context = [str(item) for item in raw_context]
    if error_code is not None:
        message = f"server request failed: {response.status_code} error code {error_code}"
        if error_context:
            message = f"{message}: {', '.join(error_context)}"
    else:
        message = f"server request failed: {response.status_code} {response.text}"
    return RequestError(
        message,
        status_code=response.status_code,
        error_code=error_code,
        error_context=error_context,
        body=body,
    )


def _parse(model, payload: dict):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise TransportError(f"invalid {model.__name__} from server: {exc}") from exc


__all__ = ["CMSClient", "NewUserResult", "digest_password"]
