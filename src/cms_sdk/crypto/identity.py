"""Ed25519 user identity: generation, signing and on-disk persistence."""

from __future__ import annotations

import base64
import json
import os
from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)


class IdentityError(ValueError):
    """Raised when identity material is invalid or cannot be loaded."""


@dataclass(frozen=True)
class Identity:
    private_key_bytes: bytes
    public_key_bytes: bytes

    @classmethod
    def generate(cls) -> "Identity":
        private = Ed25519PrivateKey.generate()
        return cls(
            private_key_bytes=private.private_bytes(
                Encoding.Raw, PrivateFormat.Raw, NoEncryption()
            ),
            public_key_bytes=private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw),
        )

    @property
    def private_key_b64(self) -> str:
        return base64.b64encode(self.private_key_bytes).decode("ascii")

    @property
    def public_key_b64(self) -> str:
        return base64.b64encode(self.public_key_bytes).decode("ascii")

    @property
    def public_key_hex(self) -> str:
        return self.public_key_bytes.hex()

    def sign_message(self, message: bytes) -> bytes:
        return Ed25519PrivateKey.from_private_bytes(self.private_key_bytes).sign(message)

    def save(self, path: str | Path) -> Path:
        """Write the keypair to ``path`` readable by the owner only."""
        identity_path = Path(path)
        identity_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = {
            "private_key_b64": self.private_key_b64,
            "public_key_b64": self.public_key_b64,
        }
        identity_path.write_text(json.dumps(serialized, indent=2) + "\n", encoding="utf-8")
        _chmod_owner_only(identity_path)
        return identity_path


def _chmod_owner_only(path: Path) -> None:
    if os.name != "posix":
        return
    path.chmod(0o600)


def load_identity(path: str | Path) -> Identity:
    identity_path = Path(path)
    if not identity_path.exists():
        raise IdentityError(f"identity file not found: {identity_path}")
    try:
        payload = json.loads(identity_path.read_text(encoding="utf-8"))
    except Exception as exc:
        raise IdentityError(f"invalid identity file: {identity_path}") from exc

    private_key_b64 = payload.get("private_key_b64") if isinstance(payload, dict) else None
    public_key_b64 = payload.get("public_key_b64") if isinstance(payload, dict) else None
    if not isinstance(private_key_b64, str) or not isinstance(public_key_b64, str):
        raise IdentityError("identity file must contain private_key_b64 and public_key_b64")

    try:
        private_key_bytes = base64.b64decode(private_key_b64, validate=True)
        public_key_bytes = base64.b64decode(public_key_b64, validate=True)
    except Exception as exc:
        raise IdentityError("identity keys must be valid base64") from exc

    if len(private_key_bytes) != 32 or len(public_key_bytes) != 32:
        raise IdentityError("identity keys must decode to 32 bytes")

    private = Ed25519PrivateKey.from_private_bytes(private_key_bytes)
    expected_public = private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    if expected_public != public_key_bytes:
        raise IdentityError("identity file private/public keys do not match")

    return Identity(private_key_bytes=private_key_bytes, public_key_bytes=public_key_bytes)
