"""Configuration helpers for the cmsctl CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_HOME_DIR = Path.home() / ".cmsctl"
DEFAULT_CONFIG_PATH = DEFAULT_HOME_DIR / "config.toml"
DEFAULT_IDENTITY_PATH = DEFAULT_HOME_DIR / "identity.json"
DEFAULT_HOST = "https://127.0.0.1:4443"
DEFAULT_FAUCET_URL = "https://faucet.decred.org/requestfaucet"
HOST_ENV_VAR = "CMSCTL_HOST"
SESSION_ENV_VAR = "CMSCTL_SESSION"


@dataclass(frozen=True)
class CLIConfig:
    host: str = DEFAULT_HOST
    faucet_url: str = DEFAULT_FAUCET_URL
    identity_path: str = str(DEFAULT_IDENTITY_PATH)
    session_cookie: str | None = None
    skip_verify: bool = False
    timeout: float = 10.0


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _to_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    raise ConfigError(f"{field_name} must be a boolean")


def _to_positive_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a positive number")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be a positive number") from exc
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be a positive number")
    return parsed


def _non_empty(source: dict[str, Any], key: str, default: str) -> str:
    value = str(source.get(key, default)).strip()
    if not value:
        raise ConfigError(f"{key} must not be empty")
    return value


def load_cli_config(path: str | Path | None = None) -> CLIConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    parsed: dict[str, Any] = _load_toml(config_path) if config_path.exists() else {}

    section = parsed.get("cli")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[cli] must be a table")

    env_host = os.getenv(HOST_ENV_VAR)
    host = env_host.strip() if env_host and env_host.strip() else _non_empty(
        source, "host", DEFAULT_HOST
    )
    if not host.startswith(("http://", "https://")):
        raise ConfigError("host must be an http:// or https:// URL")

    faucet_url = _non_empty(source, "faucet_url", DEFAULT_FAUCET_URL)
    raw_identity_path = _non_empty(source, "identity_path", str(DEFAULT_IDENTITY_PATH))
    identity_path = str(Path(raw_identity_path).expanduser())

    env_session = os.getenv(SESSION_ENV_VAR)
    raw_session = env_session if env_session else source.get("session_cookie")
    session_cookie = str(raw_session).strip() or None if raw_session is not None else None

    return CLIConfig(
        host=host,
        faucet_url=faucet_url,
        identity_path=identity_path,
        session_cookie=session_cookie,
        skip_verify=_to_bool(source.get("skip_verify", False), "skip_verify"),
        timeout=_to_positive_float(source.get("timeout", 10.0), "timeout"),
    )
