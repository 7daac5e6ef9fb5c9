"""Command-line interface for cmsctl."""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import replace
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from cms_sdk.cli.config import CLIConfig, ConfigError, load_cli_config
from cms_sdk.cli.context import CommandContext
from cms_sdk.cli.manage_user import run_manage_user
from cms_sdk.cli.new_user import NewUserOptions, run_new_user
from cms_sdk.cli.prompts import Prompter, StreamLineSource
from cms_sdk.cli.reconcile import AttributeFlags
from cms_sdk.client import CMSClient
from cms_sdk.crypto.identity import IdentityError
from cms_sdk.errors import (
    AuthorizationError,
    CMSSDKError,
    InputValidationError,
    PaywallError,
    TransportError,
    UserLookupError,
)
from cms_sdk.faucet import pay_with_testnet_faucet

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_NETWORK_ERROR = 2
EXIT_AUTHORIZATION_ERROR = 3
EXIT_PAYWALL_ERROR = 4

_SENSITIVE_FIELDS = (
    "private_key_b64",
    "password",
    "overridetoken",
    "verificationtoken",
    "signature",
    "session",
    "token",
)

MANAGE_USER_EPILOG = """Request:
{
  "userid": "<userid>",
  "domain": 1,
  "contractortype": 1,
  "supervisoruserids": ["<userid>"]
}

Response:
{}"""


def _sdk_version() -> str:
    try:
        return pkg_version("cms-sdk")
    except PackageNotFoundError:
        return "0.0.0+local"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cmsctl")
    parser.add_argument(
        "--version",
        action="version",
        version=f"cmsctl {_sdk_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.cmsctl/config.toml)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Server base URL override (default from config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show CLI version and configured host")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    manage = sub.add_parser(
        "manageuser",
        help="Edit a user's domain, contractor type and supervisors (admin only)",
        epilog=MANAGE_USER_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    manage.add_argument("userid", help="ID of the user to manage")
    manage.add_argument(
        "--domain",
        default="",
        help=(
            "Domain type: (1) Developer, (2) Marketing, (3) Community, (4) Research, "
            "(5) Design, (6) Documentation; number or name"
        ),
    )
    manage.add_argument(
        "--contractortype",
        default="",
        help="Contractor type: (1) Direct, (2) Supervisor, (3) Sub contractor; number or name",
    )
    manage.add_argument(
        "--supervisoruserids",
        default="",
        help="Comma separated supervisor user IDs",
    )
    manage.add_argument("--json", action="store_true", help="Print the reply as compact JSON")

    new = sub.add_parser("newuser", help="Register a new user account")
    new.add_argument("email", nargs="?", default="", help="Email address of the new user")
    new.add_argument("password", nargs="?", default="", help="Password of the new user")
    new.add_argument(
        "--random",
        action="store_true",
        help="Generate a random email/password for the user",
    )
    new.add_argument(
        "--save",
        action="store_true",
        help="Save the user's identity to the configured identity path",
    )
    new.add_argument("--verify", action="store_true", help="Verify the user's email address")
    new.add_argument(
        "--paywall",
        action="store_true",
        help="Satisfy paywall fee using testnet faucet",
    )
    new.add_argument(
        "--overridetoken",
        default=None,
        help="Override token for the testnet faucet",
    )

    return parser


def _sanitize_error_text(value: str) -> str:
    redacted = value
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,&\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    return redacted


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {_sanitize_error_text(message)}", file=stderr)
    return code


def _report(exc: CMSSDKError, stderr) -> int:
    if isinstance(exc, AuthorizationError):
        return _print_error(
            stderr, "authorization error", str(exc), code=EXIT_AUTHORIZATION_ERROR
        )
    if isinstance(exc, InputValidationError):
        return _print_error(stderr, "input error", str(exc), code=EXIT_VALIDATION_ERROR)
    if isinstance(exc, PaywallError):
        return _print_error(stderr, "paywall error", str(exc), code=EXIT_PAYWALL_ERROR)
    if isinstance(exc, (TransportError, UserLookupError)):
        return _print_error(stderr, "server error", str(exc), code=EXIT_NETWORK_ERROR)
    return _print_error(stderr, "error", str(exc), code=EXIT_NETWORK_ERROR)


def _build_client(config: CLIConfig) -> CMSClient:
    return CMSClient(
        host=config.host,
        session_cookie=config.session_cookie,
        verify_tls=not config.skip_verify,
        timeout=config.timeout,
    )


def _run_version(*, config: CLIConfig, as_json: bool, stdout) -> int:
    payload = {
        "cli": "cmsctl",
        "sdk_version": _sdk_version(),
        "host": config.host,
    }
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print(f"cmsctl {payload['sdk_version']}", file=stdout)
        print(f"host: {payload['host']}", file=stdout)
    return EXIT_SUCCESS


def _run_manage_user(*, args, ctx: CommandContext) -> int:
    flags = AttributeFlags(
        domain=args.domain,
        contractor_type=args.contractortype,
        supervisor_user_ids=args.supervisoruserids,
    )
    run_manage_user(ctx, user_id=args.userid, flags=flags)
    return EXIT_SUCCESS


def _run_new_user(*, args, ctx: CommandContext) -> int:
    options = NewUserOptions(
        email=args.email,
        password=args.password,
        random=args.random,
        save=args.save,
        verify=args.verify,
        paywall=args.paywall,
        override_token=args.overridetoken,
    )
    run_new_user(ctx, options)
    return EXIT_SUCCESS


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout=sys.stdout,
    stderr=sys.stderr,
    stdin=sys.stdin,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)
    if args.host:
        config = replace(config, host=args.host)

    if args.command == "version":
        return _run_version(config=config, as_json=args.json, stdout=stdout)

    try:
        ctx = CommandContext(
            client=_build_client(config),
            config=config,
            prompter=Prompter(StreamLineSource(stdin), stdout),
            stdout=stdout,
            faucet=pay_with_testnet_faucet,
            as_json=getattr(args, "json", False),
        )
        if args.command == "manageuser":
            return _run_manage_user(args=args, ctx=ctx)
        if args.command == "newuser":
            return _run_new_user(args=args, ctx=ctx)
    except IdentityError as exc:
        return _print_error(stderr, "identity error", str(exc), code=EXIT_VALIDATION_ERROR)
    except CMSSDKError as exc:
        return _report(exc, stderr)

    print("unknown command", file=stderr)
    return EXIT_NETWORK_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
