"""`newuser`: register an account and optionally verify and pay for it."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from cms_sdk.cli.context import CommandContext
from cms_sdk.client import NewUserResult
from cms_sdk.errors import InputValidationError, PaywallError, TransportError
from cms_sdk.faucet import atoms_to_coin

RANDOM_EMAIL_DOMAIN = "example.com"


@dataclass(frozen=True)
class NewUserOptions:
    email: str = ""
    password: str = ""
    random: bool = False
    save: bool = False
    verify: bool = False
    paywall: bool = False
    override_token: str | None = None


def random_credentials(min_password_length: int) -> tuple[str, str]:
    """Return ``(email, password)`` sharing one random hex string.

    The hex string is cut to exactly ``min_password_length`` characters.
    """
    secret = secrets.token_bytes(min_password_length).hex()[:min_password_length]
    return f"{secret}@{RANDOM_EMAIL_DOMAIN}", secret


def resolve_credentials(ctx: CommandContext, options: NewUserOptions) -> tuple[str, str]:
    if not options.random and not options.email:
        raise InputValidationError(
            "you must either provide an email & password or use the --random flag"
        )

    policy = ctx.client.policy()
    if options.random:
        return random_credentials(policy.min_password_length)

    if "@" not in options.email:
        raise InputValidationError(f"invalid email address: {options.email}")
    if len(options.password) < policy.min_password_length:
        raise InputValidationError(
            f"password must be at least {policy.min_password_length} characters"
        )
    return options.email, options.password


def pay_paywall(
    ctx: CommandContext,
    *,
    address: str,
    amount: int,
    override_token: str | None,
) -> str:
    coins = atoms_to_coin(amount)
    if not address and amount == 0:
        raise PaywallError(f"unable to pay {coins} DCR to {address}: no paywall is active")
    try:
        txid = ctx.faucet(ctx.config.faucet_url, address, amount, override_token)
    except TransportError as exc:
        raise PaywallError(f"unable to pay {coins} DCR to {address} with faucet: {exc}") from exc
    ctx.status(f"paid {coins} DCR to {address} with faucet tx {txid}")
    return txid


def run_new_user(ctx: CommandContext, options: NewUserOptions) -> NewUserResult:
    email, password = resolve_credentials(ctx, options)

    created: NewUserResult = ctx.client.new_user(email, password)
    ctx.status(f"email: {email}")
    if options.random:
        ctx.status(f"password: {password}")

    if options.save:
        identity_path = created.identity.save(ctx.config.identity_path)
        ctx.status(f"User identity saved to: {identity_path}")

    if options.verify:
        signature = created.identity.sign_message(created.verification_token.encode("utf-8"))
        ctx.client.verify_new_user(email, created.verification_token, signature.hex())
        ctx.status("email verified")

    if options.paywall:
        pay_paywall(
            ctx,
            address=created.paywall_address,
            amount=created.paywall_amount,
            override_token=options.override_token,
        )

    return created
