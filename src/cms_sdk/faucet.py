"""Testnet faucet payments for satisfying the signup paywall."""

from __future__ import annotations

from decimal import Decimal

from cms_sdk.errors import TransportError

ATOMS_PER_COIN = 100_000_000


def atoms_to_coin(amount: int) -> str:
    coins = Decimal(amount) / Decimal(ATOMS_PER_COIN)
    return format(coins.normalize(), "f")


def pay_with_testnet_faucet(
    faucet_url: str,
    address: str,
    amount: int,
    override_token: str | None = None,
    *,
    timeout: float = 10.0,
) -> str:
    """Ask the faucet to send ``amount`` atoms to ``address``; returns the txid."""
    try:
        import requests
    except Exception as exc:  # pragma: no cover
        raise TransportError(f"requests stack unavailable: {exc}") from exc

    form = {
        "address": address,
        "amount": atoms_to_coin(amount),
        "overridetoken": override_token or "",
    }
    try:
        response = requests.post(
            faucet_url,
            data=form,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
    except Exception as exc:
        raise TransportError(str(exc)) from exc

    if response.status_code >= 400:
        raise TransportError(f"faucet request failed: {response.status_code} {response.text}")
    try:
        body = response.json()
    except Exception as exc:
        raise TransportError("faucet returned an invalid response") from exc

    error = body.get("Error") or body.get("error") if isinstance(body, dict) else None
    if error:
        raise TransportError(str(error))
    txid = body.get("Txid") or body.get("txid") if isinstance(body, dict) else None
    if not isinstance(txid, str) or not txid:
        raise TransportError("faucet response missing txid")
    return txid
