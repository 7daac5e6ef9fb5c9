"""`manageuser`: edit a contractor's domain, type and supervisors."""

from __future__ import annotations

from pathlib import Path

from cms_sdk.cli.context import CommandContext
from cms_sdk.cli.reconcile import AttributeFlags, reconcile
from cms_sdk.crypto.identity import load_identity
from cms_sdk.errors import AuthorizationError, InputValidationError


def run_manage_user(ctx: CommandContext, *, user_id: str, flags: AttributeFlags) -> dict:
    identity_path = Path(ctx.config.identity_path)
    if not identity_path.exists():
        raise AuthorizationError(
            f"user identity not found at {identity_path}; "
            "create one with `cmsctl newuser --save` first"
        )
    load_identity(identity_path)

    me = ctx.client.me()
    if not me.is_admin:
        raise AuthorizationError("must be an administrator to complete this request")

    user_id = user_id.strip()
    if not user_id:
        raise InputValidationError("userid must not be empty")
    current = ctx.client.cms_user_details(user_id)

    update = reconcile(user_id=user_id, current=current, flags=flags, prompter=ctx.prompter)
    reply = ctx.client.cms_manage_user(update.to_request())

    # Reply is expected to be empty.
    ctx.print_reply(reply)
    return reply
