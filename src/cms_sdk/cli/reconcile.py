"""Merge server state, command flags and interactive answers into one update.

Each attribute (domain, contractor type, supervisor list) is resolved from
exactly one source, chosen by ``DECISION_TABLE`` from which flags were given:

- ``FLAG``: the flag value is used as-is, no prompt.
- ``PROMPT``: the administrator is asked whether to change the current
  server value; declining keeps it.
- ``UNRESOLVED``: neither a flag nor a prompt applies, so the (empty) flag is
  parsed and rejected.

A flag for domain or contractor type still opens the wizard for the sibling
attribute that has no flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from cms_sdk.cli.prompts import Prompter
from cms_sdk.errors import InputValidationError
from cms_sdk.schemas import ManageUserRequest, UserRecord
from cms_sdk.types import (
    CONTRACTOR_TYPE_LABELS,
    DOMAIN_LABELS,
    ContractorType,
    DomainType,
    contractor_type_menu,
    domain_menu,
    is_valid_contractor_type,
    is_valid_domain,
    parse_contractor_type,
    parse_domain,
    split_supervisor_ids,
)

REVIEW_MESSAGE = (
    "\nPlease carefully review your information and ensure it's correct. "
    "If not, press Ctrl + C to exit. Or, press Enter to continue your request."
)


class Source(Enum):
    FLAG = "flag"
    PROMPT = "prompt"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class AttributeFlags:
    domain: str = ""
    contractor_type: str = ""
    supervisor_user_ids: str = ""


@dataclass(frozen=True)
class AttributePlan:
    domain: Source
    contractor_type: Source
    supervisor_user_ids: Source

    @property
    def interactive(self) -> bool:
        return Source.PROMPT in (self.domain, self.contractor_type, self.supervisor_user_ids)


_F, _P, _U = Source.FLAG, Source.PROMPT, Source.UNRESOLVED

# (domain flag given, contractor type flag given, supervisor flag given)
DECISION_TABLE: dict[tuple[bool, bool, bool], AttributePlan] = {
    (False, False, False): AttributePlan(_P, _P, _P),
    (True, False, False): AttributePlan(_F, _P, _P),
    (False, True, False): AttributePlan(_P, _F, _P),
    (True, True, False): AttributePlan(_F, _F, _P),
    (False, False, True): AttributePlan(_U, _U, _F),
    (True, False, True): AttributePlan(_F, _P, _F),
    (False, True, True): AttributePlan(_P, _F, _F),
    (True, True, True): AttributePlan(_F, _F, _F),
}


@dataclass
class PendingUpdate:
    user_id: str
    domain: Optional[int] = None
    contractor_type: Optional[int] = None
    supervisor_user_ids: Optional[List[str]] = None

    def to_request(self) -> ManageUserRequest:
        if self.domain is None or not is_valid_domain(self.domain):
            raise InputValidationError(f"invalid domain {self.domain}; must be between 1 and 6")
        if self.contractor_type is None or not is_valid_contractor_type(self.contractor_type):
            raise InputValidationError(
                f"invalid contractor type {self.contractor_type}; must be between 1 and 3"
            )
        return ManageUserRequest(
            user_id=self.user_id,
            domain=self.domain,
            contractor_type=self.contractor_type,
            supervisor_user_ids=list(self.supervisor_user_ids or []),
        )


def plan_attributes(flags: AttributeFlags) -> AttributePlan:
    key = (
        flags.domain != "",
        flags.contractor_type != "",
        flags.supervisor_user_ids != "",
    )
    return DECISION_TABLE[key]


def _label(labels: dict[int, str], code: int) -> str:
    name = labels.get(code)
    return f"{code} ({name})" if name else str(code)


def _prompt_domain(prompter: Prompter, current: int) -> int:
    question = f'The current Domain setting is: "{_label(DOMAIN_LABELS, current)}" Update?'
    if not prompter.confirm(question, "no"):
        return current
    return prompter.choose_confirmed(
        f"Domain Type: {domain_menu()}",
        low=DomainType.DEVELOPER,
        high=DomainType.DOCUMENTATION,
        label="Domain",
        describe=lambda code: _label(DOMAIN_LABELS, code),
    )


def _prompt_contractor_type(prompter: Prompter, current: int) -> int:
    shown = _label(CONTRACTOR_TYPE_LABELS, current)
    question = f'The current Contractor Type setting is: "{shown}" Update?'
    if not prompter.confirm(question, "no"):
        return current
    return prompter.choose_confirmed(
        contractor_type_menu(),
        low=ContractorType.DIRECT,
        high=ContractorType.SUB_CONTRACTOR,
        label="Contractor Type",
        describe=lambda code: _label(CONTRACTOR_TYPE_LABELS, code),
    )


def _prompt_supervisors(prompter: Prompter, current: list[str]) -> list[str]:
    supervisors = list(current)
    if prompter.confirm(f"The current Supervisor User IDs are: {supervisors} Update?", "no"):
        supervisors = prompter.build_list(supervisors, item_label="Supervisor User ID")
    prompter.pause(REVIEW_MESSAGE)
    return supervisors


def reconcile(
    *,
    user_id: str,
    current: UserRecord,
    flags: AttributeFlags,
    prompter: Prompter,
) -> PendingUpdate:
    """Resolve every attribute of ``current`` into a :class:`PendingUpdate`."""
    plan = plan_attributes(flags)
    update = PendingUpdate(user_id=user_id)

    domain = DomainType.INVALID
    if plan.domain is Source.PROMPT:
        domain = _prompt_domain(prompter, current.domain)
    contractor_type = ContractorType.INVALID
    if plan.contractor_type is Source.PROMPT:
        contractor_type = _prompt_contractor_type(prompter, current.contractor_type)
    supervisors = list(current.supervisor_user_ids)
    if plan.supervisor_user_ids is Source.PROMPT:
        supervisors = _prompt_supervisors(prompter, supervisors)

    update.domain = int(domain) if domain else int(parse_domain(flags.domain))
    update.contractor_type = (
        int(contractor_type)
        if contractor_type
        else int(parse_contractor_type(flags.contractor_type))
    )
    if flags.supervisor_user_ids != "":
        supervisors = split_supervisor_ids(flags.supervisor_user_ids)
    update.supervisor_user_ids = supervisors
    return update
