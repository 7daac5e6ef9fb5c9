"""Contractor attribute enumerations and parsing."""

from __future__ import annotations

from enum import IntEnum

from cms_sdk.errors import InputValidationError


class DomainType(IntEnum):
    INVALID = 0
    DEVELOPER = 1
    MARKETING = 2
    COMMUNITY = 3
    RESEARCH = 4
    DESIGN = 5
    DOCUMENTATION = 6


class ContractorType(IntEnum):
    INVALID = 0
    DIRECT = 1
    SUPERVISOR = 2
    SUB_CONTRACTOR = 3


DOMAIN_LABELS: dict[int, str] = {
    DomainType.DEVELOPER: "Developer",
    DomainType.MARKETING: "Marketing",
    DomainType.COMMUNITY: "Community",
    DomainType.RESEARCH: "Research",
    DomainType.DESIGN: "Design",
    DomainType.DOCUMENTATION: "Documentation",
}

CONTRACTOR_TYPE_LABELS: dict[int, str] = {
    ContractorType.DIRECT: "Direct",
    ContractorType.SUPERVISOR: "Supervisor",
    ContractorType.SUB_CONTRACTOR: "Sub contractor",
}

_DOMAIN_NAMES = {
    "developer": DomainType.DEVELOPER,
    "marketing": DomainType.MARKETING,
    "community": DomainType.COMMUNITY,
    "research": DomainType.RESEARCH,
    "design": DomainType.DESIGN,
    "documentation": DomainType.DOCUMENTATION,
}

_CONTRACTOR_TYPE_NAMES = {
    "direct": ContractorType.DIRECT,
    "supervisor": ContractorType.SUPERVISOR,
    "super": ContractorType.SUPERVISOR,
    "sub": ContractorType.SUB_CONTRACTOR,
    "subcontractor": ContractorType.SUB_CONTRACTOR,
}


def is_valid_domain(value: int) -> bool:
    return DomainType.DEVELOPER <= value <= DomainType.DOCUMENTATION


def is_valid_contractor_type(value: int) -> bool:
    return ContractorType.DIRECT <= value <= ContractorType.SUB_CONTRACTOR


def _parse_code(raw: str, names: dict[str, IntEnum], label: str) -> int:
    normalized = raw.strip().lower()
    if normalized in names:
        return int(names[normalized])
    try:
        return int(normalized)
    except ValueError as exc:
        raise InputValidationError(f"invalid {label} attempted, please try again") from exc


def parse_domain(raw: str) -> DomainType:
    """Parse a domain given as its numeric code or its name."""
    code = _parse_code(raw, _DOMAIN_NAMES, "domain")
    if not is_valid_domain(code):
        raise InputValidationError(f"invalid domain {code}; must be between 1 and 6")
    return DomainType(code)


def parse_contractor_type(raw: str) -> ContractorType:
    """Parse a contractor type given as its numeric code or its name."""
    code = _parse_code(raw, _CONTRACTOR_TYPE_NAMES, "contractor type")
    if not is_valid_contractor_type(code):
        raise InputValidationError(f"invalid contractor type {code}; must be between 1 and 3")
    return ContractorType(code)


def split_supervisor_ids(raw: str) -> list[str]:
    """Split a comma separated supervisor list, dropping empty segments."""
    supervisor_ids = [part.strip() for part in raw.split(",") if part.strip()]
    if not supervisor_ids:
        raise InputValidationError(
            "invalid supervisor user ids attempted, please try again with a list "
            "separated by commas"
        )
    return supervisor_ids


def domain_menu() -> str:
    return ", ".join(f"({code}) {name}" for code, name in DOMAIN_LABELS.items())


def contractor_type_menu() -> str:
    return ", ".join(f"({code}) {name}" for code, name in CONTRACTOR_TYPE_LABELS.items())
