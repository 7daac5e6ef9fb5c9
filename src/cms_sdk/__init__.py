"""CMS SDK public surface."""

from cms_sdk.client import CMSClient, NewUserResult
from cms_sdk.crypto.identity import Identity, IdentityError, load_identity
from cms_sdk.errors import (
    AuthorizationError,
    CMSSDKError,
    InputValidationError,
    PaywallError,
    RequestError,
    TransportError,
    UserLookupError,
)
from cms_sdk.faucet import pay_with_testnet_faucet
from cms_sdk.schemas import ManageUserRequest, UserRecord
from cms_sdk.types import (
    ContractorType,
    DomainType,
    parse_contractor_type,
    parse_domain,
    split_supervisor_ids,
)

__all__ = [
    "CMSSDKError",
    "AuthorizationError",
    "InputValidationError",
    "TransportError",
    "RequestError",
    "UserLookupError",
    "PaywallError",
    "CMSClient",
    "NewUserResult",
    "Identity",
    "IdentityError",
    "load_identity",
    "pay_with_testnet_faucet",
    "ManageUserRequest",
    "UserRecord",
    "DomainType",
    "ContractorType",
    "parse_domain",
    "parse_contractor_type",
    "split_supervisor_ids",
]
