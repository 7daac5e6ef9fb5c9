"""Wire schemas for the user-administration API."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cms_sdk.types import ContractorType, DomainType


class _Reply(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LoginReply(_Reply):
    is_admin: bool = Field(False, alias="isadmin")
    user_id: str = Field("", alias="userid")
    email: str = ""
    username: str = ""


class PolicyReply(_Reply):
    min_password_length: int = Field(..., ge=0, alias="minpasswordlength")
    min_username_length: int = Field(0, alias="minusernamelength")
    max_username_length: int = Field(0, alias="maxusernamelength")


class UserRecord(_Reply):
    """Snapshot of a user's organizational attributes held by the server."""

    id: str = ""
    email: str = ""
    username: str = ""
    domain: int = Field(DomainType.INVALID, ge=0, le=6)
    contractor_type: int = Field(ContractorType.INVALID, ge=0, le=3, alias="contractortype")
    supervisor_user_ids: List[str] = Field(default_factory=list, alias="supervisoruserids")

    @field_validator("supervisor_user_ids", mode="before")
    @classmethod
    def _null_supervisors(cls, value: object) -> object:
        return [] if value is None else value


class UserDetailsReply(_Reply):
    user: UserRecord


class ManageUserRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    user_id: str = Field(..., min_length=1, serialization_alias="userid")
    domain: int = Field(..., ge=1, le=6)
    contractor_type: int = Field(..., ge=1, le=3, serialization_alias="contractortype")
    supervisor_user_ids: List[str] = Field(
        default_factory=list, serialization_alias="supervisoruserids"
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class NewUserReply(_Reply):
    verification_token: str = Field(..., alias="verificationtoken")
    paywall_address: str = Field("", alias="paywalladdress")
    paywall_amount: int = Field(0, ge=0, alias="paywallamount")
