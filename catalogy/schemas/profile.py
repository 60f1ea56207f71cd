# catalogy/schemas/profile.py
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# App-level roles.
Role = Literal["user", "admin"]
Theme = Literal["system", "light", "dark"]


# Account id keys in order of preference.
ACCOUNT_ID_KEYS = ("$id", "userId", "id")


class AccountCreatedEvent(BaseModel):
    """
    Payload of the account-created event.

    The auth provider sends the account id as `$id`; direct callers may use
    `userId` or `id`. The first non-empty one wins. Every field is optional
    here so a bad payload reaches the provisioner and comes back as a 400
    with our own message.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email: str | None = None
    name: Any = None

    @model_validator(mode="before")
    @classmethod
    def pick_account_id(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        candidates = [data.pop(key, None) for key in ACCOUNT_ID_KEYS]
        data["id"] = next((value for value in candidates if value), None)
        return data


class ProvisionResult(BaseModel):
    """Response schema returned to the event source."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    message: str
    profile_id: str | None = None
    created: bool = Field(default=False, exclude=True)


class PreferencesRead(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    profile_id: str
    theme: Theme
    locale: str
    enabled: bool
    flags: dict[str, Any]
