# catalogy/models/profile.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Persistent user profile mirrored from the auth provider.

    Identity:
      - id: MUST match the account id carried by the account-created event.
        There is no synthetic key, so the primary key itself guarantees one
        profile per account.

    Role:
      - "user" | "admin" (admin must be promoted manually)

    This table is *not* responsible for credentials. The auth provider keeps
    those; we only mirror identity, name and application flags.
    """

    __tablename__ = "profiles"

    id: str = Field(
        primary_key=True,
        max_length=64,
        description="Matches the auth account id",
    )

    # Names and email carry no length bound.
    first_name: str
    last_name: str = ""

    email: str = Field(
        index=True,
        description="Email from the auth account",
    )
    email_verified: bool = Field(default=False)

    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )
    enabled: bool = Field(default=True)
    active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Preferences(SQLModel, table=True):
    """
    Per-profile UI preferences.

    Best-effort companion of Profile: created right after the profile,
    but its absence never invalidates the profile. It can be recreated
    lazily (see ProfileProvisioner.ensure_preferences).
    """

    __tablename__ = "user_preferences"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        max_length=64,
    )

    profile_id: str = Field(
        index=True,
        max_length=64,
        description="Back-reference to profiles.id",
    )

    theme: str = Field(default="system", description="system | light | dark")
    locale: str = Field(default="es", max_length=16)
    enabled: bool = Field(default=True)

    flags: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )
