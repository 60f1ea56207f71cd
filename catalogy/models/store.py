# catalogy/models/store.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Store(SQLModel, table=True):
    """
    Storefront owned by a profile.

    The store lifecycle (create, rename, disable) belongs to the store
    management flows; this service only reads `slug` + `enabled` to decide
    slug availability.
    """

    __tablename__ = "stores"

    id: str = Field(primary_key=True, max_length=64)

    profile_id: str = Field(
        index=True,
        max_length=64,
        description="Owner profile id",
    )

    name: str = Field(default="", max_length=100)

    slug: str = Field(
        max_length=50,
        index=True,
        description="Normalized URL identifier, unique among enabled stores",
    )

    enabled: bool = Field(
        default=True,
        index=True,
        description="Disabled stores release their slug",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
