from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, String, JSON
from sqlmodel import SQLModel, Field

from app.models.timestamps import TIMESTAMP, utc_now
from app.schemas.enums import ListingPermission


class Listing(SQLModel, table=True):
    """A rental listing owned by exactly one profile."""
    __tablename__ = "listings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: str = Field(foreign_key="profiles.id", index=True, max_length=64)

    title: str = Field(max_length=200)
    description: str
    listing_type: str = Field(sa_column=Column(String, nullable=False, index=True))
    property_type: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    price: float = Field(index=True)

    address: str = Field(max_length=255)
    city: str = Field(max_length=100, index=True)
    state: str = Field(max_length=2, index=True)
    zip_code: str = Field(max_length=10)
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    amenities: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    room_details: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    available_date: date

    is_active: bool = Field(default=True, index=True)
    permission: str = Field(
        default=ListingPermission.PRIVATE.value,
        sa_column=Column(String, nullable=False, default=ListingPermission.PRIVATE.value)
    )
    share_token: Optional[str] = Field(default=None, sa_column=Column(String, unique=True, nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)
