from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, validator

from app.schemas.enums import ListingPermission, ListingType, PropertyType
from app.utils.validation import check_images, check_price, check_state_code, check_zip_code


class RoomDetails(BaseModel):
    furnished: Optional[bool] = None
    private_bathroom: Optional[bool] = None
    roommate_preferences: Optional[Dict[str, Any]] = None


class ListingCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    listing_type: ListingType
    property_type: Optional[PropertyType] = None
    price: float
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str
    zip_code: str
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    available_date: date
    room_details: Optional[RoomDetails] = None
    permission: ListingPermission = ListingPermission.PRIVATE

    @validator("price")
    def validate_price(cls, v):
        return check_price(v)

    @validator("state")
    def validate_state(cls, v):
        return check_state_code(v)

    @validator("zip_code")
    def validate_zip_code(cls, v):
        return check_zip_code(v)

    @validator("images")
    def validate_images(cls, v):
        return check_images(v)

    @validator("available_date")
    def validate_available_date(cls, v):
        if v < date.today():
            raise ValueError("Available date must be today or in the future")
        return v


class ListingUpdate(BaseModel):
    """Partial update; permission changes go through their own endpoint."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    listing_type: Optional[ListingType] = None
    property_type: Optional[PropertyType] = None
    price: Optional[float] = None
    address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    available_date: Optional[date] = None
    room_details: Optional[RoomDetails] = None
    is_active: Optional[bool] = None

    # Omitted means unchanged; an explicit null on a required column is rejected.
    @validator("title", "description", "listing_type", "price", "address", "city", "state",
               "zip_code", "available_date", "is_active", pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("This field cannot be null")
        return v

    @validator("price")
    def validate_price(cls, v):
        return check_price(v)

    @validator("state")
    def validate_state(cls, v):
        return check_state_code(v)

    @validator("zip_code")
    def validate_zip_code(cls, v):
        return check_zip_code(v)

    @validator("images")
    def validate_images(cls, v):
        return check_images(v)


class PermissionUpdate(BaseModel):
    permission: ListingPermission


class ListingRead(BaseModel):
    id: UUID
    owner_id: str
    title: str
    description: str
    listing_type: ListingType
    property_type: Optional[PropertyType] = None
    price: float
    address: str
    city: str
    state: str
    zip_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    amenities: List[str] = []
    images: List[str] = []
    room_details: Optional[Dict[str, Any]] = None
    available_date: date
    is_active: bool
    permission: ListingPermission
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OwnedListingRead(ListingRead):
    """Owner view; exposes the share token."""
    share_token: Optional[str] = None


class ListingFilters(BaseModel):
    """Optional, conjunctive listing filters"""
    listing_type: Optional[ListingType] = None
    property_type: Optional[PropertyType] = None
    city: Optional[str] = None
    state: Optional[str] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    q: Optional[str] = None

    @validator("state")
    def normalize_state(cls, v):
        return v.strip().upper() if v else None

    @validator("city", "q")
    def blank_to_none(cls, v):
        if v is None:
            return None
        return v.strip() or None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ListingPage(BaseModel):
    listings: List[ListingRead]
    pagination: Pagination


class OwnedListingPage(BaseModel):
    listings: List[OwnedListingRead]
    pagination: Pagination


class ListingResponse(BaseModel):
    message: str
    listing: OwnedListingRead


class ShareLinkRead(BaseModel):
    message: str
    share_token: str
    share_url: str
