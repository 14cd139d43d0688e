from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator

from app.utils.validation import check_phone, check_state_code, check_zip_code


class ProfileFields(BaseModel):
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = None
    zip_code: Optional[str] = None

    @validator("phone")
    def validate_phone(cls, v):
        return check_phone(v)

    @validator("state")
    def validate_state(cls, v):
        return check_state_code(v)

    @validator("zip_code")
    def validate_zip_code(cls, v):
        return check_zip_code(v)


class ProfileCreate(ProfileFields):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


class ProfileUpdate(ProfileFields):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)


class ProfilePublic(BaseModel):
    """Profile data other users may see"""
    id: str
    first_name: str
    last_name: str
    profile_picture: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileRead(ProfilePublic):
    """The caller's own profile"""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    zip_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime
