from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from app.models.timestamps import TIMESTAMP, utc_now


class ProfileBase(SQLModel):
    """Fields shared by the profile table and its schemas"""
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=20)
    profile_picture: Optional[str] = Field(default=None)
    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=2)
    zip_code: Optional[str] = Field(default=None, max_length=10)


class Profile(ProfileBase, table=True):
    """
    A user as seen by this service. The identifier is issued by the
    identity provider and never changes.
    """
    __tablename__ = "profiles"

    id: str = Field(primary_key=True, max_length=64)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
