from datetime import datetime
from typing import Tuple
from uuid import UUID, uuid4
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, String, UniqueConstraint, CheckConstraint
from app.models.timestamps import TIMESTAMP, utc_now
from app.schemas.enums import ConnectionStatus


def canonical_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    """Order two user ids so a pair maps to exactly one row."""
    if user_a == user_b:
        raise ValueError("A connection needs two distinct users")
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


class Connection(SQLModel, table=True):
    """
    Friend relationship or request between two users.

    `low_id` is always the smaller endpoint as ordered by `canonical_pair`,
    so (A, B) and (B, A) share a single row, guarded by the unique constraint.
    """
    __tablename__ = "friend_connections"
    __table_args__ = (
        UniqueConstraint("low_id", "high_id", name="uq_friend_connections_pair"),
        CheckConstraint(
            "requested_by = low_id OR requested_by = high_id",
            name="ck_friend_connections_requester",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    low_id: str = Field(foreign_key="profiles.id", index=True, max_length=64)
    high_id: str = Field(foreign_key="profiles.id", index=True, max_length=64)

    # Store status as VARCHAR, not Enum
    status: str = Field(
        default=ConnectionStatus.PENDING.value,
        sa_column=Column(String, nullable=False, default=ConnectionStatus.PENDING.value)
    )
    requested_by: str = Field(max_length=64)

    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.low_id, self.high_id)

    def other(self, user_id: str) -> str:
        """The endpoint that is not `user_id`."""
        return self.high_id if user_id == self.low_id else self.low_id
