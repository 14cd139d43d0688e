from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field
from app.schemas.enums import ConnectionStatus, RelationshipState
from app.schemas.profile import ProfilePublic


class FriendRequestCreate(BaseModel):
    user_id: str = Field(..., min_length=1)


class ConnectionRead(BaseModel):
    id: UUID
    low_id: str
    high_id: str
    status: ConnectionStatus
    requested_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ConnectionResponse(BaseModel):
    message: str
    connection: ConnectionRead


class FriendRequestsRead(BaseModel):
    requests: List[ConnectionRead]


class FriendsRead(BaseModel):
    friends: List[ProfilePublic]


class NetworkRead(BaseModel):
    network: List[ProfilePublic]
    count: int
    degree: int


class RelationshipStatusRead(BaseModel):
    status: RelationshipState
    can_send_request: bool
    connection_id: Optional[UUID] = None


class MessageResponse(BaseModel):
    message: str
