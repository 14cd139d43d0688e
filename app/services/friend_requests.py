"""
Friend request lifecycle: pending -> accepted, deleted on reject/remove,
blocked by either party at any time.
"""

import logging
from typing import List
from uuid import UUID

from app.core import error_codes
from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InputError,
    NotFoundError,
)
from app.crud.base import ConnectionStore, ProfileStore
from app.models.connection import Connection
from app.schemas.enums import ConnectionStatus, RelationshipState

logger = logging.getLogger(__name__)


class FriendRequestService:
    def __init__(self, connections: ConnectionStore, profiles: ProfileStore):
        self.connections = connections
        self.profiles = profiles

    async def send_request(self, requester_id: str, target_id: str) -> Connection:
        if requester_id == target_id:
            raise InputError("Cannot send friend request to yourself", error_codes.SELF_CONNECTION)

        target = await self.profiles.get(target_id)
        if not target:
            raise NotFoundError("User not found", error_codes.PROFILE_NOT_FOUND)

        existing = await self.connections.get_between(requester_id, target_id)
        if existing:
            if existing.status == ConnectionStatus.BLOCKED:
                raise ConflictError(
                    "Friend requests are not allowed between these users",
                    error_codes.CONNECTION_BLOCKED
                )
            if existing.status == ConnectionStatus.ACCEPTED:
                raise ConflictError("You are already friends with this user")
            if existing.requested_by == requester_id:
                raise ConflictError("Friend request already sent")
            raise ConflictError("This user already sent you a friend request. Please respond to it instead.")

        # The store's unique pair constraint settles concurrent senders.
        connection = await self.connections.insert(requester_id, target_id, requester_id)
        logger.info(f"Friend request {connection.id} sent by {requester_id} to {target_id}")
        return connection

    async def _pending_for(self, connection_id: UUID, user_id: str) -> Connection:
        connection = await self.connections.get(connection_id)
        if (
            not connection
            or not connection.involves(user_id)
            or connection.status != ConnectionStatus.PENDING
        ):
            raise NotFoundError("Friend request not found", error_codes.CONNECTION_NOT_FOUND)
        return connection

    async def accept_request(self, connection_id: UUID, user_id: str) -> Connection:
        connection = await self._pending_for(connection_id, user_id)
        if connection.requested_by == user_id:
            raise AuthorizationError("Only the recipient can accept a friend request")
        connection = await self.connections.set_status(connection, ConnectionStatus.ACCEPTED)
        logger.info(f"Friend request {connection_id} accepted by {user_id}")
        return connection

    async def reject_request(self, connection_id: UUID, user_id: str) -> None:
        """Recipient rejects, or requester withdraws, a pending request."""
        connection = await self._pending_for(connection_id, user_id)
        await self.connections.delete(connection)
        logger.info(f"Friend request {connection_id} removed by {user_id}")

    async def incoming_requests(self, user_id: str) -> List[Connection]:
        pending = await self.connections.list_for_user(user_id, ConnectionStatus.PENDING)
        return [conn for conn in pending if conn.requested_by != user_id]

    async def outgoing_requests(self, user_id: str) -> List[Connection]:
        pending = await self.connections.list_for_user(user_id, ConnectionStatus.PENDING)
        return [conn for conn in pending if conn.requested_by == user_id]

    async def remove_friend(self, user_id: str, friend_id: str) -> None:
        if user_id == friend_id:
            raise InputError("Cannot remove yourself", error_codes.SELF_CONNECTION)
        connection = await self.connections.get_between(user_id, friend_id)
        if not connection or connection.status != ConnectionStatus.ACCEPTED:
            raise NotFoundError("Friend not found", error_codes.CONNECTION_NOT_FOUND)
        await self.connections.delete(connection)
        logger.info(f"{user_id} removed friend {friend_id}")

    async def block_user(self, blocker_id: str, target_id: str) -> Connection:
        if blocker_id == target_id:
            raise InputError("Cannot block yourself", error_codes.SELF_CONNECTION)
        target = await self.profiles.get(target_id)
        if not target:
            raise NotFoundError("User not found", error_codes.PROFILE_NOT_FOUND)
        connection = await self.connections.upsert_blocked(blocker_id, target_id)
        logger.info(f"{blocker_id} blocked {target_id}")
        return connection

    async def unblock_user(self, blocker_id: str, target_id: str) -> None:
        if blocker_id == target_id:
            raise InputError("Cannot unblock yourself", error_codes.SELF_CONNECTION)
        connection = await self.connections.get_between(blocker_id, target_id)
        if (
            not connection
            or connection.status != ConnectionStatus.BLOCKED
            or connection.requested_by != blocker_id
        ):
            raise NotFoundError("Block not found", error_codes.CONNECTION_NOT_FOUND)
        await self.connections.delete(connection)
        logger.info(f"{blocker_id} unblocked {target_id}")

    async def relationship(self, user_id: str, other_id: str) -> dict:
        """Connection state between the caller and another user"""
        if user_id == other_id:
            raise InputError("Cannot check a relationship with yourself", error_codes.SELF_CONNECTION)

        connection = await self.connections.get_between(user_id, other_id)
        if not connection:
            return {"status": RelationshipState.NONE, "can_send_request": True}

        if connection.status == ConnectionStatus.ACCEPTED:
            state = RelationshipState.CONNECTED
        elif connection.status == ConnectionStatus.BLOCKED:
            state = RelationshipState.BLOCKED
        elif connection.requested_by == user_id:
            state = RelationshipState.PENDING_SENT
        else:
            state = RelationshipState.PENDING_RECEIVED

        return {
            "status": state,
            "can_send_request": False,
            "connection_id": connection.id
        }
