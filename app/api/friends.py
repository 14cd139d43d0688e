import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from app.api.deps import get_friend_graph, get_friend_requests
from app.core.config import settings
from app.core.rate_limit import limiter
from app.core.security import get_current_user
from app.models.profile import Profile
from app.schemas.connection import (
    ConnectionResponse,
    FriendRequestCreate,
    FriendRequestsRead,
    FriendsRead,
    MessageResponse,
    NetworkRead,
    RelationshipStatusRead,
)
from app.services.friend_graph import FriendGraphService
from app.services.friend_requests import FriendRequestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friends", tags=["Friends"])


@router.post("/send-request", response_model=ConnectionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_FRIEND_REQUESTS)
async def send_request(
    request: Request,
    payload: FriendRequestCreate,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    connection = await requests.send_request(current_user.id, payload.user_id)
    return {"message": "Friend request sent successfully", "connection": connection}


@router.post("/accept-request/{request_id}", response_model=ConnectionResponse)
async def accept_request(
    request_id: UUID,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    connection = await requests.accept_request(request_id, current_user.id)
    return {"message": "Friend request accepted", "connection": connection}


@router.delete("/reject-request/{request_id}", response_model=MessageResponse)
async def reject_request(
    request_id: UUID,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    await requests.reject_request(request_id, current_user.id)
    return {"message": "Friend request rejected"}


@router.get("/requests", response_model=FriendRequestsRead)
async def incoming_requests(
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    """Pending requests other users sent to the caller"""
    return {"requests": await requests.incoming_requests(current_user.id)}


@router.get("/requests/sent", response_model=FriendRequestsRead)
async def outgoing_requests(
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    return {"requests": await requests.outgoing_requests(current_user.id)}


@router.get("/list", response_model=FriendsRead)
async def list_friends(
    current_user: Profile = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph)
):
    return {"friends": await graph.get_direct_friends(current_user.id)}


async def _network(user_id: str, degree: int, graph: FriendGraphService) -> dict:
    network = await graph.get_reachable_within_degree(user_id, degree)
    return {"network": network, "count": len(network), "degree": degree}


@router.get("/network", response_model=NetworkRead)
async def default_network(
    current_user: Profile = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph)
):
    return await _network(current_user.id, settings.DEFAULT_NETWORK_DEGREE, graph)


@router.get("/network/{degree}", response_model=NetworkRead)
async def network(
    degree: int,
    current_user: Profile = Depends(get_current_user),
    graph: FriendGraphService = Depends(get_friend_graph)
):
    """Everyone within `degree` hops (1-6) of the caller"""
    return await _network(current_user.id, degree, graph)


@router.delete("/remove/{friend_id}", response_model=MessageResponse)
async def remove_friend(
    friend_id: str,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    await requests.remove_friend(current_user.id, friend_id)
    return {"message": "Friend removed successfully"}


@router.post("/block/{user_id}", response_model=MessageResponse)
async def block_user(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    await requests.block_user(current_user.id, user_id)
    return {"message": "User blocked successfully"}


@router.delete("/block/{user_id}", response_model=MessageResponse)
async def unblock_user(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    await requests.unblock_user(current_user.id, user_id)
    return {"message": "User unblocked successfully"}


@router.get("/status/{user_id}", response_model=RelationshipStatusRead)
async def relationship_status(
    user_id: str,
    current_user: Profile = Depends(get_current_user),
    requests: FriendRequestService = Depends(get_friend_requests)
):
    return await requests.relationship(current_user.id, user_id)
