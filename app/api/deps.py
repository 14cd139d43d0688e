"""
Request-scoped wiring: SQL stores over the request's session, and the
services built on them.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.connection import SQLConnectionStore
from app.crud.listing import SQLListingStore
from app.crud.profile import SQLProfileStore
from app.db.database import get_db
from app.services.friend_graph import FriendGraphService
from app.services.friend_requests import FriendRequestService
from app.services.images import ImageUploadService
from app.services.listing_directory import ListingDirectory
from app.services.listings import ListingService
from app.services.share_tokens import ShareTokenIssuer
from app.services.visibility import VisibilityPolicy
from app.utils.file_handling import BlobStorage, get_blob_storage


def get_profile_store(db: AsyncSession = Depends(get_db)) -> SQLProfileStore:
    return SQLProfileStore(db)


def get_connection_store(db: AsyncSession = Depends(get_db)) -> SQLConnectionStore:
    return SQLConnectionStore(db)


def get_listing_store(db: AsyncSession = Depends(get_db)) -> SQLListingStore:
    return SQLListingStore(db)


def get_friend_graph(
    connections: SQLConnectionStore = Depends(get_connection_store),
    profiles: SQLProfileStore = Depends(get_profile_store),
) -> FriendGraphService:
    return FriendGraphService(connections, profiles)


def get_friend_requests(
    connections: SQLConnectionStore = Depends(get_connection_store),
    profiles: SQLProfileStore = Depends(get_profile_store),
) -> FriendRequestService:
    return FriendRequestService(connections, profiles)


def get_visibility_policy(graph: FriendGraphService = Depends(get_friend_graph)) -> VisibilityPolicy:
    return VisibilityPolicy(graph)


def get_listing_directory(
    listings: SQLListingStore = Depends(get_listing_store),
    policy: VisibilityPolicy = Depends(get_visibility_policy),
) -> ListingDirectory:
    return ListingDirectory(listings, policy)


def get_listing_service(listings: SQLListingStore = Depends(get_listing_store)) -> ListingService:
    return ListingService(listings)


def get_share_tokens(listings: SQLListingStore = Depends(get_listing_store)) -> ShareTokenIssuer:
    return ShareTokenIssuer(listings)


def get_image_uploads(storage: BlobStorage = Depends(get_blob_storage)) -> ImageUploadService:
    return ImageUploadService(storage)
