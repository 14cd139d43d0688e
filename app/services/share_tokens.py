import logging
import secrets
from uuid import UUID

from app.core import error_codes
from app.core.config import settings
from app.core.exceptions import AuthorizationError, NotFoundError
from app.crud.base import ListingStore
from app.models.listing import Listing
from app.schemas.enums import ListingPermission

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32  # 256 bits
SHARED_NOT_FOUND = "Shared listing not found or no longer available"


def build_share_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/shared/{token}"


class ShareTokenIssuer:
    """Issues, revokes and resolves link-only access tokens for listings."""

    def __init__(self, listings: ListingStore):
        self.listings = listings

    async def _owned_listing(self, listing_id: UUID, requester_id: str) -> Listing:
        listing = await self.listings.get(listing_id)
        if not listing:
            raise NotFoundError("Listing not found", error_codes.LISTING_NOT_FOUND)
        if listing.owner_id != requester_id:
            raise AuthorizationError(
                "You can only manage sharing for your own listings",
                error_codes.NOT_LISTING_OWNER
            )
        return listing

    async def issue_token(self, listing_id: UUID, requester_id: str) -> str:
        listing = await self._owned_listing(listing_id, requester_id)
        if listing.share_token:
            return listing.share_token

        token = secrets.token_urlsafe(TOKEN_BYTES)
        await self.listings.update(listing, {"share_token": token})
        logger.info(f"Issued share token for listing {listing_id}")
        return token

    async def revoke_token(self, listing_id: UUID, requester_id: str) -> None:
        listing = await self._owned_listing(listing_id, requester_id)
        if listing.share_token is None:
            return
        await self.listings.update(listing, {"share_token": None})
        logger.info(f"Revoked share token for listing {listing_id}")

    async def resolve(self, token: str) -> Listing:
        """
        The listing behind a share token. Unknown, revoked and unavailable
        tokens all fail the same way so nothing leaks about the listing.
        """
        listing = await self.listings.get_by_share_token(token) if token else None
        if (
            listing is None
            or not listing.is_active
            or listing.permission == ListingPermission.PRIVATE
        ):
            raise NotFoundError(SHARED_NOT_FOUND, error_codes.SHARED_LISTING_NOT_FOUND)
        return listing
