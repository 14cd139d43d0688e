"""
Owner-only listing mutations. Each listing has a single writer, so
concurrent edits resolve as last-write-wins.
"""

import logging
from uuid import UUID

from app.core import error_codes
from app.core.exceptions import AuthorizationError, NotFoundError
from app.crud.base import ListingStore
from app.models.listing import Listing
from app.schemas.enums import ListingPermission
from app.schemas.listing import ListingCreate, ListingUpdate

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(self, listings: ListingStore):
        self.listings = listings

    async def _owned(self, listing_id: UUID, user_id: str, action: str) -> Listing:
        listing = await self.listings.get(listing_id)
        if not listing:
            raise NotFoundError("Listing not found", error_codes.LISTING_NOT_FOUND)
        if listing.owner_id != user_id:
            raise AuthorizationError(
                f"You can only {action} your own listings",
                error_codes.NOT_LISTING_OWNER
            )
        return listing

    async def create(self, owner_id: str, data: ListingCreate) -> Listing:
        values = data.model_dump(mode="json")
        values["available_date"] = data.available_date
        listing = Listing(**values, owner_id=owner_id)
        return await self.listings.create(listing)

    async def update(self, listing_id: UUID, user_id: str, data: ListingUpdate) -> Listing:
        listing = await self._owned(listing_id, user_id, "update")
        changes = data.model_dump(exclude_unset=True, mode="json")
        if "available_date" in changes:
            changes["available_date"] = data.available_date
        if not changes:
            return listing
        logger.debug(f"Updating listing {listing_id} fields: {sorted(changes)}")
        return await self.listings.update(listing, changes)

    async def delete(self, listing_id: UUID, user_id: str) -> Listing:
        listing = await self._owned(listing_id, user_id, "delete")
        await self.listings.delete(listing)
        return listing

    async def deactivate(self, listing_id: UUID, user_id: str) -> Listing:
        listing = await self._owned(listing_id, user_id, "deactivate")
        return await self.listings.update(listing, {"is_active": False})

    async def set_permission(self, listing_id: UUID, user_id: str,
                             permission: ListingPermission) -> Listing:
        """Share tokens survive permission changes."""
        listing = await self._owned(listing_id, user_id, "change permissions for")
        return await self.listings.update(listing, {"permission": permission.value})
