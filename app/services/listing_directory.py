"""
Filtered, paginated listing retrieval.

Three surfaces: listings visible to a signed-in viewer, public listings for
anyone, and an owner's own listings (inactive included). Visibility is
pushed into the store query via a `ListingScope`.
"""

import logging
import math
from typing import List, Optional, Tuple
from uuid import UUID

from app.core import error_codes
from app.core.config import settings
from app.core.exceptions import InputError, NotFoundError
from app.crud.base import ListingScope, ListingStore
from app.models.listing import Listing
from app.schemas.listing import ListingFilters
from app.services.visibility import VisibilityPolicy

logger = logging.getLogger(__name__)


def validate_pagination(page: int, limit: int) -> Tuple[int, int]:
    if page < 1:
        raise InputError("Page must be a positive integer", error_codes.INVALID_PAGINATION)
    if not 1 <= limit <= settings.MAX_PAGE_SIZE:
        raise InputError(
            f"Limit must be between 1 and {settings.MAX_PAGE_SIZE}",
            error_codes.INVALID_PAGINATION
        )
    return page, limit


class ListingPageResult:
    def __init__(self, listings: List[Listing], page: int, limit: int, total: int):
        self.listings = listings
        self.page = page
        self.limit = limit
        self.total = total

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    def to_dict(self) -> dict:
        return {
            "listings": self.listings,
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "pages": self.pages,
            },
        }


class ListingDirectory:
    def __init__(self, listings: ListingStore, policy: VisibilityPolicy):
        self.listings = listings
        self.policy = policy

    async def _page(self, scope: ListingScope, filters: Optional[ListingFilters],
                    page: int, limit: int) -> ListingPageResult:
        page, limit = validate_pagination(page, limit)
        filters = filters or ListingFilters()
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise InputError("minPrice cannot be greater than maxPrice")

        items, total = await self.listings.find(scope, filters, (page - 1) * limit, limit)
        return ListingPageResult(items, page, limit, total)

    async def visible_to(self, viewer_id: str, filters: Optional[ListingFilters] = None,
                         page: int = 1, limit: int = 10) -> ListingPageResult:
        scope = await self.policy.scope_for(viewer_id)
        return await self._page(scope, filters, page, limit)

    async def public(self, filters: Optional[ListingFilters] = None,
                     page: int = 1, limit: int = 10) -> ListingPageResult:
        return await self._page(self.policy.public_scope(), filters, page, limit)

    async def owned_by(self, owner_id: str, filters: Optional[ListingFilters] = None,
                       page: int = 1, limit: int = 10) -> ListingPageResult:
        return await self._page(self.policy.owner_scope(owner_id), filters, page, limit)

    async def get_visible(self, listing_id: UUID, viewer_id: Optional[str]) -> Listing:
        """
        A single listing if the viewer may see it. Missing and hidden
        listings fail identically.
        """
        listing = await self.listings.get(listing_id)
        if listing is not None:
            is_owner = viewer_id is not None and viewer_id == listing.owner_id
            if (is_owner or listing.is_active) and await self.policy.can_view(listing, viewer_id):
                return listing
        raise NotFoundError("Listing not found", error_codes.LISTING_NOT_FOUND)
