import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError

from app.api.deps import get_listing_directory, get_listing_service, get_share_tokens
from app.core.config import settings
from app.core.exceptions import InputError
from app.core.rate_limit import limiter
from app.core.security import get_current_user, get_optional_user_id
from app.models.profile import Profile
from app.schemas.connection import MessageResponse
from app.schemas.enums import ListingType, PropertyType
from app.schemas.listing import (
    ListingCreate,
    ListingFilters,
    ListingPage,
    ListingRead,
    ListingResponse,
    ListingUpdate,
    OwnedListingPage,
    PermissionUpdate,
    ShareLinkRead,
)
from app.services.listing_directory import ListingDirectory
from app.services.listings import ListingService
from app.services.share_tokens import ShareTokenIssuer, build_share_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["Listings"])


def listing_filters(
    listing_type: Optional[ListingType] = Query(None, alias="type"),
    property_type: Optional[PropertyType] = Query(None),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    q: Optional[str] = Query(None, max_length=200),
) -> ListingFilters:
    try:
        return ListingFilters(
            listing_type=listing_type,
            property_type=property_type,
            city=city,
            state=state,
            min_price=min_price,
            max_price=max_price,
            q=q,
        )
    except ValidationError as e:
        raise InputError(f"Invalid listing filters: {e.errors()[0]['msg']}")


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_LISTING_CREATE)
async def create_listing(
    request: Request,
    payload: ListingCreate,
    current_user: Profile = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service)
):
    listing = await service.create(current_user.id, payload)
    return {"message": "Listing created successfully", "listing": listing}


@router.get("", response_model=ListingPage)
async def browse_listings(
    filters: ListingFilters = Depends(listing_filters),
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    current_user: Profile = Depends(get_current_user),
    directory: ListingDirectory = Depends(get_listing_directory)
):
    """Listings the caller may see: their own, their network's private ones, and public ones"""
    result = await directory.visible_to(current_user.id, filters, page, limit)
    return result.to_dict()


@router.get("/my-listings", response_model=OwnedListingPage)
async def my_listings(
    filters: ListingFilters = Depends(listing_filters),
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    current_user: Profile = Depends(get_current_user),
    directory: ListingDirectory = Depends(get_listing_directory)
):
    result = await directory.owned_by(current_user.id, filters, page, limit)
    return result.to_dict()


@router.get("/public", response_model=ListingPage)
async def public_listings(
    filters: ListingFilters = Depends(listing_filters),
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
    directory: ListingDirectory = Depends(get_listing_directory)
):
    result = await directory.public(filters, page, limit)
    return result.to_dict()


@router.get("/shared/{token}", response_model=ListingRead)
async def shared_listing(
    token: str,
    share_tokens: ShareTokenIssuer = Depends(get_share_tokens)
):
    """No identity is required: holding the token is the grant."""
    return await share_tokens.resolve(token)


@router.get("/{listing_id}", response_model=ListingRead)
async def get_listing(
    listing_id: UUID,
    viewer_id: Optional[str] = Depends(get_optional_user_id),
    directory: ListingDirectory = Depends(get_listing_directory)
):
    return await directory.get_visible(listing_id, viewer_id)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: UUID,
    payload: ListingUpdate,
    current_user: Profile = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service)
):
    listing = await service.update(listing_id, current_user.id, payload)
    return {"message": "Listing updated successfully", "listing": listing}


@router.delete("/{listing_id}", response_model=MessageResponse)
async def delete_listing(
    listing_id: UUID,
    current_user: Profile = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service)
):
    await service.delete(listing_id, current_user.id)
    return {"message": "Listing deleted successfully"}


@router.post("/{listing_id}/deactivate", response_model=ListingResponse)
async def deactivate_listing(
    listing_id: UUID,
    current_user: Profile = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service)
):
    listing = await service.deactivate(listing_id, current_user.id)
    return {"message": "Listing deactivated", "listing": listing}


@router.post("/{listing_id}/share", response_model=ShareLinkRead)
async def share_listing(
    listing_id: UUID,
    current_user: Profile = Depends(get_current_user),
    share_tokens: ShareTokenIssuer = Depends(get_share_tokens)
):
    token = await share_tokens.issue_token(listing_id, current_user.id)
    return {
        "message": "Share link generated",
        "share_token": token,
        "share_url": build_share_url(token),
    }


@router.delete("/{listing_id}/share", response_model=MessageResponse)
async def revoke_share(
    listing_id: UUID,
    current_user: Profile = Depends(get_current_user),
    share_tokens: ShareTokenIssuer = Depends(get_share_tokens)
):
    await share_tokens.revoke_token(listing_id, current_user.id)
    return {"message": "Share link revoked"}


@router.patch("/{listing_id}/permission", response_model=ListingResponse)
async def update_permission(
    listing_id: UUID,
    payload: PermissionUpdate,
    current_user: Profile = Depends(get_current_user),
    service: ListingService = Depends(get_listing_service)
):
    listing = await service.set_permission(listing_id, current_user.id, payload.permission)
    return {"message": "Listing permission updated", "listing": listing}
