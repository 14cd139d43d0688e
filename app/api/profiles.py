"""
Profile endpoints
- Profile creation for a newly authenticated identity
- Own profile management
- Profile search for finding people to befriend
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_profile_store
from app.core.security import get_current_user, get_current_user_id
from app.crud.base import ProfileStore
from app.models.profile import Profile
from app.schemas.profile import ProfileCreate, ProfilePublic, ProfileRead, ProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.post("/me", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
async def create_own_profile(
    payload: ProfileCreate,
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileStore = Depends(get_profile_store)
):
    """Create the profile for the authenticated identity; a second call conflicts."""
    profile = await profiles.create(Profile(id=user_id, **payload.model_dump()))
    logger.info(f"Created profile {user_id}")
    return profile


@router.get("/me", response_model=ProfileRead)
async def get_own_profile(current_user: Profile = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=ProfileRead)
async def update_own_profile(
    payload: ProfileUpdate,
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileStore = Depends(get_profile_store)
):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        return current_user
    return await profiles.update(current_user, changes)


@router.get("/search", response_model=List[ProfilePublic])
async def search_profiles(
    q: str = Query(..., min_length=2, max_length=100),
    limit: int = Query(20, ge=1, le=50),
    current_user: Profile = Depends(get_current_user),
    profiles: ProfileStore = Depends(get_profile_store)
):
    return await profiles.search(q.strip(), exclude_id=current_user.id, limit=limit)
