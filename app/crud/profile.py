import logging
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core import error_codes
from app.core.exceptions import ConflictError, DependencyError
from app.crud.base import ProfileStore
from app.models.profile import Profile
from app.models.timestamps import utc_now

logger = logging.getLogger(__name__)


class SQLProfileStore(ProfileStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str) -> Optional[Profile]:
        try:
            result = await self.db.execute(select(Profile).where(Profile.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading profile {user_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def get_many(self, user_ids: Iterable[str]) -> List[Profile]:
        ids = list(set(user_ids))
        if not ids:
            return []
        try:
            result = await self.db.execute(
                select(Profile).where(Profile.id.in_(ids)).order_by(Profile.first_name, Profile.last_name)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Database error loading {len(ids)} profiles: {str(e)}", exc_info=True)
            raise DependencyError()

    async def create(self, profile: Profile) -> Profile:
        profile_id = profile.id
        try:
            self.db.add(profile)
            await self.db.commit()
            await self.db.refresh(profile)
            return profile
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Profile already exists", error_codes.PROFILE_EXISTS)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error creating profile {profile_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def update(self, profile: Profile, changes: dict) -> Profile:
        # Rollback expires the instance, so error branches must not touch it.
        profile_id = profile.id
        try:
            for key, value in changes.items():
                setattr(profile, key, value)
            profile.updated_at = utc_now()
            self.db.add(profile)
            await self.db.commit()
            await self.db.refresh(profile)
            return profile
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error updating profile {profile_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def search(self, query: str, exclude_id: Optional[str] = None, limit: int = 20) -> List[Profile]:
        pattern = f"%{query}%"
        stmt = select(Profile).where(
            or_(
                Profile.first_name.ilike(pattern),
                Profile.last_name.ilike(pattern),
                Profile.email.ilike(pattern),
            )
        )
        if exclude_id:
            stmt = stmt.where(Profile.id != exclude_id)
        try:
            result = await self.db.execute(stmt.order_by(Profile.first_name).limit(limit))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Database error searching profiles: {str(e)}", exc_info=True)
            raise DependencyError()
