import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DependencyError
from app.crud.base import ListingScope, ListingStore
from app.models.listing import Listing
from app.models.timestamps import utc_now
from app.schemas.enums import ListingPermission
from app.schemas.listing import ListingFilters

logger = logging.getLogger(__name__)


def _scope_clause(scope: ListingScope):
    clauses = []
    if scope.owner_id:
        clauses.append(Listing.owner_id == scope.owner_id)
    if scope.network_ids:
        clauses.append(
            and_(
                Listing.permission == ListingPermission.PRIVATE.value,
                Listing.owner_id.in_(sorted(scope.network_ids))
            )
        )
    if scope.include_public:
        clauses.append(Listing.permission == ListingPermission.PUBLIC.value)
    if not clauses:
        return None
    return or_(*clauses)


def _apply_filters(stmt, filters: ListingFilters):
    if filters.listing_type:
        stmt = stmt.where(Listing.listing_type == filters.listing_type.value)
    if filters.property_type:
        stmt = stmt.where(Listing.property_type == filters.property_type.value)
    if filters.min_price is not None:
        stmt = stmt.where(Listing.price >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(Listing.price <= filters.max_price)
    if filters.city:
        stmt = stmt.where(Listing.city.ilike(f"%{filters.city}%"))
    if filters.state:
        stmt = stmt.where(Listing.state == filters.state.upper())
    if filters.q:
        pattern = f"%{filters.q}%"
        stmt = stmt.where(
            or_(
                Listing.title.ilike(pattern),
                Listing.description.ilike(pattern),
                Listing.city.ilike(pattern),
                Listing.address.ilike(pattern)
            )
        )
    return stmt


class SQLListingStore(ListingStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, listing_id: UUID) -> Optional[Listing]:
        try:
            result = await self.db.execute(select(Listing).where(Listing.id == listing_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading listing {listing_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def get_by_share_token(self, token: str) -> Optional[Listing]:
        try:
            result = await self.db.execute(select(Listing).where(Listing.share_token == token))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error resolving share token: {str(e)}", exc_info=True)
            raise DependencyError()

    async def create(self, listing: Listing) -> Listing:
        owner_id = listing.owner_id
        try:
            self.db.add(listing)
            await self.db.commit()
            await self.db.refresh(listing)
            logger.info(f"Created listing {listing.id} for owner {owner_id}")
            return listing
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error creating listing for owner {owner_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def update(self, listing: Listing, changes: dict) -> Listing:
        # Rollback expires the instance, so error branches must not touch it.
        listing_id = listing.id
        try:
            for key, value in changes.items():
                setattr(listing, key, value)
            listing.updated_at = utc_now()
            self.db.add(listing)
            await self.db.commit()
            await self.db.refresh(listing)
            return listing
        except IntegrityError as e:
            # A share_token collision or a NOT NULL column left empty.
            await self.db.rollback()
            logger.error(f"Integrity error updating listing {listing_id}: {str(e)}", exc_info=True)
            raise DependencyError()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error updating listing {listing_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def delete(self, listing: Listing) -> None:
        listing_id = listing.id
        try:
            await self.db.delete(listing)
            await self.db.commit()
            logger.info(f"Deleted listing {listing_id}")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error deleting listing {listing_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def find(self, scope: ListingScope, filters: ListingFilters,
                   offset: int, limit: int) -> Tuple[List[Listing], int]:
        clause = _scope_clause(scope)
        if clause is None:
            return [], 0

        stmt = select(Listing).where(clause)
        if scope.active_only:
            stmt = stmt.where(Listing.is_active == True)
        stmt = _apply_filters(stmt, filters)

        try:
            total_result = await self.db.execute(
                select(func.count()).select_from(stmt.subquery())
            )
            total = total_result.scalar_one()

            result = await self.db.execute(
                stmt.order_by(Listing.created_at.desc()).offset(offset).limit(limit)
            )
            return list(result.scalars().all()), total
        except SQLAlchemyError as e:
            logger.error(f"Database error searching listings: {str(e)}", exc_info=True)
            raise DependencyError()
