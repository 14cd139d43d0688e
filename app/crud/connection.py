import logging
from typing import Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select, or_

from app.core.exceptions import DependencyError, DuplicateConnectionError
from app.crud.base import ConnectionStore
from app.models.connection import Connection, canonical_pair
from app.models.timestamps import utc_now
from app.schemas.enums import ConnectionStatus


logger = logging.getLogger(__name__)


class SQLConnectionStore(ConnectionStore):
    """Connection rows in the `friend_connections` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, connection_id: UUID) -> Optional[Connection]:
        try:
            result = await self.db.execute(select(Connection).where(Connection.id == connection_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading connection {connection_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def get_between(self, user_a: str, user_b: str) -> Optional[Connection]:
        low_id, high_id = canonical_pair(user_a, user_b)
        try:
            result = await self.db.execute(
                select(Connection).where(
                    Connection.low_id == low_id,
                    Connection.high_id == high_id
                )
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error in get_between({user_a}, {user_b}): {str(e)}", exc_info=True)
            raise DependencyError()

    async def insert(self, user_a: str, user_b: str, requested_by: str,
                     status: ConnectionStatus = ConnectionStatus.PENDING) -> Connection:
        low_id, high_id = canonical_pair(user_a, user_b)
        conn = Connection(
            low_id=low_id,
            high_id=high_id,
            status=status.value,
            requested_by=requested_by
        )
        try:
            self.db.add(conn)
            await self.db.commit()
            await self.db.refresh(conn)
            logger.debug(f"Inserted connection {conn.id} ({low_id}, {high_id}) as {status.value}")
            return conn
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Lost insert race for connection ({low_id}, {high_id})")
            raise DuplicateConnectionError()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error inserting connection ({low_id}, {high_id}): {str(e)}", exc_info=True)
            raise DependencyError()

    async def set_status(self, connection: Connection, status: ConnectionStatus) -> Connection:
        # Rollback expires the instance, so error branches must not touch it.
        connection_id = connection.id
        try:
            connection.status = status.value
            connection.updated_at = utc_now()
            self.db.add(connection)
            await self.db.commit()
            await self.db.refresh(connection)
            return connection
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error updating connection {connection_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def upsert_blocked(self, blocker_id: str, target_id: str) -> Connection:
        existing = await self.get_between(blocker_id, target_id)
        if existing is None:
            try:
                return await self.insert(blocker_id, target_id, blocker_id, ConnectionStatus.BLOCKED)
            except DuplicateConnectionError:
                # A concurrent writer created the row first; overwrite it below.
                existing = await self.get_between(blocker_id, target_id)
                if existing is None:
                    raise DependencyError()

        try:
            existing.status = ConnectionStatus.BLOCKED.value
            existing.requested_by = blocker_id
            existing.updated_at = utc_now()
            self.db.add(existing)
            await self.db.commit()
            await self.db.refresh(existing)
            return existing
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error blocking ({blocker_id}, {target_id}): {str(e)}", exc_info=True)
            raise DependencyError()

    async def delete(self, connection: Connection) -> None:
        connection_id = connection.id
        try:
            await self.db.delete(connection)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error deleting connection {connection_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def list_for_user(self, user_id: str, status: ConnectionStatus) -> List[Connection]:
        try:
            result = await self.db.execute(
                select(Connection)
                .where(
                    or_(
                        Connection.low_id == user_id,
                        Connection.high_id == user_id
                    ),
                    Connection.status == status.value
                )
                .order_by(Connection.created_at.desc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Database error listing {status.value} connections for {user_id}: {str(e)}", exc_info=True)
            raise DependencyError()

    async def adjacency(self, user_ids: Iterable[str]) -> Dict[str, Set[str]]:
        ids = set(user_ids)
        neighbours: Dict[str, Set[str]] = {user_id: set() for user_id in ids}
        if not ids:
            return neighbours
        try:
            result = await self.db.execute(
                select(Connection.low_id, Connection.high_id).where(
                    Connection.status == ConnectionStatus.ACCEPTED.value,
                    or_(
                        Connection.low_id.in_(list(ids)),
                        Connection.high_id.in_(list(ids))
                    )
                )
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading adjacency for {len(ids)} users: {str(e)}", exc_info=True)
            raise DependencyError()

        for low_id, high_id in rows:
            if low_id in neighbours:
                neighbours[low_id].add(high_id)
            if high_id in neighbours:
                neighbours[high_id].add(low_id)
        return neighbours

    async def blocked_ids(self, user_id: str) -> Set[str]:
        rows = await self.list_for_user(user_id, ConnectionStatus.BLOCKED)
        return {conn.other(user_id) for conn in rows}
