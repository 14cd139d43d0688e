"""
Store interfaces the services depend on.

Services receive these by injection; `app.crud.profile`, `app.crud.connection`
and `app.crud.listing` implement them over an async SQL session.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from app.models.connection import Connection
from app.models.listing import Listing
from app.models.profile import Profile
from app.schemas.enums import ConnectionStatus
from app.schemas.listing import ListingFilters


@dataclass(frozen=True)
class ListingScope:
    """
    Which listings a query may return, before filters apply.

    A listing matches when any clause holds: it belongs to `owner_id`, it is
    private and owned by someone in `network_ids`, or it is public and
    `include_public` is set.
    """
    owner_id: Optional[str] = None
    network_ids: FrozenSet[str] = field(default_factory=frozenset)
    include_public: bool = False
    active_only: bool = True


class ProfileStore(ABC):
    @abstractmethod
    async def get(self, user_id: str) -> Optional[Profile]: ...

    @abstractmethod
    async def get_many(self, user_ids: Iterable[str]) -> List[Profile]: ...

    @abstractmethod
    async def create(self, profile: Profile) -> Profile: ...

    @abstractmethod
    async def update(self, profile: Profile, changes: dict) -> Profile: ...

    @abstractmethod
    async def search(self, query: str, exclude_id: Optional[str] = None, limit: int = 20) -> List[Profile]: ...


class ConnectionStore(ABC):
    @abstractmethod
    async def get(self, connection_id: UUID) -> Optional[Connection]: ...

    @abstractmethod
    async def get_between(self, user_a: str, user_b: str) -> Optional[Connection]: ...

    @abstractmethod
    async def insert(self, user_a: str, user_b: str, requested_by: str,
                     status: ConnectionStatus = ConnectionStatus.PENDING) -> Connection:
        """Insert a new pair; raises DuplicateConnectionError if the pair exists."""

    @abstractmethod
    async def set_status(self, connection: Connection, status: ConnectionStatus) -> Connection: ...

    @abstractmethod
    async def upsert_blocked(self, blocker_id: str, target_id: str) -> Connection:
        """Write a blocked row for the pair, overwriting any prior state."""

    @abstractmethod
    async def delete(self, connection: Connection) -> None: ...

    @abstractmethod
    async def list_for_user(self, user_id: str, status: ConnectionStatus) -> List[Connection]: ...

    @abstractmethod
    async def adjacency(self, user_ids: Iterable[str]) -> Dict[str, Set[str]]:
        """Accepted neighbours of every given user, in one read."""

    @abstractmethod
    async def blocked_ids(self, user_id: str) -> Set[str]:
        """Users sharing a blocked row with `user_id`, whoever blocked whom."""


class ListingStore(ABC):
    @abstractmethod
    async def get(self, listing_id: UUID) -> Optional[Listing]: ...

    @abstractmethod
    async def get_by_share_token(self, token: str) -> Optional[Listing]: ...

    @abstractmethod
    async def create(self, listing: Listing) -> Listing: ...

    @abstractmethod
    async def update(self, listing: Listing, changes: dict) -> Listing: ...

    @abstractmethod
    async def delete(self, listing: Listing) -> None: ...

    @abstractmethod
    async def find(self, scope: ListingScope, filters: ListingFilters,
                   offset: int, limit: int) -> Tuple[List[Listing], int]:
        """Page of matching listings, newest first, and the total match count."""
