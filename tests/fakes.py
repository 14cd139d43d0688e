"""In-memory stores for service tests."""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from app.core.exceptions import DuplicateConnectionError
from app.crud.base import ConnectionStore, ListingScope, ListingStore, ProfileStore
from app.models.connection import Connection, canonical_pair
from app.models.listing import Listing
from app.models.profile import Profile
from app.schemas.enums import ConnectionStatus, ListingPermission
from app.schemas.listing import ListingFilters
from app.utils.file_handling import BlobStorage


class FakeProfileStore(ProfileStore):
    def __init__(self):
        self.rows: Dict[str, Profile] = {}

    def add(self, user_id: str, first_name: str = "Test", last_name: str = "User", **fields) -> Profile:
        profile = Profile(id=user_id, first_name=first_name, last_name=last_name, **fields)
        self.rows[user_id] = profile
        return profile

    async def get(self, user_id):
        return self.rows.get(user_id)

    async def get_many(self, user_ids):
        return [self.rows[user_id] for user_id in set(user_ids) if user_id in self.rows]

    async def create(self, profile):
        self.rows[profile.id] = profile
        return profile

    async def update(self, profile, changes):
        for key, value in changes.items():
            setattr(profile, key, value)
        return profile

    async def search(self, query, exclude_id=None, limit=20):
        needle = query.lower()
        return [
            p for p in self.rows.values()
            if p.id != exclude_id and needle in f"{p.first_name} {p.last_name} {p.email or ''}".lower()
        ][:limit]


class FakeConnectionStore(ConnectionStore):
    def __init__(self):
        self.rows: Dict[Tuple[str, str], Connection] = {}
        self.adjacency_calls = 0

    def befriend(self, user_a: str, user_b: str) -> Connection:
        low_id, high_id = canonical_pair(user_a, user_b)
        conn = Connection(
            low_id=low_id,
            high_id=high_id,
            status=ConnectionStatus.ACCEPTED.value,
            requested_by=user_a,
        )
        self.rows[(low_id, high_id)] = conn
        return conn

    async def get(self, connection_id: UUID) -> Optional[Connection]:
        return next((c for c in self.rows.values() if c.id == connection_id), None)

    async def get_between(self, user_a, user_b):
        return self.rows.get(canonical_pair(user_a, user_b))

    async def insert(self, user_a, user_b, requested_by, status=ConnectionStatus.PENDING):
        key = canonical_pair(user_a, user_b)
        if key in self.rows:
            raise DuplicateConnectionError()
        conn = Connection(low_id=key[0], high_id=key[1], status=status.value, requested_by=requested_by)
        self.rows[key] = conn
        return conn

    async def set_status(self, connection, status):
        connection.status = status.value
        return connection

    async def upsert_blocked(self, blocker_id, target_id):
        key = canonical_pair(blocker_id, target_id)
        conn = self.rows.get(key)
        if conn is None:
            return await self.insert(blocker_id, target_id, blocker_id, ConnectionStatus.BLOCKED)
        conn.status = ConnectionStatus.BLOCKED.value
        conn.requested_by = blocker_id
        return conn

    async def delete(self, connection):
        self.rows.pop((connection.low_id, connection.high_id), None)

    async def list_for_user(self, user_id, status):
        return [c for c in self.rows.values() if c.involves(user_id) and c.status == status.value]

    async def adjacency(self, user_ids: Iterable[str]) -> Dict[str, Set[str]]:
        self.adjacency_calls += 1
        ids = set(user_ids)
        neighbours = {user_id: set() for user_id in ids}
        for conn in self.rows.values():
            if conn.status != ConnectionStatus.ACCEPTED.value:
                continue
            if conn.low_id in ids:
                neighbours[conn.low_id].add(conn.high_id)
            if conn.high_id in ids:
                neighbours[conn.high_id].add(conn.low_id)
        return neighbours

    async def blocked_ids(self, user_id):
        return {c.other(user_id) for c in await self.list_for_user(user_id, ConnectionStatus.BLOCKED)}


def _in_scope(listing: Listing, scope: ListingScope) -> bool:
    if scope.active_only and not listing.is_active:
        return False
    if scope.owner_id and listing.owner_id == scope.owner_id:
        return True
    if listing.permission == ListingPermission.PRIVATE.value and listing.owner_id in scope.network_ids:
        return True
    return scope.include_public and listing.permission == ListingPermission.PUBLIC.value


def _matches(listing: Listing, filters: ListingFilters) -> bool:
    if filters.listing_type and listing.listing_type != filters.listing_type.value:
        return False
    if filters.property_type and listing.property_type != filters.property_type.value:
        return False
    if filters.min_price is not None and listing.price < filters.min_price:
        return False
    if filters.max_price is not None and listing.price > filters.max_price:
        return False
    if filters.city and filters.city.lower() not in listing.city.lower():
        return False
    if filters.state and listing.state != filters.state:
        return False
    if filters.q:
        haystack = " ".join([listing.title, listing.description, listing.city, listing.address]).lower()
        if filters.q.lower() not in haystack:
            return False
    return True


class FakeListingStore(ListingStore):
    def __init__(self):
        self.rows: Dict[UUID, Listing] = {}
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def add(self, owner_id: str, **fields) -> Listing:
        # Strictly increasing timestamps keep newest-first ordering deterministic.
        self._clock += timedelta(minutes=1)
        values = dict(
            title="Sunny room",
            description="Close to the park",
            listing_type="room",
            price=1200.0,
            address="1 Main St",
            city="Austin",
            state="TX",
            zip_code="78701",
            available_date=self._clock.date(),
            permission=ListingPermission.PRIVATE.value,
            is_active=True,
            created_at=self._clock,
        )
        values.update(fields)
        listing = Listing(owner_id=owner_id, **values)
        self.rows[listing.id] = listing
        return listing

    async def get(self, listing_id):
        return self.rows.get(listing_id)

    async def get_by_share_token(self, token):
        return next((l for l in self.rows.values() if l.share_token == token), None)

    async def create(self, listing):
        self.rows[listing.id] = listing
        return listing

    async def update(self, listing, changes):
        for key, value in changes.items():
            setattr(listing, key, value)
        return listing

    async def delete(self, listing):
        self.rows.pop(listing.id, None)

    async def find(self, scope, filters, offset, limit):
        matches = [l for l in self.rows.values() if _in_scope(l, scope) and _matches(l, filters)]
        matches.sort(key=lambda l: l.created_at, reverse=True)
        return matches[offset:offset + limit], len(matches)


class FakeBlobStorage(BlobStorage):
    BASE_URL = "https://storage.test/bucket"

    def __init__(self):
        self.blobs: Dict[str, Tuple[bytes, str]] = {}

    def path_from_url(self, url: str) -> str:
        prefix = f"{self.BASE_URL}/"
        if not url.startswith(prefix):
            raise ValueError("foreign URL")
        return url[len(prefix):]

    async def upload(self, data, content_type, blob_path):
        self.blobs[blob_path] = (data, content_type)
        return f"{self.BASE_URL}/{blob_path}"

    async def delete(self, url):
        return self.blobs.pop(self.path_from_url(url), None) is not None

    def urls(self) -> List[str]:
        return [f"{self.BASE_URL}/{path}" for path in self.blobs]
