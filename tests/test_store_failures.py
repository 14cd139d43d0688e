import logging
from datetime import date, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from app.core import error_codes
from app.core.exceptions import DependencyError, DuplicateConnectionError
from app.crud.connection import SQLConnectionStore
from app.crud.listing import SQLListingStore
from app.crud.profile import SQLProfileStore
from app.models.listing import Listing
from app.models.profile import Profile
from app.schemas.enums import ConnectionStatus


def _disk_failure():
    return OperationalError("UPDATE profiles SET first_name=?", {}, Exception("disk I/O error"))


@pytest_asyncio.fixture
async def seeded(async_test_session):
    async_test_session.add_all([
        Profile(id="alice", first_name="Alice", last_name="A"),
        Profile(id="Bob", first_name="Bob", last_name="B"),
    ])
    await async_test_session.commit()
    return async_test_session


async def _listing(session) -> Listing:
    return await SQLListingStore(session).create(Listing(
        owner_id="alice",
        title="Studio",
        description="Small and sunny",
        listing_type="apartment",
        price=900,
        address="1 Main St",
        city="Austin",
        state="TX",
        zip_code="73301",
        available_date=date(2026, 12, 1),
    ))


@pytest.mark.asyncio
async def test_listing_update_integrity_failure_is_dependency_error(seeded, caplog):
    store = SQLListingStore(seeded)
    listing = await _listing(seeded)
    listing_id = listing.id

    with caplog.at_level(logging.ERROR, logger="app.crud.listing"):
        with pytest.raises(DependencyError) as exc_info:
            await store.update(listing, {"title": None})

    assert exc_info.value.status_code == 500
    assert exc_info.value.error_code == error_codes.STORE_UNAVAILABLE
    assert str(listing_id) in caplog.text

    await seeded.refresh(listing)
    assert listing.title == "Studio"


@pytest.mark.asyncio
async def test_profile_update_commit_failure_is_dependency_error(seeded, monkeypatch, caplog):
    store = SQLProfileStore(seeded)
    profile = await store.get("alice")
    monkeypatch.setattr(seeded, "commit", AsyncMock(side_effect=_disk_failure()))

    with caplog.at_level(logging.ERROR, logger="app.crud.profile"):
        with pytest.raises(DependencyError):
            await store.update(profile, {"first_name": "Alicia"})

    assert "Database error updating profile alice" in caplog.text
    monkeypatch.undo()
    await seeded.refresh(profile)
    assert profile.first_name == "Alice"


@pytest.mark.asyncio
async def test_connection_writes_survive_commit_failure(seeded, monkeypatch, caplog):
    store = SQLConnectionStore(seeded)
    connection = await store.insert("alice", "Bob", "alice")
    connection_id = connection.id
    monkeypatch.setattr(seeded, "commit", AsyncMock(side_effect=_disk_failure()))

    with caplog.at_level(logging.ERROR, logger="app.crud.connection"):
        with pytest.raises(DependencyError):
            await store.set_status(connection, ConnectionStatus.ACCEPTED)
        with pytest.raises(DependencyError):
            await store.delete(connection)

    assert caplog.text.count(str(connection_id)) == 2
    monkeypatch.undo()
    row = await store.get(connection_id)
    assert row.status == ConnectionStatus.PENDING.value


@pytest.mark.asyncio
async def test_mixed_case_ids_share_one_row(seeded):
    store = SQLConnectionStore(seeded)

    # "Bob" sorts before "alice" by code point
    row = await store.insert("alice", "Bob", "alice")
    assert (row.low_id, row.high_id) == ("Bob", "alice")

    with pytest.raises(DuplicateConnectionError):
        await store.insert("Bob", "alice", "Bob")


def test_new_rows_carry_aware_timestamps():
    profile = Profile(id="carol", first_name="Carol", last_name="C")
    assert profile.created_at.tzinfo is timezone.utc
    assert Listing.__table__.c.created_at.type.timezone is True
