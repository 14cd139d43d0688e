import pytest

from app.core.exceptions import AuthorizationError, NotFoundError
from app.schemas.enums import ListingPermission
from app.services.share_tokens import ShareTokenIssuer, build_share_url


@pytest.fixture
def issuer(listings):
    return ShareTokenIssuer(listings)


@pytest.mark.asyncio
async def test_issue_is_idempotent(issuer, listings):
    listing = listings.add("owner", permission=ListingPermission.LINK_ONLY.value)

    token = await issuer.issue_token(listing.id, "owner")
    assert len(token) >= 43  # 32 random bytes, url-safe base64
    assert await issuer.issue_token(listing.id, "owner") == token
    assert await issuer.resolve(token) is listing


@pytest.mark.asyncio
async def test_only_owner_manages_tokens(issuer, listings):
    listing = listings.add("owner", permission=ListingPermission.LINK_ONLY.value)
    with pytest.raises(AuthorizationError):
        await issuer.issue_token(listing.id, "someone")

    token = await issuer.issue_token(listing.id, "owner")
    with pytest.raises(AuthorizationError):
        await issuer.revoke_token(listing.id, "someone")
    assert listing.share_token == token


@pytest.mark.asyncio
async def test_revoked_token_no_longer_resolves(issuer, listings):
    listing = listings.add("owner", permission=ListingPermission.LINK_ONLY.value)
    token = await issuer.issue_token(listing.id, "owner")

    await issuer.revoke_token(listing.id, "owner")
    with pytest.raises(NotFoundError):
        await issuer.resolve(token)
    # revoking twice is a no-op
    await issuer.revoke_token(listing.id, "owner")

    assert await issuer.issue_token(listing.id, "owner") != token


@pytest.mark.asyncio
async def test_token_dormant_while_inactive_or_private(issuer, listings):
    listing = listings.add("owner", permission=ListingPermission.PUBLIC.value)
    token = await issuer.issue_token(listing.id, "owner")

    listing.permission = ListingPermission.PRIVATE.value
    with pytest.raises(NotFoundError):
        await issuer.resolve(token)

    listing.permission = ListingPermission.LINK_ONLY.value
    assert await issuer.resolve(token) is listing

    listing.is_active = False
    with pytest.raises(NotFoundError) as error:
        await issuer.resolve(token)
    assert error.value.detail == "Shared listing not found or no longer available"


@pytest.mark.asyncio
async def test_unknown_token(issuer):
    with pytest.raises(NotFoundError):
        await issuer.resolve("not-a-token")
    with pytest.raises(NotFoundError):
        await issuer.resolve("")


def test_share_url_uses_frontend():
    assert build_share_url("abc") == "http://localhost:5173/shared/abc"
