"""
Listing visibility rules.

- the owner always sees their listing
- public listings are visible to everyone, anonymous callers included
- private listings are visible to the owner's friend network within a
  fixed system-wide degree
- link-only listings are never granted through identity; only the share
  token opens them (see `ShareTokenIssuer.resolve`)
"""

import logging
from typing import Optional

from app.core.config import settings
from app.crud.base import ListingScope
from app.models.listing import Listing
from app.schemas.enums import ListingPermission
from app.services.friend_graph import FriendGraphService, validate_degree

logger = logging.getLogger(__name__)


class VisibilityPolicy:
    def __init__(self, graph: FriendGraphService, degree: Optional[int] = None):
        self.graph = graph
        self.degree = validate_degree(degree or settings.DEFAULT_NETWORK_DEGREE)

    async def can_view(self, listing: Listing, viewer_id: Optional[str]) -> bool:
        if viewer_id is not None and viewer_id == listing.owner_id:
            return True

        permission = listing.permission
        if permission == ListingPermission.PUBLIC:
            return True
        if viewer_id is None:
            return False
        if permission == ListingPermission.PRIVATE:
            return await self.graph.are_connected_within_degree(
                listing.owner_id, viewer_id, self.degree
            )
        return False

    async def scope_for(self, viewer_id: str) -> ListingScope:
        """
        Everything `can_view` admits for this viewer, as a store query.
        Reachability is symmetric, so the viewer's own reachable set is
        exactly the set of owners whose private listings they may see.
        """
        network = await self.graph.get_reachable_ids(viewer_id, self.degree)
        logger.debug(f"Viewer {viewer_id} has {len(network)} users within degree {self.degree}")
        return ListingScope(
            owner_id=viewer_id,
            network_ids=frozenset(network),
            include_public=True,
        )

    @staticmethod
    def public_scope() -> ListingScope:
        return ListingScope(include_public=True)

    @staticmethod
    def owner_scope(owner_id: str) -> ListingScope:
        return ListingScope(owner_id=owner_id, active_only=False)
