"""
Friend network reachability.

Answers "who are X's friends" and "who is within N hops of X" over accepted
connections. The traversal is a breadth-first worklist: one batched
adjacency read per hop, with a visited set seeded with the start user so
cycles (A-B-C-A) neither loop nor double count.

A blocked row between two users is a hard cut for that pair: the blocked
edge never carries traversal (it is not accepted) and neither user ever
appears in the other's reachable set, whatever indirect paths exist.
Because the rule only looks at the pair, reachability stays symmetric.
"""

import logging
from typing import List, Optional, Set

from app.core import error_codes
from app.core.config import settings
from app.core.exceptions import InputError
from app.crud.base import ConnectionStore, ProfileStore
from app.models.profile import Profile

logger = logging.getLogger(__name__)

MIN_DEGREE = 1


def validate_degree(max_degree: int) -> int:
    if isinstance(max_degree, bool) or not isinstance(max_degree, int):
        raise InputError("Degree must be an integer", error_codes.INVALID_DEGREE)
    if not MIN_DEGREE <= max_degree <= settings.MAX_NETWORK_DEGREE:
        raise InputError(
            f"Degree must be between {MIN_DEGREE} and {settings.MAX_NETWORK_DEGREE}",
            error_codes.INVALID_DEGREE
        )
    return max_degree


class FriendGraphService:
    def __init__(
        self,
        connections: ConnectionStore,
        profiles: ProfileStore,
        max_reachable: Optional[int] = None,
    ):
        self.connections = connections
        self.profiles = profiles
        self.max_reachable = max_reachable or settings.NETWORK_MAX_REACHABLE

    async def get_direct_friend_ids(self, user_id: str) -> Set[str]:
        adjacency = await self.connections.adjacency([user_id])
        friends = adjacency.get(user_id, set())
        friends.discard(user_id)
        return friends

    async def get_direct_friends(self, user_id: str) -> List[Profile]:
        """Profiles of everyone sharing an accepted connection with `user_id`."""
        return await self.profiles.get_many(await self.get_direct_friend_ids(user_id))

    async def get_reachable_ids(self, user_id: str, max_degree: int) -> Set[str]:
        validate_degree(max_degree)
        return await self._traverse(user_id, max_degree)

    async def get_reachable_within_degree(self, user_id: str, max_degree: int) -> List[Profile]:
        """
        Profiles within `max_degree` hops of `user_id`, excluding the user.
        No ordering is guaranteed.
        """
        ids = await self.get_reachable_ids(user_id, max_degree)
        return await self.profiles.get_many(ids)

    async def are_connected_within_degree(self, user_a: str, user_b: str, max_degree: int) -> bool:
        validate_degree(max_degree)
        if user_a == user_b:
            return False
        reachable = await self._traverse(user_a, max_degree, target=user_b)
        return user_b in reachable

    async def _traverse(self, start_id: str, max_degree: int, target: Optional[str] = None) -> Set[str]:
        excluded = await self.connections.blocked_ids(start_id)
        if target is not None and target in excluded:
            return set()

        # Mark on discovery, not on expansion, so two parents in the same hop
        # cannot enqueue the same user twice.
        visited: Set[str] = {start_id}
        frontier: List[str] = [start_id]
        hop = 0

        while frontier and hop < max_degree:
            hop += 1
            adjacency = await self.connections.adjacency(frontier)
            next_frontier: List[str] = []
            for node in frontier:
                for friend_id in adjacency.get(node, ()):
                    if friend_id in visited:
                        continue
                    visited.add(friend_id)
                    next_frontier.append(friend_id)

            if target is not None and target in visited:
                break
            if len(visited) > self.max_reachable:
                logger.warning(
                    f"Network traversal from {start_id} stopped at hop {hop}/{max_degree}: "
                    f"{len(visited) - 1} users exceeds cap {self.max_reachable}"
                )
                break
            frontier = next_frontier

        logger.debug(f"Traversal from {start_id} reached {len(visited) - 1} users in {hop} hops")
        visited.discard(start_id)
        return visited - excluded
