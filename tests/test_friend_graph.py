import pytest

from app.core.exceptions import InputError
from app.services.friend_graph import FriendGraphService, validate_degree


@pytest.fixture
def graph(connections, profiles):
    for user_id in ["alice", "bob", "carol", "dave", "erin", "frank"]:
        profiles.add(user_id, first_name=user_id.title())
    return FriendGraphService(connections, profiles)


@pytest.mark.asyncio
async def test_direct_friends_only_accepted(graph, connections):
    connections.befriend("alice", "bob")
    await connections.insert("alice", "carol", "alice")  # pending

    friends = await graph.get_direct_friends("alice")
    assert {p.id for p in friends} == {"bob"}


@pytest.mark.asyncio
async def test_degree_bounds_reachability(graph, connections):
    # alice - bob - carol - dave
    connections.befriend("alice", "bob")
    connections.befriend("bob", "carol")
    connections.befriend("carol", "dave")

    assert await graph.get_reachable_ids("alice", 1) == {"bob"}
    assert await graph.get_reachable_ids("alice", 2) == {"bob", "carol"}
    assert await graph.get_reachable_ids("alice", 3) == {"bob", "carol", "dave"}


@pytest.mark.asyncio
async def test_one_adjacency_read_per_hop(graph, connections):
    connections.befriend("alice", "bob")
    connections.befriend("alice", "carol")
    connections.befriend("bob", "dave")
    connections.befriend("carol", "erin")

    await graph.get_reachable_ids("alice", 2)
    # blocked lookup is separate; hops 1 and 2 are one batched read each
    assert connections.adjacency_calls == 2


@pytest.mark.asyncio
async def test_cycle_does_not_loop_or_include_start(graph, connections):
    connections.befriend("alice", "bob")
    connections.befriend("bob", "carol")
    connections.befriend("carol", "alice")

    reachable = await graph.get_reachable_within_degree("alice", 6)
    ids = [p.id for p in reachable]
    assert sorted(ids) == ["bob", "carol"]
    assert "alice" not in ids


@pytest.mark.asyncio
async def test_reachability_is_symmetric(graph, connections):
    connections.befriend("alice", "bob")
    connections.befriend("bob", "carol")

    assert await graph.are_connected_within_degree("alice", "carol", 2)
    assert await graph.are_connected_within_degree("carol", "alice", 2)
    assert not await graph.are_connected_within_degree("alice", "carol", 1)
    assert not await graph.are_connected_within_degree("carol", "alice", 1)


@pytest.mark.asyncio
async def test_user_is_not_connected_to_self(graph, connections):
    connections.befriend("alice", "bob")
    assert not await graph.are_connected_within_degree("alice", "alice", 3)


@pytest.mark.asyncio
async def test_blocked_pair_never_reachable_through_indirect_path(graph, connections):
    connections.befriend("alice", "bob")
    connections.befriend("bob", "carol")
    await connections.upsert_blocked("carol", "alice")

    assert "carol" not in await graph.get_reachable_ids("alice", 3)
    assert "alice" not in await graph.get_reachable_ids("carol", 3)
    assert not await graph.are_connected_within_degree("alice", "carol", 3)
    # bob is unaffected on either side
    assert "bob" in await graph.get_reachable_ids("alice", 3)


@pytest.mark.asyncio
async def test_unrelated_block_does_not_cut_paths(graph, connections):
    connections.befriend("alice", "dave")
    connections.befriend("dave", "bob")
    connections.befriend("bob", "carol")
    await connections.upsert_blocked("alice", "erin")

    assert await graph.get_reachable_ids("alice", 3) == {"dave", "bob", "carol"}


@pytest.mark.asyncio
@pytest.mark.parametrize("degree", [0, 7, -1])
async def test_degree_out_of_range_is_input_error(graph, degree):
    with pytest.raises(InputError):
        await graph.get_reachable_ids("alice", degree)


def test_validate_degree_rejects_non_integers():
    with pytest.raises(InputError):
        validate_degree(True)
    with pytest.raises(InputError):
        validate_degree("2")
    assert validate_degree(6) == 6


@pytest.mark.asyncio
async def test_traversal_stops_at_reachable_cap(connections, profiles):
    # star: alice - hub - 10 leaves, each leaf with one more friend
    connections.befriend("alice", "hub")
    for i in range(10):
        connections.befriend("hub", f"leaf{i}")
        connections.befriend(f"leaf{i}", f"far{i}")

    graph = FriendGraphService(connections, profiles, max_reachable=5)
    reachable = await graph.get_reachable_ids("alice", 6)
    assert not any(user_id.startswith("far") for user_id in reachable)
    assert "hub" in reachable
