"""Tests of the NoC storage model."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import pytest

from noc_storage import GridLoc, NocStorage


def test_add_router_returns_sequential_ids() -> None:
    noc = NocStorage()
    assert noc.add_router(10, GridLoc(x=1, y=1)) == 0
    assert noc.add_router(20, GridLoc(x=4, y=1)) == 1
    assert noc.convert_router_id(20) == 1
    assert noc.get_noc_router_user_id(0) == 10
    assert noc.get_router_at_grid_location(GridLoc(x=4, y=1)) == 1


def test_links_update_adjacency(ring_noc: NocStorage) -> None:
    assert ring_noc.get_number_of_noc_routers() == 4
    assert ring_noc.get_number_of_noc_links() == 4
    assert ring_noc.get_noc_router_outgoing_links(1) == [1]
    assert ring_noc.get_noc_router_incoming_links(1) == [0]
    link = ring_noc.get_single_noc_link(2)
    assert (link.src, link.sink) == (2, 3)


def test_every_link_is_in_both_adjacency_lists(ring_noc: NocStorage) -> None:
    for link in ring_noc.get_noc_links():
        assert link.link_id in ring_noc.get_noc_router_outgoing_links(link.src)
        assert link.link_id in ring_noc.get_noc_router_incoming_links(link.sink)


def test_add_link_requires_room() -> None:
    noc = NocStorage()
    noc.add_router(0, GridLoc(x=0, y=0))
    noc.add_router(1, GridLoc(x=1, y=0))
    with pytest.raises(AssertionError):
        noc.add_link(0, 1)


def test_self_loop_is_rejected() -> None:
    noc = NocStorage()
    noc.add_router(0, GridLoc(x=0, y=0))
    noc.make_room_for_router_link_lists()
    with pytest.raises(AssertionError):
        noc.add_link(0, 0)


def test_duplicate_user_id_and_location_are_rejected() -> None:
    noc = NocStorage()
    noc.add_router(0, GridLoc(x=0, y=0))
    with pytest.raises(AssertionError):
        noc.add_router(0, GridLoc(x=1, y=0))
    with pytest.raises(AssertionError):
        noc.add_router(1, GridLoc(x=0, y=0))


def test_built_noc_is_immutable(ring_noc: NocStorage) -> None:
    assert ring_noc.built
    with pytest.raises(AssertionError):
        ring_noc.add_router(9, GridLoc(x=5, y=5))
    with pytest.raises(AssertionError):
        ring_noc.add_link(0, 2)


def test_clear_noc(ring_noc: NocStorage) -> None:
    ring_noc.clear_noc()
    assert not ring_noc.built
    assert ring_noc.get_number_of_noc_routers() == 0
    assert ring_noc.get_number_of_noc_links() == 0
    ring_noc.add_router(0, GridLoc(x=0, y=0))


def test_unknown_location_fails(ring_noc: NocStorage) -> None:
    with pytest.raises(AssertionError):
        ring_noc.get_router_at_grid_location(GridLoc(x=3, y=3))


def test_nx_graph(ring_noc: NocStorage) -> None:
    graph = ring_noc.get_nx_graph()
    assert graph.number_of_nodes() == 4
    assert graph.number_of_edges() == 4
    assert graph.edges[3, 0]["link_id"] == 3
