"""Tests of converting solved variables into routes and block locations."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import pytest
from pulp import LpVariable

from noc_route_decoder import (
    check_route,
    convert_vars_to_locs,
    convert_vars_to_routes,
    get_route_routers,
    sort_noc_links_in_chain_order,
)
from noc_storage import GridLoc, NocStorage


def solved_var(name: str, value: int) -> LpVariable:
    var = LpVariable(name, cat="Binary")
    var.setInitialValue(value)
    return var


@pytest.mark.parametrize("links", [[0, 1, 2], [2, 0, 1], [1, 2, 0]])
def test_chain_order(ring_noc: NocStorage, links: list[int]) -> None:
    assert sort_noc_links_in_chain_order(ring_noc, links) == [0, 1, 2]


def test_chain_order_of_nothing(ring_noc: NocStorage) -> None:
    assert sort_noc_links_in_chain_order(ring_noc, []) == []


def test_cycle_has_no_start(ring_noc: NocStorage) -> None:
    with pytest.raises(AssertionError, match="do not have a start"):
        sort_noc_links_in_chain_order(ring_noc, [0, 1, 2, 3])


def test_disconnected_links_are_rejected(ring_noc: NocStorage) -> None:
    with pytest.raises(AssertionError, match="single path"):
        sort_noc_links_in_chain_order(ring_noc, [0, 2])


def test_convert_vars_to_routes(ring_noc: NocStorage) -> None:
    flow_link_vars = {
        (f, link): solved_var(f"x_f{f}_l{link}", 0) for f in (0, 1) for link in range(4)
    }
    for link in (1, 0):
        flow_link_vars[(0, link)].setInitialValue(1)

    routes = convert_vars_to_routes(ring_noc, [0, 1], flow_link_vars)
    assert routes == {0: [0, 1], 1: []}


def test_convert_vars_to_locs(ring_noc: NocStorage) -> None:
    chosen = {5: 2, 6: 0}
    assign_vars = {
        (b, r): solved_var(f"assign_b{b}_r{r}", int(chosen[b] == r))
        for b in chosen
        for r in range(4)
    }
    locs = convert_vars_to_locs(ring_noc, assign_vars)
    assert locs == {5: GridLoc(x=1, y=1), 6: GridLoc(x=0, y=0)}


def test_route_routers(ring_noc: NocStorage) -> None:
    assert get_route_routers(ring_noc, [1, 2, 3]) == [1, 2, 3, 0]
    assert get_route_routers(ring_noc, []) == []


def test_check_route(ring_noc: NocStorage) -> None:
    assert check_route(ring_noc, [0, 1], 0, 2)
    assert not check_route(ring_noc, [0, 1], 0, 3)
    assert not check_route(ring_noc, [0, 2], 0, 3)
    assert check_route(ring_noc, [], 1, 1)
    assert not check_route(ring_noc, [], 0, 1)
