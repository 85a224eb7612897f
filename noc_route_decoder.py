"""Converts solved routing variables back into routes and locations."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import networkx as nx
from pulp import LpVariable

from noc_solver import get_bool_value
from noc_storage import GridLoc, NocStorage


def sort_noc_links_in_chain_order(noc: NocStorage, links: list[int]) -> list[int]:
    """Orders a set of links forming a single path from its source to its sink.

    The first link is the one whose source router is not the sink of any other
    link in the set.

    Returns the ordered list of link ids.
    """
    if not links:
        return []

    src_map: dict[int, int] = {}
    dst_routers: set[int] = set()
    for link_id in links:
        link = noc.get_single_noc_link(link_id)
        src_map[link.src] = link_id
        dst_routers.add(link.sink)

    start = next(
        (i for i in links if noc.get_single_noc_link(i).src not in dst_routers), None
    )
    assert start is not None, f"The links {links} do not have a start!"

    route = []
    current: int | None = start
    while current is not None and len(route) <= len(links):
        route.append(current)
        current = src_map.get(noc.get_single_noc_link(current).sink)

    assert len(route) == len(
        links
    ), f"The links {links} do not form a single path: {route}"
    return route


def convert_vars_to_routes(
    noc: NocStorage,
    flow_ids: list[int],
    flow_link_vars: dict[tuple[int, int], LpVariable],
) -> dict[int, list[int]]:
    """Collects the activated links of every flow and orders them.

    Returns a dictionary of {flow id: ordered link ids}.
    """
    activated: dict[int, list[int]] = {f: [] for f in flow_ids}
    for (flow_id, link_id), var in flow_link_vars.items():
        if get_bool_value(var):
            activated[flow_id].append(link_id)

    return {
        flow_id: sort_noc_links_in_chain_order(noc, links)
        for flow_id, links in activated.items()
    }


def convert_vars_to_locs(
    noc: NocStorage, assign_vars: dict[tuple[int, int], LpVariable]
) -> dict[int, GridLoc]:
    """Finds the router each router cluster block was assigned to.

    assign_vars: {(cluster id, router id): binary variable}.

    Returns a dictionary of {cluster id: grid location}.
    """
    locs: dict[int, GridLoc] = {}
    for (cluster_id, router_id), var in assign_vars.items():
        if get_bool_value(var):
            assert cluster_id not in locs, f"Block {cluster_id} placed twice!"
            locs[cluster_id] = noc.get_single_noc_router(router_id).loc
    return locs


def get_route_routers(noc: NocStorage, route: list[int]) -> list[int]:
    """Lists the routers a route visits, in order."""
    if not route:
        return []
    routers = [noc.get_single_noc_link(route[0]).src]
    routers += [noc.get_single_noc_link(i).sink for i in route]
    return routers


def check_route(noc: NocStorage, route: list[int], src: int, dst: int) -> bool:
    """Checks that a route is a simple path from router src to router dst.

    Returns a bool.
    """
    if not route:
        return src == dst
    routers = get_route_routers(noc, route)
    if routers[0] != src or routers[-1] != dst:
        return False
    for link_id, (u, v) in zip(route, zip(routers, routers[1:])):
        link = noc.get_single_noc_link(link_id)
        if (link.src, link.sink) != (u, v):
            return False
    return nx.is_simple_path(noc.get_nx_graph(), routers)
