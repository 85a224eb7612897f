"""Shared pytest fixtures for the NoC builder and router tests."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import pytest

from mesh_arch import mesh_noc
from noc_context import NocContext, create_noc_context
from noc_storage import GridLoc, NocStorage
from placement import Placement
from traffic_flow import TrafficFlow, TrafficFlowStorage
from turn_model import create_routing_algorithm


def build_noc(
    router_locs: list[tuple[int, int]],
    connections: list[tuple[int, int]],
    link_bandwidth: float = 1000.0,
    link_latency: float = 1e-9,
    router_latency: float = 1e-9,
) -> NocStorage:
    """Builds a NoC whose router user ids equal their index in router_locs."""
    noc = NocStorage(
        link_bandwidth=link_bandwidth,
        link_latency=link_latency,
        router_latency=router_latency,
    )
    for user_id, (x, y) in enumerate(router_locs):
        noc.add_router(user_id, GridLoc(x=x, y=y))
    noc.make_room_for_router_link_lists()
    for src, sink in connections:
        noc.add_link(src, sink)
    noc.finished_building_noc()
    return noc


def place_on_routers(noc: NocStorage, blocks: dict[int, int]) -> Placement:
    """Places each cluster block on the router with the given internal id."""
    placement = Placement()
    for cluster_id, router_id in blocks.items():
        placement.place_block(cluster_id, noc.get_single_noc_router(router_id).loc)
    return placement


def add_flow(
    ctx: NocContext,
    src: int,
    dst: int,
    bandwidth: float = 100.0,
    max_latency: float = 1.0,
) -> int:
    """Adds a flow between two cluster blocks and returns its id."""
    return ctx.traffic_flows.add_traffic_flow(
        TrafficFlow(
            name=f"flow_{src}_{dst}_{ctx.traffic_flows.get_number_of_traffic_flows()}",
            source_cluster=src,
            sink_cluster=dst,
            bandwidth=bandwidth,
            max_latency=max_latency,
        )
    )


@pytest.fixture
def ring_noc() -> NocStorage:
    """Four routers on a unit square joined by a one-way ring.

    Links: 0 right, 1 up, 2 left, 3 down.
    """
    return build_noc(
        [(0, 0), (1, 0), (1, 1), (0, 1)],
        [(0, 1), (1, 2), (2, 3), (3, 0)],
    )


@pytest.fixture
def ring_ctx(ring_noc: NocStorage) -> NocContext:
    """An XY-routed context over the ring NoC without any flows."""
    return NocContext(
        noc=ring_noc,
        traffic_flows=TrafficFlowStorage(),
        routing_algorithm=create_routing_algorithm("xy"),
    )


@pytest.fixture
def ring_placement(ring_noc: NocStorage) -> Placement:
    """Cluster block i sits on router i."""
    return place_on_routers(ring_noc, {i: i for i in range(4)})


@pytest.fixture
def mesh_factory():
    """Factory for 2x2 mesh contexts with a chosen turn model."""

    def _create(routing_algorithm: str = "xy") -> NocContext:
        grid, arch = mesh_noc(2, 2)
        return create_noc_context(grid, arch, routing_algorithm=routing_algorithm)

    return _create
