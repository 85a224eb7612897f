"""The NoC state shared by the topology builder and the routing passes."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from pydantic import BaseModel

from device_grid import DeviceGrid
from noc_arch import NocArch
from noc_storage import NocStorage
from setup_noc import setup_noc
from traffic_flow import TrafficFlowStorage
from turn_model import RoutingAlgorithm, XYRouting, create_routing_algorithm


class NocContext(BaseModel):
    """Represents the NoC of a run.

    noc: the finalized NoC topology.
    traffic_flows: the flows to route and their latest routes.
    routing_algorithm: the turn model that decides the forbidden turns.
    """

    noc: NocStorage
    traffic_flows: TrafficFlowStorage = TrafficFlowStorage()
    routing_algorithm: RoutingAlgorithm = XYRouting()


def create_noc_context(
    grid: DeviceGrid,
    arch: NocArch,
    traffic_flows: TrafficFlowStorage | None = None,
    routing_algorithm: str = "xy",
) -> NocContext:
    """Builds the NoC of the device and wraps it in a NocContext."""
    return NocContext(
        noc=setup_noc(grid, arch),
        traffic_flows=traffic_flows or TrafficFlowStorage(),
        routing_algorithm=create_routing_algorithm(routing_algorithm),
    )
