"""The traffic flows communicated over the NoC and their routes."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from pydantic import BaseModel

# a traffic flow latency below this value is treated as a latency constraint
LATENCY_CONSTRAINED_THRESHOLD = 0.1
DEFAULT_MAX_TRAFFIC_FLOW_LATENCY = 1.0


class TrafficFlow(BaseModel):
    """Represents a stream of data between two router cluster blocks.

    source_cluster, sink_cluster: cluster blocks whose placement decides
        the source and sink routers.
    bandwidth: required bandwidth, in the unit of the NoC link bandwidth.
    max_latency: latency bound of the flow in seconds.
    """

    name: str
    source_cluster: int
    sink_cluster: int
    bandwidth: float
    max_latency: float = DEFAULT_MAX_TRAFFIC_FLOW_LATENCY
    priority: int = 1

    def is_latency_constrained(self) -> bool:
        """Returns whether the flow gets a latency overrun variable.

        Example:
        >>> TrafficFlow(name="t", source_cluster=0, sink_cluster=1,
        ...             bandwidth=1.0).is_latency_constrained()
        False
        >>> TrafficFlow(name="t", source_cluster=0, sink_cluster=1,
        ...             bandwidth=1.0, max_latency=5e-9).is_latency_constrained()
        True
        """
        return self.max_latency < LATENCY_CONSTRAINED_THRESHOLD


class TrafficFlowStorage(BaseModel):
    """Represents all traffic flows of the netlist.

    flows: traffic flows, the flow id is the index in this list.
    routes: per flow, the ordered link ids of its current route.
    """

    flows: list[TrafficFlow] = []
    routes: list[list[int]] = []

    def add_traffic_flow(self, flow: TrafficFlow) -> int:
        """Adds a traffic flow with an empty route.

        Returns the id of the new flow.
        """
        self.flows.append(flow)
        self.routes.append([])
        return len(self.flows) - 1

    def get_all_traffic_flow_id(self) -> list[int]:
        """Get a list of all flow ids."""
        return list(range(len(self.flows)))

    def get_number_of_traffic_flows(self) -> int:
        """Get the number of flows."""
        return len(self.flows)

    def get_traffic_flow(self, flow_id: int) -> TrafficFlow:
        """Get the flow with the given id."""
        return self.flows[flow_id]

    def get_route(self, flow_id: int) -> list[int]:
        """Get the current route of the given flow."""
        if flow_id >= len(self.routes):
            return []
        return self.routes[flow_id]

    def set_route(self, flow_id: int, route: list[int]) -> None:
        """Replaces the route of the given flow."""
        while len(self.routes) < len(self.flows):
            self.routes.append([])
        self.routes[flow_id] = list(route)

    def update_routes(self, routes: dict[int, list[int]]) -> None:
        """Replaces the routes of all flows in `routes`."""
        for flow_id, route in routes.items():
            self.set_route(flow_id, route)

    def get_router_clusters_in_netlist(self) -> list[int]:
        """Get the sorted ids of all cluster blocks that are a flow endpoint."""
        clusters = {f.source_cluster for f in self.flows}
        clusters |= {f.sink_cluster for f in self.flows}
        return sorted(clusters)
