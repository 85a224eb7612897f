"""The NoC storage model: routers, directed links and adjacency queries."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from typing import Any

import networkx as nx
from pydantic import BaseModel, ConfigDict


class GridLoc(BaseModel):
    """Represents a location on the device grid."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    layer: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        """Returns the location as an (x, y, layer) tuple.

        Example:
        >>> GridLoc(x=3, y=1).as_tuple()
        (3, 1, 0)
        """
        return (self.x, self.y, self.layer)


class NocRouter(BaseModel):
    """Represents a physical NoC router.

    router_id: internal handle, equal to the router's index in the storage.
    user_id: the id declared in the architecture description.
    loc: grid location of the router tile's origin cell.
    """

    model_config = ConfigDict(frozen=True)

    router_id: int
    user_id: int
    loc: GridLoc


class NocLink(BaseModel):
    """Represents a directed link between two NoC routers."""

    model_config = ConfigDict(frozen=True)

    link_id: int
    src: int
    sink: int


class NocStorage(BaseModel):
    """Represents the NoC topology.

    routers: all routers, indexed by their internal id.
    links: all links, indexed by their internal id.
    outgoing_links: per router, the ids of the links leaving it.
    incoming_links: per router, the ids of the links entering it.
    user_id_map: user id -> internal router id.
    grid_loc_map: (x, y, layer) -> internal router id.
    built: set once the topology is finalized; no mutation afterwards.

    The adjacency lists have to be created with
    make_room_for_router_link_lists() before any link is added.
    """

    routers: list[NocRouter] = []
    links: list[NocLink] = []
    outgoing_links: list[list[int]] = []
    incoming_links: list[list[int]] = []
    user_id_map: dict[int, int] = {}
    grid_loc_map: dict[tuple[int, int, int], int] = {}
    built: bool = False

    link_bandwidth: float = 0.0
    link_latency: float = 0.0
    router_latency: float = 0.0

    def __init__(self, **data: Any) -> None:
        """Initialize class."""
        super().__init__(**data)
        assert len(self.outgoing_links) == len(
            self.incoming_links
        ), "Invalid class attributes!"

    def add_router(self, user_id: int, loc: GridLoc) -> int:
        """Adds a router at the given grid location.

        Returns the internal id of the new router.
        """
        assert not self.built, "The NoC has already been built!"
        assert user_id not in self.user_id_map, f"Duplicate router id {user_id}!"
        assert (
            loc.as_tuple() not in self.grid_loc_map
        ), f"Two routers at the same location {loc.as_tuple()}!"

        router_id = len(self.routers)
        self.routers.append(NocRouter(router_id=router_id, user_id=user_id, loc=loc))
        self.user_id_map[user_id] = router_id
        self.grid_loc_map[loc.as_tuple()] = router_id
        return router_id

    def make_room_for_router_link_lists(self) -> None:
        """Creates an empty outgoing and incoming link list for every router."""
        assert not self.built, "The NoC has already been built!"
        self.outgoing_links = [[] for _ in self.routers]
        self.incoming_links = [[] for _ in self.routers]

    def add_link(self, src: int, sink: int) -> int:
        """Adds a directed link from src to sink.

        Returns the internal id of the new link.
        """
        assert not self.built, "The NoC has already been built!"
        assert src != sink, f"Invalid link! {src} -> {sink}"
        assert len(self.outgoing_links) == len(
            self.routers
        ), "Router link lists were not created before adding links!"

        link_id = len(self.links)
        self.links.append(NocLink(link_id=link_id, src=src, sink=sink))
        self.outgoing_links[src].append(link_id)
        self.incoming_links[sink].append(link_id)
        return link_id

    def finished_building_noc(self) -> None:
        """Locks the topology against further changes."""
        self.built = True

    def clear_noc(self) -> None:
        """Removes all routers and links."""
        self.routers = []
        self.links = []
        self.outgoing_links = []
        self.incoming_links = []
        self.user_id_map = {}
        self.grid_loc_map = {}
        self.built = False

    def get_noc_routers(self) -> list[NocRouter]:
        """Get a list of all routers."""
        return self.routers

    def get_noc_links(self) -> list[NocLink]:
        """Get a list of all links."""
        return self.links

    def get_number_of_noc_routers(self) -> int:
        """Get the number of routers."""
        return len(self.routers)

    def get_number_of_noc_links(self) -> int:
        """Get the number of links."""
        return len(self.links)

    def get_single_noc_router(self, router_id: int) -> NocRouter:
        """Get the router with the given internal id."""
        return self.routers[router_id]

    def get_single_noc_link(self, link_id: int) -> NocLink:
        """Get the link with the given internal id."""
        return self.links[link_id]

    def get_noc_router_outgoing_links(self, router_id: int) -> list[int]:
        """Get the ids of all links leaving the given router."""
        return self.outgoing_links[router_id]

    def get_noc_router_incoming_links(self, router_id: int) -> list[int]:
        """Get the ids of all links entering the given router."""
        return self.incoming_links[router_id]

    def get_router_at_grid_location(self, loc: GridLoc) -> int:
        """Get the internal id of the router placed at the given location."""
        assert (
            loc.as_tuple() in self.grid_loc_map
        ), f"No NoC router at location {loc.as_tuple()}!"
        return self.grid_loc_map[loc.as_tuple()]

    def convert_router_id(self, user_id: int) -> int:
        """Converts a user router id into the internal router id."""
        return self.user_id_map[user_id]

    def get_noc_router_user_id(self, router_id: int) -> int:
        """Converts an internal router id into the user router id."""
        return self.routers[router_id].user_id

    def get_nx_graph(self) -> nx.DiGraph:
        """Converts the topology into a NetworkX graph.

        Nodes are internal router ids; each edge carries its link_id.

        Returns a NetworkX directed graph.
        """
        graph = nx.DiGraph()
        graph.add_nodes_from(r.router_id for r in self.routers)
        for link in self.links:
            graph.add_edge(link.src, link.sink, link_id=link.link_id)
        return graph
