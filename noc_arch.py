"""The NoC section of an architecture description."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from pydantic import BaseModel


class LogicalRouter(BaseModel):
    """Represents a router declared by the user.

    id: user id of the router.
    device_x_position, device_y_position: reference position on the device;
        the closest physical router tile is assigned to this router.
    connection_list: user ids of the routers this router has a link to.
    """

    id: int
    device_x_position: float
    device_y_position: float
    connection_list: list[int] = []


class NocArch(BaseModel):
    """Represents the NoC topology and its global constraints."""

    router_tile_name: str
    router_list: list[LogicalRouter]
    link_bandwidth: float
    link_latency: float
    router_latency: float
