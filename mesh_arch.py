"""Generates mesh NoC descriptions and the device grids they sit on."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from device_grid import DeviceGrid, TileType, create_device_grid
from noc_arch import LogicalRouter, NocArch

ROUTER_TILE_NAME = "noc_router"


def mesh_router_id(x: int, y: int, num_col: int) -> int:
    """Returns the user id of the mesh router in column x and row y.

    Example:
    >>> mesh_router_id(2, 1, num_col=4)
    6
    """
    return y * num_col + x


def mesh_router_tiles(
    num_col: int, num_row: int, pitch: int, tile_size: int
) -> list[tuple[int, int]]:
    """Creates the origin cell of every router tile, one tile every `pitch` cells.

    Returns a list of (x, y) tuples ordered by row then column.

    Example:
    >>> mesh_router_tiles(2, 2, pitch=3, tile_size=1)
    [(1, 1), (4, 1), (1, 4), (4, 4)]
    """
    assert tile_size <= pitch, "Router tiles would overlap!"
    return [
        (1 + x * pitch, 1 + y * pitch) for y in range(num_row) for x in range(num_col)
    ]


def create_bidir_connections(
    routers: dict[int, LogicalRouter], id1: int, id2: int
) -> None:
    """Connects two logical routers in both directions."""
    routers[id1].connection_list.append(id2)
    routers[id2].connection_list.append(id1)


def mesh_noc(
    num_col: int,
    num_row: int,
    pitch: int = 3,
    tile_size: int = 1,
    link_bandwidth: float = 1000.0,
    link_latency: float = 1e-9,
    router_latency: float = 1e-9,
) -> tuple[DeviceGrid, NocArch]:
    """Generates a num_col x num_row mesh NoC.

    Each logical router is declared at the centroid of its router tile and
    has a bidirectional link to each horizontal and vertical neighbor.

    Returns the device grid and the NoC architecture description.

    Example:
    >>> grid, arch = mesh_noc(3, 2)
    >>> len(arch.router_list), grid.width, grid.height
    (6, 9, 6)
    >>> sorted(arch.router_list[4].connection_list)
    [1, 3, 5]
    """
    router_tile = TileType(name=ROUTER_TILE_NAME, width=tile_size, height=tile_size)
    origins = mesh_router_tiles(num_col, num_row, pitch, tile_size)
    width = 2 + (num_col - 1) * pitch + tile_size
    height = 2 + (num_row - 1) * pitch + tile_size
    grid = create_device_grid(
        width, height, [(router_tile, x, y) for x, y in origins]
    )

    centroid_offset = (tile_size - 1) / 2
    routers: dict[int, LogicalRouter] = {}
    for y in range(num_row):
        for x in range(num_col):
            ox, oy = origins[mesh_router_id(x, y, num_col)]
            routers[mesh_router_id(x, y, num_col)] = LogicalRouter(
                id=mesh_router_id(x, y, num_col),
                device_x_position=ox + centroid_offset,
                device_y_position=oy + centroid_offset,
            )

    for y in range(num_row):
        for x in range(num_col):
            if x + 1 < num_col:
                create_bidir_connections(
                    routers,
                    mesh_router_id(x, y, num_col),
                    mesh_router_id(x + 1, y, num_col),
                )
            if y + 1 < num_row:
                create_bidir_connections(
                    routers,
                    mesh_router_id(x, y, num_col),
                    mesh_router_id(x, y + 1, num_col),
                )

    arch = NocArch(
        router_tile_name=ROUTER_TILE_NAME,
        router_list=[routers[i] for i in sorted(routers)],
        link_bandwidth=link_bandwidth,
        link_latency=link_latency,
        router_latency=router_latency,
    )
    return grid, arch
