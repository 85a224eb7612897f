"""Builds the NoC storage model from the architecture description.

Every logical router declared by the user is assigned to the closest physical
router tile on the device grid. The assignment must be unambiguous: each
logical router has exactly one closest tile and no tile is claimed twice.
"""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import logging
import math

from pydantic import BaseModel, ConfigDict

from device_grid import DeviceGrid
from noc_arch import NocArch
from noc_errors import (
    AmbiguousRouterAssignmentError,
    DuplicateRouterAssignmentError,
    NoRouterTilesError,
    TooFewRouterTilesError,
    TooManyRouterTilesError,
    UnknownRouterIdError,
)
from noc_storage import GridLoc, NocStorage

logger = logging.getLogger(__name__)


class RouterTilePosition(BaseModel):
    """Represents a physical router tile found on the device grid.

    loc: origin cell of the tile.
    centroid_x, centroid_y: centre of the tile, used for distance computation.
    """

    model_config = ConfigDict(frozen=True)

    loc: GridLoc
    centroid_x: float
    centroid_y: float


def identify_router_tile_positions(
    grid: DeviceGrid, router_tile_name: str
) -> list[RouterTilePosition]:
    """Finds all physical router tiles on the device grid.

    A tile spanning several cells is only reported once, at the cell whose
    width and height offsets are zero.

    Returns a list of RouterTilePosition in grid scan order.
    """
    tiles = []
    for layer in range(grid.num_layers):
        for x in range(grid.width):
            for y in range(grid.height):
                cell = grid.get_tile(x, y, layer)
                if cell.type.name != router_tile_name:
                    continue
                if cell.width_offset != 0 or cell.height_offset != 0:
                    continue
                tiles.append(
                    RouterTilePosition(
                        loc=GridLoc(x=x, y=y, layer=layer),
                        centroid_x=(cell.type.width - 1) / 2 + x,
                        centroid_y=(cell.type.height - 1) / 2 + y,
                    )
                )
    return tiles


def check_router_tile_count(
    tiles: list[RouterTilePosition], arch: NocArch
) -> None:
    """Checks that every physical router tile gets exactly one logical router."""
    num_logical = len(arch.router_list)
    if not tiles:
        raise NoRouterTilesError(
            f"No physical NoC routers were found on the device. Either the router "
            f"tile name '{arch.router_tile_name}' is incorrect or the device has "
            "no routers."
        )
    if len(tiles) < num_logical:
        raise TooFewRouterTilesError(
            f"The NoC description has {num_logical} routers but the device only "
            f"has {len(tiles)} '{arch.router_tile_name}' tiles."
        )
    if len(tiles) > num_logical:
        raise TooManyRouterTilesError(
            f"The NoC description has {num_logical} routers and leaves some of "
            f"the {len(tiles)} '{arch.router_tile_name}' tiles unused."
        )


def find_closest_router_tile(
    router_id: int, x: float, y: float, tiles: list[RouterTilePosition]
) -> int:
    """Finds the physical router tile closest to the position (x, y).

    Returns the index of the closest tile.

    Example:
    >>> tiles = [
    ...     RouterTilePosition(loc=GridLoc(x=0, y=0), centroid_x=0, centroid_y=0),
    ...     RouterTilePosition(loc=GridLoc(x=4, y=0), centroid_x=4, centroid_y=0),
    ... ]
    >>> find_closest_router_tile(7, 3.0, 1.0, tiles)
    1
    """
    shortest_distance = math.inf
    closest = 0
    tie: tuple[int, int] | None = None

    for idx, tile in enumerate(tiles):
        distance = math.hypot(tile.centroid_x - x, tile.centroid_y - y)
        if math.isclose(distance, shortest_distance):
            tie = (closest, idx)
        elif distance < shortest_distance:
            shortest_distance = distance
            closest = idx

    if tie is not None and tie[0] == closest:
        loc1 = tiles[tie[0]].loc
        loc2 = tiles[tie[1]].loc
        raise AmbiguousRouterAssignmentError(
            f"Router with ID:'{router_id}' has the same distance to physical "
            f"router tiles located at position ({loc1.x},{loc1.y}) and "
            f"({loc2.x},{loc2.y}). Therefore, no router assignment could be made."
        )
    return closest


def create_noc_routers(
    arch: NocArch, noc: NocStorage, tiles: list[RouterTilePosition]
) -> None:
    """Assigns each logical router to its closest physical router tile."""
    # tile index -> user id of the logical router holding it
    assignments: dict[int, int] = {}

    for router in arch.router_list:
        closest = find_closest_router_tile(
            router.id, router.device_x_position, router.device_y_position, tiles
        )
        if closest in assignments:
            loc = tiles[closest].loc
            raise DuplicateRouterAssignmentError(
                f"Routers with IDs:'{router.id}' and '{assignments[closest]}' are "
                f"both closest to physical router tile located at "
                f"({loc.x},{loc.y}) and the physical router could not be "
                "assigned multiple times."
            )

        noc.add_router(router.id, tiles[closest].loc)
        assignments[closest] = router.id


def create_noc_links(arch: NocArch, noc: NocStorage) -> None:
    """Adds one link per declared connection between routers."""
    noc.make_room_for_router_link_lists()

    for router in arch.router_list:
        src = noc.convert_router_id(router.id)
        for conn_id in router.connection_list:
            if conn_id not in noc.user_id_map:
                raise UnknownRouterIdError(
                    f"Router with ID:'{router.id}' is connected to router "
                    f"'{conn_id}' which is not declared."
                )
            noc.add_link(src, noc.convert_router_id(conn_id))


def setup_noc(grid: DeviceGrid, arch: NocArch) -> NocStorage:
    """Creates the NoC model of the device from the NoC description.

    Raises a NocConfigError if the description does not fit the device.

    Returns the finalized NocStorage.
    """
    tiles = identify_router_tile_positions(grid, arch.router_tile_name)
    check_router_tile_count(tiles, arch)

    noc = NocStorage(
        link_bandwidth=arch.link_bandwidth,
        link_latency=arch.link_latency,
        router_latency=arch.router_latency,
    )
    create_noc_routers(arch, noc, tiles)
    create_noc_links(arch, noc)
    noc.finished_building_noc()

    logger.info(
        "built NoC with %d routers and %d links",
        noc.get_number_of_noc_routers(),
        noc.get_number_of_noc_links(),
    )
    return noc
