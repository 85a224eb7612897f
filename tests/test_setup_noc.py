"""Tests of building the NoC model from a device grid and its description."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import pytest

from device_grid import TileType, create_device_grid
from mesh_arch import ROUTER_TILE_NAME, mesh_noc
from noc_arch import LogicalRouter, NocArch
from noc_errors import (
    AmbiguousRouterAssignmentError,
    DuplicateRouterAssignmentError,
    NocConfigError,
    NoRouterTilesError,
    TooFewRouterTilesError,
    TooManyRouterTilesError,
    UnknownRouterIdError,
)
from noc_storage import GridLoc
from setup_noc import (
    RouterTilePosition,
    find_closest_router_tile,
    identify_router_tile_positions,
    setup_noc,
)


def make_arch(routers: list[LogicalRouter]) -> NocArch:
    return NocArch(
        router_tile_name=ROUTER_TILE_NAME,
        router_list=routers,
        link_bandwidth=1000.0,
        link_latency=1e-9,
        router_latency=1e-9,
    )


def square_routers() -> list[LogicalRouter]:
    """Logical routers on the tiles of a 2x2 mesh with pitch 3."""
    return [
        LogicalRouter(id=0, device_x_position=1, device_y_position=1),
        LogicalRouter(id=1, device_x_position=4, device_y_position=1),
        LogicalRouter(id=2, device_x_position=1, device_y_position=4),
        LogicalRouter(id=3, device_x_position=4, device_y_position=4),
    ]


def test_mesh_setup() -> None:
    grid, arch = mesh_noc(2, 2)
    noc = setup_noc(grid, arch)

    assert noc.built
    assert noc.get_number_of_noc_routers() == 4
    assert noc.get_number_of_noc_links() == 8
    assert noc.link_bandwidth == 1000.0
    router = noc.get_single_noc_router(noc.convert_router_id(3))
    assert router.loc == GridLoc(x=4, y=4)
    sinks = sorted(
        noc.get_single_noc_link(i).sink
        for i in noc.get_noc_router_outgoing_links(noc.convert_router_id(0))
    )
    assert sinks == [noc.convert_router_id(1), noc.convert_router_id(2)]


def test_large_tiles_are_reported_once() -> None:
    router = TileType(name=ROUTER_TILE_NAME, width=2, height=2)
    grid = create_device_grid(7, 4, [(router, 1, 1), (router, 4, 1)])
    tiles = identify_router_tile_positions(grid, ROUTER_TILE_NAME)

    assert [t.loc for t in tiles] == [GridLoc(x=1, y=1), GridLoc(x=4, y=1)]
    assert (tiles[0].centroid_x, tiles[0].centroid_y) == (1.5, 1.5)


def test_large_tile_router_is_placed_on_origin_cell() -> None:
    grid, arch = mesh_noc(2, 1, pitch=4, tile_size=2)
    noc = setup_noc(grid, arch)
    assert noc.get_single_noc_router(noc.convert_router_id(1)).loc == GridLoc(
        x=5, y=1
    )


def test_no_router_tiles() -> None:
    grid, _ = mesh_noc(2, 2)
    arch = make_arch(square_routers())
    arch.router_tile_name = "missing_tile"
    with pytest.raises(NoRouterTilesError):
        setup_noc(grid, arch)


def test_too_few_router_tiles() -> None:
    grid, _ = mesh_noc(2, 2)
    routers = square_routers()
    routers.append(LogicalRouter(id=4, device_x_position=7, device_y_position=7))
    with pytest.raises(TooFewRouterTilesError):
        setup_noc(grid, make_arch(routers))


def test_too_many_router_tiles() -> None:
    grid, _ = mesh_noc(2, 2)
    with pytest.raises(TooManyRouterTilesError):
        setup_noc(grid, make_arch(square_routers()[:3]))


def test_ambiguous_assignment() -> None:
    grid, _ = mesh_noc(2, 2)
    routers = square_routers()
    routers[0] = LogicalRouter(id=0, device_x_position=2.5, device_y_position=1)
    with pytest.raises(AmbiguousRouterAssignmentError, match="ID:'0'"):
        setup_noc(grid, make_arch(routers))


def test_duplicate_assignment() -> None:
    grid, _ = mesh_noc(2, 2)
    routers = square_routers()
    routers[1] = LogicalRouter(id=1, device_x_position=1.2, device_y_position=1)
    with pytest.raises(DuplicateRouterAssignmentError, match="'1' and '0'"):
        setup_noc(grid, make_arch(routers))


def test_unknown_connection() -> None:
    grid, _ = mesh_noc(2, 2)
    routers = square_routers()
    routers[0].connection_list.append(99)
    with pytest.raises(UnknownRouterIdError):
        setup_noc(grid, make_arch(routers))


def test_config_errors_share_a_base() -> None:
    grid, _ = mesh_noc(2, 2)
    with pytest.raises(NocConfigError):
        setup_noc(grid, make_arch(square_routers()[:1]))


def test_tie_away_from_the_minimum_is_ignored() -> None:
    tiles = [
        RouterTilePosition(loc=GridLoc(x=x, y=0), centroid_x=x, centroid_y=0)
        for x in (0, 4, 3)
    ]
    assert find_closest_router_tile(0, 2.0, 0.0, tiles) == 2


def test_tie_at_the_minimum_is_an_error() -> None:
    tiles = [
        RouterTilePosition(loc=GridLoc(x=x, y=0), centroid_x=x, centroid_y=0)
        for x in (0, 4, 9)
    ]
    with pytest.raises(AmbiguousRouterAssignmentError):
        find_closest_router_tile(0, 2.0, 0.0, tiles)
