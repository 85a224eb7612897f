"""The FPGA device grid class."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class TileType(BaseModel):
    """Represents a physical tile type. A tile may span several grid cells."""

    model_config = ConfigDict(frozen=True)

    name: str
    width: int = 1
    height: int = 1


class GridTile(BaseModel):
    """Represents one grid cell.

    width_offset and height_offset locate the cell inside a multi-cell tile;
    the origin (bottom-left) cell of a tile has both offsets equal to zero.
    """

    model_config = ConfigDict(frozen=True)

    type: TileType
    width_offset: int = 0
    height_offset: int = 0


class DeviceGrid(BaseModel):
    """Represents an FPGA device grid.

    tiles: 3d array indexed as tiles[layer][x][y].
    Note: all 2d arrays are indexed as in the Cartesian plane.
    """

    width: int
    height: int
    num_layers: int = 1
    tiles: list[list[list[GridTile]]]

    def __init__(self, **data: Any) -> None:
        """Initialize class."""
        super().__init__(**data)
        assert len(self.tiles) == self.num_layers, "Invalid class attributes!"
        for layer in self.tiles:
            assert len(layer) == self.width, "Invalid class attributes!"
            for col in layer:
                assert len(col) == self.height, "Invalid class attributes!"

    def get_tile(self, x: int, y: int, layer: int = 0) -> GridTile:
        """Returns the grid cell at (x, y, layer)."""
        assert 0 <= x < self.width, "X coordinate out of range!"
        assert 0 <= y < self.height, "Y coordinate out of range!"
        assert 0 <= layer < self.num_layers, "Layer out of range!"
        return self.tiles[layer][x][y]


def create_device_grid(
    width: int,
    height: int,
    placed_tiles: list[tuple[TileType, int, int]],
    fill: TileType | None = None,
) -> DeviceGrid:
    """Creates a single-layer device grid.

    placed_tiles: (tile type, x, y) of the origin cell of each placed tile.
    fill: tile type used for every cell no placed tile covers.

    Returns a DeviceGrid.

    Example:
    >>> router = TileType(name="noc_router", width=2, height=2)
    >>> grid = create_device_grid(4, 4, [(router, 1, 1)])
    >>> grid.get_tile(2, 2).type.name, grid.get_tile(2, 2).width_offset
    ('noc_router', 1)
    >>> grid.get_tile(0, 0).type.name
    'clb'
    """
    fill = fill or TileType(name="clb")
    cols: list[list[GridTile | None]] = [
        [None for _ in range(height)] for _ in range(width)
    ]
    for tile_type, x0, y0 in placed_tiles:
        for dx in range(tile_type.width):
            for dy in range(tile_type.height):
                x, y = x0 + dx, y0 + dy
                assert x < width and y < height, f"Tile at ({x0},{y0}) is off grid!"
                assert cols[x][y] is None, f"Tiles overlap at ({x},{y})!"
                cols[x][y] = GridTile(type=tile_type, width_offset=dx, height_offset=dy)

    tiles = [
        [cell if cell is not None else GridTile(type=fill) for cell in col]
        for col in cols
    ]
    return DeviceGrid(width=width, height=height, num_layers=1, tiles=[tiles])
