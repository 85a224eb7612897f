"""A compressed coordinate space over the NoC router locations.

Router tiles are usually spread over the device with other tiles between
them. The compressed grid numbers only the columns and rows that hold a
router, so neighboring routers are one compressed unit apart.
"""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from pydantic import BaseModel

from noc_storage import GridLoc, NocStorage


class CompressedGrid(BaseModel):
    """Represents the compressed grid of one block type.

    grid_x, grid_y: per layer, the sorted device coordinates holding a router.
    """

    grid_x: dict[int, list[int]]
    grid_y: dict[int, list[int]]

    def get_compressed_loc(self, loc: GridLoc) -> tuple[int, int]:
        """Converts a device location into compressed (x, y) coordinates.

        Example:
        >>> cg = CompressedGrid(grid_x={0: [1, 4, 7]}, grid_y={0: [1, 4]})
        >>> cg.get_compressed_loc(GridLoc(x=7, y=4))
        (2, 1)
        """
        assert loc.layer in self.grid_x, f"No router on layer {loc.layer}!"
        xs = self.grid_x[loc.layer]
        ys = self.grid_y[loc.layer]
        assert loc.x in xs and loc.y in ys, f"No router at {loc.as_tuple()}!"
        return xs.index(loc.x), ys.index(loc.y)


def create_compressed_noc_grid(noc: NocStorage) -> CompressedGrid:
    """Creates the compressed grid of the NoC router locations.

    Returns a CompressedGrid.
    """
    grid_x: dict[int, set[int]] = {}
    grid_y: dict[int, set[int]] = {}
    for router in noc.get_noc_routers():
        grid_x.setdefault(router.loc.layer, set()).add(router.loc.x)
        grid_y.setdefault(router.loc.layer, set()).add(router.loc.y)
    return CompressedGrid(
        grid_x={layer: sorted(xs) for layer, xs in grid_x.items()},
        grid_y={layer: sorted(ys) for layer, ys in grid_y.items()},
    )
