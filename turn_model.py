"""Turn model routing algorithms.

A turn model avoids deadlock in a mesh NoC by forbidding some of the turns a
traffic flow may take at a router. A turn is two consecutive links: one
entering the router and one leaving it. 180 degree turns (going straight
back to the router a flow came from) are forbidden by every turn model.
"""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from compressed_grid import create_compressed_noc_grid
from noc_direction import LinkDirection, get_link_direction
from noc_storage import NocStorage

UP = LinkDirection.UP
DOWN = LinkDirection.DOWN
LEFT = LinkDirection.LEFT
RIGHT = LinkDirection.RIGHT


class TurnModelRouting(BaseModel):
    """Base class of all turn models."""

    model_config = ConfigDict(frozen=True)

    def is_turn_forbidden(
        self, prev_dir: LinkDirection, next_dir: LinkDirection, column: int
    ) -> bool:
        """Returns whether turning from prev_dir into next_dir is forbidden.

        column: compressed x coordinate of the router where the turn happens.
        """
        raise NotImplementedError

    def get_all_illegal_turns(self, noc: NocStorage) -> list[tuple[int, int]]:
        """Lists every pair of consecutive links a flow must not use together.

        Returns a list of (incoming link id, outgoing link id) tuples.
        """
        compressed_grid = create_compressed_noc_grid(noc)
        illegal_turns = []
        for router in noc.get_noc_routers():
            column, _ = compressed_grid.get_compressed_loc(router.loc)
            for in_link_id in noc.get_noc_router_incoming_links(router.router_id):
                in_link = noc.get_single_noc_link(in_link_id)
                in_dir = get_link_direction(noc, in_link_id)
                for out_link_id in noc.get_noc_router_outgoing_links(router.router_id):
                    out_link = noc.get_single_noc_link(out_link_id)
                    if out_link.sink == in_link.src or self.is_turn_forbidden(
                        in_dir, get_link_direction(noc, out_link_id), column
                    ):
                        illegal_turns.append((in_link_id, out_link_id))
        return illegal_turns


class XYRouting(TurnModelRouting):
    """Routes along x first: no turn from a vertical into a horizontal link.

    Example:
    >>> XYRouting().is_turn_forbidden(UP, RIGHT, 0)
    True
    >>> XYRouting().is_turn_forbidden(RIGHT, UP, 0)
    False
    """

    kind: Literal["xy"] = "xy"

    def is_turn_forbidden(
        self, prev_dir: LinkDirection, next_dir: LinkDirection, column: int
    ) -> bool:
        return not prev_dir.is_horizontal() and next_dir.is_horizontal()


class WestFirstRouting(TurnModelRouting):
    """No turn into the west (left) direction."""

    kind: Literal["west_first"] = "west_first"

    def is_turn_forbidden(
        self, prev_dir: LinkDirection, next_dir: LinkDirection, column: int
    ) -> bool:
        return next_dir == LEFT and prev_dir in (UP, DOWN)


class NorthLastRouting(TurnModelRouting):
    """No turn out of the north (up) direction."""

    kind: Literal["north_last"] = "north_last"

    def is_turn_forbidden(
        self, prev_dir: LinkDirection, next_dir: LinkDirection, column: int
    ) -> bool:
        return prev_dir == UP and next_dir in (LEFT, RIGHT)


class NegativeFirstRouting(TurnModelRouting):
    """No turn from a positive (up, right) into a negative (down, left) direction."""

    kind: Literal["negative_first"] = "negative_first"

    def is_turn_forbidden(
        self, prev_dir: LinkDirection, next_dir: LinkDirection, column: int
    ) -> bool:
        return (prev_dir, next_dir) in ((UP, LEFT), (RIGHT, DOWN))


class OddEvenRouting(TurnModelRouting):
    """Odd-even turn model.

    East to north and east to south turns are forbidden in even columns.
    North to west and south to west turns are forbidden in odd columns.

    Example:
    >>> OddEvenRouting().is_turn_forbidden(RIGHT, UP, 2)
    True
    >>> OddEvenRouting().is_turn_forbidden(RIGHT, UP, 1)
    False
    >>> OddEvenRouting().is_turn_forbidden(DOWN, LEFT, 1)
    True
    """

    kind: Literal["odd_even"] = "odd_even"

    def is_turn_forbidden(
        self, prev_dir: LinkDirection, next_dir: LinkDirection, column: int
    ) -> bool:
        if column % 2 == 0:
            return prev_dir == RIGHT and next_dir in (UP, DOWN)
        return prev_dir in (UP, DOWN) and next_dir == LEFT


RoutingAlgorithm = Annotated[
    XYRouting
    | WestFirstRouting
    | NorthLastRouting
    | NegativeFirstRouting
    | OddEvenRouting,
    Field(discriminator="kind"),
]


def create_routing_algorithm(kind: str) -> TurnModelRouting:
    """Creates the turn model named `kind`.

    Example:
    >>> create_routing_algorithm("west_first")
    WestFirstRouting(kind='west_first')
    """
    return TypeAdapter(RoutingAlgorithm).validate_python({"kind": kind})
