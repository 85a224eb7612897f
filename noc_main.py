"""Builds the NoC of a device and routes traffic flows over it.

Usage:
    python noc_main.py <noc.json> <flows.json> <placement.json> [echo.txt]

noc.json holds the device grid, the NoC architecture description and the
turn model name; flows.json the traffic flows; placement.json the location
of every router cluster block.
"""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

import logging
import sys

from pydantic import BaseModel

from device_grid import DeviceGrid
from noc_arch import NocArch
from noc_context import NocContext, create_noc_context
from noc_echo import echo_routes, write_noc_echo
from placement import Placement
from sat_routing import NocRoutingConfig, route_traffic_flows
from traffic_flow import TrafficFlowStorage


class NocDescription(BaseModel):
    """Represents the content of noc.json."""

    grid: DeviceGrid
    arch: NocArch
    routing_algorithm: str = "xy"
    routing: NocRoutingConfig = NocRoutingConfig()


def read_json_model(file_name: str, model: type[BaseModel]) -> BaseModel:
    """Reads a pydantic model from a JSON file."""
    with open(file_name, "r", encoding="utf-8") as file:
        return model.model_validate_json(file.read())


def run(
    desc: NocDescription, flows: TrafficFlowStorage, placement: Placement
) -> tuple[NocContext, bool]:
    """Builds the NoC and runs one routing pass.

    Returns the NoC context and whether routing succeeded.
    """
    ctx = create_noc_context(desc.grid, desc.arch, flows, desc.routing_algorithm)
    return ctx, route_traffic_flows(ctx, placement, desc.routing)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )

    # command line inputs
    NUM_CMD_IN = 4
    if len(sys.argv) < NUM_CMD_IN:
        print(__doc__)
        sys.exit(1)

    t_desc = read_json_model(sys.argv[1], NocDescription)
    t_flows = read_json_model(sys.argv[2], TrafficFlowStorage)
    t_placement = read_json_model(sys.argv[3], Placement)
    assert isinstance(t_desc, NocDescription)
    assert isinstance(t_flows, TrafficFlowStorage)
    assert isinstance(t_placement, Placement)

    t_ctx, t_success = run(t_desc, t_flows, t_placement)
    if not t_success:
        print("NoC routing failed.")
        sys.exit(2)

    print("\n".join(echo_routes(t_ctx)))
    if len(sys.argv) > NUM_CMD_IN:
        write_noc_echo(t_ctx, sys.argv[NUM_CMD_IN])
