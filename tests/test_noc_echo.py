"""Tests of the text dumps and the command line entry."""

__copyright__ = """
Copyright (c) 2024 RapidStream Design Automation, Inc. and contributors.
All rights reserved. The contributor(s) of this file has/have agreed to the
RapidStream Contributor License Agreement.
"""

from conftest import add_flow

from mesh_arch import mesh_noc
from noc_context import NocContext
from noc_echo import echo_noc, echo_routes, write_noc_echo
from noc_main import NocDescription, read_json_model, run
from noc_storage import GridLoc
from placement import Placement
from traffic_flow import TrafficFlow, TrafficFlowStorage


def test_echo_noc(mesh_factory) -> None:
    ctx: NocContext = mesh_factory()
    lines = echo_noc(ctx)

    assert "Maximum NoC Link Bandwidth: 1000.000000" in lines
    idx = lines.index("Router 0:")
    assert lines[idx + 1] == "Equivalent Physical Tile Grid Position -> (1,1)"
    assert lines[idx + 2] == "Router Connections -> 1 2"
    assert sum(line.startswith("Router Connections") for line in lines) == 4


def test_echo_routes(ring_ctx: NocContext) -> None:
    first = add_flow(ring_ctx, 0, 2)
    add_flow(ring_ctx, 1, 2)
    ring_ctx.traffic_flows.set_route(first, [0, 1])

    assert echo_routes(ring_ctx) == [
        "flow_0_2_0: 0 -> 1 -> 2",
        "flow_1_2_1: not routed",
    ]


def test_write_noc_echo(ring_ctx: NocContext, tmp_path) -> None:
    add_flow(ring_ctx, 0, 2)
    file_name = tmp_path / "noc_echo.txt"
    write_noc_echo(ring_ctx, str(file_name))

    text = file_name.read_text(encoding="utf-8")
    assert "Router 3:" in text
    assert text.rstrip().endswith("flow_0_2_0: not routed")


def test_run_from_json_files(tmp_path) -> None:
    grid, arch = mesh_noc(2, 2)
    desc = NocDescription(grid=grid, arch=arch, routing_algorithm="west_first")
    flows = TrafficFlowStorage()
    flows.add_traffic_flow(
        TrafficFlow(name="dma", source_cluster=0, sink_cluster=1, bandwidth=250.0)
    )

    paths = {}
    for name, model in (("noc", desc), ("flows", flows)):
        paths[name] = tmp_path / f"{name}.json"
        paths[name].write_text(model.model_dump_json(), encoding="utf-8")

    t_desc = read_json_model(str(paths["noc"]), NocDescription)
    t_flows = read_json_model(str(paths["flows"]), TrafficFlowStorage)
    assert isinstance(t_desc, NocDescription)
    assert isinstance(t_flows, TrafficFlowStorage)
    assert t_desc.routing_algorithm == "west_first"

    placement = Placement()
    placement.place_block(0, GridLoc(x=1, y=1))
    placement.place_block(1, GridLoc(x=4, y=4))
    ctx, success = run(t_desc, t_flows, placement)
    assert success
    assert ctx.noc.get_number_of_noc_routers() == 4
    assert len(ctx.traffic_flows.get_route(0)) == 2
    assert echo_routes(ctx) in (["dma: 0 -> 1 -> 3"], ["dma: 0 -> 2 -> 3"])
