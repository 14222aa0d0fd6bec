"""
Flow View CLI
=============

Render trace call graphs from the command line.

COMMANDS:
- render:  Lay out a flow (by trace id, or from a saved JSON payload)
- traces:  List recent traces

USAGE:
    python -m flowview.cli render <trace_id>
    python -m flowview.cli render --file graph.json
    python -m flowview.cli traces --service order-service --range 6h
"""
from __future__ import annotations
import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from enum import Enum
from typing import Any, List, Optional

from flowview.analysis import FlowTopology
from flowview.client import FlowApiClient
from flowview.config import TIME_RANGE_TO_MS, FlowViewConfig
from flowview.errors import FlowViewError
from flowview.mapper import FlowGraphMapper
from flowview.presentation import build_trace_cards
from flowview.state import SelectionState
from flowview.visualization import build_graph_view

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Convert view dataclasses to JSON-ready structures."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value


async def _fetch_flow(config: FlowViewConfig, trace_id: str) -> Any:
    async with FlowApiClient(config) as client:
        return await client.fetch_flow(trace_id)


async def _fetch_traces(config: FlowViewConfig, service: Optional[str], time_range: str) -> Any:
    async with FlowApiClient(config) as client:
        return await client.fetch_traces(
            service_name=service,
            limit=config.trace_limit,
            lookback_ms=config.lookback_ms(time_range),
        )


def cmd_render(args, config: FlowViewConfig) -> dict:
    """Lay out one flow graph."""
    mapper = FlowGraphMapper()
    if args.file:
        with open(args.file, encoding='utf-8') as f:
            payload = json.load(f)
    else:
        payload = asyncio.run(_fetch_flow(config, args.trace_id))

    flow = mapper.map_flow_graph(payload, trace_id=args.trace_id)
    view = build_graph_view(flow, args.select_node, args.select_edge)

    topology = FlowTopology()
    topology.build_graph(flow)
    bottleneck = topology.find_bottleneck_edge()

    return {
        'view': to_jsonable(view),
        'metrics': to_jsonable(topology.compute_metrics()),
        'has_failures': topology.has_failures(),
        'bottleneck_edge': bottleneck.edge_id if bottleneck else None,
    }


def cmd_traces(args, config: FlowViewConfig) -> list:
    """List recent traces as cards."""
    raw = asyncio.run(_fetch_traces(config, args.service, args.range or config.default_time_range))
    traces = FlowGraphMapper().map_trace_list(raw)
    return to_jsonable(build_trace_cards(SelectionState(traces=traces)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trace flow graph renderer")
    parser.add_argument("--api-base", default=None, help="Tracing API base URL")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser("render", help="Lay out a flow graph")
    render_parser.add_argument("trace_id", nargs="?", default=None, help="Trace id to fetch")
    render_parser.add_argument("--file", default=None, help="Read the graph payload from a JSON file")
    render_parser.add_argument("--select-node", default=None, help="Mark a node as selected")
    render_parser.add_argument("--select-edge", default=None, help="Mark an edge as selected")

    traces_parser = subparsers.add_parser("traces", help="List recent traces")
    traces_parser.add_argument("--service", default=None, help="Root service filter")
    traces_parser.add_argument("--range", default=None, choices=list(TIME_RANGE_TO_MS), help="Time range")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = FlowViewConfig.from_env()
    if args.api_base:
        config = dataclasses.replace(config, api_base_url=args.api_base.rstrip("/"))

    if args.command == "render":
        if not args.trace_id and not args.file:
            parser.error("render needs a trace id or --file")
        handler = cmd_render
    elif args.command == "traces":
        handler = cmd_traces
    else:
        parser.print_help()
        return 2

    try:
        result = handler(args, config)
    except FlowViewError as e:
        logger.error("%s", e)
        print(f"[!] {e.code.name}: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Cannot read payload file %s: %s", args.file, e)
        print(f"[!] Cannot read payload file: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
