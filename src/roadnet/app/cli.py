import argparse
import json
import sys
from dataclasses import asdict

from pydantic import ValidationError

from roadnet.app.build import build
from roadnet.config.models import RoutingModel
from roadnet.domain.entities.geography import Coord
from roadnet.errors import EmptyGraphError, GraphLoadError, UnknownNodeError
from roadnet.io.route_events import RouteReport
from roadnet.io.routing_logging import RoutingLogging
from roadnet.runtime.resources import load_osm_xml, save_graph_to_path

EXIT_FOUND, EXIT_NO_PATH, EXIT_LOAD, EXIT_UNKNOWN_NODE = 0, 1, 2, 3


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="roadnet", description="Shortest drivable routes over OpenStreetMap road data"
    )
    sub = ap.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", help="Parse an .osm file and save the road graph as a pickle")
    b.add_argument("--osm", required=True, help="Path to OSM XML extract (e.g., karachi.osm)")
    b.add_argument("--out", required=True, help="Output pickle path")

    r = sub.add_parser("route", help="Run one shortest-path query and print it as JSON")
    src = r.add_mutually_exclusive_group(required=True)
    src.add_argument("--config", help="RoutingModel JSON file")
    src.add_argument("--graph", help="Graph file (shortcut for a minimal config)")
    r.add_argument("--fmt", choices=["osm_xml", "pickle"], default="osm_xml")
    q = r.add_mutually_exclusive_group(required=True)
    q.add_argument("--nodes", nargs=2, type=int, metavar=("START", "GOAL"))
    q.add_argument("--coords", nargs=4, type=float, metavar=("SLAT", "SLON", "GLAT", "GLON"))
    r.add_argument("--quiet", action="store_true", help="Disable JSON logs")
    return ap


def _load_model(args) -> RoutingModel:
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            return RoutingModel.model_validate_json(f.read())
    return RoutingModel.model_validate(
        {"graph": {"by": "path", "file": args.graph, "fmt": args.fmt}, "report": {"sink": "memory"}}
    )


def run_build(osm: str, out: str) -> int:
    try:
        graph = load_osm_xml(osm, hooks=RoutingLogging(run_id="build"))
        save_graph_to_path(graph, out)
    except (GraphLoadError, OSError) as e:
        print(f"[cli] {e}", file=sys.stderr)
        return EXIT_LOAD
    print(json.dumps({"out": out, "nodes": len(graph), "edges": graph.edge_count}))
    return EXIT_FOUND


def run_route(args) -> int:
    try:
        model = _load_model(args)
        app = build(model, use_logging=not args.quiet)
    except (ValidationError, GraphLoadError, OSError, ValueError) as e:
        print(f"[cli] {e}", file=sys.stderr)
        return EXIT_LOAD

    try:
        if args.nodes:
            route = app.mechanics.route(*args.nodes)
        else:
            slat, slon, glat, glon = args.coords
            route = app.mechanics.route(Coord(slat, slon), Coord(glat, glon))
    except (UnknownNodeError, EmptyGraphError) as e:
        print(f"[cli] {e}", file=sys.stderr)
        return EXIT_UNKNOWN_NODE
    finally:
        app.close()

    # a stdout sink behind live hooks has already printed this report
    if args.quiet or model.report.sink != "stdout":
        report = RouteReport.from_route(
            route, run_id=model.run_id, indirect_ratio=model.search.indirect_ratio
        )
        print(json.dumps(asdict(report)))
    return EXIT_FOUND if route.found else EXIT_NO_PATH


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "build":
            return run_build(args.osm, args.out)
        return run_route(args)
    except KeyboardInterrupt:
        print("\n[cli] Interrupted.", file=sys.stderr)
        return 130  # 128 + SIGINT


if __name__ == "__main__":
    sys.exit(main())
