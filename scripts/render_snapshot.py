"""Lay out a graph snapshot and write it as an SVG.

This script:
1. Reads a snapshot JSON file ({"nodes": [...], "edges": [...]})
2. Runs the force simulation until it settles (or --max-ticks)
3. Applies optional search/type filters and viewport zoom
4. Writes the rendered view as a standalone SVG

Usage:
    python scripts/render_snapshot.py graph.json -o graph.svg --search docker
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path
sys.path.insert(0, str(project_root / "src"))

from kgviz.config import settings
from kgviz.session import GraphSession, LoadStatus


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a knowledge-graph snapshot to SVG")
    parser.add_argument("snapshot", type=Path, help="Snapshot JSON file")
    parser.add_argument("-o", "--output", type=Path, default=Path("knowledge-graph.svg"))
    parser.add_argument("--max-ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--search", default="", help="Only draw nodes matching this term")
    parser.add_argument("--type", dest="types", action="append", default=[], help="Allowed node type (repeatable)")
    parser.add_argument("--zoom", type=float, default=1.0, help="Zoom factor around the canvas centre")
    parser.add_argument("--stats", action="store_true", help="Print graph statistics")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    data = json.loads(args.snapshot.read_text(encoding="utf-8"))

    session = GraphSession(config=settings)
    result = session.load_snapshot(data)
    if result.status is LoadStatus.REJECTED:
        print(f"Snapshot rejected: {result.error}", file=sys.stderr)
        return 1
    if result.status is LoadStatus.EMPTY:
        print("Snapshot has no nodes, writing empty canvas")

    print(f"Loaded {result.node_count} nodes, {result.edge_count} edges")

    ticks = session.run_until_stable(args.max_ticks)
    print(f"Layout ran {ticks} ticks (alpha={session.simulation.alpha:.4f})")

    if args.search:
        session.set_search_term(args.search)
    if args.types:
        session.set_type_filter(args.types)
    if args.zoom != 1.0:
        session.zoom_by(args.zoom)

    session.export_image(args.output)
    print(f"Wrote {args.output}")

    if args.stats:
        for key, value in session.stats().to_dict().items():
            print(f"  {key}: {value}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
