from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cycleroute.graph import RawNode, RawWay
from cycleroute.logging_utils import get_logger
from cycleroute.osm_source import ingest_osm
from cycleroute.settings import Settings


@dataclass
class _Census:
    nodes: int = 0
    ways: int = 0
    segments: int = 0

    def add_node(self, node: RawNode) -> None:
        self.nodes += 1

    def add_way(self, way: RawWay) -> None:
        self.ways += 1
        self.segments += max(0, len(way.nodes) - 1)


def count(*, source: Path, settings: Settings) -> dict[str, Any]:
    census = _Census()
    stats = ingest_osm(source, census, settings=settings, filter_ways=False)
    return {
        "source": str(source),
        "nodes": census.nodes,
        "ways": census.ways,
        "segments": census.segments,
        "elapsed_s": stats.elapsed_s,
    }


def main() -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(description="Count nodes, ways and way segments in an OSM dump.")
    parser.add_argument(
        "--source",
        type=Path,
        default=settings.osm_path,
        help="Path to the .osm.pbf/.osm dump (defaults to the configured dump path).",
    )
    args = parser.parse_args()
    get_logger(settings.log_level, settings.log_dir)
    report = count(source=args.source, settings=settings)
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
