from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import httpx
import osmium

from .errors import CycleRouteError, DecodeError, FetchError
from .graph import RawNode, RawWay
from .logging_utils import log_event
from .settings import Settings
from .way_filter import is_cyclable_way


class RecordSink(Protocol):
    def add_node(self, node: RawNode) -> None: ...

    def add_way(self, way: RawWay) -> None: ...


@dataclass(frozen=True)
class IngestStats:
    nodes_seen: int
    ways_seen: int
    ways_kept: int
    elapsed_s: float


def _download(client: httpx.Client, url: str, dest: Path) -> int:
    written = 0
    with client.stream("GET", url) as resp:
        resp.raise_for_status()
        with dest.open("wb") as fh:
            for chunk in resp.iter_bytes():
                fh.write(chunk)
                written += len(chunk)
    return written


def ensure_osm_dump(settings: Settings, *, client: httpx.Client | None = None) -> Path:
    """Return the local dump path, downloading it first when it is missing.

    A failed download never leaves a partial file behind.
    """
    path = settings.osm_path
    if path.exists():
        return path
    url = settings.osm_download_url
    path.parent.mkdir(parents=True, exist_ok=True)
    log_event("osm_download_started", url=url, path=str(path))
    started = time.monotonic()
    own_client = client is None
    if client is None:
        client = httpx.Client(timeout=settings.download_timeout_s, follow_redirects=True)
    part_path = path.with_suffix(path.suffix + ".part")
    try:
        written = _download(client, url, part_path)
        part_path.replace(path)
    except (httpx.HTTPError, OSError) as exc:
        part_path.unlink(missing_ok=True)
        raise FetchError(
            reason_code="osm_fetch_failed",
            # httpx exceptions can stringify to "" (e.g. some timeouts), so include the type.
            message=f"failed to fetch {url}: {type(exc).__name__}: {str(exc).strip()}",
            details={"url": url, "path": str(path)},
        ) from exc
    except BaseException:
        part_path.unlink(missing_ok=True)
        raise
    finally:
        if own_client:
            client.close()
    log_event(
        "osm_download_completed",
        url=url,
        path=str(path),
        bytes=written,
        elapsed_s=round(time.monotonic() - started, 3),
    )
    return path


class _RecordHandler(osmium.SimpleHandler):  # type: ignore[misc]
    def __init__(self, sink: RecordSink, *, settings: Settings, filter_ways: bool) -> None:
        super().__init__()
        self.sink = sink
        self.settings = settings
        self.filter_ways = filter_ways
        self.nodes_seen = 0
        self.ways_seen = 0
        self.ways_kept = 0

    def node(self, n: Any) -> None:
        location = n.location
        if not location.valid():
            raise DecodeError(
                reason_code="osm_decode_failed",
                message=f"node {n.id} has no valid location",
                details={"node_id": int(n.id)},
            )
        node = RawNode(id=int(n.id), lat=float(location.lat), lon=float(location.lon))
        if self.nodes_seen == 0:
            log_event("first_node", node_id=node.id, lat=node.lat, lon=node.lon, tags={t.k: t.v for t in n.tags})
        self.nodes_seen += 1
        self.sink.add_node(node)
        if self.nodes_seen % 10_000_000 == 0:
            log_event("osm_ingest_progress", nodes_seen=self.nodes_seen, ways_seen=self.ways_seen)

    def way(self, w: Any) -> None:
        self.ways_seen += 1
        tags = {str(t.k): str(t.v) for t in w.tags}
        if self.filter_ways and not is_cyclable_way(tags, settings=self.settings):
            return
        way = RawWay(id=int(w.id), nodes=tuple(int(n.ref) for n in w.nodes), tags=tags)
        if self.ways_kept == 0:
            log_event("first_way", way_id=way.id, node_refs=len(way.nodes), tags=tags)
        self.ways_kept += 1
        self.sink.add_way(way)


def ingest_osm(
    path: Path,
    sink: RecordSink,
    *,
    settings: Settings,
    filter_ways: bool = True,
) -> IngestStats:
    """Decode ``path`` and feed every node and every (cyclable) way into ``sink``."""
    started = time.monotonic()
    handler = _RecordHandler(sink, settings=settings, filter_ways=filter_ways)
    try:
        handler.apply_file(str(path), locations=False)
    except CycleRouteError:
        raise
    except (RuntimeError, OSError, ValueError) as exc:
        raise DecodeError(
            reason_code="osm_decode_failed",
            message=f"failed to decode {path}: {type(exc).__name__}: {str(exc).strip()}",
            details={"path": str(path)},
        ) from exc
    stats = IngestStats(
        nodes_seen=handler.nodes_seen,
        ways_seen=handler.ways_seen,
        ways_kept=handler.ways_kept,
        elapsed_s=round(time.monotonic() - started, 3),
    )
    log_event(
        "osm_ingest_completed",
        path=str(path),
        nodes_seen=stats.nodes_seen,
        ways_seen=stats.ways_seen,
        ways_kept=stats.ways_kept,
        elapsed_s=stats.elapsed_s,
    )
    return stats
