from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

import scripts.count_osm_objects as count_osm_objects
from cycleroute.settings import Settings


def test_count_reports_raw_totals(tiny_osm_path: Path) -> None:
    report = count_osm_objects.count(source=tiny_osm_path, settings=Settings())
    assert report["nodes"] == 5
    assert report["ways"] == 4
    assert report["segments"] == 5
    assert report["source"] == str(tiny_osm_path)


def test_main_prints_report(tiny_osm_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(
        count_osm_objects.argparse.ArgumentParser,
        "parse_args",
        lambda self: SimpleNamespace(source=tiny_osm_path),
    )
    monkeypatch.setattr(count_osm_objects, "print", lambda text: captured.setdefault("text", text), raising=False)
    count_osm_objects.main()
    assert '"nodes": 5' in str(captured["text"])
