from __future__ import annotations

from pathlib import Path

import pytest

TINY_OSM = """<?xml version='1.0' encoding='UTF-8'?>
<osm version="0.6" generator="pytest">
  <node id="1" version="1" lat="35.0000000" lon="139.0000000">
    <tag k="highway" v="traffic_signals"/>
  </node>
  <node id="2" version="1" lat="35.0010000" lon="139.0000000"/>
  <node id="3" version="1" lat="35.0010000" lon="139.0010000"/>
  <node id="4" version="1" lat="35.0020000" lon="139.0010000"/>
  <node id="5" version="1" lat="35.0030000" lon="139.0020000"/>
  <way id="100" version="1">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <tag k="highway" v="residential"/>
  </way>
  <way id="101" version="1">
    <nd ref="3"/>
    <nd ref="4"/>
    <tag k="highway" v="cycleway"/>
    <tag k="oneway" v="yes"/>
  </way>
  <way id="102" version="1">
    <nd ref="4"/>
    <nd ref="5"/>
    <tag k="highway" v="track"/>
    <tag k="surface" v="dirt"/>
  </way>
  <way id="103" version="1">
    <nd ref="1"/>
    <nd ref="5"/>
    <tag k="building" v="yes"/>
  </way>
</osm>
"""


@pytest.fixture
def tiny_osm_text() -> str:
    return TINY_OSM


@pytest.fixture
def tiny_osm_path(tmp_path: Path) -> Path:
    path = tmp_path / "tiny.osm"
    path.write_text(TINY_OSM, encoding="utf-8")
    return path
