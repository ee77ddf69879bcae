from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PAVED_SURFACES: tuple[str, ...] = ("paved", "asphalt", "concrete", "paving_stones")

# ref: https://github.com/team-azb/route-bucket-backend/blob/master/osrm/customized.lua#L54
DEFAULT_INACCESSIBLE_TAGS: tuple[tuple[str, str], ...] = (
    ("highway", "motorway"),
    ("highway", "motorway_link"),
    ("access", "agricultural"),
    ("access", "delivery"),
    ("access", "forestry"),
    ("access", "use_sidepath"),
)


class Settings(BaseSettings):
    """Run configuration, built once at process start and passed to every stage."""

    model_config = SettingsConfigDict(
        env_prefix="CYCLEROUTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    data_dir: Path = Field(default=Path("data"))
    osm_filename: str = Field(default="japan-latest.osm.pbf")
    nodes_cache_filename: str = Field(default="nodes.json")
    adjacency_cache_filename: str = Field(default="adj-list.json")
    result_filename: str = Field(default="result-polyline.txt")

    osm_download_url: str = Field(default="https://download.geofabrik.de/asia/japan-latest.osm.pbf")
    download_timeout_s: float = Field(default=60.0, ge=1.0)

    # https://www.openstreetmap.org/node/5798366045 -> https://www.openstreetmap.org/node/1254449298
    source_node_id: int = Field(default=5798366045, ge=0)
    goal_node_id: int = Field(default=1254449298, ge=0)

    paved_surfaces: tuple[str, ...] = Field(default=DEFAULT_PAVED_SURFACES)
    inaccessible_tags: tuple[tuple[str, str], ...] = Field(default=DEFAULT_INACCESSIBLE_TAGS)

    log_level: str = Field(default="INFO")
    log_dir: Path | None = Field(default=None)

    @field_validator("inaccessible_tags")
    @classmethod
    def _dedupe_inaccessible_tags(cls, value: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
        seen: dict[tuple[str, str], None] = {}
        for key, tag_value in value:
            seen.setdefault((str(key).strip(), str(tag_value).strip()), None)
        return tuple(seen)

    @property
    def osm_path(self) -> Path:
        return self.data_dir / self.osm_filename

    @property
    def nodes_cache_path(self) -> Path:
        return self.data_dir / self.nodes_cache_filename

    @property
    def adjacency_cache_path(self) -> Path:
        return self.data_dir / self.adjacency_cache_filename

    @property
    def result_path(self) -> Path:
        return self.data_dir / self.result_filename
