"""Configuration loading for loveflix."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    root_dir: str = "data/storage"
    public_base_url: str = "/storage/v1/object/public"
    max_file_size: int = 200_000_000


class TimingConfig(BaseModel):
    """All delays are in seconds."""
    countdown_from: int = 3
    countdown_tick: float = 1.0
    fade_delay: float = 0.8
    shake_duration: float = 0.5
    card_reveal_delay: float = 0.3
    typewriter_speed: float = 0.06
    opening_typewriter_speed: float = 0.07
    typewriter_linger: float = 2.0
    controls_hide_delay: float = 3.0
    profile_enter_delay: float = 0.8
    duration_tick: float = 1.0


class FeatureFlags(BaseModel):
    music: bool = True
    admin: bool = True
    local_cache: bool = False
    photos_newest_first: bool = False


class Config(BaseModel):
    db_path: str = "data/loveflix.db"
    cache_path: str = "data/local-cache.json"
    realtime_channel: str = "surprise-realtime"
    storage: StorageConfig = Field(default_factory=StorageConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    features: FeatureFlags = Field(default_factory=FeatureFlags)

    @property
    def resolved_db_path(self) -> Path:
        """Resolve db_path relative to project root."""
        return _resolve(self.db_path)

    @property
    def resolved_cache_path(self) -> Path:
        return _resolve(self.cache_path)

    @property
    def resolved_storage_dir(self) -> Path:
        return _resolve(self.storage.root_dir)


def _resolve(path: str) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return _project_root() / p


def _project_root() -> Path:
    """Return the loveflix project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
