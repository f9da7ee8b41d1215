"""
Loading and validation of the SiteDrift configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from site_drift.errors import ConfigError
from site_drift.utils import normalize_url


class CrawlConfig(BaseModel):
    """Settings for one snapshot or diff run."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    base_url: HttpUrl = Field("https://docs.trunk.io", description="Seed URL and origin prefix of the crawl.")
    rate_limit_delay: int = Field(50, ge=0, description="Minimum delay before each fetch (milliseconds).")
    max_depth: int = Field(5, ge=0, description="Maximum link depth that is still fetched.")
    fetch_timeout: float = Field(30.0, gt=0, description="Timeout of a single fetch (seconds).")
    user_agent: str = Field("SiteDriftBot/1.0", min_length=1, description="User-Agent header.")
    retry_times: int = Field(2, ge=0, description="HTTP retries on 5xx/429.")
    renderer: Literal["browser", "http"] = Field("browser", description="Page fetcher implementation.")
    title_selector: str = Field("header h1", min_length=1, description="CSS selector of the page title.")
    not_found_selector: str = Field("h2", min_length=1, description="CSS selector checked for the not-found marker.")
    not_found_text: str = Field("Page not found", min_length=1, description="Marker text of a not-found page.")
    snapshots_dir: Path = Field(Path("snapshots"), description="Directory holding snapshot files.")

    @property
    def origin(self) -> str:
        """Normalised seed URL; every crawled URL must start with it."""
        return normalize_url(str(self.base_url))

    @property
    def delay_seconds(self) -> float:
        return self.rate_limit_delay / 1000.0


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def _read_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path)
    if suffix == ".json":
        return _read_json(path)
    raise ConfigError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Read a YAML or JSON file and return a validated CrawlConfig.

    Without *path* the optional ``configs/default.yaml`` is used, falling back
    to built-in defaults. Keyword overrides win over file values; ``None``
    overrides are ignored so CLI options can be passed through unchanged.
    """
    data: dict[str, Any] = {}
    if path is None:
        if _DEFAULT_CFG.is_file():
            data = _read_file(_DEFAULT_CFG)
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
        data = _read_file(path_obj)

    data.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlConfig(**data)


__all__ = ["CrawlConfig", "load_config"]
