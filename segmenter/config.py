"""Settings loader for segmentation runs."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError
from .mappings import DEFAULT_FIELD_MAPPINGS, BrandMappingTable, CenterBrandMap
from .rules import CHUNK_THRESHOLD, ON_BAD_ROW_ABORT, SPLIT_POLICY

CONFIG_ENV_VAR = "SEGMENTER_CONFIG"


class Settings(BaseModel):
    output_dir: str = "output"
    chunk_threshold: int = Field(default=CHUNK_THRESHOLD, gt=0)
    split_policy: Literal["halve", "bounded"] = SPLIT_POLICY
    on_bad_row: Literal["abort", "skip"] = ON_BAD_ROW_ABORT
    strict_writes: bool = False
    categories: Optional[List[str]] = None
    centers: Dict[str, str] = Field(default_factory=dict)
    brands: Dict[str, Dict[str, Dict[str, Any]]] = Field(
        default_factory=lambda: {b: {c: dict(m) for c, m in cats.items()} for b, cats in DEFAULT_FIELD_MAPPINGS.items()}
    )
    log_level: str = "INFO"

    def brand_table(self) -> BrandMappingTable:
        return BrandMappingTable.from_dict(self.brands)

    def center_map(self) -> CenterBrandMap:
        return CenterBrandMap.from_brands(self.brands, aliases=self.centers)


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML. Falls back to $SEGMENTER_CONFIG, then defaults.

    Unknown keys are ignored; a missing explicit path is an error.
    """
    explicit = path is not None
    path = path or os.getenv(CONFIG_ENV_VAR)
    if not path:
        return Settings()
    config_path = Path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {config_path}")
        return Settings()
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings in {config_path}: {exc}") from exc
