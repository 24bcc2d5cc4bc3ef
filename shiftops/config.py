"""Configuration loading (YAML or JSON) and logging setup."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml


@dataclass
class ShiftOpsConfig:
    db_url: str = "sqlite:///shiftops.db"
    timezone: str = "UTC"  # fallback when an organization has none
    log_level: str = "INFO"
    suggestion_weekly_cap: float = 40.0
    report_group_by: str = "template"


def load_config(path: str | Path) -> ShiftOpsConfig:
    """
    Load configuration from a YAML (.yaml/.yml) or JSON file.

    Args:
        path: Config file path

    Returns:
        ShiftOpsConfig with file values over defaults

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a mapping or has unknown keys
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        raw = yaml.safe_load(text) or {}
    else:
        raw = json.loads(text)

    if not isinstance(raw, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    known = {f.name for f in fields(ShiftOpsConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    cfg = ShiftOpsConfig(**raw)
    cfg.suggestion_weekly_cap = float(cfg.suggestion_weekly_cap)
    return cfg


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
    )
