from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .engine.board import PlayerColor
from .engine.strength import DifficultyTier, parse_tier

DEFAULTS_PATH = pathlib.Path(__file__).resolve().parent / "config" / "defaults.toml"
HOME_ENV = "REVERSI_AI_HOME"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def config_home() -> pathlib.Path:
    return pathlib.Path(os.environ.get(HOME_ENV) or os.path.expanduser("~/.reversi_ai"))


def config_path() -> pathlib.Path:
    return config_home() / "config.toml"


@dataclass(frozen=True)
class Settings:
    difficulty: DifficultyTier = DifficultyTier.INTERMEDIATE
    workers: int = 1
    human_color: PlayerColor = PlayerColor.BLACK
    log_level: int = logging.INFO
    log_overwrite: bool = True


def _read_toml(path: pathlib.Path) -> Dict[str, Any]:
    # Prefer stdlib tomllib (3.11+), else tomli
    try:
        import tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]
    with open(path, "rb") as f:
        return tomllib.load(f)


def ensure_config() -> bool:
    """Create the user config from the defaults. Returns True if it was created."""
    path = config_path()
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULTS_PATH.read_text(encoding="utf-8"), encoding="utf-8")
    logging.getLogger(__name__).info("Created configuration at %s", path)
    return True


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_color(value: str) -> PlayerColor:
    try:
        return PlayerColor[str(value).strip().upper()]
    except KeyError:
        raise ValueError(f"invalid color '{value}', expected 'black' or 'white'") from None


def from_dict(cfg: Dict[str, Any]) -> Settings:
    engine = cfg.get("engine", {}) or {}
    game = cfg.get("game", {}) or {}
    log_cfg = cfg.get("logging", {}) or {}

    workers = engine.get("workers", 1)
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ValueError(f"engine.workers must be a positive integer, got {workers!r}")

    level = str(log_cfg.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"logging.level must be one of {sorted(LOG_LEVELS)}, got {level!r}")

    return Settings(
        difficulty=parse_tier(str(engine.get("difficulty", "intermediate"))),
        workers=workers,
        human_color=_parse_color(game.get("human_color", "black")),
        log_level=getattr(logging, level),
        log_overwrite=bool(log_cfg.get("overwrite", True)),
    )


def load_config(path: Optional[pathlib.Path] = None) -> Settings:
    """Defaults merged with the user's config file (created on first use)."""
    cfg = _read_toml(DEFAULTS_PATH)
    if path is None:
        ensure_config()
        path = config_path()
    if path.exists():
        cfg = _merge(cfg, _read_toml(path))
    return from_dict(cfg)
