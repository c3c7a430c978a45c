from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple, Optional, Any
import logging
import os

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from .errors import context

logger = logging.getLogger("carli.config")


@dataclass
class Config:
    default_name: str = "world"
    log_level: Optional[str] = None  # e.g., "INFO", "DEBUG"


def _read_toml(path: Path) -> Dict[str, Any]:
    with context(lambda: f"Unable to load the configuration file: {path}"):
        with path.open("rb") as f:
            return tomllib.load(f)


def _find_default_name(mapping: Dict[str, Any]) -> Optional[str]:
    """
    Look up "default_name" at the top level, then in a [carli] table.
    Other tables are left alone.
    """
    val = mapping.get("default_name")
    if isinstance(val, str):
        return val
    carli_tbl = mapping.get("carli")
    if isinstance(carli_tbl, dict) and isinstance(carli_tbl.get("default_name"), str):
        return carli_tbl["default_name"]
    return None


def _apply_from_mapping(cfg: Config, sources: Dict[str, str], mapping: Dict[str, Any], label: str) -> None:
    nm = _find_default_name(mapping)
    if isinstance(nm, str):
        cfg.default_name = nm
        sources["default_name"] = label

    # either top-level "log_level" or table [logging].level
    if isinstance(mapping.get("log_level"), str):
        cfg.log_level = mapping["log_level"].upper()
        sources["log_level"] = label

    logging_tbl = mapping.get("logging")
    if isinstance(logging_tbl, dict):
        level = logging_tbl.get("level")
        if isinstance(level, str):
            cfg.log_level = level.upper()
            sources["log_level"] = label


def _user_config_path() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "carli" / "config.toml"
    return Path.home() / ".config" / "carli" / "config.toml"


def _project_config_path() -> Path:
    return Path.cwd() / "carli.toml"


def load_config(override_path: Optional[str] = None) -> Tuple[Config, Dict[str, str]]:
    """
    Precedence:
    defaults < user < project < override file < env
    (CLI flags are handled in cli.py and beat all of these.)

    User and project files are optional. An override file given explicitly
    must exist. Any file that cannot be read or parsed raises CarliError.
    """
    cfg = Config()
    sources: Dict[str, str] = {"default_name": "default", "log_level": "default"}

    u = _user_config_path()
    if u.exists():
        _apply_from_mapping(cfg, sources, _read_toml(u), "user")

    p = _project_config_path()
    if p.exists():
        _apply_from_mapping(cfg, sources, _read_toml(p), "project")

    if override_path:
        op = Path(override_path)
        _apply_from_mapping(cfg, sources, _read_toml(op), f"override:{op}")

    # env (highest among config sources)
    if "CARLI_DEFAULT_NAME" in os.environ:
        cfg.default_name = os.environ["CARLI_DEFAULT_NAME"]
        sources["default_name"] = "env:CARLI_DEFAULT_NAME"

    if "CARLI_LOG_LEVEL" in os.environ:
        cfg.log_level = os.environ["CARLI_LOG_LEVEL"].upper()
        sources["log_level"] = "env:CARLI_LOG_LEVEL"

    logger.debug("Effective configuration %s (sources=%s)", cfg, sources)
    return cfg, sources
