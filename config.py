import logging
import os
from pathlib import Path

import json5

LOGGER = logging.getLogger(__name__)

CONFIG_PATH = Path(os.environ.get("CONFIG_PATH", "/app/config.jsonc"))


def _load_config(path: Path):
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            cfg = json5.load(fh)
    except (OSError, ValueError):
        LOGGER.exception("Failed to load configuration from %s", path)
        return {}
    if not isinstance(cfg, dict):
        LOGGER.warning("Ignoring configuration in %s: top level is not an object", path)
        return {}
    LOGGER.info("Loaded configuration from %s", path)
    return cfg


def _resolve_config():
    candidates = [CONFIG_PATH, Path.cwd() / "config.jsonc"]
    for candidate in candidates:
        cfg = _load_config(candidate)
        if cfg:
            return cfg
    LOGGER.info("No configuration file found; falling back to environment variables")
    return {}

CONFIG = _resolve_config()


def get_env(name: str, default=None):
    return os.environ.get(name, default)


def get_setting(env_key: str, json_key: str, default=None):
    return os.environ.get(env_key) or CONFIG.get(json_key, default)


def get_int_setting(env_key: str, json_key: str, default=None):
    """Integer setting; blank values fall back to ``default``."""
    raw = get_setting(env_key, json_key, default)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        LOGGER.warning("Invalid integer for %s: %r; using %r", env_key, raw, default)
        return default


def get_float_setting(env_key: str, json_key: str, default=None):
    raw = get_setting(env_key, json_key, default)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        LOGGER.warning("Invalid number for %s: %r; using %r", env_key, raw, default)
        return default


def setup_logging():
    raw = get_env("LOG_LEVEL", "INFO").upper()
    if raw not in ("DEBUG", "INFO", "WARN", "ERROR"):
        raw = "INFO"
    logging.basicConfig(
        level=getattr(logging, raw),
        format="[%(asctime)s] [%(levelname)s] %(message)s"
    )


setup_logging()
