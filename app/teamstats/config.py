"""
Configuration for the team data fetcher.

Defaults are compiled in; a JSON file named by TEAMSTATS_CONFIG and a few
single-key environment variables may override them.
"""

import copy
import json
import logging
import math
import os
from typing import List, Optional

from .errors import ConfigError
from .models.member import Member

log = logging.getLogger(__name__)

CONFIG_ENV = "TEAMSTATS_CONFIG"

DEFAULT_CONFIG = {
    "members": {
        "Luis": 918399,
        "Samu": 1096007,
        "Porta": 900904,
        "Marcos": 1094362,
        "Rubén": 1301050,
        "Dalogax": 305408,
    },
    "categories": ["sports_car", "formula_car"],
    "api_base": "https://iracing6-backend.herokuapp.com/api/member-career-stats/career",
    "output_path": "data/team-data.json",
    "request_delay_seconds": 2.0,
    "logging": {"level": "INFO"},
}

ENV_OVERRIDES = {
    "TEAMSTATS_API_BASE": ("api_base", str),
    "TEAMSTATS_OUTPUT_PATH": ("output_path", str),
    "TEAMSTATS_REQUEST_DELAY_SECONDS": ("request_delay_seconds", float),
}


def load_config(path: Optional[str] = None) -> dict:
    """
    Build the effective configuration.

    Precedence, lowest first: compiled-in defaults, the JSON file at
    ``path`` (or $TEAMSTATS_CONFIG), then the single-key environment
    overrides. A config file that was asked for but cannot be read is fatal.
    """
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    path = path or os.getenv(CONFIG_ENV)
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                overrides = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Failed to load config {path}: {exc}")
        if not isinstance(overrides, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        log.debug("Loaded config overrides from %s", path)
        cfg.update(overrides)

    for env_name, (key, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if not raw:
            continue
        try:
            cfg[key] = cast(raw)
        except ValueError:
            raise ConfigError(f"Invalid value for {env_name}: {raw!r}")

    return cfg


def validate_config(cfg: dict) -> dict:
    members = cfg.get("members")
    if not isinstance(members, dict) or not members:
        raise ConfigError("'members' must be a non-empty mapping of name to id")

    seen_ids = set()
    for name, member_id in members.items():
        if not str(name).strip():
            raise ConfigError("Member names must not be empty")
        if isinstance(member_id, bool) or not isinstance(member_id, int) or member_id <= 0:
            raise ConfigError(f"Member {name!r} has invalid id {member_id!r}")
        if member_id in seen_ids:
            raise ConfigError(f"Duplicate member id {member_id}")
        seen_ids.add(member_id)

    categories = cfg.get("categories")
    if not isinstance(categories, list) or not categories:
        raise ConfigError("'categories' must be a non-empty list")
    for category in categories:
        if not isinstance(category, str) or not category.strip():
            raise ConfigError(f"Invalid category {category!r}")
    if len(set(categories)) != len(categories):
        raise ConfigError("'categories' must not contain duplicates")

    if not str(cfg.get("api_base") or "").strip():
        raise ConfigError("'api_base' must be set")
    if not str(cfg.get("output_path") or "").strip():
        raise ConfigError("'output_path' must be set")

    if not isinstance(cfg.get("logging", {}), dict):
        raise ConfigError("'logging' must be a JSON object")

    delay = cfg.get("request_delay_seconds", 0)
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        raise ConfigError(f"Invalid request_delay_seconds {delay!r}")
    if not math.isfinite(delay) or delay < 0:
        raise ConfigError(f"Invalid request_delay_seconds {delay!r}")

    return cfg


def list_members(cfg: dict) -> List[Member]:
    return [Member(name, member_id) for name, member_id in cfg["members"].items()]


def list_categories(cfg: dict) -> List[str]:
    return list(cfg["categories"])


def api_base(cfg: dict) -> str:
    return str(cfg["api_base"]).rstrip("/")
