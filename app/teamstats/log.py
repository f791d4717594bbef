import logging
import os
from typing import Optional

log = logging.getLogger("teamstats")

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _resolve_log_level(cfg: Optional[dict] = None) -> int:
    env_level = os.getenv("TEAMSTATS_LOG_LEVEL")
    if env_level:
        return logging._nameToLevel.get(env_level.upper(), logging.INFO)

    logging_cfg = (cfg or {}).get("logging")
    if not isinstance(logging_cfg, dict):
        return logging.INFO
    level_name = logging_cfg.get("level", "INFO")
    return logging._nameToLevel.get(str(level_name).upper(), logging.INFO)


def configure_logging(level: Optional[int] = None, cfg: Optional[dict] = None) -> None:
    resolved = level if level is not None else _resolve_log_level(cfg)
    logging.basicConfig(level=resolved, format=DEFAULT_LOG_FORMAT)
    logging.getLogger("teamstats").setLevel(resolved)
