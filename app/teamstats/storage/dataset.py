import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Optional

from ..errors import WriteFailure

log = logging.getLogger("teamstats.storage")


def load_dataset(path) -> Optional[dict]:
    """Load the previously written dataset, or None if there is none.

    An unreadable or non-object file is logged and treated as absent so the
    run starts fresh instead of failing.
    """
    path = Path(path)
    if not path.exists():
        log.info("No existing data file found, starting fresh")
        return None
    log.info("Loading existing data from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("Existing data file %s is unreadable (%s); starting fresh", path, exc)
        return None
    if not isinstance(data, dict):
        log.warning("Existing data file %s is not a JSON object; starting fresh", path)
        return None
    log.info("   Existing data loaded")
    return data


def save_dataset(path, dataset: dict) -> int:
    """Write the dataset and return the file size in bytes.

    Writes to a sibling temp file and replaces the target, so the previous
    file survives any failure.
    """
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(dataset, f, indent=2, ensure_ascii=False)
            f.write("\n")
        tmp.replace(path)
        return os.path.getsize(path)
    except (OSError, TypeError, ValueError) as exc:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise WriteFailure(f"Failed to save {path}: {exc}") from exc
