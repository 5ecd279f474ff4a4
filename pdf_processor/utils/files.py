import logging
import re
import time
import uuid
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

INPUT_PREFIX = "input"
OUTPUT_PREFIX = "output"

_GENERATED_NAME = re.compile(rf"^(?:{INPUT_PREFIX}|{OUTPUT_PREFIX})-\d+-[0-9a-f]{{32}}\.pdf$")


def unique_filename(prefix: str, suffix: str = ".pdf") -> str:
    """Return ``<prefix>-<epoch ms>-<uuid4 hex><suffix>``."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex}{suffix}"


def is_scratch_file(name: str) -> bool:
    """True for names this service generates for uploads and outputs."""
    return _GENERATED_NAME.match(name) is not None


def safe_unlink(path: Path) -> bool:
    """Best-effort delete. Returns True when the file was removed."""
    try:
        path.unlink()
        logger.debug("Removed %s", path)
        return True
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Failed to remove %s: %s", path, exc)
        return False


def ensure_directories(*directories: Path) -> None:
    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def purge_stale_files(directories: Iterable[Path], max_age_seconds: float) -> int:
    """Delete scratch files older than ``max_age_seconds``; returns the count.

    Only names produced by :func:`unique_filename` for uploads and outputs
    are considered, so other files sharing the directories are left alone.
    """
    cutoff = time.time() - max_age_seconds
    removed = 0
    for directory in directories:
        if not directory.is_dir():
            continue
        for path in directory.iterdir():
            try:
                if not is_scratch_file(path.name) or not path.is_file() or path.stat().st_mtime >= cutoff:
                    continue
            except OSError:
                continue
            if safe_unlink(path):
                removed += 1
    if removed:
        logger.info("Purged %d stale scratch file(s)", removed)
    return removed
