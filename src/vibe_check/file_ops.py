"""Local state files stored in .vibe-check/ at the repository root."""

import json
import os
import tempfile
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)

DATA_DIR_NAME = ".vibe-check"


def data_dir(repo_path: str, dir_name: str = DATA_DIR_NAME) -> Path:
    return Path(repo_path) / dir_name


def ensure_data_dir(directory: Path) -> None:
    """Create the data dir and write a .gitignore so it stays untracked."""
    directory.mkdir(parents=True, exist_ok=True)
    gitignore = directory / ".gitignore"
    if not gitignore.exists():
        gitignore.write_text("*\n")


def atomic_write_json(path: Path, payload: dict) -> None:
    """Write JSON via a temp file in the same directory, then rename.

    Readers see either the previous file or the new one, never a partial
    write. There is no cross-process lock: concurrent writers can still lose
    each other's updates.
    """
    ensure_data_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    logger.debug("Wrote %s", path)


def read_json(path: Path):
    """Parse a JSON file. Raises OSError or ValueError on failure."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)
