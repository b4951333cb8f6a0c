"""
storage.py
==========
Line-oriented file helpers shared by every record store.

 - iter_lines: lazy, restartable read of a record file
 - append_line: durable single-line append
 - safe_replace: write-temp-then-rename rewrite of a whole file

Every OSError is re-raised as PersistenceError so callers only deal with
the clinic's own exception types.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import Iterable, Iterator

from .errors import PersistenceError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def _ensure_parent(path: Path):
    parent = path.parent
    if parent and not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


def iter_lines(path) -> Iterator[str]:
    """
    Yield each line of the file without its trailing newline.
    A missing file yields nothing. Every call starts from the top.
    """
    path = Path(path)
    if not path.exists():
        return
    try:
        with open(path, "r", encoding=ENCODING) as f:
            for line in f:
                yield line.rstrip("\r\n")
    except OSError as e:
        logger.error(f"Error reading {path}: {e}")
        raise PersistenceError(f"Error reading {path.name}: {e}", path) from e


def read_lines(path) -> list:
    """Read the whole file into a list of lines."""
    return list(iter_lines(path))


def append_line(path, line: str):
    """Append one record line, creating the file as needed."""
    path = Path(path)
    try:
        _ensure_parent(path)
        with open(path, "a", encoding=ENCODING) as f:
            f.write(line + "\n")
    except OSError as e:
        logger.error(f"Error appending to {path}: {e}")
        raise PersistenceError(f"Error saving to {path.name}: {e}", path) from e


def safe_replace(path, lines: Iterable[str]):
    """
    Rewrite the whole file with the given lines.

    The lines go to a temp file in the same directory which is then swapped
    in with os.replace. On any failure the temp file is removed and the
    original file is left as it was.
    """
    path = Path(path)
    tmp_name = None
    try:
        _ensure_parent(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding=ENCODING) as f:
            for line in lines:
                f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error(f"Error rewriting {path}: {e}")
        raise PersistenceError(f"Error updating {path.name}: {e}", path) from e
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def touch(path):
    """Create an empty file if it does not exist yet."""
    path = Path(path)
    if path.exists():
        return
    try:
        _ensure_parent(path)
        path.touch()
    except OSError as e:
        raise PersistenceError(f"Error creating {path.name}: {e}", path) from e
