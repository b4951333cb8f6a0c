"""
cases.py
========
CaseLedger: per-disease occurrence counters kept in a small text file.

Line format: ``<disease> : <count>``
Updates read the whole ledger and swap in a rewritten copy with
safe_replace, so the previous ledger survives a failed write.
"""

import logging
from typing import Iterator, Optional, Tuple

from .storage import append_line, iter_lines, read_lines, safe_replace, touch

logger = logging.getLogger(__name__)

SEPARATOR = " : "


def parse_case_line(line: str) -> Optional[Tuple[str, int]]:
    # Disease names may contain ":"; the count follows the last one
    parts = line.rsplit(":", 1)
    if len(parts) != 2:
        return None
    disease, count = parts[0].strip(), parts[1].strip()
    if not disease:
        return None
    try:
        return disease, int(count)
    except ValueError:
        return None


class CaseLedger:

    def __init__(self, path):
        self.path = path
        touch(self.path)

    def is_tracked(self, disease: str) -> bool:
        return any(name == disease for name, _ in self.report())

    def ensure_tracked(self, disease: str):
        """Add ``<disease> : 0`` unless the disease already has an entry."""
        if self.is_tracked(disease):
            return
        append_line(self.path, f"{disease}{SEPARATOR}0")
        logger.info(f"Started tracking cases of {disease}")

    def increment(self, disease: str) -> int:
        """
        Add one case of the disease and return the new count.
        An untracked disease is appended with a count of 1.
        """
        lines = read_lines(self.path)
        new_count = None
        updated = []
        for line in lines:
            parsed = parse_case_line(line) if new_count is None else None
            if parsed is not None and parsed[0] == disease:
                new_count = parsed[1] + 1
                updated.append(f"{disease}{SEPARATOR}{new_count}")
            else:
                updated.append(line)
        if new_count is None:
            new_count = 1
            updated.append(f"{disease}{SEPARATOR}{new_count}")

        safe_replace(self.path, updated)
        logger.info(f"{disease} now has {new_count} case(s)")
        return new_count

    def report(self) -> Iterator[Tuple[str, int]]:
        """(disease, count) pairs in file order; malformed lines are skipped."""
        for line in iter_lines(self.path):
            parsed = parse_case_line(line)
            if parsed is None:
                if line.strip():
                    logger.warning(f"Skipping malformed case line: {line!r}")
                continue
            yield parsed

    def count(self, disease: str) -> int:
        for name, count in self.report():
            if name == disease:
                return count
        return 0
