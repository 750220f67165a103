from __future__ import annotations

import re

from .schemas import Task

MATCHED_FIELDS = ("id", "owner", "summary")


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a ``*``-only glob into a case-insensitive regex.

    Every character other than ``*`` is literal; ``*`` matches any run of
    characters, including none. Callers match with ``fullmatch``.
    """
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.IGNORECASE | re.DOTALL)


class GlobExclusionFilter:
    def __init__(self, pattern: str | None = None) -> None:
        self.pattern = pattern
        self._regex = compile_glob(pattern) if pattern else None

    def should_exclude(self, record: Task) -> bool:
        if self._regex is None:
            return False
        for key in MATCHED_FIELDS:
            value = record.get(key)
            if self._regex.fullmatch("" if value is None else str(value)):
                return True
        return False
