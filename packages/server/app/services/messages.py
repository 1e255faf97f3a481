"""
User-visible message buffer.

Failures are appended rather than replacing one another, so several
independent failures in one action are all shown. Each top-level action
clears the buffer before it starts.
"""

from __future__ import annotations

import structlog

log = structlog.get_logger()


class MessageBuffer:
    def __init__(self) -> None:
        self._lines: list[str] = []

    def clear(self) -> None:
        self._lines.clear()

    def append(self, message: str) -> None:
        if not message:
            return
        log.warning("workspace.message", message=message)
        self._lines.append(message)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def __str__(self) -> str:
        return self.text
