"""
Generic relational query interface.

The core only ever talks to the data store through this narrow surface:
equality filters, ordered selects with an optional join projection,
single-row inserts and patch updates. Access control is the store's job
(row-level security), not this layer's.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence


class StoreError(Exception):
    """A store operation failed. ``message`` is shown to the user verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


class QueryStore(Protocol):
    async def select(
        self,
        table: str,
        columns: Sequence[str],
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order: Sequence[Order] = (),
        join: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> list[dict]:
        """Rows matching every equality filter.

        ``join`` maps a related table to the columns to project from it; the
        related row is nested under the table name (``None`` if missing).
        """
        ...

    async def insert(
        self,
        table: str,
        record: Mapping[str, Any],
        *,
        returning: Sequence[str],
    ) -> dict:
        """Insert one row and return it projected to ``returning``."""
        ...

    async def update(
        self,
        table: str,
        patch: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> int:
        """Patch every row matching ``filters``; returns the affected count."""
        ...
