"""
QueryStore implementation over the SQLModel tables.

Each operation runs in its own short-lived session so independent requests
issued concurrently from the same event loop never share a connection.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import sqlalchemy as sa
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from app.models.profile import Profile
from app.models.project import Project
from app.models.project_member import ProjectMember

from .base import Order, StoreError

log = structlog.get_logger()

TABLES: dict[str, type[SQLModel]] = {
    "profiles": Profile,
    "projects": Project,
    "project_members": ProjectMember,
}

# (table, related table) -> (local column, related column)
RELATIONS: dict[tuple[str, str], tuple[str, str]] = {
    ("project_members", "projects"): ("project_id", "id"),
    ("project_members", "profiles"): ("profile_id", "id"),
}


def _error_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class SQLModelStore:
    """Async store bound to a session factory (``async_session_factory``)."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    # --- helpers ---

    def _table(self, name: str) -> sa.Table:
        model = TABLES.get(name)
        if model is None:
            raise StoreError(f'relation "{name}" does not exist')
        return model.__table__

    def _column(self, table: sa.Table, name: str) -> sa.Column:
        column = table.c.get(name)
        if column is None:
            raise StoreError(f'column {table.name}.{name} does not exist')
        return column

    def _where(self, stmt, table: sa.Table, filters: Mapping[str, Any]):
        for name, value in filters.items():
            column = self._column(table, name)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        return stmt

    # --- QueryStore ---

    async def select(
        self,
        table: str,
        columns: Sequence[str],
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order: Sequence[Order] = (),
        join: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> list[dict]:
        base = self._table(table)
        selected = [self._column(base, c).label(c) for c in columns]
        source = base
        nested: list[tuple[str, list[str]]] = []

        for related, related_columns in (join or {}).items():
            relation = RELATIONS.get((table, related))
            if relation is None:
                raise StoreError(
                    f"Could not find a relationship between '{table}' and '{related}'"
                )
            other = self._table(related)
            local, remote = relation
            source = source.outerjoin(
                other, self._column(base, local) == self._column(other, remote)
            )
            selected.extend(
                self._column(other, c).label(f"{related}__{c}") for c in related_columns
            )
            nested.append((related, list(related_columns)))

        stmt = self._where(sa.select(*selected).select_from(source), base, filters or {})
        for o in order:
            column = self._column(base, o.column)
            stmt = stmt.order_by(column.asc() if o.ascending else column.desc())

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                raw_rows = result.mappings().all()
        except SQLAlchemyError as exc:
            log.warning("store.select_failed", table=table, error=_error_message(exc))
            raise StoreError(_error_message(exc)) from exc

        rows = []
        for raw in raw_rows:
            row = {c: raw[c] for c in columns}
            for related, related_columns in nested:
                values = {c: raw[f"{related}__{c}"] for c in related_columns}
                row[related] = None if all(v is None for v in values.values()) else values
            rows.append(row)
        return rows

    async def insert(
        self,
        table: str,
        record: Mapping[str, Any],
        *,
        returning: Sequence[str],
    ) -> dict:
        target = self._table(table)
        for name in list(record) + list(returning):
            self._column(target, name)
        model = TABLES[table]

        try:
            async with self._session_factory() as session:
                obj = model(**record)
                session.add(obj)
                await session.commit()
                await session.refresh(obj)
                return {c: getattr(obj, c) for c in returning}
        except SQLAlchemyError as exc:
            log.warning("store.insert_failed", table=table, error=_error_message(exc))
            raise StoreError(_error_message(exc)) from exc

    async def update(
        self,
        table: str,
        patch: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> int:
        if not filters:
            raise StoreError("UPDATE requires a WHERE clause")
        target = self._table(table)
        values = {self._column(target, name).name: value for name, value in patch.items()}
        stmt = self._where(sa.update(target), target, filters).values(**values)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount
        except SQLAlchemyError as exc:
            log.warning("store.update_failed", table=table, error=_error_message(exc))
            raise StoreError(_error_message(exc)) from exc
