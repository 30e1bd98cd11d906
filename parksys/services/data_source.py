"""Data sources the export engine reads rows from.

The engine only needs ``fetch_rows``; how rows are stored is up to the
implementation.
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol

import structlog
from sqlmodel import Session, SQLModel, select

from parksys.export.config import Row, SortSpec

logger = structlog.get_logger(__name__)


class DataSource(Protocol):
    """Provider of raw entity rows."""

    async def fetch_rows(
        self,
        entity: str,
        filters: dict[str, Any],
        sorting: SortSpec | None = None,
    ) -> list[Row]:
        """Return the rows of ``entity`` matching ``filters``."""
        ...


def _matches(row: Row, filters: dict[str, Any]) -> bool:
    for key, expected in filters.items():
        actual = row.get(key)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryDataSource:
    """Serves rows from dictionaries held in memory.

    Example:
        >>> source = InMemoryDataSource({"parks": [{"name": "Parque Central"}]})
        >>> rows = await source.fetch_rows("parks", {})
    """

    def __init__(self, tables: Mapping[str, list[Row]] | None = None) -> None:
        self._tables = dict(tables or {})

    async def fetch_rows(
        self,
        entity: str,
        filters: dict[str, Any],
        sorting: SortSpec | None = None,
    ) -> list[Row]:
        rows = [dict(row) for row in self._tables.get(entity, []) if _matches(row, filters)]

        if sorting is not None:
            present = [row for row in rows if row.get(sorting.field) is not None]
            missing = [row for row in rows if row.get(sorting.field) is None]
            present.sort(key=lambda row: row[sorting.field], reverse=sorting.direction == "desc")
            rows = present + missing

        return rows


class SQLModelDataSource:
    """Reads entity rows from SQLModel tables.

    Filters and sort keys that are not columns of the mapped table are
    ignored. List values filter with ``IN``.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        models: Mapping[str, type[SQLModel]],
    ) -> None:
        """
        Args:
            session_factory: Returns a new Session, used as a context manager
            models: Entity name to table model
        """
        self.session_factory = session_factory
        self.models = dict(models)

    async def fetch_rows(
        self,
        entity: str,
        filters: dict[str, Any],
        sorting: SortSpec | None = None,
    ) -> list[Row]:
        model = self.models.get(entity)
        if model is None:
            logger.warning("entity_not_mapped", entity=entity)
            return []

        columns = model.__table__.columns
        statement = select(model)

        for key, value in filters.items():
            if key not in columns:
                logger.debug("filter_ignored", entity=entity, filter=key)
                continue
            column = columns[key]
            if isinstance(value, (list, tuple, set, frozenset)):
                statement = statement.where(column.in_(list(value)))
            else:
                statement = statement.where(column == value)

        if sorting is not None and sorting.field in columns:
            column = columns[sorting.field]
            statement = statement.order_by(column.desc() if sorting.direction == "desc" else column.asc())

        with self.session_factory() as session:
            results = session.exec(statement).all()
            return [record.model_dump() for record in results]
