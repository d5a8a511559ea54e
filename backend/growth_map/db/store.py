"""Filtered select/insert/update access to the planning tables.

The planning services talk to the database only through :class:`RecordStore`,
which keeps them independent of query construction and turns driver errors
into :class:`~growth_map.core.errors.UpstreamFailure`.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import and_, asc, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from growth_map.core.errors import UpstreamFailure
from growth_map.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


@dataclass(frozen=True)
class Between:
    """Inclusive range filter; either bound may be omitted."""

    low: Any = None
    high: Any = None


class RecordStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select_records(
        self,
        model: Type[ModelT],
        filters: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        """Return rows matching every filter.

        Filter values are matched by equality, except sequences/sets (``IN``),
        :class:`Between` (inclusive range) and ``None`` (``IS NULL``).
        """
        stmt = select(model)
        conditions = _build_conditions(model, filters or {})
        if conditions:
            stmt = stmt.where(and_(*conditions))
        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(desc(column) if descending else asc(column))
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("Select on %s failed", model.__tablename__)
            raise UpstreamFailure(f"Failed to read {model.__tablename__}") from exc

    def select_single_record(
        self,
        model: Type[ModelT],
        filters: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Optional[ModelT]:
        rows = self.select_records(model, filters, order_by=order_by, descending=descending, limit=1)
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_records(self, model: Type[ModelT], rows: Sequence[Mapping[str, Any]]) -> List[ModelT]:
        """Insert ``rows`` and return the persisted instances (empty if nothing was written)."""
        if not rows:
            return []
        instances = [model(**row) for row in rows]
        try:
            self.db.add_all(instances)
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.exception("Insert into %s failed", model.__tablename__)
            raise UpstreamFailure(f"Failed to write {model.__tablename__}") from exc
        return instances

    def update_records(
        self,
        model: Type[ModelT],
        patch: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> List[ModelT]:
        """Apply ``patch`` to every row matching ``filters`` and return the updated rows."""
        conditions = _build_conditions(model, filters)
        stmt = (
            update(model)
            .where(and_(*conditions))
            .values(**patch)
            .execution_options(synchronize_session="fetch")
        )
        try:
            self.db.execute(stmt)
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.exception("Update on %s failed", model.__tablename__)
            raise UpstreamFailure(f"Failed to update {model.__tablename__}") from exc
        return self.select_records(model, filters)

    @contextmanager
    def atomic(self) -> Iterator["RecordStore"]:
        """Commit every write made inside the block, or none of them."""
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Transaction failed and was rolled back")
            raise UpstreamFailure("Failed to commit changes") from exc
        except Exception:
            self.db.rollback()
            raise


def _build_conditions(model: Type[Base], filters: Mapping[str, Any]) -> list:
    conditions = []
    for name, value in filters.items():
        column = getattr(model, name)
        if value is None:
            conditions.append(column.is_(None))
        elif isinstance(value, Between):
            if value.low is not None:
                conditions.append(column >= value.low)
            if value.high is not None:
                conditions.append(column <= value.high)
        elif isinstance(value, (list, tuple, set, frozenset)):
            conditions.append(column.in_(list(value)))
        else:
            conditions.append(column == value)
    return conditions
