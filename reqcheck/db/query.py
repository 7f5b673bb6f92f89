"""Query helpers for paginated listing and id lookup."""

from __future__ import annotations

from typing import Any
from typing import TypeVar

from sqlalchemy import Select
from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from reqcheck.core.errors import not_found

ModelT = TypeVar("ModelT")


def apply_skip_limit(stmt: Select, skip: int | None = None, limit: int | None = None) -> Select:
    """Bound a select statement; ``None`` leaves that side unbounded."""
    if skip is not None:
        stmt = stmt.offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


def find(
    session: Session,
    stmt: Select,
    *,
    skip: int | None = None,
    limit: int | None = None,
) -> tuple[list[Any], int]:
    """Return one page of scalar results and the total count of the unbounded query."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = session.scalar(count_stmt) or 0
    items = list(session.scalars(apply_skip_limit(stmt, skip, limit)))
    return items, total


def get_or_404(session: Session, model: type[ModelT], item_id: Any) -> ModelT:
    """Fetch a row by primary key or raise a 404 service error."""
    item = session.get(model, item_id)
    if item is None:
        raise not_found(item_id)
    return item
