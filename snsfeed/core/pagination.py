from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar

from sqlalchemy.orm import Query

from snsfeed.core.exceptions import InvalidCursorError, InvalidLimitError

T = TypeVar("T")


@dataclass
class CursorPage(Generic[T]):
    """One page of rows plus the cursor that resumes after it."""

    items: List[T] = field(default_factory=list)
    next_cursor: Optional[int] = None

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    def __len__(self) -> int:
        return len(self.items)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_page_args(limit, cursor) -> None:
    if not _is_int(limit) or limit < 1:
        raise InvalidLimitError(limit)
    if cursor is not None and (not _is_int(cursor) or cursor < 1):
        raise InvalidCursorError(cursor)


def _row_id(row) -> int:
    return row.id


def paginate(
    query: Query,
    *,
    id_column,
    limit: int,
    cursor: Optional[int] = None,
    created_column=None,
    ascending: bool = False,
    key: Callable[[Any], int] = _row_id,
) -> CursorPage:
    """
    Keyset pagination over ``query``.

    - descending (feeds): ``id < cursor`` ordered by ``created_column DESC, id DESC``
    - ascending (follow listings): ``id > cursor`` ordered by ``id ASC``

    The cursor is only ever compared against ids, so a row that was deleted
    after its id was handed out as a cursor still resumes correctly.
    ``next_cursor`` is set only when the page came back full.
    """
    check_page_args(limit, cursor)

    if cursor is not None:
        query = query.filter(id_column > cursor if ascending else id_column < cursor)

    if ascending:
        order_by = [id_column.asc()]
    else:
        order_by = [id_column.desc()]
        if created_column is not None:
            order_by.insert(0, created_column.desc())

    rows = query.order_by(*order_by).limit(limit).all()
    next_cursor = key(rows[-1]) if len(rows) == limit else None
    return CursorPage(items=rows, next_cursor=next_cursor)
