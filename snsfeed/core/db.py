from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from snsfeed.core.logx import logger
from snsfeed.core.post_commit import SideEffectDispatcher, get_dispatcher

_UOW_KEY = "snsfeed.unit_of_work"


class TxState(str, Enum):
    PENDING = "PENDING"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"
    DISPATCHED = "DISPATCHED"


class UnitOfWork:
    """
    One write transaction on a session, plus the side effects that must only
    run once it has committed.

        PENDING -> COMMITTED -> DISPATCHED
        PENDING -> ROLLED_BACK            (callbacks discarded)
    """

    def __init__(self, db: Session):
        self.db = db
        self.state = TxState.PENDING
        self._callbacks: List[Tuple[Callable, tuple, dict]] = []

    def on_commit(self, fn: Callable, *args, **kwargs) -> None:
        if self.state is not TxState.PENDING:
            raise RuntimeError(f"cannot register a side effect on a {self.state.value} transaction")
        self._callbacks.append((fn, args, kwargs))

    @property
    def pending_callbacks(self) -> int:
        return len(self._callbacks)

    def _rolled_back(self) -> None:
        dropped = len(self._callbacks)
        self._callbacks.clear()
        self.state = TxState.ROLLED_BACK
        if dropped:
            logger.info(f"[TX] rolled back, discarded {dropped} side effect(s)")

    def _committed(self, dispatcher: SideEffectDispatcher) -> None:
        self.state = TxState.COMMITTED
        callbacks, self._callbacks = self._callbacks, []
        for fn, args, kwargs in callbacks:
            # past commit: a refused submit is logged, the rest still go out
            try:
                dispatcher.submit(fn, *args, **kwargs)
            except Exception:
                logger.exception(f"[TX] could not dispatch side effect {getattr(fn, '__qualname__', repr(fn))}")
        self.state = TxState.DISPATCHED


@contextmanager
def transaction(db: Session, dispatcher: Optional[SideEffectDispatcher] = None) -> Iterator[UnitOfWork]:
    """
    Commit on success, roll back on any exception.

    A nested ``transaction()`` on the same session joins the outermost one, so
    a service can wrap several repository writes and the counter updates that
    go with them into a single commit.
    """
    outer = db.info.get(_UOW_KEY)
    if outer is not None:
        yield outer
        return

    uow = UnitOfWork(db)
    db.info[_UOW_KEY] = uow
    try:
        yield uow
        db.commit()
    except BaseException:
        db.rollback()
        uow._rolled_back()
        raise
    finally:
        db.info.pop(_UOW_KEY, None)

    uow._committed(dispatcher or get_dispatcher())


def current_unit_of_work(db: Session) -> Optional[UnitOfWork]:
    return db.info.get(_UOW_KEY)


def on_commit(db: Session, fn: Callable, *args, **kwargs) -> None:
    """Register ``fn`` on the transaction currently open on ``db``."""
    uow = current_unit_of_work(db)
    if uow is None:
        raise RuntimeError("on_commit() called outside of transaction()")
    uow.on_commit(fn, *args, **kwargs)
