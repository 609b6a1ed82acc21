import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from snsfeed.core import config
from snsfeed.core.logx import logger


class SideEffectDispatcher:
    """
    Worker pool that runs post-commit side effects off the request thread.

    Each submitted callable runs exactly once. Exceptions are logged and
    dropped here: the request that registered the side effect has already
    returned, so there is nobody left to report to. No retries.
    """

    def __init__(self, max_workers: int = config.POST_COMMIT_WORKERS, name: str = "post-commit"):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._idle = threading.Condition()
        self._in_flight = 0
        self._closed = False

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        with self._idle:
            if self._closed:
                raise RuntimeError("dispatcher is shut down")
            self._in_flight += 1
        try:
            return self._executor.submit(self._run, fn, args, kwargs)
        except Exception:
            self._done()
            raise

    def _run(self, fn: Callable, args, kwargs) -> None:
        name = getattr(fn, "__qualname__", repr(fn))
        try:
            logger.debug(f"[POST-COMMIT] running {name}")
            fn(*args, **kwargs)
        except Exception:
            logger.exception(f"[POST-COMMIT] side effect {name} failed")
        finally:
            self._done()

    def _done(self) -> None:
        with self._idle:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted side effect (and any it submitted) finished."""
        with self._idle:
            return self._idle.wait_for(lambda: self._in_flight == 0, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._idle:
            self._closed = True
        self._executor.shutdown(wait=wait)


_dispatcher: Optional[SideEffectDispatcher] = None
_dispatcher_lock = threading.Lock()


def get_dispatcher() -> SideEffectDispatcher:
    global _dispatcher
    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = SideEffectDispatcher()
        return _dispatcher


def set_dispatcher(dispatcher: Optional[SideEffectDispatcher]) -> Optional[SideEffectDispatcher]:
    """Swap the process-wide dispatcher, returning the previous one."""
    global _dispatcher
    with _dispatcher_lock:
        previous, _dispatcher = _dispatcher, dispatcher
        return previous


def shutdown_dispatcher(wait: bool = True) -> None:
    previous = set_dispatcher(None)
    if previous is not None:
        previous.shutdown(wait=wait)
