"""
Single UI-owning execution context.

Interactive credential prompts must run on one thread no matter which worker
asks for them. :meth:`UiExecutor.invoke_and_wait` runs the callable in place
when already on that thread, otherwise hands it over and blocks until it
completes.
"""

import queue
import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, Future
from typing import Any, TypeVar

from gitrelease.logging import get_logger

T = TypeVar("T")

logger = get_logger("credentials")

_Item = tuple[Callable[[], Any], Future[Any]] | None


class UiExecutor:
    """
    Owns a dedicated daemon thread that executes UI work in submission order.

    There is no timeout on :meth:`invoke_and_wait`. :meth:`cancel` is the only
    way to release blocked callers early; they then get ``CancelledError``.

    After :meth:`shutdown` the next request starts a fresh thread with its own
    queue; the previous thread drains what was queued before the shutdown.
    """

    def __init__(self, name: str = "gitrelease-ui") -> None:
        self._name = name
        self._queue: "queue.Queue[_Item] | None" = None
        self._thread: threading.Thread | None = None
        self._start_lock = threading.Lock()
        self._condition = threading.Condition()
        self._generation = 0
        self._local = threading.local()

    def is_ui_thread(self) -> bool:
        """Whether the calling thread is a UI thread of this executor."""
        return getattr(self._local, "owner", False)

    def invoke_and_wait(self, task: Callable[[], T]) -> T:
        """
        Run ``task`` on the UI thread and return its result.

        Exceptions raised by ``task`` are re-raised in the caller.

        Raises:
            CancelledError: If :meth:`cancel` was called while waiting
        """
        if self.is_ui_thread():
            return task()

        future: Future[T] = Future()
        future.add_done_callback(self._wake_waiters)

        with self._condition:
            generation = self._generation
        self._submit(task, future)

        with self._condition:
            while not future.done() and generation == self._generation:
                self._condition.wait()

        if not future.done():
            future.cancel()
            raise CancelledError("The interactive request was cancelled")
        return future.result()

    def cancel(self) -> None:
        """Release every caller currently blocked in :meth:`invoke_and_wait`."""
        with self._condition:
            self._generation += 1
            self._condition.notify_all()
        logger.info("pending interactive requests cancelled")

    def shutdown(self, wait: bool = True) -> None:
        """Stop the UI thread after the already queued work."""
        with self._start_lock:
            thread, work = self._thread, self._queue
            if thread is None or work is None:
                return
            work.put(None)
            self._thread = None
            self._queue = None
        if wait and thread is not threading.current_thread():
            thread.join()

    def _submit(self, task: Callable[[], Any], future: "Future[Any]") -> None:
        with self._start_lock:
            if self._thread is None or self._queue is None:
                self._queue = queue.Queue()
                self._thread = threading.Thread(
                    target=self._loop, args=(self._queue,), name=self._name, daemon=True
                )
                self._thread.start()
            self._queue.put((task, future))

    def _wake_waiters(self, _future: "Future[Any]") -> None:
        with self._condition:
            self._condition.notify_all()

    def _loop(self, work: "queue.Queue[_Item]") -> None:
        self._local.owner = True
        while True:
            item = work.get()
            if item is None:
                return
            task, future = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = task()
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)


__all__ = ["UiExecutor", "CancelledError"]
