"""Run probes on daemon threads and race each one against its deadline."""
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from threading import Thread
from typing import Literal

from pubface.networking.exceptions import ResolutionTimeoutError


def with_timeout[T](future: Future[T], timeout: float, tag: str | Literal[False], *, started_at: float | None = None) -> T:
    """Wait for `future` until `timeout` seconds after `started_at`.

    Losing the race does not cancel the work: the worker thread keeps running until
    its own I/O timeouts expire and its outcome is discarded.

    Args:
        future (Future[T]): The submitted operation.
        timeout (float): Deadline in seconds.
        tag (str | Literal[False]): Source address of the probe, reported in the timeout error.
        started_at (float | None): `time.monotonic()` value the deadline counts from. Defaults to now.

    Returns:
        T: The result of the operation.

    Raises:
        ResolutionTimeoutError: If the deadline passes first.
    """
    if started_at is None:
        started_at = time.monotonic()

    remaining = max(0.0, started_at + timeout - time.monotonic())
    try:
        return future.result(timeout=remaining)
    except FutureTimeoutError as e:
        # a socket timeout raised by the operation itself is not a lost race
        if future.done() and future.exception() is e:
            raise
        raise ResolutionTimeoutError(tag) from e


def submit_daemon[T](fn: Callable[..., T], /, *args, name: str | None = None) -> Future[T]:
    """Run `fn` on a daemon thread and return a future for its outcome.

    The thread does not keep the interpreter alive, so an abandoned probe never
    holds up process exit.
    """
    future: Future[T] = Future()
    future.set_running_or_notify_cancel()

    def worker():
        try:
            result = fn(*args)
        except BaseException as e:  # noqa: BLE001
            future.set_exception(e)
        else:
            future.set_result(result)

    Thread(target=worker, name=name, daemon=True).start()
    return future
