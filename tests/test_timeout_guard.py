import threading
import time
from concurrent.futures import Future

import pytest

from pubface.networking.exceptions import ResolutionError, ResolutionTimeoutError
from pubface.networking.timeout_guard import submit_daemon, with_timeout


def test_returns_result_of_settled_future():
    future = Future()
    future.set_result('203.0.113.9')

    assert with_timeout(future, 1.0, '10.0.0.5') == '203.0.113.9'


def test_unsettled_future_times_out_with_source_tag():
    future = Future()

    start = time.monotonic()
    with pytest.raises(ResolutionTimeoutError) as exc_info:
        with_timeout(future, 0.05, '10.0.0.5')

    assert time.monotonic() - start < 1.0
    assert exc_info.value.source == '10.0.0.5'
    assert not future.cancelled()


def test_default_probe_timeout_has_no_source():
    with pytest.raises(ResolutionTimeoutError) as exc_info:
        with_timeout(Future(), 0.01, False)

    assert exc_info.value.source is False
    assert 'source' not in str(exc_info.value)


def test_deadline_counts_from_start_time():
    start = time.monotonic()
    with pytest.raises(ResolutionTimeoutError):
        with_timeout(Future(), 5.0, '10.0.0.5', started_at=start - 10.0)

    assert time.monotonic() - start < 1.0


def test_operation_errors_propagate_unchanged():
    future = Future()
    future.set_exception(ResolutionError())

    with pytest.raises(ResolutionError):
        with_timeout(future, 1.0, '10.0.0.5')


def test_socket_timeout_of_operation_is_not_a_lost_race():
    future = Future()
    future.set_exception(TimeoutError('timed out'))

    with pytest.raises(TimeoutError) as exc_info:
        with_timeout(future, 1.0, '10.0.0.5')

    assert not isinstance(exc_info.value, ResolutionTimeoutError)


def test_submit_daemon_settles_future_with_result():
    future = submit_daemon(lambda ip: ip, '203.0.113.9', name='lookup')

    assert future.result(timeout=1.0) == '203.0.113.9'


def test_submit_daemon_settles_future_with_error():
    def fail():
        raise ResolutionError

    future = submit_daemon(fail)

    with pytest.raises(ResolutionError):
        future.result(timeout=1.0)


def test_submit_daemon_runs_on_daemon_thread():
    future = submit_daemon(threading.current_thread)

    worker = future.result(timeout=1.0)
    assert worker.daemon
    assert worker is not threading.current_thread()
