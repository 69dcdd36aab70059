import time

import pytest

from library import Library


def _wait_until(predicate, timeout: float = 2.0, interval: float = 0.005) -> bool:
    """Poll predicate until it is true or the timeout runs out."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_until():
    return _wait_until


@pytest.fixture
def committed():
    # Lines the log consumer committed, in commit order
    return []


@pytest.fixture
def lib(committed):
    # No throttle and a list sink so tests never sleep or touch stdout
    lib = Library(capacity=100, delay=0, sink=committed.append, poll_interval=0.01)
    yield lib
    lib.close(drain=True, timeout=5)
