import pytest

from statehooks import MemoryStorage, TaskQueue, set_default_storage, set_scheduler


@pytest.fixture(autouse=True)
def queue():
    """Fresh default scheduler per test so deferred work never leaks."""
    q = TaskQueue()
    set_scheduler(q)
    return q


@pytest.fixture(autouse=True)
def storage():
    """Fresh default storage per test."""
    s = MemoryStorage()
    set_default_storage(s)
    return s
