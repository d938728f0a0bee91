"""statehooks: hook-style reactive state primitives for Python."""

from importlib.metadata import version as _version

__version__ = _version("statehooks")

from statehooks._scheduling import (
    LoopScheduler,
    Scheduler,
    TaskQueue,
    flush,
    get_pending_count,
    get_scheduler,
    set_scheduler,
)
from statehooks.bus import SubscriptionBus
from statehooks.cell import ValueCell, use_state
from statehooks.storage import (
    JsonFileStorage,
    MemoryStorage,
    Storage,
    default_storage,
    set_default_storage,
)
from statehooks.coercion import as_bool, as_number, as_text
from statehooks.store import Store, use_store
from statehooks.partitioned import PartitionedStore, use_partitioned_store
from statehooks.signal import Derived, DerivedNode, Effect, Signal, use_signal

__all__ = [
    "SubscriptionBus",
    "ValueCell",
    "use_state",
    "Store",
    "use_store",
    "PartitionedStore",
    "use_partitioned_store",
    "Signal",
    "Derived",
    "DerivedNode",
    "Effect",
    "use_signal",
    "Storage",
    "MemoryStorage",
    "JsonFileStorage",
    "default_storage",
    "set_default_storage",
    "as_number",
    "as_bool",
    "as_text",
    "Scheduler",
    "TaskQueue",
    "LoopScheduler",
    "set_scheduler",
    "get_scheduler",
    "flush",
    "get_pending_count",
]
