# Storage package
from .progress import ProgressStore, InMemoryProgressStore
from .usage import UsageStore, InMemoryUsageStore

__all__ = [
    "ProgressStore",
    "InMemoryProgressStore",
    "UsageStore",
    "InMemoryUsageStore",
]
