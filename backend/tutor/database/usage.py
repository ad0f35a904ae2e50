"""
Storage for per-user usage counters
"""

from typing import Dict, List, Optional, Protocol
import threading

from tutor.models.usage import UserUsage


class UsageStore(Protocol):
    def get(self, user_id: str) -> Optional[UserUsage]: ...

    def put(self, usage: UserUsage) -> None: ...

    def all(self) -> List[UserUsage]: ...


class InMemoryUsageStore:
    """Process-local usage store keyed by user id"""

    def __init__(self):
        self._records: Dict[str, UserUsage] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[UserUsage]:
        with self._lock:
            record = self._records.get(user_id)
            return record.model_copy(deep=True) if record is not None else None

    def put(self, usage: UserUsage) -> None:
        record = usage.model_copy(deep=True)
        with self._lock:
            self._records[usage.user_id] = record

    def all(self) -> List[UserUsage]:
        with self._lock:
            snapshot = list(self._records.values())
        return [record.model_copy(deep=True) for record in snapshot]
