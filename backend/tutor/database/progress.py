"""
Storage for per-student progress records
"""

from typing import Dict, List, Optional, Protocol
import logging
import threading

from tutor.models.progress import StudentProgress

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    """Keyed get/put boundary the progress engine persists through"""

    def get(self, student_id: str) -> Optional[StudentProgress]: ...

    def put(self, progress: StudentProgress) -> None: ...

    def all(self) -> List[StudentProgress]: ...


class InMemoryProgressStore:
    """Process-local progress store; records live for the lifetime of the process.

    Records are copied on the way in and out so that callers never hold a
    reference to stored state. Every access to the record table holds
    ``_lock``, so ``all`` can run while other threads add students.
    """

    def __init__(self):
        self._records: Dict[str, StudentProgress] = {}
        self._lock = threading.Lock()

    def get(self, student_id: str) -> Optional[StudentProgress]:
        with self._lock:
            record = self._records.get(student_id)
            return record.model_copy(deep=True) if record is not None else None

    def put(self, progress: StudentProgress) -> None:
        record = progress.model_copy(deep=True)
        with self._lock:
            self._records[progress.student_id] = record

    def all(self) -> List[StudentProgress]:
        """All records in insertion order"""
        with self._lock:
            snapshot = list(self._records.values())
        # Stored records are replaced on put, never mutated
        return [record.model_copy(deep=True) for record in snapshot]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, student_id: str) -> bool:
        with self._lock:
            return student_id in self._records
