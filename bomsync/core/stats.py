import threading
import time
from dataclasses import dataclass
from dataclasses import field


@dataclass
class SyncStats:
    """Counters for a single repository sync. Safe to update from worker threads."""
    repo_key: str = ''
    mode: str = 'none'
    total: int = 0
    identified: int = 0
    unidentified: int = 0
    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    start_time: float = field(default_factory=time.time)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def inc_identified(self, count: int = 1):
        with self._lock:
            self.identified += count

    def inc_unidentified(self, count: int = 1):
        with self._lock:
            self.unidentified += count

    def inc_submitted(self, count: int = 1):
        with self._lock:
            self.submitted += count

    def inc_succeeded(self, count: int = 1):
        with self._lock:
            self.succeeded += count

    def inc_failed(self, count: int = 1):
        with self._lock:
            self.failed += count

    def inc_skipped(self, count: int = 1):
        with self._lock:
            self.skipped += count

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    def as_log_fields(self) -> dict:
        return {
            'repo': self.repo_key,
            'mode': self.mode,
            'total': self.total,
            'identified': self.identified,
            'unidentified': self.unidentified,
            'submitted': self.submitted,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'skipped': self.skipped,
            'elapsed': f"{self.elapsed_time:.2f}s",
        }
