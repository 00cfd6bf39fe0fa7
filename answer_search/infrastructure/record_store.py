# answer_search/infrastructure/record_store.py

import threading
from collections import Counter
from typing import Sequence, Tuple

from answer_search.domain.interfaces import RecordSupplierPort
from answer_search.domain.models import Record


class InMemoryRecordStore(RecordSupplierPort):
    """
    Holds the record set the user last imported.

    One writer swaps the whole set, any number of readers take snapshots.
    Snapshots are tuples, so a search running on one is unaffected by a
    later replace().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Tuple[Record, ...] = ()
        self._loaded = False

    def replace(self, records: Sequence[Record]) -> None:
        invalid = [r for r in records if not isinstance(r, Record)]
        if invalid:
            raise ValueError(f"Not a Record: {invalid[0]!r}")

        snapshot = tuple(records)
        with self._lock:
            self._records = snapshot
            self._loaded = True
        print(f"[RecordStore] Holding {len(snapshot)} records.")

    def get_records(self) -> Tuple[Record, ...]:
        with self._lock:
            return self._records

    def is_ready(self) -> bool:
        """Ready once a record set has been supplied, even an empty one."""
        with self._lock:
            return self._loaded

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def get_kind_stats(self) -> list[dict]:
        """Record counts per kind label."""
        counts = Counter(record.kind for record in self.get_records())
        return [{"kind": kind, "count": count} for kind, count in sorted(counts.items())]
