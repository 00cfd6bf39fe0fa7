# answer_search/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import Sequence

from .models import Record


class RecordSupplierPort(ABC):
    """
    Port for whatever owns the "current" record set.
    The search engine only ever reads a snapshot from it.
    """

    @abstractmethod
    def get_records(self) -> Sequence[Record]: ...

    @abstractmethod
    def replace(self, records: Sequence[Record]) -> None: ...

    @abstractmethod
    def is_ready(self) -> bool: ...

    @abstractmethod
    def count(self) -> int:
        """Number of records currently held."""
        ...
