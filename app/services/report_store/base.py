from abc import ABC, abstractmethod
from typing import Callable, Dict, List
import logging
import time

from app.models.report import Report

logger = logging.getLogger(__name__)

# Mutators edit a report in place and return True when something changed.
ReportMutator = Callable[[Report], bool]


class ReportStore(ABC):
    """
    Single source of truth for report state.

    Contract:
    - `append`, `replace`, `update`, `update_all` and `clear` are the only writers.
    - `update` / `update_all` are atomic read-modify-write operations; callers
      never read a snapshot, edit it and write the whole collection back.
    - `get`, `replace` and `update` raise NotFoundError for an unknown id.
    - `list` returns reports in insertion order.
    """

    backend: str = "abstract"

    def __init__(self):
        self._last_id = 0

    def _issue_id(self, existing_max: int = 0) -> int:
        """Epoch milliseconds, bumped so ids never repeat or go backwards."""
        candidate = int(time.time() * 1000)
        self._last_id = max(candidate, self._last_id + 1, existing_max + 1)
        return self._last_id

    @abstractmethod
    def next_id(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def append(self, report: Report) -> int:
        raise NotImplementedError

    @abstractmethod
    def list(self) -> List[Report]:
        raise NotImplementedError

    @abstractmethod
    def get(self, report_id: int) -> Report:
        raise NotImplementedError

    @abstractmethod
    def replace(self, report_id: int, report: Report) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(self, report_id: int, mutator: ReportMutator) -> Report:
        raise NotImplementedError

    @abstractmethod
    def update_all(self, mutator: ReportMutator) -> int:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> int:
        raise NotImplementedError

    def check(self) -> Dict:
        """Lightweight connectivity check used by /health/store."""
        return {
            "backend": self.backend,
            "reports_count": len(self.list()),
        }
