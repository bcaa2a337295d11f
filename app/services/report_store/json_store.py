import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import NotFoundError, StoreError
from app.models.report import Report, report_from_record
from .base import ReportMutator, ReportStore

logger = logging.getLogger(__name__)

_locks: Dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    """One lock per store file, shared by every store instance in the process."""
    key = str(path.resolve())
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


class JsonFileReportStore(ReportStore):
    """
    Reports kept as a JSON array in a single file.

    - Every write holds the file's lock, so writers are serialized.
    - Writes go to a temp file in the same directory and are moved into place
      with os.replace, so readers never see a half-written file.
    - A missing or empty file is an empty collection.
    """

    backend = "json"

    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def _read_records(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
            if not text.strip():
                return []
            data = json.loads(text)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read report store {self.path}: {e}")
            raise StoreError(f"Could not read report store {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StoreError(f"Report store {self.path} does not contain a JSON array")
        return data

    def _load(self) -> List[Report]:
        try:
            return [report_from_record(record) for record in self._read_records()]
        except (PydanticValidationError, TypeError) as e:
            logger.error(f"Report store {self.path} holds a malformed record: {e}")
            raise StoreError(f"Report store {self.path} holds a malformed record") from e

    def _write(self, reports: List[Report]) -> None:
        payload = [report.model_dump(mode="json") for report in reports]
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".reports-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write report store {self.path}: {e}", exc_info=True)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"Could not write report store {self.path}: {e}") from e

    @staticmethod
    def _index_of(reports: List[Report], report_id: int) -> int:
        for index, report in enumerate(reports):
            if report.id == report_id:
                return index
        raise NotFoundError("Report", report_id)

    def next_id(self) -> int:
        with self._lock:
            existing_max = max((report.id for report in self._load()), default=0)
            return self._issue_id(existing_max)

    def append(self, report: Report) -> int:
        with self._lock:
            reports = self._load()
            reports.append(report)
            self._write(reports)
        logger.info(f"Report {report.id} appended to {self.path}")
        return report.id

    def list(self) -> List[Report]:
        with self._lock:
            return self._load()

    def get(self, report_id: int) -> Report:
        with self._lock:
            reports = self._load()
            return reports[self._index_of(reports, report_id)]

    def replace(self, report_id: int, report: Report) -> None:
        if report.id != report_id:
            raise ValueError(f"Cannot replace report {report_id} with report {report.id}")
        with self._lock:
            reports = self._load()
            reports[self._index_of(reports, report_id)] = report
            self._write(reports)

    def update(self, report_id: int, mutator: ReportMutator) -> Report:
        with self._lock:
            reports = self._load()
            report = reports[self._index_of(reports, report_id)]
            if mutator(report):
                self._write(reports)
            return report

    def update_all(self, mutator: ReportMutator) -> int:
        with self._lock:
            reports = self._load()
            changed = sum(1 for report in reports if mutator(report))
            if changed:
                self._write(reports)
            return changed

    def clear(self) -> int:
        with self._lock:
            try:
                count = len(self._read_records())
            except StoreError:
                # Clearing is how a corrupt file gets recovered
                logger.warning(f"Clearing unreadable report store {self.path}")
                count = 0
            self._write([])
        logger.info(f"Cleared {count} report(s) from {self.path}")
        return count

    def check(self) -> Dict:
        result = super().check()
        result["path"] = str(self.path)
        return result
