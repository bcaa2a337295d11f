import logging
import threading
from typing import Dict, List, Optional

from firebase_admin import firestore

from app.config.firebase import get_db
from app.core.errors import NotFoundError
from app.models.report import Report, report_from_record
from .base import ReportMutator, ReportStore

logger = logging.getLogger(__name__)

# Firestore caps a write batch at 500 operations
BATCH_LIMIT = 500


class FirestoreReportStore(ReportStore):
    """
    Reports kept as documents in a Firestore collection, keyed by str(id).

    Single-record updates run inside a Firestore transaction, so concurrent
    writers to the same report retry instead of overwriting each other.
    """

    backend = "firestore"

    def __init__(self, db: Optional[firestore.Client] = None, collection: str = "reports"):
        super().__init__()
        self.db = db or get_db()
        self.collection = self.db.collection(collection)
        self._id_lock = threading.Lock()

    def _ref(self, report_id: int):
        return self.collection.document(str(report_id))

    def next_id(self) -> int:
        with self._id_lock:
            return self._issue_id()

    def append(self, report: Report) -> int:
        self._ref(report.id).set(report.model_dump(mode="json"))
        logger.info(f"Report {report.id} saved to Firestore")
        return report.id

    def list(self) -> List[Report]:
        docs = self.collection.order_by("id").stream()
        return [report_from_record(doc.to_dict()) for doc in docs]

    def get(self, report_id: int) -> Report:
        doc = self._ref(report_id).get()
        if not doc.exists:
            raise NotFoundError("Report", report_id)
        return report_from_record(doc.to_dict())

    def replace(self, report_id: int, report: Report) -> None:
        if report.id != report_id:
            raise ValueError(f"Cannot replace report {report_id} with report {report.id}")
        ref = self._ref(report_id)
        if not ref.get().exists:
            raise NotFoundError("Report", report_id)
        ref.set(report.model_dump(mode="json"))

    def update(self, report_id: int, mutator: ReportMutator) -> Report:
        ref = self._ref(report_id)

        @firestore.transactional
        def _update_in_transaction(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Report", report_id)
            report = report_from_record(snapshot.to_dict())
            if mutator(report):
                transaction.set(ref, report.model_dump(mode="json"))
            return report

        return _update_in_transaction(self.db.transaction())

    def update_all(self, mutator: ReportMutator) -> int:
        changed = 0
        for doc in self.collection.select([]).stream():
            flags = []

            def _tracking_mutator(report: Report) -> bool:
                result = mutator(report)
                flags.append(result)
                return result

            try:
                self.update(int(doc.id), _tracking_mutator)
            except NotFoundError:
                # Removed between listing and updating
                continue
            if flags and flags[-1]:
                changed += 1
        return changed

    def clear(self) -> int:
        count = 0
        batch = self.db.batch()
        for doc in self.collection.select([]).stream():
            batch.delete(doc.reference)
            count += 1
            if count % BATCH_LIMIT == 0:
                batch.commit()
                batch = self.db.batch()
        batch.commit()
        logger.info(f"Cleared {count} report(s) from Firestore")
        return count

    def check(self) -> Dict:
        # Limit(1) keeps the probe cheap on large collections
        list(self.collection.limit(1).stream())
        return {"backend": self.backend, "collection": self.collection.id}
