import pytest

from app.core.errors import NotFoundError
from app.services.report_store import firestore_store
from app.services.report_store.firestore_store import FirestoreReportStore
from app.services.status_workflow import StatusWorkflowEngine
from conftest import make_report


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    def set(self, data):
        self.collection.docs[self.id] = dict(data)
        self.collection.writes += 1

    def get(self, transaction=None):
        return FakeSnapshot(self, self.collection.docs.get(self.id))

    def delete(self):
        self.collection.docs.pop(self.id, None)


class FakeCollection:
    """In-memory stand-in for a Firestore collection and its queries."""

    def __init__(self, name):
        self.id = name
        self.docs = {}
        self.writes = 0

    def document(self, doc_id):
        return FakeDocument(self, doc_id)

    def order_by(self, field):
        return FakeQuery(self, key=lambda data: data[field])

    def select(self, fields):
        return FakeQuery(self)

    def limit(self, count):
        return FakeQuery(self, limit=count)


class FakeQuery:
    def __init__(self, collection, key=None, limit=None):
        self.collection = collection
        self.key = key
        self.limit_count = limit

    def stream(self):
        items = list(self.collection.docs.items())
        if self.key is not None:
            items.sort(key=lambda item: self.key(item[1]))
        if self.limit_count is not None:
            items = items[:self.limit_count]
        for doc_id, data in items:
            yield FakeSnapshot(FakeDocument(self.collection, doc_id), data)


class FakeTransaction:
    def set(self, ref, data):
        ref.set(data)


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.pending = []

    def delete(self, ref):
        self.pending.append(ref)

    def commit(self):
        for ref in self.pending:
            ref.delete()
        self.db.commits.append(len(self.pending))
        self.pending = []


class FakeFirestore:
    def __init__(self):
        self.collections = {}
        self.commits = []

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection(name))

    def transaction(self):
        return FakeTransaction()

    def batch(self):
        return FakeBatch(self)


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fs_store(fake_db, monkeypatch):
    # The fake transaction applies writes directly, so run the body unwrapped
    monkeypatch.setattr(firestore_store.firestore, "transactional", lambda fn: fn)
    return FirestoreReportStore(db=fake_db)


def test_append_and_get(fs_store, fake_db):
    fs_store.append(make_report(1, "hazardous", "Critical"))

    assert fake_db.collection("reports").docs["1"]["priority"] == "Critical"
    report = fs_store.get(1)
    assert report.type == "hazardous"
    assert report.priority == "Critical"


def test_missing_report_raises_not_found(fs_store):
    with pytest.raises(NotFoundError):
        fs_store.get(99)
    with pytest.raises(NotFoundError):
        fs_store.update(99, StatusWorkflowEngine.advance)
    with pytest.raises(NotFoundError):
        fs_store.replace(99, make_report(99))


def test_list_is_ordered_by_id(fs_store):
    for report_id in (3, 1, 2):
        fs_store.append(make_report(report_id))
    assert [r.id for r in fs_store.list()] == [1, 2, 3]


def test_update_writes_only_on_change(fs_store, fake_db):
    fs_store.append(make_report(1, status="Resolved"))
    collection = fake_db.collection("reports")
    writes_before = collection.writes

    report = fs_store.update(1, StatusWorkflowEngine.advance)
    assert report.status == "Resolved"
    assert collection.writes == writes_before

    fs_store.append(make_report(2))
    report = fs_store.update(2, StatusWorkflowEngine.advance)
    assert report.status == "Acknowledged"
    assert fs_store.get(2).status == "Acknowledged"


def test_update_all_counts_changed_reports(fs_store):
    fs_store.append(make_report(1))
    fs_store.append(make_report(2, status="In Progress"))
    fs_store.append(make_report(3, status="Resolved"))

    assert fs_store.update_all(StatusWorkflowEngine.advance) == 2
    assert [r.status for r in fs_store.list()] == ["Acknowledged", "Resolved", "Resolved"]


def test_clear_commits_in_batches(fs_store, fake_db, monkeypatch):
    monkeypatch.setattr(firestore_store, "BATCH_LIMIT", 2)
    for report_id in range(1, 6):
        fs_store.append(make_report(report_id))

    assert fs_store.clear() == 5
    assert fs_store.list() == []
    assert fake_db.commits == [2, 2, 1]


def test_check_reports_collection(fs_store):
    assert fs_store.check() == {"backend": "firestore", "collection": "reports"}
