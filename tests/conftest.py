import datetime
import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from api.deps import get_current_user, get_db, get_today
from main import app
from models.bill import BillInDB
from models.income import IncomeCreate

TODAY = datetime.date(2026, 10, 8)


# --- In-memory замінник Firestore (лише те, що використовує репозиторій) ---

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
        self._collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self, self._collection.docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._collection.docs:
            self._collection.docs[self.id].update(data)
        else:
            self._collection.docs[self.id] = dict(data)

    def update(self, data):
        self._collection.docs[self.id].update(data)

    def delete(self):
        self._collection.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=()):
        self._collection = collection
        self._filters = filters

    def where(self, filter):
        assert filter.op_string == "=="
        return FakeQuery(self._collection, self._filters + ((filter.field_path, filter.value),))

    def stream(self):
        for doc_id, data in list(self._collection.docs.items()):
            if all(data.get(field) == value for field, value in self._filters):
                yield FakeSnapshot(FakeDocument(self._collection, doc_id), data)


class FakeCollection(FakeQuery):
    def __init__(self, name, ids):
        self.name = name
        self.docs = {}
        self._ids = ids
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocument(self, doc_id or self._next_id())

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return None, ref

    def _next_id(self):
        return f"{self.name}-{next(self._ids)}"


class FakeFirestore:
    def __init__(self):
        self._collections = {}
        self._ids = itertools.count(1)

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self._ids)
        return self._collections[name]


# --- Фікстури ---

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_current_user] = lambda: {"uid": "user-1"}
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_db):
    app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_bill(name, amount, due_date, bill_id=None):
    return BillInDB(
        id=bill_id or name.lower(),
        user_uid="user-1",
        name=name,
        amount=Decimal(str(amount)),
        due_date=due_date,
    )


def make_income(amount, frequency, source="Job"):
    return IncomeCreate(source=source, amount=Decimal(str(amount)), frequency=frequency)
