"""
In-memory stand-in for the Firestore client used in local development and tests.

Supports the subset of the API the services use:
    db.collection(name).document(id).set/get/update/delete
    db.collection(name).where(field, op, value).order_by(field, direction).offset(n).limit(n).stream()
    query.count(alias).get()
    db.collections()

When a path is given, the data is mirrored to a JSON file after every write
and reloaded on startup.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from firebase_admin import firestore

logger = logging.getLogger(__name__)

_DATETIME_KEY = "__datetime__"

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
    "in": lambda a, b: a in b,
    "array_contains": lambda a, b: isinstance(a, list) and b in a,
}


def _resolve_sentinels(data: Dict) -> Dict:
    resolved = {}
    for key, value in data.items():
        if value is firestore.SERVER_TIMESTAMP:
            value = datetime.now(timezone.utc)
        resolved[key] = value
    return resolved


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_DATETIME_KEY: value.isoformat()}
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_encode(v) for v in value]
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {_DATETIME_KEY}:
            return datetime.fromisoformat(value[_DATETIME_KEY])
        return {k: _decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode(v) for v in value]
    return value


class MockDocumentSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict]:
        return copy.deepcopy(self._data) if self._data is not None else None


class MockDocumentReference:
    def __init__(self, db: "MockFirestore", collection: str, doc_id: str):
        self._db = db
        self._collection = collection
        self.id = doc_id

    def set(self, data: Dict, merge: bool = False) -> None:
        with self._db._lock:
            documents = self._db._data.setdefault(self._collection, {})
            new_data = _resolve_sentinels(copy.deepcopy(data))
            if merge and self.id in documents:
                documents[self.id].update(new_data)
            else:
                documents[self.id] = new_data
        self._db._persist()

    def update(self, data: Dict) -> None:
        with self._db._lock:
            documents = self._db._data.get(self._collection, {})
            if self.id not in documents:
                raise KeyError(f"No document to update: {self._collection}/{self.id}")
            documents[self.id].update(_resolve_sentinels(copy.deepcopy(data)))
        self._db._persist()

    def get(self) -> MockDocumentSnapshot:
        with self._db._lock:
            data = self._db._data.get(self._collection, {}).get(self.id)
        return MockDocumentSnapshot(self.id, data)

    def delete(self) -> None:
        with self._db._lock:
            self._db._data.get(self._collection, {}).pop(self.id, None)
        self._db._persist()


class MockQuery:
    def __init__(self, db: "MockFirestore", collection: str):
        self._db = db
        self._collection = collection
        self._filters: List[tuple] = []
        self._order: List[tuple] = []
        self._offset = 0
        self._limit: Optional[int] = None

    def _copy(self) -> "MockQuery":
        query = MockQuery(self._db, self._collection)
        query._filters = list(self._filters)
        query._order = list(self._order)
        query._offset = self._offset
        query._limit = self._limit
        return query

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        if op_string not in _OPERATORS:
            raise ValueError(f"Unsupported operator for mock Firestore: {op_string}")
        query = self._copy()
        query._filters.append((field_path, op_string, value))
        return query

    def order_by(self, field_path: str, direction: str = firestore.Query.ASCENDING) -> "MockQuery":
        query = self._copy()
        query._order.append((field_path, direction == firestore.Query.DESCENDING))
        return query

    def offset(self, num_to_skip: int) -> "MockQuery":
        query = self._copy()
        query._offset = num_to_skip
        return query

    def limit(self, count: int) -> "MockQuery":
        query = self._copy()
        query._limit = count
        return query

    def stream(self):
        with self._db._lock:
            items = list(self._db._data.get(self._collection, {}).items())

        for field_path, op_string, value in self._filters:
            compare = _OPERATORS[op_string]
            items = [
                (doc_id, data) for doc_id, data in items
                if field_path in data and compare(data[field_path], value)
            ]

        # Apply sort keys last-to-first so the first order_by wins
        for field_path, descending in reversed(self._order):
            items = [item for item in items if item[1].get(field_path) is not None]
            items.sort(key=lambda item: item[1][field_path], reverse=descending)

        items = items[self._offset:]
        if self._limit is not None:
            items = items[:self._limit]

        for doc_id, data in items:
            yield MockDocumentSnapshot(doc_id, copy.deepcopy(data))

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())

    def count(self, alias: Optional[str] = None) -> "MockAggregationQuery":
        return MockAggregationQuery(self, alias or "count")


class MockAggregationResult:
    def __init__(self, alias: str, value: int):
        self.alias = alias
        self.value = value


class MockAggregationQuery:
    """Mirrors AggregationQuery.get(): a list of result rows, one result per aggregation."""

    def __init__(self, query: MockQuery, alias: str):
        self._query = query
        self._alias = alias

    def get(self) -> List[List[MockAggregationResult]]:
        return [[MockAggregationResult(self._alias, sum(1 for _ in self._query.stream()))]]


class MockCollectionReference(MockQuery):
    def __init__(self, db: "MockFirestore", name: str):
        super().__init__(db, name)
        self.id = name

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._db, self._collection, document_id or uuid.uuid4().hex[:20])

    def add(self, data: Dict) -> tuple:
        doc_ref = self.document()
        doc_ref.set(data)
        return datetime.now(timezone.utc), doc_ref


class MockFirestore:
    """Dictionary-backed Firestore replacement: {collection: {doc_id: data}}."""

    def __init__(self, path: Optional[str] = None):
        self._path = path or None
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict]] = {}
        self._load()

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            return [MockCollectionReference(self, name) for name in self._data]

    def clear(self) -> None:
        with self._lock:
            self._data = {}
        self._persist()

    def _load(self) -> None:
        if not self._path or not os.path.exists(self._path):
            return
        with open(self._path, "r", encoding="utf-8") as f:
            self._data = _decode(json.load(f))
        logger.info(f"[MOCK DB] Loaded {sum(len(d) for d in self._data.values())} documents from {self._path}")

    def _persist(self) -> None:
        if not self._path:
            return
        with self._lock:
            snapshot = _encode(self._data)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2)


_mock_db: Optional[MockFirestore] = None


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    """Get or create the process-wide mock database."""
    global _mock_db
    if _mock_db is None:
        _mock_db = MockFirestore(path)
    return _mock_db
