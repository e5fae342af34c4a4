"""Tests for DocumentStore batching, naming, counters and error wrapping."""

import pytest
from casebook.db.database import create_db_engine
from casebook.errors import BackendError
from casebook.repository.document.store import (
    GET_BATCH_LIMIT,
    IN_FILTER_LIMIT,
    WRITE_BATCH_LIMIT,
    DocumentStore,
    chunked,
)


@pytest.fixture
def store(in_memory_engine):
    return DocumentStore(in_memory_engine, prefix="test")


def test_batch_limits():
    assert (WRITE_BATCH_LIMIT, GET_BATCH_LIMIT, IN_FILTER_LIMIT) == (500, 10, 20)


def test_chunked():
    assert [list(c) for c in chunked([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 3)) == []


def test_collection_naming(in_memory_engine):
    assert DocumentStore(in_memory_engine, prefix="test").collection("case", "ws1") == "test_case/ws1"
    assert DocumentStore(in_memory_engine).collection("memory", "ws1", 7) == "memory/ws1/7"
    assert DocumentStore(in_memory_engine).collection("token") == "token"


def test_put_get_and_upsert(store):
    coll = store.collection("thing", "ws1")
    store.put(coll, "a", {"v": 1})
    store.put(coll, "b", {"v": 2})
    store.put(coll, "a", {"v": 3})

    assert store.get(coll, "a") == {"v": 3}
    assert store.get(coll, "missing") is None
    assert store.scan(coll) == [{"v": 3}, {"v": 2}]


def test_collections_do_not_leak(store):
    store.put(store.collection("thing", "ws1"), "a", {"v": 1})
    assert store.scan(store.collection("thing", "ws2")) == []
    assert store.get(store.collection("thing", "ws2"), "a") is None


def test_put_many_spans_several_write_batches(store):
    coll = store.collection("bulk")
    docs = [(f"d{i:04d}", {"i": i}, i % 3) for i in range(WRITE_BATCH_LIMIT * 2 + 37)]

    assert store.put_many(coll, docs) == len(docs)
    assert len(store.scan(coll)) == len(docs)
    assert len(store.get_many(coll, [d[0] for d in docs[: GET_BATCH_LIMIT * 3 + 1]])) == GET_BATCH_LIMIT * 3 + 1
    assert len(store.scan_refs(coll, [0])) == len([d for d in docs if d[2] == 0])
    assert store.delete_collection(coll) == len(docs)
    assert store.scan(coll) == []


def test_scan_refs_beyond_in_filter_limit_keeps_insertion_order(store):
    coll = store.collection("refs")
    for i in range(IN_FILTER_LIMIT * 2 + 5):
        store.put(coll, str(i), {"i": i}, ref=i)

    found = store.scan_refs(coll, reversed(range(IN_FILTER_LIMIT * 2 + 5)))
    assert [d["i"] for d in found] == list(range(IN_FILTER_LIMIT * 2 + 5))


def test_update_and_insert_if_absent(store):
    coll = store.collection("thing")
    assert store.update(coll, "x", lambda d: d) is None
    assert store.insert_if_absent(coll, "x", {"n": 1}) is True
    assert store.insert_if_absent(coll, "x", {"n": 2}) is False
    assert store.update(coll, "x", lambda d: {"n": d["n"] + 10}) == {"n": 11}
    assert store.get(coll, "x") == {"n": 11}


def test_delete_helpers(store):
    coll = store.collection("thing")
    for i in range(6):
        store.put(coll, str(i), {"i": i}, ref="even" if i % 2 == 0 else "odd")

    assert store.delete(coll, "0") is True
    assert store.delete(coll, "0") is False
    assert store.delete_refs(coll, "even") == 2
    assert store.delete_where(coll, lambda d: d["i"] > 3) == 1
    assert [d["i"] for d in store.scan(coll)] == [1, 3]


def test_counters_start_at_one_per_collection(store):
    assert [store.next_id("c1") for _ in range(3)] == [1, 2, 3]
    assert store.next_id("c2") == 1


def test_sqlalchemy_failures_become_backend_errors():
    engine = create_db_engine("sqlite:///:memory:")  # tables never created
    store = DocumentStore(engine)
    with pytest.raises(BackendError) as exc_info:
        store.get("case/ws1", "1")
    assert exc_info.value.context["operation"] == "get"
    assert exc_info.value.context["collection"] == "case/ws1"
    assert exc_info.value.__cause__ is not None
    engine.dispose()




def test_numbered_create_refuses_a_taken_id(in_memory_engine):
    from casebook.models import Case
    from casebook.repository.document.repository import DocumentRepository

    repo = DocumentRepository(in_memory_engine, prefix="test")
    # a document already sits at the ID the counter will hand out next
    repo.store.put(repo.store.collection("case", "ws1"), "1", {"id": 1, "title": "existing"})

    with pytest.raises(BackendError) as exc_info:
        repo.case().create("ws1", Case(title="new"))
    assert exc_info.value.context["key"] == 1
    assert repo.store.get(repo.store.collection("case", "ws1"), "1")["title"] == "existing"
    assert repo.case().create("ws1", Case(title="new")).id == 2


def test_put_move_to_end_requeues_existing_document(store):
    coll = store.collection("thing")
    for doc_id in ("a", "b", "c"):
        store.put(coll, doc_id, {"id": doc_id})

    store.put(coll, "a", {"id": "a", "edited": True}, move_to_end=True)
    store.put(coll, "b", {"id": "b", "edited": True})

    assert [d["id"] for d in store.scan(coll)] == ["b", "c", "a"]
