"""Knowledge and Memory stores: IDs, similarity search and pagination."""

import uuid

import pytest
from casebook.errors import NotFoundError
from casebook.models import Knowledge, Memory

WS = "ws1"


def test_knowledge_gets_uuid_unless_supplied(repo):
    generated = repo.knowledge().create(WS, Knowledge(case_id=1, title="gen"))
    uuid.UUID(generated.id)

    supplied = repo.knowledge().create(WS, Knowledge(id="kb-fixed", case_id=1, title="fixed"))
    assert supplied.id == "kb-fixed"
    assert repo.knowledge().get(WS, "kb-fixed").title == "fixed"


def test_knowledge_round_trip_and_update(repo):
    original = Knowledge(
        case_id=3,
        source_id="src-1",
        source_urls=["https://www.notion.so/page"],
        title="Attacker infra",
        summary="Shared hosting ASN",
        embedding=[0.25, 0.5, 0.75],
    )
    created = repo.knowledge().create(WS, original)
    fetched = repo.knowledge().get(WS, created.id)
    assert fetched.model_dump(exclude={"id", "created_at", "updated_at"}) == original.model_dump(
        exclude={"id", "created_at", "updated_at"}
    )

    fetched.summary = "Bulletproof hosting"
    updated = repo.knowledge().update(WS, fetched)
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at

    with pytest.raises(NotFoundError):
        repo.knowledge().update(WS, Knowledge(id="missing"))


def test_knowledge_filters(repo):
    repo.knowledge().create(WS, Knowledge(case_id=1, source_id="a", title="1a"))
    repo.knowledge().create(WS, Knowledge(case_id=2, source_id="a", title="2a"))
    repo.knowledge().create(WS, Knowledge(case_id=1, source_id="b", title="1b"))

    assert [k.title for k in repo.knowledge().list_by_case_id(WS, 1)] == ["1a", "1b"]
    assert [k.title for k in repo.knowledge().list_by_source_id(WS, "a")] == ["1a", "2a"]
    grouped = repo.knowledge().list_by_case_ids(WS, [1, 2, 9])
    assert [len(grouped[c]) for c in (1, 2, 9)] == [2, 1, 0]


def test_knowledge_find_by_embedding(repo):
    repo.knowledge().create(WS, Knowledge(id="a", embedding=[1.0, 0.0, 0.1]))
    repo.knowledge().create(WS, Knowledge(id="b", embedding=[0.2, 1.0, 0.0]))
    repo.knowledge().create(WS, Knowledge(id="no-embedding"))
    repo.knowledge().create(WS, Knowledge(id="old-dimension", embedding=[1.0, 0.0]))

    ranked = repo.knowledge().find_by_embedding(WS, [1.0, 0.0, 0.0], 10)
    ids = [k.id for k in ranked]
    assert ids[:2] == ["a", "b"]
    assert "no-embedding" not in ids
    assert repo.knowledge().find_by_embedding("empty-ws", [1.0, 0.0, 0.0], 10) == []


def test_knowledge_offset_and_cursor_pagination(repo):
    created = [repo.knowledge().create(WS, Knowledge(title=f"k{i}")) for i in range(7)]
    newest_first = [k.id for k in reversed(created)]

    page, total = repo.knowledge().list_with_pagination(WS, 3, 3)
    assert total == 7
    assert [k.id for k in page] == newest_first[3:6]

    seen, cursor = [], ""
    while True:
        page, cursor = repo.knowledge().list_page(WS, 3, cursor)
        seen.extend(k.id for k in page)
        if not cursor:
            break
    assert seen == newest_first


def test_memory_crud_scoped_by_case(repo):
    created = repo.memory().create(WS, 1, Memory(claim="uses Tor exit nodes", embedding=[1.0, 0.0]))
    assert created.case_id == 1
    assert repo.memory().get(WS, 1, created.id).claim == "uses Tor exit nodes"

    with pytest.raises(NotFoundError):
        repo.memory().get(WS, 2, created.id)

    created.claim = "uses residential proxies"
    updated = repo.memory().update(WS, 1, created)
    assert updated.claim == "uses residential proxies"
    assert updated.created_at == created.created_at

    repo.memory().delete(WS, 1, created.id)
    with pytest.raises(NotFoundError):
        repo.memory().delete(WS, 1, created.id)


def test_memory_list_newest_first_and_search(repo):
    first = repo.memory().create(WS, 1, Memory(claim="first", embedding=[0.0, 1.0]))
    second = repo.memory().create(WS, 1, Memory(claim="second", embedding=[1.0, 0.0]))
    repo.memory().create(WS, 1, Memory(claim="unindexed"))
    repo.memory().create(WS, 2, Memory(claim="other case", embedding=[1.0, 0.0]))

    assert [m.claim for m in repo.memory().list(WS, 1)] == ["unindexed", "second", "first"]

    ranked = repo.memory().find_by_embedding(WS, 1, [1.0, 0.1], 5)
    assert [m.id for m in ranked] == [second.id, first.id]
    assert len(repo.memory().find_by_embedding(WS, 1, [1.0, 0.1], 1)) == 1


def test_memory_delete_by_case(repo):
    for i in range(3):
        repo.memory().create(WS, 4, Memory(claim=str(i)))
    assert repo.memory().delete_by_case(WS, 4) == 3
    assert repo.memory().list(WS, 4) == []
