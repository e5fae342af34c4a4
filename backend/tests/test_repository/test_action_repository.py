"""Action store behaviour against both adapters."""

import pytest
from casebook.errors import NotFoundError, ValidationError
from casebook.models import Action, Case

WS = "ws1"


def test_create_requires_case_id(repo):
    with pytest.raises(ValidationError):
        repo.action().create(WS, Action(title="orphan"))


def test_crud(repo):
    case = repo.case().create(WS, Case(title="c"))
    created = repo.action().create(WS, Action(case_id=case.id, title="triage", assignee_ids=["U1"]))
    assert created.id == 1
    assert created.status == "TODO"

    created.status = "IN_PROGRESS"
    updated = repo.action().update(WS, created)
    assert updated.status == "IN_PROGRESS"
    assert updated.updated_at > updated.created_at

    assert [a.id for a in repo.action().list(WS)] == [1]
    repo.action().delete(WS, created.id)
    with pytest.raises(NotFoundError):
        repo.action().get(WS, created.id)
    with pytest.raises(NotFoundError):
        repo.action().delete(WS, created.id)


def test_get_by_cases_has_entry_for_every_requested_case(repo):
    repo.action().create(WS, Action(case_id=1, title="a"))
    repo.action().create(WS, Action(case_id=2, title="b"))
    repo.action().create(WS, Action(case_id=1, title="c"))

    grouped = repo.action().get_by_cases(WS, [1, 3])
    assert [a.title for a in grouped[1]] == ["a", "c"]
    assert grouped[3] == []
    assert 2 not in grouped


def test_get_by_cases_handles_more_cases_than_one_filter_batch(repo):
    case_ids = list(range(1, 46))
    for case_id in case_ids:
        repo.action().create(WS, Action(case_id=case_id, title=f"a{case_id}"))

    grouped = repo.action().get_by_cases(WS, case_ids)
    assert len(grouped) == 45
    assert all(len(actions) == 1 for actions in grouped.values())


def test_moving_action_to_another_case(repo):
    created = repo.action().create(WS, Action(case_id=1, title="move me"))
    created.case_id = 2
    repo.action().update(WS, created)

    assert repo.action().get_by_case(WS, 1) == []
    assert [a.id for a in repo.action().get_by_case(WS, 2)] == [created.id]


def test_delete_by_case_returns_count(repo):
    for _ in range(3):
        repo.action().create(WS, Action(case_id=5, title="x"))
    assert repo.action().delete_by_case(WS, 5) == 3
    assert repo.action().delete_by_case(WS, 5) == 0
