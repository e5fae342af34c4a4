"""Case store behaviour, run against both adapters via the ``repo`` fixture."""

import pytest
from casebook.errors import NotFoundError
from casebook.models import Action, Case, FieldValue, Knowledge, Memory

WS = "ws1"
SERVER_FIELDS = {"id", "created_at", "updated_at"}


def _case(**overrides) -> Case:
    fields = {
        "title": "Phishing campaign",
        "description": "Credential harvesting emails",
        "assignee_ids": ["U1", "U2"],
        "slack_channel_id": "C100",
        "field_values": {
            "severity": FieldValue(field_id="severity", type="select", value="high"),
            "category": FieldValue(field_id="category", type="multi-select", value=["phishing"]),
            "score": FieldValue(field_id="score", type="number", value=7),
            "due": FieldValue(field_id="due", type="date", value="2026-05-01T09:00:00Z"),
        },
    }
    fields.update(overrides)
    return Case(**fields)


def test_round_trip(repo):
    original = _case()
    created = repo.case().create(WS, original)
    fetched = repo.case().get(WS, created.id)

    assert fetched.model_dump(exclude=SERVER_FIELDS) == original.model_dump(exclude=SERVER_FIELDS)
    assert fetched.id == created.id == 1
    assert fetched.created_at == fetched.updated_at


def test_ids_auto_increment_per_workspace(repo):
    first = repo.case().create(WS, Case(title="a"))
    second = repo.case().create(WS, Case(title="b"))
    other = repo.case().create("ws2", Case(title="c"))
    assert (first.id, second.id, other.id) == (1, 2, 1)


def test_create_ignores_caller_id_and_timestamps(repo):
    stale = _case(id=99)
    created = repo.case().create(WS, stale)
    assert created.id == 1
    assert created.created_at > stale.created_at


def test_copy_isolation(repo):
    created = repo.case().create(WS, _case())
    created.assignee_ids.append("U3")
    created.field_values["category"].value.append("malware")

    fetched = repo.case().get(WS, created.id)
    assert fetched.assignee_ids == ["U1", "U2"]
    assert fetched.field_values["category"].value == ["phishing"]

    fetched.assignee_ids.clear()
    assert repo.case().get(WS, created.id).assignee_ids == ["U1", "U2"]


def test_input_not_aliased(repo):
    original = _case()
    created = repo.case().create(WS, original)
    original.assignee_ids.append("U9")
    assert repo.case().get(WS, created.id).assignee_ids == ["U1", "U2"]


def test_list_ordered_by_id_and_filtered_by_status(repo):
    for title in ("a", "b", "c"):
        repo.case().create(WS, Case(title=title))
    closed = repo.case().get(WS, 2)
    closed.status = "CLOSED"
    repo.case().update(WS, closed)

    assert [c.title for c in repo.case().list(WS)] == ["a", "b", "c"]
    assert [c.id for c in repo.case().list(WS, status="CLOSED")] == [2]
    assert [c.id for c in repo.case().list(WS, status="OPEN")] == [1, 3]


def test_update_preserves_created_at_and_advances_updated_at(repo):
    created = repo.case().create(WS, _case())
    created.title = "Renamed"
    updated = repo.case().update(WS, created)

    assert updated.title == "Renamed"
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    assert repo.case().get(WS, created.id).title == "Renamed"


def test_update_missing_case_raises_not_found(repo):
    with pytest.raises(NotFoundError) as exc_info:
        repo.case().update(WS, Case(id=42, title="ghost"))
    assert exc_info.value.context == {"kind": "case", "key": 42, "workspace_id": WS}


def test_unknown_workspace_behaves_as_empty(repo):
    assert repo.case().list("never-created") == []
    with pytest.raises(NotFoundError):
        repo.case().get("never-created", 1)
    with pytest.raises(NotFoundError):
        repo.case().delete("never-created", 1)


def test_workspaces_are_isolated(repo):
    created = repo.case().create(WS, Case(title="mine"))
    with pytest.raises(NotFoundError):
        repo.case().get("ws2", created.id)


def test_get_by_slack_channel_id(repo):
    repo.case().create(WS, Case(title="no channel"))
    created = repo.case().create(WS, _case(slack_channel_id="C777"))

    assert repo.case().get_by_slack_channel_id(WS, "C777").id == created.id
    assert repo.case().get_by_slack_channel_id(WS, "C000") is None
    assert repo.case().get_by_slack_channel_id(WS, "") is None


def test_delete_cascades_to_actions_knowledge_and_memory(repo):
    case = repo.case().create(WS, Case(title="doomed"))
    keeper = repo.case().create(WS, Case(title="keeper"))
    for i in range(3):
        repo.action().create(WS, Action(case_id=case.id, title=f"a{i}"))
    repo.action().create(WS, Action(case_id=keeper.id, title="keep"))
    repo.knowledge().create(WS, Knowledge(case_id=case.id, title="k"))
    repo.memory().create(WS, case.id, Memory(claim="remember"))

    repo.case().delete(WS, case.id)

    assert repo.action().get_by_case(WS, case.id) == []
    assert repo.knowledge().list_by_case_id(WS, case.id) == []
    assert repo.memory().list(WS, case.id) == []
    assert [a.title for a in repo.action().get_by_case(WS, keeper.id)] == ["keep"]


def test_count_field_values(repo):
    for value in ("high", "medium", "invalid-opt"):
        repo.case().create(
            WS,
            Case(title=value, field_values={"severity": FieldValue(field_id="severity", type="select", value=value)}),
        )
    # Same field ID with a different type is excluded from both counts
    repo.case().create(
        WS,
        Case(title="text", field_values={"severity": FieldValue(field_id="severity", type="text", value="high")}),
    )

    total, valid = repo.case().count_field_values(WS, "severity", "select", ["high", "medium", "low"])
    assert (total, valid) == (3, 2)


def test_find_case_with_invalid_field_value(repo):
    repo.case().create(
        WS,
        Case(title="ok", field_values={"tags": FieldValue(field_id="tags", type="multi-select", value=["network"])}),
    )
    assert repo.case().find_case_with_invalid_field_value(WS, "tags", "multi-select", ["network"]) is None

    bad = repo.case().create(
        WS,
        Case(
            title="bad",
            field_values={"tags": FieldValue(field_id="tags", type="multi-select", value=["network", "bogus"])},
        ),
    )
    found = repo.case().find_case_with_invalid_field_value(WS, "tags", "multi-select", ["network"])
    assert found is not None
    assert found.id == bad.id


def test_case_lifecycle_scenario(repo):
    c1 = repo.case().create(WS, Case(title="C1"))
    assert [c.title for c in repo.case().list(WS)] == ["C1"]

    repo.action().create(WS, Action(case_id=c1.id, title="investigate"))
    repo.case().delete(WS, c1.id)

    assert repo.action().get_by_case(WS, c1.id) == []
    with pytest.raises(NotFoundError):
        repo.case().get(WS, c1.id)
