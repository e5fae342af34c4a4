"""Risk, Response and the join table between them."""

import pytest
from casebook.errors import NotFoundError
from casebook.models import Response, Risk

WS = "ws1"


@pytest.fixture
def seeded(repo):
    risk = repo.risk().create(WS, Risk(name="Credential theft"))
    response = repo.response().create(WS, Response(title="Enforce MFA", responder_ids=["U1"]))
    return repo, risk, response


def test_risk_and_response_crud(repo):
    risk = repo.risk().create(WS, Risk(name="r"))
    response = repo.response().create(WS, Response(title="t"))
    assert (risk.id, response.id) == (1, 1)
    assert response.status == "backlog"

    response.status = "in-progress"
    assert repo.response().update(WS, response).status == "in-progress"
    risk.description = "updated"
    assert repo.risk().update(WS, risk).description == "updated"

    assert [r.name for r in repo.risk().list(WS)] == ["r"]
    repo.risk().delete(WS, risk.id)
    repo.response().delete(WS, response.id)
    assert repo.risk().list(WS) == []
    assert repo.response().list(WS) == []


def test_link_is_idempotent(seeded):
    repo, risk, response = seeded
    repo.risk_response().link(WS, risk.id, response.id)
    repo.risk_response().link(WS, risk.id, response.id)

    responses = repo.risk_response().get_responses_by_risk(WS, risk.id)
    assert [r.id for r in responses] == [response.id]
    assert [r.id for r in repo.risk_response().get_risks_by_response(WS, response.id)] == [risk.id]


def test_link_validates_both_sides(seeded):
    repo, risk, response = seeded
    with pytest.raises(NotFoundError) as exc_info:
        repo.risk_response().link(WS, 999, response.id)
    assert exc_info.value.kind == "risk"

    with pytest.raises(NotFoundError) as exc_info:
        repo.risk_response().link(WS, risk.id, 999)
    assert exc_info.value.kind == "response"


def test_unlink(seeded):
    repo, risk, response = seeded
    repo.risk_response().link(WS, risk.id, response.id)
    repo.risk_response().unlink(WS, risk.id, response.id)
    assert repo.risk_response().get_responses_by_risk(WS, risk.id) == []

    with pytest.raises(NotFoundError):
        repo.risk_response().unlink(WS, risk.id, response.id)


def test_broken_links_are_skipped(seeded):
    repo, risk, response = seeded
    extra = repo.response().create(WS, Response(title="Rotate keys"))
    repo.risk_response().link(WS, risk.id, response.id)
    repo.risk_response().link(WS, risk.id, extra.id)

    repo.response().delete(WS, response.id)

    assert [r.id for r in repo.risk_response().get_responses_by_risk(WS, risk.id)] == [extra.id]
    grouped = repo.risk_response().get_responses_by_risks(WS, [risk.id, 42])
    assert [r.id for r in grouped[risk.id]] == [extra.id]
    assert grouped[42] == []


def test_delete_by_risk_and_response(seeded):
    repo, risk, response = seeded
    other_risk = repo.risk().create(WS, Risk(name="Data exfiltration"))
    repo.risk_response().link(WS, risk.id, response.id)
    repo.risk_response().link(WS, other_risk.id, response.id)

    assert repo.risk_response().delete_by_risk(WS, risk.id) == 1
    assert [r.id for r in repo.risk_response().get_risks_by_response(WS, response.id)] == [other_risk.id]

    assert repo.risk_response().delete_by_response(WS, response.id) == 1
    assert repo.risk_response().get_risks_by_responses(WS, [response.id]) == {response.id: []}
