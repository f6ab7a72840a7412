import pytest


@pytest.fixture
def assigned_claim(client, moderator_headers, create_claim, approved_checker):
    checker = approved_checker("checker-1")
    claim = create_claim()
    response = client.post(
        f"/api/v1/fact-checkers/{checker['id']}/assign",
        json={"claimId": claim["id"]},
        headers=moderator_headers,
    )
    assert response.status_code == 200
    return response.json()["claim"]


def _verdict(claim_id, outcome="false"):
    return {"claimId": claim_id, "outcome": outcome, "reasoning": "Contradicted by the official record"}


def test_record_and_fetch_verdict(client, auth_headers, assigned_claim):
    response = client.post("/api/v1/verdicts", json=_verdict(assigned_claim["id"]), headers=auth_headers("checker-1"))
    assert response.status_code == 201
    body = response.json()
    assert body["claim"]["status"] == "false"
    assert body["claim"]["verdictAt"] is not None
    assert body["verdict"]["outcome"] == "false"
    assert body["verdict"]["isCurrent"] is True

    fetched = client.get(f"/api/v1/verdicts/{body['verdict']['id']}", headers=auth_headers())
    assert fetched.status_code == 200
    assert fetched.json()["verdict"]["claimId"] == assigned_claim["id"]


def test_second_verdict_is_409(client, auth_headers, assigned_claim):
    client.post("/api/v1/verdicts", json=_verdict(assigned_claim["id"]), headers=auth_headers("checker-1"))
    response = client.post(
        "/api/v1/verdicts",
        json=_verdict(assigned_claim["id"], "verified"),
        headers=auth_headers("checker-1"),
    )
    assert response.status_code == 409
    assert response.json()["error"] == "ILLEGAL_TRANSITION"


def test_pending_claim_verdict_is_409(client, auth_headers, create_claim, approved_checker):
    approved_checker("checker-1")
    claim = create_claim()
    response = client.post("/api/v1/verdicts", json=_verdict(claim["id"]), headers=auth_headers("checker-1"))
    assert response.status_code == 409
    assert client.get(f"/api/v1/claims/{claim['id']}", headers=auth_headers()).json()["claim"]["status"] == "pending"


def test_non_checker_is_422(client, auth_headers, assigned_claim):
    response = client.post("/api/v1/verdicts", json=_verdict(assigned_claim["id"]), headers=auth_headers("user-2"))
    assert response.status_code == 422


def test_invalid_outcome_is_400(client, auth_headers, assigned_claim):
    response = client.post(
        "/api/v1/verdicts",
        json=_verdict(assigned_claim["id"], "pending"),
        headers=auth_headers("checker-1"),
    )
    assert response.status_code == 400


def test_unknown_verdict_is_404(client, auth_headers):
    assert client.get("/api/v1/verdicts/missing", headers=auth_headers()).status_code == 404
