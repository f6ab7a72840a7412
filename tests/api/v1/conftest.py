import pytest


@pytest.fixture
def create_claim(client, auth_headers):
    def _create(user_id="user-1", **overrides):
        body = {
            "title": "Schools closing for a month",
            "description": "Voice note shared on messaging apps",
            "category": "education",
        }
        body.update(overrides)
        response = client.post("/api/v1/claims", json=body, headers=auth_headers(user_id))
        assert response.status_code == 201, response.text
        return response.json()["claim"]
    return _create


@pytest.fixture
def approved_checker(client, auth_headers, moderator_headers):
    """Apply as ``user_id`` and have a moderator approve the application."""
    def _approved(user_id="checker-1", expertise=None):
        response = client.post(
            "/api/v1/fact-checkers/apply",
            json={"expertiseAreas": expertise or ["education"]},
            headers=auth_headers(user_id),
        )
        assert response.status_code == 201, response.text
        fc_id = response.json()["application"]["id"]
        response = client.post(f"/api/v1/fact-checkers/{fc_id}/approve", headers=moderator_headers)
        assert response.status_code == 200, response.text
        return response.json()["factChecker"]
    return _approved
