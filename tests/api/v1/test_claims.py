import logging

logger = logging.getLogger(__name__)


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    assert "message" in client.get("/").json()


class TestAuth:
    def test_missing_token(self, client):
        response = client.get("/api/v1/claims")
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_AUTH_HEADER"

    def test_garbage_token(self, client):
        response = client.get("/api/v1/claims", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json() == {"error": "INVALID_TOKEN", "message": "Invalid authentication token"}


class TestSubmit:
    def test_submit_claim(self, client, auth_headers):
        response = client.post(
            "/api/v1/claims",
            json={
                "title": "X",
                "description": "Y",
                "category": "Politics",
                "sourceUrl": "https://example.com/post/1",
            },
            headers=auth_headers("user-7"),
        )
        logger.info(f"Response JSON: {response.json()}")

        assert response.status_code == 201
        claim = response.json()["claim"]
        assert claim["status"] == "pending"
        assert claim["category"] == "politics"
        assert claim["submitterId"] == "user-7"
        assert claim["assignedFactCheckerId"] is None
        assert claim["verdictAt"] is None

    def test_missing_fields_are_400(self, client, auth_headers):
        response = client.post("/api/v1/claims", json={"title": "Only a title"}, headers=auth_headers())
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert {d["field"] for d in body["details"]} >= {"body.description", "body.category"}

    def test_unknown_category_is_400(self, client, auth_headers):
        response = client.post(
            "/api/v1/claims",
            json={"title": "X", "description": "Y", "category": "sports"},
            headers=auth_headers(),
        )
        assert response.status_code == 400
        assert "Invalid category" in response.json()["message"]

    def test_unknown_fields_are_rejected(self, client, auth_headers):
        response = client.post(
            "/api/v1/claims",
            json={"title": "X", "description": "Y", "category": "health", "status": "verified"},
            headers=auth_headers(),
        )
        assert response.status_code == 400

    def test_bad_url_is_rejected(self, client, auth_headers):
        response = client.post(
            "/api/v1/claims",
            json={"title": "X", "description": "Y", "category": "health", "videoUrl": "ftp://files"},
            headers=auth_headers(),
        )
        assert response.status_code == 400


class TestRead:
    def test_get_is_idempotent(self, client, auth_headers, create_claim):
        claim = create_claim()
        first = client.get(f"/api/v1/claims/{claim['id']}", headers=auth_headers())
        second = client.get(f"/api/v1/claims/{claim['id']}", headers=auth_headers())
        assert first.status_code == 200
        assert first.json() == second.json()

    def test_get_unknown_is_404(self, client, auth_headers):
        response = client.get("/api/v1/claims/does-not-exist", headers=auth_headers())
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_list_with_pagination(self, client, auth_headers, create_claim):
        for i in range(3):
            create_claim(title=f"Claim {i}")
        response = client.get("/api/v1/claims?page=1&limit=2", headers=auth_headers())
        body = response.json()
        assert response.status_code == 200
        assert len(body["claims"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    def test_list_filters(self, client, auth_headers, create_claim):
        create_claim(category="health")
        create_claim(category="economy")
        response = client.get("/api/v1/claims?category=Health&status=pending", headers=auth_headers())
        claims = response.json()["claims"]
        assert [c["category"] for c in claims] == ["health"]

    def test_invalid_status_filter_is_400(self, client, auth_headers):
        response = client.get("/api/v1/claims?status=archived", headers=auth_headers())
        assert response.status_code == 400

    def test_trending(self, client, auth_headers, moderator_headers, create_claim):
        claim = create_claim()
        create_claim()
        client.put(f"/api/v1/claims/{claim['id']}", json={"isTrending": True}, headers=moderator_headers)

        response = client.get("/api/v1/claims/trending", headers=auth_headers())
        assert [c["id"] for c in response.json()["claims"]] == [claim["id"]]


class TestEditAndDelete:
    def test_author_edits_pending_claim(self, client, auth_headers, create_claim):
        claim = create_claim()
        response = client.put(
            f"/api/v1/claims/{claim['id']}",
            json={"title": "Schools closing for two weeks"},
            headers=auth_headers("user-1"),
        )
        assert response.status_code == 200
        assert response.json()["claim"]["title"] == "Schools closing for two weeks"

    def test_stranger_cannot_edit(self, client, auth_headers, create_claim):
        claim = create_claim()
        response = client.put(f"/api/v1/claims/{claim['id']}", json={"title": "Mine now"}, headers=auth_headers("user-2"))
        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"

    def test_delete_requires_moderator(self, client, auth_headers, moderator_headers, create_claim):
        claim = create_claim()
        assert client.delete(f"/api/v1/claims/{claim['id']}", headers=auth_headers()).status_code == 403

        response = client.delete(f"/api/v1/claims/{claim['id']}", headers=moderator_headers)
        assert response.status_code == 204
        assert client.get(f"/api/v1/claims/{claim['id']}", headers=auth_headers()).status_code == 404
        assert client.get("/api/v1/claims", headers=auth_headers()).json()["pagination"]["total"] == 0


class TestStatusAndAutoAssign:
    def test_auto_assign_and_override(self, client, auth_headers, moderator_headers, create_claim, approved_checker):
        checker = approved_checker("checker-1", ["education"])
        claim = create_claim()

        response = client.post(f"/api/v1/claims/{claim['id']}/auto-assign", headers=moderator_headers)
        assert response.status_code == 200
        assert response.json()["claim"]["assignedFactCheckerId"] == checker["id"]
        assert response.json()["claim"]["status"] == "human_review"

        response = client.post(
            "/api/v1/verdicts",
            json={"claimId": claim["id"], "outcome": "false", "reasoning": "Ministry denied it"},
            headers=auth_headers("checker-1"),
        )
        assert response.status_code == 201

        response = client.post(
            f"/api/v1/claims/{claim['id']}/status",
            json={"status": "human_review", "note": "Ministry retracted the denial"},
            headers=moderator_headers,
        )
        assert response.status_code == 200
        assert response.json()["claim"]["status"] == "human_review"
        assert response.json()["claim"]["verdictAt"] is None

    def test_direct_status_change_is_409(self, client, moderator_headers, create_claim):
        claim = create_claim()
        response = client.post(
            f"/api/v1/claims/{claim['id']}/status",
            json={"status": "verified"},
            headers=moderator_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "ILLEGAL_TRANSITION"

    def test_auto_assign_without_checkers_is_422(self, client, moderator_headers, create_claim):
        claim = create_claim()
        response = client.post(f"/api/v1/claims/{claim['id']}/auto-assign", headers=moderator_headers)
        assert response.status_code == 422
        assert response.json()["error"] == "INELIGIBLE"


class TestMineAndSearch:
    def test_my_claims(self, client, auth_headers, create_claim):
        mine = create_claim(user_id="user-1")
        create_claim(user_id="user-2")

        body = client.get("/api/v1/claims/mine", headers=auth_headers("user-1")).json()
        assert [c["id"] for c in body["claims"]] == [mine["id"]]

        everything = client.get("/api/v1/claims/mine?status=all", headers=auth_headers("user-1")).json()
        assert everything["pagination"]["total"] == 1
        reviewed = client.get("/api/v1/claims/mine?status=verified", headers=auth_headers("user-1")).json()
        assert reviewed["claims"] == []

    def test_search(self, client, auth_headers, create_claim):
        match = create_claim(title="Bridge collapse in Mombasa")
        create_claim(title="Exam leak")

        response = client.get("/api/v1/claims/search?q=mombasa", headers=auth_headers())
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["claims"]] == [match["id"]]

    def test_search_without_query_is_400(self, client, auth_headers):
        response = client.get("/api/v1/claims/search", headers=auth_headers())
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_detail_includes_current_verdict(self, client, auth_headers, moderator_headers, create_claim, approved_checker):
        checker = approved_checker("checker-1")
        claim = create_claim()
        detail = client.get(f"/api/v1/claims/{claim['id']}", headers=auth_headers()).json()
        assert detail["verdict"] is None

        client.post(
            f"/api/v1/fact-checkers/{checker['id']}/assign",
            json={"claimId": claim["id"]},
            headers=moderator_headers,
        )
        recorded = client.post(
            "/api/v1/verdicts",
            json={"claimId": claim["id"], "outcome": "misleading", "reasoning": "Old photo from 2019"},
            headers=auth_headers("checker-1"),
        ).json()

        detail = client.get(f"/api/v1/claims/{claim['id']}", headers=auth_headers()).json()
        assert detail["claim"]["status"] == "misleading"
        assert detail["verdict"]["id"] == recorded["verdict"]["id"]
