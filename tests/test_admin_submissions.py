"""Tests for admin submission management."""

import uuid
import warnings

from sqlalchemy.exc import SAWarning

from tests.conftest import live_votes, user_count, vote_count

PAYLOAD = {
    "title": "Quantum Error Correction",
    "type": "DEMO",
    "authorName": "Alice",
    "authorEmail": "alice@uni.edu",
    "authorStudentId": "S1",
    "isPresented": True,
}


class TestAdminSubmissions:
    def test_create(self, client, admin_headers):
        resp = client.post("/api/admin/submissions", json=PAYLOAD, headers=admin_headers)
        body = resp.get_json()
        assert resp.status_code == 201
        assert body["isPresented"] is True
        assert body["voteCount"] == 0
        assert body["author"]["email"] == "alice@uni.edu"

    def test_create_reuses_author(self, client, admin_headers, make_submission):
        existing = make_submission(author_email="alice@uni.edu", author_student_id="S1")
        before = user_count()
        resp = client.post("/api/admin/submissions", json=PAYLOAD, headers=admin_headers)
        assert resp.get_json()["authorId"] == str(existing.author_id)
        assert user_count() == before

    def test_list(self, client, admin_headers, make_submission):
        make_submission(title="First")
        make_submission(title="Second")
        resp = client.get("/api/admin/submissions", headers=admin_headers)
        titles = {s["title"] for s in resp.get_json()["submissions"]}
        assert titles == {"First", "Second"}

    def test_update_fields(self, client, admin_headers, make_submission):
        s = make_submission()
        resp = client.put(
            f"/api/admin/submissions/{s.id}",
            json={"title": "Renamed", "isPresented": True, "keywords": "ml"},
            headers=admin_headers,
        )
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["title"] == "Renamed"
        assert body["isPresented"] is True
        assert body["keywords"] == "ml"

    def test_vote_count_not_editable(self, client, admin_headers, make_submission, services):
        s = make_submission()
        services.votes.cast_vote(s.id, "S1", "Alice")
        resp = client.put(f"/api/admin/submissions/{s.id}", json={"voteCount": 50}, headers=admin_headers)
        assert resp.status_code == 400
        assert vote_count(s.id) == 1

    def test_update_keeps_counter(self, client, admin_headers, make_submission, services):
        s = make_submission()
        services.votes.cast_vote(s.id, "S1", "Alice")
        client.put(f"/api/admin/submissions/{s.id}", json={"title": "New"}, headers=admin_headers)
        assert vote_count(s.id) == 1

    def test_invalid_type(self, client, admin_headers, make_submission):
        s = make_submission()
        resp = client.put(f"/api/admin/submissions/{s.id}", json={"type": "ESSAY"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_update_missing(self, client, admin_headers):
        resp = client.put(f"/api/admin/submissions/{uuid.uuid4()}", json={"title": "x"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_delete_cascades_votes(self, client, admin_headers, make_submission, services):
        s = make_submission()
        keep = make_submission()
        services.votes.cast_vote(s.id, "S1", "Alice")
        services.votes.cast_vote(keep.id, "S1", "Alice")
        s_id = s.id

        resp = client.delete(f"/api/admin/submissions/{s_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert live_votes(s_id) == 0
        assert services.store.get_submission(s_id) is None
        assert vote_count(keep.id) == 1
        assert services.votes.remaining_votes("S1") == 4

    def test_delete_missing(self, client, admin_headers):
        resp = client.delete(f"/api/admin/submissions/{uuid.uuid4()}", headers=admin_headers)
        assert resp.status_code == 404

    def test_delete_with_loaded_votes_issues_no_stale_deletes(self, client, admin_headers, make_submission, services):
        s = make_submission()
        services.votes.cast_vote(s.id, "S1", "Alice")
        services.votes.cast_vote(s.id, "S2", "Bob")
        s_id = s.id
        assert len(client.get("/api/submissions").get_json()["submissions"][0]["votes"]) == 2
        assert len(services.store.get_submission(s_id).votes) == 2

        with warnings.catch_warnings():
            warnings.simplefilter("error", SAWarning)
            resp = client.delete(f"/api/admin/submissions/{s_id}", headers=admin_headers)

        assert resp.status_code == 200
        assert live_votes() == 0
        assert services.votes.remaining_votes("S1") == 5
