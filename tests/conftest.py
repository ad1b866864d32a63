"""Shared fixtures and helpers."""

import itertools

import pytest
from sqlalchemy import func

from paperfair import create_app
from paperfair.config import TestConfig
from paperfair.extensions import db
from paperfair.models import Submission, User, Vote
from paperfair.services import get_services

ADMIN_LOGIN = {"email": TestConfig.ADMIN_LOGIN_EMAIL, "password": TestConfig.ADMIN_LOGIN_PASSWORD}


def vote_count(submission_id) -> int:
    """Stored counter, read without going through the identity map."""
    return db.session.query(Submission.vote_count).filter(Submission.id == submission_id).scalar()


def live_votes(submission_id=None) -> int:
    q = db.session.query(func.count(Vote.id))
    if submission_id is not None:
        q = q.filter(Vote.submission_id == submission_id)
    return q.scalar()


def assert_counters_consistent():
    """Every submission's counter equals its number of Vote rows."""
    for submission_id, stored in db.session.query(Submission.id, Submission.vote_count).all():
        assert stored == live_votes(submission_id), f"counter drift on {submission_id}"


def user_count() -> int:
    return db.session.query(func.count(User.id)).scalar()


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return get_services()


@pytest.fixture
def admin_token(client):
    resp = client.post("/api/admin/login", json=ADMIN_LOGIN)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def make_submission(services):
    """Factory creating a submission (and its author) through the service layer."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {
            "title": f"Submission {n}",
            "author_name": f"Author {n}",
            "author_email": f"author{n}@uni.edu",
            "author_student_id": f"A{n:03d}",
        }
        data.update(overrides)
        return services.identity.create_submission(data)

    return _make
