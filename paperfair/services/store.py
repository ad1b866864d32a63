"""
SQLAlchemy-backed persistence gateway.

Services never touch the session directly; every read and write of users,
submissions and votes goes through a SqlAlchemyStore so the queries live in
one place and tests can exercise them against SQLite.
"""
import uuid
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import case, func

from ..models.user import User
from ..models.submission import Submission
from ..models.vote import Vote


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class SqlAlchemyStore:
    def __init__(self, session):
        # Usually db.session (a scoped_session), so one store serves every request
        self.session = session

    @contextmanager
    def transaction(self):
        """
        Commit everything done inside the block, or roll all of it back.
        Exceptions are re-raised after the rollback.
        """
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def add(self, obj):
        self.session.add(obj)
        self.session.flush()  # ensure obj.id and surface constraint violations now
        return obj

    def delete(self, obj) -> None:
        self.session.delete(obj)

    def flush(self) -> None:
        self.session.flush()

    # Users

    def get_user(self, user_id) -> Optional[User]:
        user_id = _as_uuid(user_id)
        if user_id is None:
            return None
        return self.session.get(User, user_id)

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter_by(email=email).first()

    def find_user_by_student_id(self, student_id: str) -> Optional[User]:
        return self.session.query(User).filter_by(student_id=student_id).first()

    def lock_user(self, user_id) -> Optional[User]:
        # FOR UPDATE is a no-op on SQLite, which serializes writers anyway
        return (
            self.session.query(User)
            .filter(User.id == _as_uuid(user_id))
            .with_for_update()
            .populate_existing()
            .first()
        )

    def list_users_with_counts(self):
        """Returns [(user, submission_count, vote_count)], newest users first."""
        submission_counts = (
            self.session.query(Submission.author_id.label("user_id"), func.count(Submission.id).label("n"))
            .group_by(Submission.author_id)
            .subquery()
        )
        vote_counts = (
            self.session.query(Vote.voter_id.label("user_id"), func.count(Vote.id).label("n"))
            .group_by(Vote.voter_id)
            .subquery()
        )
        rows = (
            self.session.query(
                User,
                func.coalesce(submission_counts.c.n, 0),
                func.coalesce(vote_counts.c.n, 0),
            )
            .outerjoin(submission_counts, submission_counts.c.user_id == User.id)
            .outerjoin(vote_counts, vote_counts.c.user_id == User.id)
            .order_by(User.created_at.desc())
            .all()
        )
        return [(user, int(subs), int(votes)) for user, subs, votes in rows]

    def count_user_submissions(self, user_id) -> int:
        return self.session.query(func.count(Submission.id)).filter(Submission.author_id == _as_uuid(user_id)).scalar() or 0

    # Submissions

    def get_submission(self, submission_id) -> Optional[Submission]:
        submission_id = _as_uuid(submission_id)
        if submission_id is None:
            return None
        return self.session.get(Submission, submission_id)

    def list_submissions(self, order_by_votes: bool = False):
        q = self.session.query(Submission)
        if order_by_votes:
            q = q.order_by(Submission.vote_count.desc(), Submission.created_at.desc())
        else:
            q = q.order_by(Submission.created_at.desc())
        return q.all()

    def list_submissions_by_author(self, user_id):
        return self.session.query(Submission).filter(Submission.author_id == _as_uuid(user_id)).all()

    def increment_vote_count(self, submission_id) -> int:
        return (
            self.session.query(Submission)
            .filter(Submission.id == _as_uuid(submission_id))
            .update({Submission.vote_count: Submission.vote_count + 1}, synchronize_session=False)
        )

    def decrement_vote_count(self, submission_id) -> int:
        # Floored at zero even if the counter has already drifted
        return (
            self.session.query(Submission)
            .filter(Submission.id == _as_uuid(submission_id))
            .update(
                {Submission.vote_count: case((Submission.vote_count > 0, Submission.vote_count - 1), else_=0)},
                synchronize_session=False,
            )
        )

    def reset_vote_counts(self) -> int:
        return self.session.query(Submission).update({Submission.vote_count: 0}, synchronize_session=False)

    # Votes

    def get_vote(self, vote_id) -> Optional[Vote]:
        vote_id = _as_uuid(vote_id)
        if vote_id is None:
            return None
        return self.session.get(Vote, vote_id)

    def find_vote(self, voter_id, submission_id) -> Optional[Vote]:
        return (
            self.session.query(Vote)
            .filter_by(voter_id=_as_uuid(voter_id), submission_id=_as_uuid(submission_id))
            .first()
        )

    def count_votes_by_voter(self, voter_id) -> int:
        return self.session.query(func.count(Vote.id)).filter(Vote.voter_id == _as_uuid(voter_id)).scalar() or 0

    def list_votes(self):
        return self.session.query(Vote).order_by(Vote.created_at.desc()).all()

    def list_votes_by_voter(self, voter_id):
        return self.session.query(Vote).filter(Vote.voter_id == _as_uuid(voter_id)).all()

    def delete_vote(self, vote_id) -> int:
        return self.session.query(Vote).filter(Vote.id == _as_uuid(vote_id)).delete(synchronize_session=False)

    def delete_votes_for_submission(self, submission_id) -> int:
        return (
            self.session.query(Vote)
            .filter(Vote.submission_id == _as_uuid(submission_id))
            .delete(synchronize_session=False)
        )

    def delete_all_votes(self) -> int:
        return self.session.query(Vote).delete(synchronize_session=False)

    # Aggregates

    def count_users(self) -> int:
        return self.session.query(func.count(User.id)).scalar() or 0

    def count_submissions(self) -> int:
        return self.session.query(func.count(Submission.id)).scalar() or 0

    def count_votes(self) -> int:
        return self.session.query(func.count(Vote.id)).scalar() or 0

    def count_distinct_voters(self) -> int:
        return self.session.query(func.count(func.distinct(Vote.voter_id))).scalar() or 0

    def count_submissions_with_votes(self) -> int:
        return self.session.query(func.count(func.distinct(Vote.submission_id))).scalar() or 0
