import uuid
from datetime import datetime
from sqlalchemy import Uuid
from ..extensions import db

class Submission(db.Model):
    __tablename__ = "submissions"

    TYPE_PAPER = "PAPER"
    TYPE_POSTER = "POSTER"
    TYPE_DEMO = "DEMO"
    VALID_TYPES = (TYPE_PAPER, TYPE_POSTER, TYPE_DEMO)

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    abstract = db.Column(db.Text, nullable=True)
    keywords = db.Column(db.String(500), nullable=True)
    type = db.Column(db.String(10), nullable=False, default=TYPE_PAPER)

    # Author details as entered at submission time
    author_id = db.Column(Uuid(as_uuid=True), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    author_name = db.Column(db.String(120), nullable=False)
    author_email = db.Column(db.String(255), nullable=False)
    author_student_id = db.Column(db.String(64), nullable=True)
    co_authors = db.Column(db.Text, nullable=True)
    co_author_student_ids = db.Column(db.Text, nullable=True)

    file_url = db.Column(db.String(500), nullable=True)
    file_name = db.Column(db.String(255), nullable=True)
    file_size = db.Column(db.Integer, nullable=True)

    # Written only by VoteLedger
    vote_count = db.Column(db.Integer, nullable=False, default=0)
    is_presented = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = db.relationship("User", back_populates="submissions")
    votes = db.relationship(
        "Vote",
        back_populates="submission",
        lazy=True,
        cascade="save-update, merge",
        # votes are bulk-deleted alongside the counter update
        passive_deletes="all",
    )

    __table_args__ = (
        db.CheckConstraint("vote_count >= 0", name="ck_submissions_vote_count_non_negative"),
        db.Index("ix_submissions_vote_count", "vote_count"),
    )
