import uuid
from datetime import datetime
from sqlalchemy import Uuid
from ..extensions import db

class Vote(db.Model):
    __tablename__ = "votes"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    voter_id = db.Column(Uuid(as_uuid=True), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    submission_id = db.Column(Uuid(as_uuid=True), db.ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)

    # Student ID the ballot was cast under
    voter_student_id = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    voter = db.relationship("User", back_populates="votes")
    submission = db.relationship("Submission", back_populates="votes")

    __table_args__ = (
        # One vote per voter per submission
        db.UniqueConstraint("voter_id", "submission_id", name="uq_votes_voter_submission"),
    )
