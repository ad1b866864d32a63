import uuid
from datetime import datetime
from sqlalchemy import Uuid
from ..extensions import db

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    name = db.Column(db.String(120), nullable=True)

    # Unique when present; NULLs don't collide
    student_id = db.Column(db.String(64), nullable=True, unique=True, index=True)

    is_admin = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Dependent rows are removed by AdminConsole and VoteLedger, never by ORM cascade
    submissions = db.relationship("Submission", back_populates="author", lazy=True, cascade="save-update, merge", passive_deletes="all")
    votes = db.relationship("Vote", back_populates="voter", lazy=True, cascade="save-update, merge", passive_deletes="all")

    def __repr__(self) -> str:
        return f"<User {self.email}>"
