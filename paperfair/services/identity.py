from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import InvalidRequest
from ..models.user import User
from ..models.submission import Submission


class IdentityManager:
    """
    Find-or-create for authors and voters.

    Email is the primary key for authors; the student ID is a secondary key
    that merges a later submission into an identity first seen under another
    email. Voters are keyed by student ID only.
    """

    def __init__(self, store, voter_email_domain: str = "student.edu"):
        self.store = store
        self.voter_email_domain = voter_email_domain

    def placeholder_email(self, student_id: str) -> str:
        return f"{student_id}@{self.voter_email_domain}"

    def resolve_or_create_author(self, email: str, name: Optional[str], student_id: Optional[str] = None) -> User:
        if not email:
            raise InvalidRequest("Author email is required")

        user = self.store.find_user_by_email(email)
        if user:
            if student_id and not user.student_id:
                owner = self.store.find_user_by_student_id(student_id)
                if owner is None:
                    user.student_id = student_id
                    self.store.flush()
                else:
                    current_app.logger.warning(
                        "Student ID %s already belongs to user %s; not attaching to %s",
                        student_id, owner.id, user.id,
                    )
            return user

        if student_id:
            user = self.store.find_user_by_student_id(student_id)
            if user:
                user.email = email
                user.name = name
                self.store.flush()
                current_app.logger.info("Reconciled user %s to new email via student ID", user.id)
                return user

        return self.store.add(User(email=email, name=name, student_id=student_id))

    def resolve_voter(self, student_id: str, name: str) -> User:
        """
        Commits a newly created voter on its own so the ballot transaction
        only ever sees an existing user row.
        """
        voter = self.store.find_user_by_student_id(student_id)
        if voter:
            return voter

        try:
            with self.store.transaction():
                voter = self.store.add(
                    User(email=self.placeholder_email(student_id), name=name, student_id=student_id)
                )
            current_app.logger.info("Created voter %s for student ID %s", voter.id, student_id)
            return voter
        except IntegrityError:
            # Lost a race with a concurrent first vote under the same student ID
            voter = self.store.find_user_by_student_id(student_id)
            if voter is None:
                raise InvalidRequest("Voter identity conflicts with an existing account")
            return voter

    def create_submission(self, data: dict, presented: bool = False) -> Submission:
        with self.store.transaction():
            author = self.resolve_or_create_author(
                data["author_email"], data["author_name"], data.get("author_student_id")
            )
            submission = self.store.add(Submission(
                title=data["title"].strip(),
                description=data.get("description"),
                abstract=data.get("abstract"),
                keywords=data.get("keywords"),
                type=data.get("type") or Submission.TYPE_PAPER,
                author_id=author.id,
                author_name=data["author_name"],
                author_email=data["author_email"],
                author_student_id=data.get("author_student_id"),
                co_authors=data.get("co_authors"),
                co_author_student_ids=data.get("co_author_student_ids"),
                file_url=data.get("file_url"),
                file_name=data.get("file_name"),
                file_size=data.get("file_size"),
                vote_count=0,
                is_presented=bool(presented),
            ))

        current_app.logger.info("Submission %s created by user %s", submission.id, author.id)
        return submission
