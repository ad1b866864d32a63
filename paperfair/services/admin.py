from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import InvalidOperation, InvalidRequest, NotFound
from ..models.submission import Submission
from ..models.user import User

# Fields an admin may change on a submission; vote_count is owned by VoteLedger
EDITABLE_SUBMISSION_FIELDS = (
    "title",
    "description",
    "abstract",
    "keywords",
    "type",
    "author_name",
    "author_email",
    "author_student_id",
    "co_authors",
    "co_author_student_ids",
    "file_url",
    "file_name",
    "file_size",
    "is_presented",
)

EDITABLE_USER_FIELDS = ("name", "email", "student_id")


class AdminConsole:
    def __init__(self, store, ledger):
        self.store = store
        self.ledger = ledger

    # Submissions

    def update_submission(self, submission_id, changes: dict) -> Submission:
        submission = self.store.get_submission(submission_id)
        if submission is None:
            raise NotFound("Submission not found")

        with self.store.transaction():
            for field in EDITABLE_SUBMISSION_FIELDS:
                if field in changes:
                    setattr(submission, field, changes[field])

        current_app.logger.info("Submission %s updated fields=%s", submission.id, sorted(changes))
        return submission

    def delete_submission(self, submission_id) -> None:
        submission = self.store.get_submission(submission_id)
        if submission is None:
            raise NotFound("Submission not found")

        with self.store.transaction():
            removed = self.store.delete_votes_for_submission(submission.id)
            self.store.delete(submission)

        current_app.logger.info("Submission %s deleted with %s votes", submission_id, removed)

    # Users

    def _get_user(self, user_id) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def set_admin(self, actor: User, user_id, is_admin: bool) -> User:
        return self.update_user(actor, user_id, {"is_admin": bool(is_admin)})

    def update_user(self, actor: User, user_id, changes: dict) -> User:
        if "is_admin" in changes and str(actor.id) == str(user_id) and not changes["is_admin"]:
            raise InvalidOperation("You cannot revoke your own administrator privileges")

        user = self._get_user(user_id)
        fields = [f for f in EDITABLE_USER_FIELDS + ("is_admin",) if f in changes]

        try:
            with self.store.transaction():
                for field in fields:
                    setattr(user, field, changes[field])
                self.store.flush()
        except IntegrityError as exc:
            raise InvalidRequest("Email or student ID is already in use") from exc

        current_app.logger.info("User %s updated fields=%s by %s", user.id, fields, actor.id)
        return user

    def delete_user(self, actor: User, user_id) -> None:
        if str(actor.id) == str(user_id):
            raise InvalidOperation("You cannot delete your own account")

        user = self._get_user(user_id)
        if user.is_admin:
            raise InvalidOperation("Administrator accounts cannot be deleted; revoke admin privileges first")

        with self.store.transaction():
            cast = self.ledger.remove_votes_by_voter(user.id)
            authored = self.store.list_submissions_by_author(user.id)
            for submission in authored:
                self.store.delete_votes_for_submission(submission.id)
                self.store.delete(submission)
            self.store.flush()
            self.store.delete(user)

        current_app.logger.info(
            "User %s deleted by %s (%s votes cast, %s submissions)", user_id, actor.id, cast, len(authored)
        )
