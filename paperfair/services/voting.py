"""
Vote accounting.

VoteLedger is the only writer of Submission.vote_count. Every path that
creates or removes Vote rows goes through it, and each one adjusts the
counter in the same transaction as the row change so the counter always
equals the number of live votes for the submission.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import DuplicateVote, InvalidRequest, NotFound, QuotaExhausted
from ..models.vote import Vote


class VoteLedger:
    def __init__(self, store, identity, quota: int = 5):
        self.store = store
        self.identity = identity
        self.quota = quota

    def cast_vote(self, submission_id, voter_student_id: str, voter_name: str) -> int:
        """
        Record one ballot and return the voter's remaining votes.

        Raises InvalidRequest, NotFound, DuplicateVote or QuotaExhausted
        without changing any state.
        """
        voter_student_id = (voter_student_id or "").strip()
        voter_name = (voter_name or "").strip()
        if not submission_id or not voter_student_id or not voter_name:
            raise InvalidRequest("Submission ID, voter student ID, and voter name are required")

        submission = self.store.get_submission(submission_id)
        if submission is None:
            raise NotFound("Submission not found")
        submission_id = submission.id

        voter = self.identity.resolve_voter(voter_student_id, voter_name)
        voter_id = voter.id

        with self.store.transaction():
            # Serializes concurrent ballots from the same voter
            self.store.lock_user(voter_id)

            if self.store.find_vote(voter_id, submission_id):
                current_app.logger.info("Duplicate vote attempt voter=%s submission=%s", voter_id, submission_id)
                raise DuplicateVote()

            used = self.store.count_votes_by_voter(voter_id)
            if used >= self.quota:
                current_app.logger.info("Vote quota exhausted voter=%s used=%s", voter_id, used)
                raise QuotaExhausted(f"No votes remaining. Each voter may cast at most {self.quota} votes.")

            try:
                vote = self.store.add(Vote(
                    voter_id=voter_id,
                    submission_id=submission_id,
                    voter_student_id=voter_student_id,
                ))
            except IntegrityError as exc:
                raise DuplicateVote() from exc

            self.store.increment_vote_count(submission_id)

        current_app.logger.info("Vote %s recorded voter=%s submission=%s", vote.id, voter_id, submission_id)
        return self.quota - (used + 1)

    def remaining_votes(self, voter_student_id: str) -> int:
        voter_student_id = (voter_student_id or "").strip()
        if not voter_student_id:
            raise InvalidRequest("Student ID is required")

        voter = self.store.find_user_by_student_id(voter_student_id)
        if voter is None:
            return self.quota
        return max(0, self.quota - self.store.count_votes_by_voter(voter.id))

    def delete_vote(self, vote_id) -> None:
        vote = self.store.get_vote(vote_id)
        if vote is None:
            raise NotFound("Vote not found")
        submission_id = vote.submission_id

        with self.store.transaction():
            # Row count guards against a concurrent delete of the same vote
            if not self.store.delete_vote(vote_id):
                raise NotFound("Vote not found")
            self.store.decrement_vote_count(submission_id)

        current_app.logger.info("Vote %s deleted; submission %s decremented", vote_id, submission_id)

    def clear_all_votes(self) -> int:
        with self.store.transaction():
            deleted = self.store.delete_all_votes()
            self.store.reset_vote_counts()

        current_app.logger.warning("All votes cleared (%s deleted)", deleted)
        return deleted

    def remove_votes_by_voter(self, voter_id) -> int:
        """
        Delete every ballot cast by one voter and give each affected
        submission its vote back. Runs inside the caller's transaction.
        """
        votes = self.store.list_votes_by_voter(voter_id)
        for vote in votes:
            self.store.decrement_vote_count(vote.submission_id)
            self.store.delete(vote)
        self.store.flush()
        return len(votes)

    def stats(self) -> dict:
        total_votes = self.store.count_votes()
        total_submissions = self.store.count_submissions()
        return {
            "totalVotes": total_votes,
            "uniqueVoters": self.store.count_distinct_voters(),
            "submissionsWithVotes": self.store.count_submissions_with_votes(),
            "averageVotesPerSubmission": total_votes / total_submissions if total_submissions > 0 else 0,
        }
