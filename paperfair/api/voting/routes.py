from flask import Blueprint
from flasgger import swag_from

from ...services import get_services
from ...schemas.vote import VoteCastSchema, VotesRemainingSchema
from ...schemas.submission import SubmissionWithVotesSchema
from ...utils.validation import load_or_abort

voting_bp = Blueprint("voting", __name__)
vote_cast_schema = VoteCastSchema()
votes_remaining_schema = VotesRemainingSchema()
leaderboard_schema = SubmissionWithVotesSchema(many=True)


@voting_bp.post("/vote")
@swag_from({
    "tags": ["Voting"],
    "summary": "Cast a vote for a submission",
    "description": "Each voter (keyed by student ID) may vote once per submission and at most five times overall.",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "submissionId": {"type": "string", "example": "uuid"},
                "voterStudentId": {"type": "string", "example": "2021001"},
                "voterName": {"type": "string", "example": "Alice"},
            },
            "required": ["submissionId", "voterStudentId", "voterName"],
        },
    }],
    "responses": {
        201: {"description": "Vote recorded"},
        400: {"description": "Validation error, duplicate vote or quota exhausted", "schema": {"$ref": "#/definitions/ErrorResponse"}},
        404: {"description": "Submission not found"},
        500: {"description": "Server error"},
    },
})
def cast_vote():
    payload = load_or_abort(vote_cast_schema)

    remaining = get_services().votes.cast_vote(
        payload["submission_id"],
        payload["voter_student_id"],
        payload["voter_name"],
    )

    return {"message": "Vote recorded successfully", "remainingVotes": remaining}, 201


@voting_bp.post("/votes-remaining")
@swag_from({
    "tags": ["Voting"],
    "summary": "Remaining votes for a student ID",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"voterStudentId": {"type": "string", "example": "2021001"}},
            "required": ["voterStudentId"],
        },
    }],
    "responses": {200: {"description": "OK"}, 400: {"description": "Validation error"}},
})
def votes_remaining():
    payload = load_or_abort(votes_remaining_schema)
    return {"remainingVotes": get_services().votes.remaining_votes(payload["voter_student_id"])}, 200


@voting_bp.get("/leaderboard")
@swag_from({
    "tags": ["Voting"],
    "summary": "Submissions ranked by vote count",
    "responses": {200: {"description": "OK"}},
})
def leaderboard():
    submissions = get_services().store.list_submissions(order_by_votes=True)
    return {"submissions": leaderboard_schema.dump(submissions)}, 200
