from flask import Blueprint
from flasgger import swag_from

from ...services import get_services
from ...schemas.submission import SubmissionCreateSchema, SubmissionSchema, SubmissionWithVotesSchema
from ...utils.validation import load_or_abort

submissions_bp = Blueprint("submissions", __name__)

submission_create_schema = SubmissionCreateSchema()
submission_read_schema = SubmissionSchema()
submission_list_schema = SubmissionWithVotesSchema(many=True)


@submissions_bp.post("/submissions")
@swag_from({
    "tags": ["Submissions"],
    "summary": "Submit a paper, poster or demo",
    "description": (
        "Finds the author by email, then by student ID (updating that record's email and name), "
        "and creates a new user when neither matches."
    ),
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "description": {"type": "string"},
                "type": {"type": "string", "enum": ["PAPER", "POSTER", "DEMO"]},
                "authorName": {"type": "string"},
                "authorEmail": {"type": "string"},
                "authorStudentId": {"type": "string"},
                "coAuthors": {"type": "string"},
                "coAuthorStudentIds": {"type": "string"},
                "abstract": {"type": "string"},
                "keywords": {"type": "string"},
                "fileUrl": {"type": "string"},
                "fileName": {"type": "string"},
                "fileSize": {"type": "integer"},
            },
            "required": ["title", "authorName", "authorEmail"],
        },
    }],
    "responses": {201: {"description": "Created"}, 400: {"description": "Validation error"}, 500: {"description": "Server error"}},
})
def create_submission():
    payload = load_or_abort(submission_create_schema)
    submission = get_services().identity.create_submission(payload)
    return submission_read_schema.dump(submission), 201


@submissions_bp.get("/submissions")
@swag_from({
    "tags": ["Submissions"],
    "summary": "List submissions with author and votes",
    "responses": {200: {"description": "OK"}},
})
def list_submissions():
    submissions = get_services().store.list_submissions()
    return {"submissions": submission_list_schema.dump(submissions)}, 200
