from flask import Blueprint, g
from flasgger import swag_from

from ...services import get_services
from ...utils.rbac import admin_required
from ...utils.validation import load_or_abort
from ...schemas.auth import AdminLoginSchema
from ...schemas.submission import AdminSubmissionCreateSchema, SubmissionUpdateSchema, SubmissionSchema
from ...schemas.user import UserSchema, UserUpdateSchema, ToggleAdminSchema
from ...schemas.vote import VoteSchema

admin_bp = Blueprint("admin", __name__)

login_schema = AdminLoginSchema()
submission_create_schema = AdminSubmissionCreateSchema()
submission_update_schema = SubmissionUpdateSchema()
submission_schema = SubmissionSchema()
submission_many_schema = SubmissionSchema(many=True)
user_schema = UserSchema()
user_update_schema = UserUpdateSchema()
toggle_admin_schema = ToggleAdminSchema()
vote_many_schema = VoteSchema(many=True)

_BEARER = [{"BearerAuth": []}]
_AUTH_ERRORS = {
    401: {"description": "Missing or invalid token", "schema": {"$ref": "#/definitions/ErrorResponse"}},
    403: {"description": "Not an administrator", "schema": {"$ref": "#/definitions/ErrorResponse"}},
}


def _user_with_counts(user, submission_count: int, vote_count: int) -> dict:
    data = user_schema.dump(user)
    data["_count"] = {"submissions": submission_count, "votes": vote_count}
    return data


# Auth

@admin_bp.post("/login")
@swag_from({
    "tags": ["Admin"],
    "summary": "Admin login",
    "description": "Exchanges the configured admin credential pair for a 24-hour bearer token.",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"email": {"type": "string"}, "password": {"type": "string"}},
            "required": ["email", "password"],
        },
    }],
    "responses": {
        200: {"description": "Login successful, token returned"},
        400: {"description": "Validation error"},
        401: {"description": "Invalid credentials"},
    },
})
def login():
    payload = load_or_abort(login_schema)
    token, user = get_services().auth.login(payload["email"], payload["password"])
    return {"token": token, "token_type": "bearer", "user": user_schema.dump(user)}, 200


@admin_bp.get("/verify")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Check that the bearer token belongs to an administrator",
    "responses": {200: {"description": "Valid"}, **_AUTH_ERRORS},
})
def verify():
    return {"valid": True, "user": user_schema.dump(g.admin_user)}, 200


@admin_bp.get("/stats")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Total users, submissions and votes",
    "responses": {200: {"description": "Counts"}, **_AUTH_ERRORS},
})
def stats():
    store = get_services().store
    return {
        "users": store.count_users(),
        "submissions": store.count_submissions(),
        "votes": store.count_votes(),
    }, 200


# Submissions

@admin_bp.get("/submissions")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "List all submissions",
    "responses": {200: {"description": "OK"}, **_AUTH_ERRORS},
})
def list_submissions():
    submissions = get_services().store.list_submissions()
    return {"submissions": submission_many_schema.dump(submissions)}, 200


@admin_bp.post("/submissions")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Create a submission on behalf of an author",
    "responses": {201: {"description": "Created"}, 400: {"description": "Validation error"}, **_AUTH_ERRORS},
})
def create_submission():
    payload = load_or_abort(submission_create_schema)
    presented = payload.pop("is_presented", False)
    submission = get_services().identity.create_submission(payload, presented=presented)
    return submission_schema.dump(submission), 201


@admin_bp.put("/submissions/<uuid:submission_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Update a submission",
    "description": "Vote counts are not editable here.",
    "responses": {200: {"description": "Updated"}, 400: {"description": "Validation error"}, 404: {"description": "Not found"}, **_AUTH_ERRORS},
})
def update_submission(submission_id):
    payload = load_or_abort(submission_update_schema)
    submission = get_services().admin.update_submission(submission_id, payload)
    return submission_schema.dump(submission), 200


@admin_bp.delete("/submissions/<uuid:submission_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Delete a submission and its votes",
    "responses": {200: {"description": "Deleted"}, 404: {"description": "Not found"}, **_AUTH_ERRORS},
})
def delete_submission(submission_id):
    get_services().admin.delete_submission(submission_id)
    return {"message": "Submission deleted"}, 200


# Users

@admin_bp.get("/users")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "List users with submission and vote counts",
    "responses": {200: {"description": "OK"}, **_AUTH_ERRORS},
})
def list_users():
    rows = get_services().store.list_users_with_counts()
    return {"users": [_user_with_counts(u, subs, votes) for u, subs, votes in rows]}, 200


def _dump_user(user) -> dict:
    store = get_services().store
    return _user_with_counts(user, store.count_user_submissions(user.id), store.count_votes_by_voter(user.id))


@admin_bp.put("/users/<uuid:user_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Update a user's name, email, student ID or admin flag",
    "responses": {
        200: {"description": "Updated"},
        400: {"description": "Validation error, duplicate identity or self-demotion"},
        404: {"description": "Not found"},
        **_AUTH_ERRORS,
    },
})
def update_user(user_id):
    payload = load_or_abort(user_update_schema)
    user = get_services().admin.update_user(g.admin_user, user_id, payload)
    return _dump_user(user), 200


@admin_bp.put("/users/<uuid:user_id>/toggle-admin")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Grant or revoke administrator privileges",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {"type": "object", "properties": {"isAdmin": {"type": "boolean"}}, "required": ["isAdmin"]},
    }],
    "responses": {200: {"description": "Updated"}, 400: {"description": "Self-demotion"}, 404: {"description": "Not found"}, **_AUTH_ERRORS},
})
def toggle_admin(user_id):
    payload = load_or_abort(toggle_admin_schema)
    user = get_services().admin.set_admin(g.admin_user, user_id, payload["is_admin"])
    return _dump_user(user), 200


@admin_bp.delete("/users/<uuid:user_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Delete a non-admin user with their submissions and votes",
    "responses": {
        200: {"description": "Deleted"},
        400: {"description": "Own account or administrator account"},
        404: {"description": "Not found"},
        **_AUTH_ERRORS,
    },
})
def delete_user(user_id):
    get_services().admin.delete_user(g.admin_user, user_id)
    return {"message": "User deleted"}, 200


# Votes

@admin_bp.get("/votes")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "List all votes with voter and submission",
    "responses": {200: {"description": "OK"}, **_AUTH_ERRORS},
})
def list_votes():
    votes = get_services().store.list_votes()
    return {"votes": vote_many_schema.dump(votes)}, 200


@admin_bp.delete("/votes")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Delete every vote and reset all vote counts",
    "responses": {200: {"description": "Cleared"}, **_AUTH_ERRORS},
})
def clear_votes():
    deleted = get_services().votes.clear_all_votes()
    return {"message": "All votes cleared", "deleted": deleted}, 200


@admin_bp.delete("/votes/<uuid:vote_id>")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Delete one vote",
    "responses": {200: {"description": "Deleted"}, 404: {"description": "Not found"}, **_AUTH_ERRORS},
})
def delete_vote(vote_id):
    get_services().votes.delete_vote(vote_id)
    return {"message": "Vote deleted"}, 200


@admin_bp.get("/votes/stats")
@admin_required
@swag_from({
    "tags": ["Admin"],
    "security": _BEARER,
    "summary": "Vote statistics",
    "responses": {200: {"description": "Stats"}, **_AUTH_ERRORS},
})
def vote_stats():
    return get_services().votes.stats(), 200
