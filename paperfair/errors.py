from flask import jsonify, g, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException


class ServiceError(Exception):
    """
    Base for failures raised by the service layer.
    Each subclass fixes the error code and HTTP status it renders as.
    """
    code = "SERVICE_ERROR"
    status = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidRequest(ServiceError):
    code = "INVALID_REQUEST"
    default_message = "Invalid request"


class InvalidCredentials(ServiceError):
    code = "INVALID_CREDENTIALS"
    status = 401
    default_message = "Invalid email or password"


class Unauthenticated(ServiceError):
    code = "UNAUTHENTICATED"
    status = 401
    default_message = "Authentication required"


class Forbidden(ServiceError):
    code = "FORBIDDEN"
    status = 403
    default_message = "Insufficient permissions"


class NotFound(ServiceError):
    code = "NOT_FOUND"
    status = 404
    default_message = "Resource not found"


class DuplicateVote(ServiceError):
    code = "DUPLICATE_VOTE"
    default_message = "You have already voted for this submission"


class QuotaExhausted(ServiceError):
    code = "QUOTA_EXHAUSTED"
    default_message = "No votes remaining"


class InvalidOperation(ServiceError):
    code = "INVALID_OPERATION"
    default_message = "Operation not allowed"


class InternalFailure(ServiceError):
    code = "INTERNAL_FAILURE"
    status = 500
    default_message = "An unexpected error occurred"


def _payload(code: str, message: str, details=None, status=400):
    return (
        jsonify({
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            },
            "request_id": getattr(g, "request_id", None),
        }),
        status,
    )

def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(e: ServiceError):
        if e.status >= 500:
            current_app.logger.error("Service failure request_id=%s: %s", getattr(g, "request_id", None), e.message)
        return _payload(code=e.code, message=e.message, details=e.details, status=e.status)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e: SQLAlchemyError):
        current_app.logger.exception("Database error request_id=%s", getattr(g, "request_id", None))
        return _payload(InternalFailure.code, InternalFailure.default_message, status=500)

    # Generic HTTP errors (404, 405, 413, etc.)
    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        desc = e.description

        # If we pass structured error info via abort(description=dict)
        if isinstance(desc, dict):
            code = desc.get("code") or e.name.replace(" ", "_").upper()
            message = desc.get("message") or e.name
            details = desc.get("errors") or desc.get("details")
            return _payload(code=code, message=message, details=details, status=e.code or 400)

        return _payload(
            code=e.name.replace(" ", "_").upper(),
            message=desc or e.name,
            details=None,
            status=e.code or 400
        )

    @app.errorhandler(404)
    def handle_404(_):
        return _payload("NOT_FOUND", "Resource not found", status=404)

    @app.errorhandler(500)
    def handle_500(_):
        # Don't leak internals
        return _payload("INTERNAL_SERVER_ERROR", "An unexpected error occurred", status=500)
