from flask import abort, request
from marshmallow import ValidationError

def load_or_abort(schema, payload=None):
    """
    Load and validate a request body with a marshmallow schema.
    Unknown fields are rejected (schema default); errors abort with 400.
    """
    if payload is None:
        payload = request.get_json(silent=True) or {}
    try:
        return schema.load(payload)
    except ValidationError as err:
        abort(
            400,
            description={
                "code": "VALIDATION_ERROR",
                "message": "Validation error",
                "errors": err.messages,
            },
        )
