from marshmallow import Schema, fields, validate

class AdminLoginSchema(Schema):
    """Schema for admin login request"""
    # The admin login is a fixed account name, not necessarily an email address
    email = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    password = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=128),
    )
