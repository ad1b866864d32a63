from marshmallow import Schema, fields, validate, validates_schema, ValidationError

class UserSummarySchema(Schema):
    id = fields.UUID()
    name = fields.Str(allow_none=True)
    email = fields.Str()
    student_id = fields.Str(allow_none=True, data_key="studentId")

class UserSchema(UserSummarySchema):
    is_admin = fields.Bool(data_key="isAdmin")
    created_at = fields.DateTime(data_key="createdAt")

class UserUpdateSchema(Schema):
    name = fields.Str(required=False, allow_none=True, validate=validate.Length(max=120))
    email = fields.Email(required=False)
    student_id = fields.Str(required=False, allow_none=True, validate=validate.Length(min=1, max=64), data_key="studentId")
    is_admin = fields.Bool(required=False, data_key="isAdmin")

    @validates_schema
    def at_least_one_field(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field must be provided")

class ToggleAdminSchema(Schema):
    is_admin = fields.Bool(required=True, data_key="isAdmin")
