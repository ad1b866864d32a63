from marshmallow import Schema, fields, validate

from .user import UserSummarySchema

class VoteCastSchema(Schema):
    submission_id = fields.UUID(required=True, data_key="submissionId")
    voter_student_id = fields.Str(required=True, validate=validate.Length(min=1, max=64), data_key="voterStudentId")
    voter_name = fields.Str(required=True, validate=validate.Length(min=1, max=120), data_key="voterName")

class VotesRemainingSchema(Schema):
    voter_student_id = fields.Str(required=True, validate=validate.Length(min=1, max=64), data_key="voterStudentId")

class VoteBriefSchema(Schema):
    id = fields.UUID()
    voter_id = fields.UUID(data_key="voterId")
    created_at = fields.DateTime(data_key="createdAt")

class VotedSubmissionSchema(Schema):
    id = fields.UUID()
    title = fields.Str()
    author_name = fields.Str(data_key="authorName")
    type = fields.Str()

class VoteSchema(Schema):
    id = fields.UUID()
    voter_id = fields.UUID(data_key="voterId")
    submission_id = fields.UUID(data_key="submissionId")
    voter_student_id = fields.Str(allow_none=True, data_key="voterStudentId")
    created_at = fields.DateTime(data_key="createdAt")
    voter = fields.Nested(UserSummarySchema)
    submission = fields.Nested(VotedSubmissionSchema)
