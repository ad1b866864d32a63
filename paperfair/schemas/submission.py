from marshmallow import Schema, fields, validate, validates_schema, post_load, ValidationError

from ..models.submission import Submission
from .user import UserSummarySchema
from .vote import VoteBriefSchema

OPTIONAL_TEXT_FIELDS = (
    "description",
    "abstract",
    "keywords",
    "author_student_id",
    "co_authors",
    "co_author_student_ids",
    "file_url",
    "file_name",
)


class _SubmissionFieldsSchema(Schema):
    description = fields.Str(required=False, allow_none=True)
    abstract = fields.Str(required=False, allow_none=True)
    keywords = fields.Str(required=False, allow_none=True, validate=validate.Length(max=500))
    co_authors = fields.Str(required=False, allow_none=True, data_key="coAuthors")
    co_author_student_ids = fields.Str(required=False, allow_none=True, data_key="coAuthorStudentIds")
    author_student_id = fields.Str(required=False, allow_none=True, validate=validate.Length(max=64), data_key="authorStudentId")
    file_url = fields.Str(required=False, allow_none=True, validate=validate.Length(max=500), data_key="fileUrl")
    file_name = fields.Str(required=False, allow_none=True, validate=validate.Length(max=255), data_key="fileName")
    file_size = fields.Int(required=False, allow_none=True, validate=validate.Range(min=0), data_key="fileSize")

    @post_load
    def blank_to_none(self, data, **kwargs):
        # Form clients send "" for untouched optional inputs
        for key in OPTIONAL_TEXT_FIELDS:
            if key in data and isinstance(data[key], str) and not data[key].strip():
                data[key] = None
        return data


class SubmissionCreateSchema(_SubmissionFieldsSchema):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=300))
    type = fields.Str(load_default=Submission.TYPE_PAPER, validate=validate.OneOf(Submission.VALID_TYPES))
    author_name = fields.Str(required=True, validate=validate.Length(min=1, max=120), data_key="authorName")
    author_email = fields.Email(required=True, data_key="authorEmail")


class AdminSubmissionCreateSchema(SubmissionCreateSchema):
    is_presented = fields.Bool(load_default=False, data_key="isPresented")


class SubmissionUpdateSchema(_SubmissionFieldsSchema):
    title = fields.Str(required=False, validate=validate.Length(min=1, max=300))
    type = fields.Str(required=False, validate=validate.OneOf(Submission.VALID_TYPES))
    author_name = fields.Str(required=False, validate=validate.Length(min=1, max=120), data_key="authorName")
    author_email = fields.Email(required=False, data_key="authorEmail")
    is_presented = fields.Bool(required=False, data_key="isPresented")

    @validates_schema
    def at_least_one_field(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field must be provided")


class SubmissionSchema(Schema):
    id = fields.UUID()
    title = fields.Str()
    description = fields.Str(allow_none=True)
    abstract = fields.Str(allow_none=True)
    keywords = fields.Str(allow_none=True)
    type = fields.Str()
    author_id = fields.UUID(data_key="authorId")
    author_name = fields.Str(data_key="authorName")
    author_email = fields.Str(data_key="authorEmail")
    author_student_id = fields.Str(allow_none=True, data_key="authorStudentId")
    co_authors = fields.Str(allow_none=True, data_key="coAuthors")
    co_author_student_ids = fields.Str(allow_none=True, data_key="coAuthorStudentIds")
    file_url = fields.Str(allow_none=True, data_key="fileUrl")
    file_name = fields.Str(allow_none=True, data_key="fileName")
    file_size = fields.Int(allow_none=True, data_key="fileSize")
    vote_count = fields.Int(data_key="voteCount")
    is_presented = fields.Bool(data_key="isPresented")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
    author = fields.Nested(UserSummarySchema)


class SubmissionWithVotesSchema(SubmissionSchema):
    votes = fields.List(fields.Nested(VoteBriefSchema))
