"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import Namespace, fields, reqparse
from werkzeug.datastructures import FileStorage

object_ns = Namespace("objects", description="Stored object operations")

# =============================================================================
# Request Models
# =============================================================================

upload_parser = reqparse.RequestParser()
upload_parser.add_argument(
    "files",
    type=FileStorage,
    location="files",
    action="append",
    required=True,
    help="One or more files; several files create a multi object",
)
upload_parser.add_argument(
    "token",
    type=str,
    location="form",
    required=False,
    help="Upload token (or send 'Authorization: Bearer <token>')",
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = object_ns.model(
    "UploadResponse",
    {
        "name": fields.String(description="Object name", example="abc.txt"),
        "reference": fields.String(
            description="Public reference", example="https://paste.example.com/abc.txt"
        ),
        "members": fields.List(
            fields.String, description="Member names of a multi upload"
        ),
    },
)

member_model = object_ns.model(
    "Member",
    {
        "name": fields.String(description="Member object name"),
        "reference": fields.String(description="Public reference of the member"),
        "exists": fields.Boolean(description="False once the member has expired"),
    },
)

object_response = object_ns.model(
    "Object",
    {
        "name": fields.String(description="Object name"),
        "reference": fields.String(description="Public reference"),
        "kind": fields.String(
            description="How the object is rendered", enum=["text", "binary", "multi"]
        ),
        "mimetype": fields.String(description="Detected MIME type", allow_null=True),
        "members": fields.List(fields.Nested(member_model)),
    },
)

error_response = object_ns.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Error title"),
        "message": fields.String(description="User-facing message"),
    },
)
