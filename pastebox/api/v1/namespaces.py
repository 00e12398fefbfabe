"""
API Namespaces - Stored object endpoints
"""

from flask import current_app
from flask_restx import Resource

from pastebox.api.routes import request_credential, uploaded_files
from pastebox.application.paste_service import PasteService
from pastebox.domain.errors import (
    ApplicationError,
    ErrorCategory,
    ObjectNotFoundError,
    StorageIOError,
    UnauthorizedError,
    categorize_domain_error,
    create_error_response,
)

from .models import (
    error_response,
    object_ns,
    object_response,
    upload_parser,
    upload_response,
)


def _paste_service() -> PasteService:
    return current_app.container.resolve(PasteService)


@object_ns.route("")
class ObjectList(Resource):
    """Object upload"""

    @object_ns.doc("upload_objects")
    @object_ns.expect(upload_parser)
    @object_ns.response(201, "Created", upload_response)
    @object_ns.response(400, "No files", error_response)
    @object_ns.response(401, "Not authenticated", error_response)
    @object_ns.response(500, "Storage error", error_response)
    def post(self):
        """
        Upload one or more files

        A single file is stored as a plain object; several files are
        stored individually plus a multi object listing them.
        """
        try:
            result = _paste_service().upload(request_credential(), uploaded_files())
            return result.to_dict(), 201

        except UnauthorizedError as e:
            return create_error_response(ErrorCategory.UNAUTHORIZED, str(e))
        except ApplicationError as e:
            return create_error_response(e.category, e.technical_message)
        except StorageIOError as e:
            current_app.logger.exception(f"Upload failed: {e}")
            return create_error_response(categorize_domain_error(e), str(e))


@object_ns.route("/<string:name>")
@object_ns.param("name", "The object name")
class ObjectItem(Resource):
    """Object description"""

    @object_ns.doc("get_object")
    @object_ns.response(200, "Success", object_response)
    @object_ns.response(404, "File Not Found", error_response)
    @object_ns.response(500, "Classification failed", error_response)
    def get(self, name):
        """
        Describe a stored object

        Reports whether the object renders as text, binary or a
        multi upload, and lists members with their availability.
        """
        try:
            return _paste_service().describe(name), 200

        except ObjectNotFoundError as e:
            return create_error_response(ErrorCategory.FILE_NOT_FOUND, str(e))
        except ApplicationError as e:
            return create_error_response(e.category, e.technical_message)
