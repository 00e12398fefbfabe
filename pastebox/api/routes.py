"""
Paste Routes

Plain HTTP endpoints: upload form, upload, rendered view and raw download.
Responses are plain text or HTML so command line clients can use them.
"""

from typing import BinaryIO, List, Tuple

from flask import (
    Blueprint,
    Response,
    current_app,
    redirect,
    render_template,
    request,
    send_file,
)

from pastebox.application.paste_service import PasteService
from pastebox.config.settings import ServiceConfig
from pastebox.domain.access.services import extract_credential
from pastebox.domain.errors import (
    ERROR_MESSAGES,
    ApplicationError,
    ErrorCategory,
    StorageIOError,
    UnauthorizedError,
    categorize_domain_error,
)
from pastebox.domain.object_storage.services import ObjectStore
from pastebox.domain.rendering.value_objects import (
    ClassificationFailedPlan,
    HighlightedTextPlan,
    MultiIndexPlan,
    RawBytesPlan,
)

pastes_bp = Blueprint("pastes", __name__)

FILES_FIELD = "files"
TOKEN_FIELD = "token"


def _paste_service() -> PasteService:
    return current_app.container.resolve(PasteService)


def _config() -> ServiceConfig:
    return current_app.container.resolve(ServiceConfig)


def text_response(message: str, status: int = 200) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def error_text_response(category: ErrorCategory) -> Response:
    info = ERROR_MESSAGES[category]
    return text_response(info["message"], info["status"])


def uploaded_files() -> List[Tuple[str, BinaryIO]]:
    """
    File parts of the current request, in the order they were sent.

    A part without a filename is still stored, with no extension.
    """
    return [
        (storage.filename or "", storage.stream)
        for storage in request.files.getlist(FILES_FIELD)
    ]


def request_credential():
    return extract_credential(
        request.form.get(TOKEN_FIELD),
        request.headers.get("Authorization"),
    )


def wants_plain_text(config: ServiceConfig) -> bool:
    """Command line clients get the reference; browsers get redirected."""
    if request.headers.get("User-Agent") == config.cli_user_agent:
        return True
    return "text/html" not in request.headers.get("Accept", "")


@pastes_bp.route("/", methods=["GET"])
def index():
    return render_template("index.html")


@pastes_bp.route("/", methods=["POST"])
def upload():
    """
    Store the uploaded files.

    One file answers ``{domain}/{name}{ext}``, several answer
    ``{domain}/m-{name}``.
    """
    service = _paste_service()

    try:
        result = service.upload(request_credential(), uploaded_files())
    except UnauthorizedError:
        return error_text_response(ErrorCategory.UNAUTHORIZED)
    except ApplicationError as e:
        return text_response(e.message, e.status_code)
    except StorageIOError as e:
        current_app.logger.exception(f"Upload failed: {e}")
        return error_text_response(categorize_domain_error(e))

    if wants_plain_text(_config()):
        return text_response(result.reference, 201)
    return redirect("/" + result.name)


@pastes_bp.route("/<name>", methods=["GET"])
def serve(name: str):
    """Highlighted HTML for text, an index page for batches, raw bytes otherwise."""
    service = _paste_service()
    plan = service.decide(name)

    if isinstance(plan, MultiIndexPlan):
        return render_template("multipaste.html", name=plan.name, files=plan.members)

    if isinstance(plan, HighlightedTextPlan):
        try:
            body = service.highlight(plan)
        except StorageIOError:
            return error_text_response(ErrorCategory.FILE_NOT_FOUND)
        return Response(body, mimetype="text/html")

    if isinstance(plan, RawBytesPlan):
        return _send_object(plan.path, plan.name, plan.content_type.mimetype)

    if isinstance(plan, ClassificationFailedPlan):
        return text_response(plan.message, 500)

    return error_text_response(ErrorCategory.FILE_NOT_FOUND)


@pastes_bp.route("/u/<name>", methods=["GET"])
def serve_raw(name: str):
    """Raw bytes of any stored object, never highlighted."""
    store = current_app.container.resolve(ObjectStore)
    if not store.exists(name):
        return error_text_response(ErrorCategory.FILE_NOT_FOUND)
    return _send_object(store.path_for(name), name, None)


def _send_object(path, name: str, mimetype):
    try:
        return send_file(
            path,
            mimetype=mimetype,
            as_attachment=False,
            download_name=name,
            conditional=True,
        )
    except FileNotFoundError:
        # Expired between the decision and the read.
        return error_text_response(ErrorCategory.FILE_NOT_FOUND)
