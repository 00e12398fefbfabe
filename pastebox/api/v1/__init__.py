"""
API v1 - pastebox JSON API

Versioned endpoints with OpenAPI/Swagger documentation.
"""

from flask import Blueprint
from flask_restx import Api

from .namespaces import object_ns

API_VERSION = "v1"

api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

api = Api(
    api_v1_bp,
    version="1.0",
    title="pastebox API",
    description="Upload files and inspect stored objects before they expire",
    doc="/docs",
)

api.add_namespace(object_ns, path="/objects")
