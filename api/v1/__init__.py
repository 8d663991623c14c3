"""
API v1 - Drophere REST API

This module contains the versioned API endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

# Get API version from environment
API_VERSION = os.getenv("API_VERSION", "v1")

# Create blueprint for API v1
api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

# Initialize Flask-RESTX API with Swagger documentation
api = Api(
    api_v1_bp,
    version="1.0",
    title="Drophere API",
    description="Drop links that relay anonymous uploads to the owner's cloud storage",
    doc="/docs",  # Swagger UI will be available at /api/v1/docs
    contact="Drophere Team",
    license="MIT",
    authorizations={
        "Bearer": {"type": "apiKey", "in": "header", "name": "Authorization"}
    },
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import (  # noqa: E402
    account_ns,
    auth_ns,
    link_ns,
    storage_provider_ns,
    upload_ns,
)

# Register namespaces
api.add_namespace(auth_ns, path="/auth")
api.add_namespace(account_ns, path="/account")
api.add_namespace(storage_provider_ns, path="/storage-providers")
api.add_namespace(link_ns, path="/links")
api.add_namespace(upload_ns, path="/uploads")
