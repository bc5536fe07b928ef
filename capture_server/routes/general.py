"""Static endpoints, prefix fallbacks and application-wide error handlers."""
from __future__ import annotations

from typing import Any, Dict, List

from flask import request
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from ..config import app
from ..responses import (
    ROUTE_METHODS,
    error_response,
    json_response,
    pretty_json_response,
    utc_timestamp,
)


AVAILABLE_ENDPOINTS: List[str] = [
    "/.well-known/assetlinks.json",
    "/api/v1/capture/initiate",
    "/api/v1/capture/submit",
    "/register/initiate",
    "/register/complete",
    "/login/initiate",
    "/login/complete",
    "/health",
]

# Paths under these prefixes that match no endpoint get a narrower 404.
API_GROUP_PREFIXES = ("/api/v1/capture/", "/register/", "/login/")

ASSET_LINK_RELATIONS = (
    "delegate_permission/common.handle_all_urls",
    "delegate_permission/common.get_login_creds",
)


def build_asset_links() -> List[Dict[str, Any]]:
    """Digital Asset Links statements for the configured Android app."""

    target = {
        "namespace": "android_app",
        "package_name": app.config["CAPTURE_SERVER_ANDROID_PACKAGE"],
        "sha256_cert_fingerprints": list(app.config["CAPTURE_SERVER_ANDROID_CERT_FINGERPRINTS"]),
    }
    return [{"relation": [relation], "target": dict(target)} for relation in ASSET_LINK_RELATIONS]


@app.route("/.well-known/assetlinks.json", methods=ROUTE_METHODS)
def asset_links():
    links = build_asset_links()
    app.logger.debug("Serving assetlinks.json for %s", app.config["CAPTURE_SERVER_ANDROID_PACKAGE"])
    return pretty_json_response(
        links,
        headers={
            "Access-Control-Allow-Methods": "GET, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Cache-Control": "public, max-age=3600",
        },
    )


@app.route("/health", methods=ROUTE_METHODS)
def health():
    return json_response(
        {
            "status": "healthy",
            "timestamp": utc_timestamp(),
            "version": app.config["CAPTURE_SERVER_VERSION"],
        }
    )


def not_found_response():
    if request.path.startswith(API_GROUP_PREFIXES):
        return error_response("API endpoint not found", 404)
    return json_response(
        {"error": "Not Found", "availableEndpoints": list(AVAILABLE_ENDPOINTS)},
        404,
    )


@app.errorhandler(NotFound)
def handle_not_found(_exc: NotFound):
    return not_found_response()


# Dispatch is by path alone; a method outside ROUTE_METHODS is just an unknown request.
@app.errorhandler(MethodNotAllowed)
def handle_method_not_allowed(_exc: MethodNotAllowed):
    return not_found_response()


@app.errorhandler(HTTPException)
def handle_http_exception(exc: HTTPException):
    return error_response(exc.name, exc.code or 500, message=exc.description)


@app.errorhandler(Exception)
def handle_unexpected_exception(exc: Exception):
    app.logger.exception("Unhandled error while serving %s: %s", request.path, exc)
    return error_response("Internal Server Error", 500, message=str(exc))
