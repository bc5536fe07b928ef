"""JSON response helpers and the cross-origin policy applied to every response."""
from __future__ import annotations

import functools
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from flask import Response, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import app

__all__ = [
    "CORS_HEADERS",
    "ROUTE_METHODS",
    "endpoint_failure",
    "error_response",
    "json_response",
    "log_payload",
    "pretty_json_response",
    "read_json_body",
    "utc_timestamp",
]


CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

# Routes match on path alone; OPTIONS never reaches a view.
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

_View = TypeVar("_View", bound=Callable[..., Any])


@app.before_request
def _short_circuit_preflight() -> Optional[Response]:
    """Answer ``OPTIONS`` on any path before URL dispatch happens."""

    if request.method == "OPTIONS":
        return app.response_class(status=200)
    return None


@app.after_request
def _apply_cors_headers(response: Response) -> Response:
    # Views may narrow the policy; only fill in what they left unset.
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_response(
    payload: Any,
    status: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    response = jsonify(payload)
    response.status_code = status
    if headers:
        response.headers.update(headers)
    return response


def pretty_json_response(payload: Any, headers: Optional[Mapping[str, str]] = None) -> Response:
    """Serialise ``payload`` with two-space indentation; output is stable across calls."""

    body = app.json.dumps(payload, indent=2)
    response = app.response_class(body, mimetype="application/json")
    if headers:
        response.headers.update(headers)
    return response


def error_response(error: str, status: int, message: Optional[str] = None, **extra: Any) -> Response:
    payload: Dict[str, Any] = {"error": error}
    if message is not None:
        payload["message"] = message
    payload.update(extra)
    return json_response(payload, status)


def read_json_body() -> Any:
    """Parse the raw request body as JSON.

    Unlike ``request.get_json`` this does not look at the content type and
    lets decoding errors propagate, so callers report them as server errors.
    """

    return app.json.loads(request.get_data(as_text=True))


def log_payload(description: str, payload: Any) -> None:
    """Log ``payload`` in full when payload logging is switched on."""

    if not app.config.get("CAPTURE_SERVER_LOG_PAYLOADS"):
        return
    try:
        rendered = app.json.dumps(payload, indent=2)
    except TypeError:
        rendered = repr(payload)
    app.logger.info("%s: %s", description, rendered)


def endpoint_failure(label: str) -> Callable[[_View], _View]:
    """Report exceptions raised by a view as a 500 carrying ``label``.

    HTTP exceptions raised on purpose keep their own status code.
    """

    def decorator(view: _View) -> _View:
        @functools.wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return view(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:  # pylint: disable=broad-except
                app.logger.exception("%s: %s", label, exc)
                return error_response(label, 500, message=str(exc))

        return wrapper  # type: ignore[return-value]

    return decorator
