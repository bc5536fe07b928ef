"""Routes for the passkey registration and login ceremonies.

The completion endpoints acknowledge whatever credential they receive; no
attestation, assertion, origin or counter checks are made and nothing is
stored.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..config import app
from ..options import PLACEHOLDER_USER_NAME, build_login_options, build_registration_options
from ..responses import (
    ROUTE_METHODS,
    endpoint_failure,
    error_response,
    json_response,
    log_payload,
    read_json_body,
)


UNKNOWN_CREDENTIAL_ID = "unknown"


def _text_field(payload: Any, name: str) -> Optional[str]:
    """Return a non-empty string field from a JSON object, else ``None``."""

    if not isinstance(payload, Mapping):
        return None
    value = payload.get(name)
    if isinstance(value, str) and value:
        return value
    return None


@app.route("/register/initiate", methods=ROUTE_METHODS)
@endpoint_failure("Failed to initiate registration")
def register_initiate():
    data = read_json_body()
    username = _text_field(data, "username")
    display_name = _text_field(data, "displayName")

    if not username or not display_name:
        app.logger.warning("Registration initiation missing username or displayName")
        return error_response("Username and displayName are required", 400)

    options = build_registration_options(username, display_name)
    app.logger.info("Issued registration challenge for %s", username)
    log_payload("Registration options", options)
    return json_response(options)


@app.route("/register/complete", methods=ROUTE_METHODS)
@endpoint_failure("Failed to complete registration")
def register_complete():
    credential = read_json_body()
    log_payload("Received registration credential", credential)

    credential_id = _text_field(credential, "id") or UNKNOWN_CREDENTIAL_ID
    app.logger.info("Acknowledged registration for credential %s", credential_id)
    return json_response(
        {
            "success": True,
            "message": "Registration successful",
            "userId": credential_id,
        }
    )


@app.route("/login/initiate", methods=ROUTE_METHODS)
@endpoint_failure("Failed to initiate login")
def login_initiate():
    data = read_json_body()
    username = _text_field(data, "username")

    if not username:
        app.logger.warning("Login initiation missing username")
        return error_response("Username is required", 400)

    options = build_login_options()
    app.logger.info("Issued login challenge for %s", username)
    log_payload("Login options", options)
    return json_response(options)


@app.route("/login/complete", methods=ROUTE_METHODS)
@endpoint_failure("Failed to complete login")
def login_complete():
    credential = read_json_body()
    log_payload("Received login credential", credential)

    credential_id = _text_field(credential, "id") or UNKNOWN_CREDENTIAL_ID
    username = _text_field(credential, "username") or PLACEHOLDER_USER_NAME
    app.logger.info("Acknowledged login for credential %s", credential_id)
    return json_response(
        {
            "success": True,
            "message": "Login successful",
            "userId": credential_id,
            "username": username,
        }
    )
