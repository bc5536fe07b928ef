import base64
import logging

import pytest

from capture_server.config import DEFAULT_RP_ID


def _decode(token: str) -> bytes:
    return base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))


def test_register_initiate_requires_username_and_display_name(client):
    response = client.post("/register/initiate", json={})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Username and displayName are required"}
    assert "required" in response.get_json()["error"]
    assert response.headers["Access-Control-Allow-Origin"] == "*"


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "alice"},
        {"displayName": "Alice"},
        {"username": "", "displayName": "Alice"},
        {"username": "alice", "displayName": None},
        ["alice", "Alice"],
    ],
)
def test_register_initiate_rejects_incomplete_payloads(client, payload):
    response = client.post("/register/initiate", json=payload)

    assert response.status_code == 400


def test_register_initiate_builds_resident_key_options(client):
    response = client.post(
        "/register/initiate", json={"username": "alice", "displayName": "Alice"}
    )

    assert response.status_code == 200
    options = response.get_json()
    assert options["rp"]["id"] == "yummyyummy.hiorangecat12888.workers.dev"
    assert options["rp"]["id"] == DEFAULT_RP_ID
    assert options["user"]["name"] == "alice"
    assert options["user"]["displayName"] == "Alice"
    assert options["authenticatorSelection"]["requireResidentKey"] is True
    assert options["authenticatorSelection"]["residentKey"] == "required"
    assert options["authenticatorSelection"]["authenticatorAttachment"] == "platform"
    assert options["authenticatorSelection"]["userVerification"] == "preferred"
    assert [param["alg"] for param in options["pubKeyCredParams"]] == [-7, -257]
    assert options["timeout"] == 60000
    assert options["attestation"] == "none"
    assert options["username"] == "alice"
    assert options["displayName"] == "Alice"
    assert len(_decode(options["challenge"])) == 32


def test_register_initiate_user_handle_is_derived_from_username(client):
    payload = {"username": "alice", "displayName": "Alice"}

    first = client.post("/register/initiate", json=payload).get_json()
    second = client.post("/register/initiate", json=payload).get_json()

    assert first["user"]["id"] == second["user"]["id"] == "YWxpY2U"
    assert _decode(first["user"]["id"]) == b"alice"
    assert first["challenge"] != second["challenge"]


def test_register_initiate_malformed_json_is_a_server_error(client):
    response = client.post(
        "/register/initiate", data="{not json", content_type="application/json"
    )

    assert response.status_code == 500
    body = response.get_json()
    assert body["error"] == "Failed to initiate registration"
    assert body["message"]


def test_register_complete_acknowledges_any_credential(client):
    response = client.post(
        "/register/complete",
        json={"id": "cred-123", "response": {"attestationObject": "AAAA"}},
    )

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "message": "Registration successful",
        "userId": "cred-123",
    }


def test_register_complete_without_id_uses_placeholder(client):
    response = client.post("/register/complete", json={"rawId": "xyz"})

    assert response.get_json()["userId"] == "unknown"


def test_register_complete_parse_error(client):
    response = client.post("/register/complete", data="", content_type="application/json")

    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to complete registration"


def test_login_initiate_requires_username(client):
    response = client.post("/login/initiate", json={"displayName": "Alice"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Username is required"}


def test_login_initiate_returns_request_options(client):
    response = client.post("/login/initiate", json={"username": "alice"})

    assert response.status_code == 200
    options = response.get_json()
    assert set(options) == {"challenge", "rpId", "allowCredentials", "userVerification", "timeout"}
    assert options["rpId"] == DEFAULT_RP_ID
    assert options["allowCredentials"] == []
    assert options["userVerification"] == "preferred"
    assert options["timeout"] == 60000
    assert len(_decode(options["challenge"])) == 32


def test_login_initiate_malformed_json(client):
    response = client.post("/login/initiate", data="[", content_type="application/json")

    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to initiate login"


def test_login_complete_echoes_id_and_username(client):
    response = client.post("/login/complete", json={"id": "cred-9", "username": "alice"})

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "message": "Login successful",
        "userId": "cred-9",
        "username": "alice",
    }


def test_login_complete_falls_back_to_placeholders(client):
    response = client.post("/login/complete", json={})

    assert response.get_json() == {
        "success": True,
        "message": "Login successful",
        "userId": "unknown",
        "username": "user@example.com",
    }


def test_login_complete_parse_error(client):
    response = client.post("/login/complete", data="nope", content_type="application/json")

    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to complete login"


def test_payload_logging_dumps_credentials(client, payload_logging, caplog):
    with caplog.at_level(logging.INFO):
        client.post("/register/complete", json={"id": "cred-logged"})

    assert "Received registration credential" in caplog.text
    assert "cred-logged" in caplog.text


def test_payloads_not_dumped_by_default(client, caplog):
    with caplog.at_level(logging.INFO):
        client.post("/login/complete", json={"id": "cred-quiet", "secret": "do-not-log"})

    assert "do-not-log" not in caplog.text
