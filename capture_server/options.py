"""Builders for the WebAuthn-style option objects handed to the capture app.

Nothing produced here is remembered: a challenge is issued and forgotten, so
no later request is ever checked against it.
"""
from __future__ import annotations

from typing import Any, Dict, List

from fido2.cose import ES256, RS256
from fido2.webauthn import (
    AttestationConveyancePreference,
    AuthenticatorAttachment,
    PublicKeyCredentialType,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)

from .config import app, build_rp_entity
from .tokens import encode_user_handle, generate_challenge, generate_user_handle

__all__ = [
    "PLACEHOLDER_DISPLAY_NAME",
    "PLACEHOLDER_USER_NAME",
    "build_capture_options",
    "build_login_options",
    "build_registration_options",
    "public_key_parameters",
]


PLACEHOLDER_USER_NAME = "user@example.com"
PLACEHOLDER_DISPLAY_NAME = "User"

# Preference order.
_PREFERRED_ALGORITHMS = (ES256.ALGORITHM, RS256.ALGORITHM)


def public_key_parameters() -> List[Dict[str, Any]]:
    return [
        {"alg": alg, "type": PublicKeyCredentialType.PUBLIC_KEY.value}
        for alg in _PREFERRED_ALGORITHMS
    ]


def _rp_dict() -> Dict[str, str]:
    rp = build_rp_entity()
    return {"id": rp.id, "name": rp.name}


def _timeout() -> int:
    return int(app.config["CAPTURE_SERVER_TIMEOUT_MS"])


def build_capture_options() -> Dict[str, Any]:
    """Creation options for a capture session.

    The user is a fixed placeholder profile with a fresh random handle. The
    object also carries the request-side fields (``rpId``, ``allowCredentials``
    and friends) so the app can use it for either ceremony.
    """

    rp = _rp_dict()
    preferred = UserVerificationRequirement.PREFERRED.value
    return {
        "challenge": generate_challenge(),
        "rp": rp,
        "user": {
            "id": generate_user_handle(),
            "name": PLACEHOLDER_USER_NAME,
            "displayName": PLACEHOLDER_DISPLAY_NAME,
        },
        "pubKeyCredParams": public_key_parameters(),
        "authenticatorSelection": {
            "authenticatorAttachment": AuthenticatorAttachment.PLATFORM.value,
            "userVerification": preferred,
            "requireResidentKey": False,
            "residentKey": ResidentKeyRequirement.PREFERRED.value,
        },
        "timeout": _timeout(),
        "attestation": AttestationConveyancePreference.NONE.value,
        "excludeCredentials": [],
        "rpId": rp["id"],
        "allowCredentials": [],
        "userVerification": preferred,
        "mediation": "optional",
    }


def build_registration_options(username: str, display_name: str) -> Dict[str, Any]:
    """Creation options for a discoverable credential bound to ``username``."""

    return {
        "challenge": generate_challenge(),
        "rp": _rp_dict(),
        "user": {
            "id": encode_user_handle(username),
            "name": username,
            "displayName": display_name,
        },
        "pubKeyCredParams": public_key_parameters(),
        "authenticatorSelection": {
            "authenticatorAttachment": AuthenticatorAttachment.PLATFORM.value,
            "requireResidentKey": True,
            "residentKey": ResidentKeyRequirement.REQUIRED.value,
            "userVerification": UserVerificationRequirement.PREFERRED.value,
        },
        "timeout": _timeout(),
        "attestation": AttestationConveyancePreference.NONE.value,
        # Duplicated at the top level for the mobile client.
        "username": username,
        "displayName": display_name,
    }


def build_login_options() -> Dict[str, Any]:
    # An empty allow list lets the authenticator offer any discoverable credential.
    return {
        "challenge": generate_challenge(),
        "rpId": build_rp_entity().id,
        "allowCredentials": [],
        "userVerification": UserVerificationRequirement.PREFERRED.value,
        "timeout": _timeout(),
    }
