"""Random challenge and user handle generation."""
from __future__ import annotations

import secrets

from fido2.utils import websafe_encode

__all__ = [
    "CHALLENGE_LENGTH",
    "USER_HANDLE_LENGTH",
    "encode_user_handle",
    "generate_challenge",
    "generate_token",
    "generate_user_handle",
]


CHALLENGE_LENGTH = 32
USER_HANDLE_LENGTH = 16


def generate_token(byte_length: int) -> str:
    """Return ``byte_length`` random bytes as unpadded URL-safe Base64.

    The output only contains ``[A-Za-z0-9_-]``: ``+`` and ``/`` are replaced
    by ``-`` and ``_`` and ``=`` padding is removed, which is the form
    WebAuthn clients expect for challenge and user id fields.
    """

    if isinstance(byte_length, bool) or not isinstance(byte_length, int):
        raise ValueError(f"byte_length must be an integer, got {byte_length!r}")
    if byte_length <= 0:
        raise ValueError(f"byte_length must be positive, got {byte_length}")
    return websafe_encode(secrets.token_bytes(byte_length))


def generate_challenge() -> str:
    return generate_token(CHALLENGE_LENGTH)


def generate_user_handle() -> str:
    return generate_token(USER_HANDLE_LENGTH)


def encode_user_handle(username: str) -> str:
    """Derive a user handle from ``username``.

    Unlike :func:`generate_user_handle` this is deterministic and reversible:
    the same username always maps to the same handle.
    """

    return websafe_encode(username.encode("utf-8"))
