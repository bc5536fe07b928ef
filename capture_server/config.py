"""Configuration and application setup for the capture passkey server."""
from __future__ import annotations

import os
import re
from typing import List, Mapping, Optional

from flask import Flask
from fido2.webauthn import PublicKeyCredentialRpEntity

app = Flask(__name__)

# Emit JSON keys in construction order.
app.json.sort_keys = False


def _env_flag(name: str) -> Optional[bool]:
    """Return ``True`` or ``False`` when the named env var is explicitly set."""

    raw_value = os.environ.get(name)
    if raw_value is None:
        return None

    normalised = raw_value.strip().lower()
    if normalised in {"", "0", "false", "off", "no"}:
        return False
    return True


def _env_int(name: str, default: int) -> int:
    raw_value = os.environ.get(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return int(raw_value.strip())
    except ValueError:
        app.logger.warning("Ignoring non-integer value for %s: %r", name, raw_value)
        return default


def parse_cert_fingerprints(raw_value: Optional[str]) -> Optional[List[str]]:
    """Normalise a list of SHA-256 certificate fingerprints.

    Entries may be separated by commas, semicolons or newlines and may use any
    byte separator. Each surviving entry is returned as upper-case,
    colon-separated hex. Entries shorter than 32 bytes are dropped.
    """

    if raw_value is None:
        return None

    fingerprints: List[str] = []
    for component in re.split(r"[,;\n]+", raw_value):
        cleaned = re.sub(r"[^0-9a-fA-F]", "", component).upper()
        if len(cleaned) < 64 or len(cleaned) % 2:
            continue
        formatted = ":".join(cleaned[i:i + 2] for i in range(0, len(cleaned), 2))
        if formatted not in fingerprints:
            fingerprints.append(formatted)
    if not fingerprints:
        return None
    return fingerprints


DEFAULT_RP_ID = "yummyyummy.hiorangecat12888.workers.dev"
DEFAULT_RP_NAME = "SpectraLens Secure Capture"
DEFAULT_ANDROID_PACKAGE = "com.example.sample_capture_app"
DEFAULT_ANDROID_CERT_FINGERPRINTS = [
    "36:2F:AE:BA:28:A2:82:25:2B:B3:C9:51:53:07:B6:A8:"
    "D9:9D:A5:1E:A8:85:57:05:B8:08:68:F6:73:F8:35:A4",
]
DEFAULT_TIMEOUT_MS = 60000
DEFAULT_VERSION = "1.0.0"

app.config.setdefault(
    "CAPTURE_SERVER_RP_ID", os.environ.get("CAPTURE_SERVER_RP_ID", DEFAULT_RP_ID)
)
app.config.setdefault(
    "CAPTURE_SERVER_RP_NAME", os.environ.get("CAPTURE_SERVER_RP_NAME", DEFAULT_RP_NAME)
)
app.config.setdefault(
    "CAPTURE_SERVER_ANDROID_PACKAGE",
    os.environ.get("CAPTURE_SERVER_ANDROID_PACKAGE", DEFAULT_ANDROID_PACKAGE),
)
app.config.setdefault(
    "CAPTURE_SERVER_ANDROID_CERT_FINGERPRINTS",
    parse_cert_fingerprints(os.environ.get("CAPTURE_SERVER_ANDROID_CERT_FINGERPRINTS"))
    or list(DEFAULT_ANDROID_CERT_FINGERPRINTS),
)
app.config.setdefault(
    "CAPTURE_SERVER_TIMEOUT_MS", _env_int("CAPTURE_SERVER_TIMEOUT_MS", DEFAULT_TIMEOUT_MS)
)
app.config.setdefault(
    "CAPTURE_SERVER_VERSION", os.environ.get("CAPTURE_SERVER_VERSION", DEFAULT_VERSION)
)
app.config.setdefault(
    "CAPTURE_SERVER_LOG_PAYLOADS", bool(_env_flag("CAPTURE_SERVER_LOG_PAYLOADS"))
)
app.config.setdefault(
    "CAPTURE_SERVER_HOST", os.environ.get("CAPTURE_SERVER_HOST", "127.0.0.1")
)
app.config.setdefault("CAPTURE_SERVER_PORT", _env_int("CAPTURE_SERVER_PORT", 8787))
app.config.setdefault("CAPTURE_SERVER_DEBUG", bool(_env_flag("CAPTURE_SERVER_DEBUG")))


def build_rp_entity(rp_data: Optional[Mapping[str, str]] = None) -> PublicKeyCredentialRpEntity:
    """Create the ``PublicKeyCredentialRpEntity`` advertised to clients."""

    rp_id_value = (rp_data or {}).get("id") or app.config["CAPTURE_SERVER_RP_ID"]
    rp_name_value = (rp_data or {}).get("name") or app.config["CAPTURE_SERVER_RP_NAME"]
    return PublicKeyCredentialRpEntity(name=rp_name_value, id=rp_id_value)


__all__ = [
    "app",
    "build_rp_entity",
    "parse_cert_fingerprints",
    "DEFAULT_ANDROID_CERT_FINGERPRINTS",
    "DEFAULT_ANDROID_PACKAGE",
    "DEFAULT_RP_ID",
    "DEFAULT_RP_NAME",
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_VERSION",
]
