"""Routes for the secure-capture challenge and submission flow."""
from __future__ import annotations

from typing import Dict, Optional

from flask import request
from werkzeug.sansio.multipart import Data, Epilogue, Field, File, MultipartDecoder, NeedData

from ..config import app
from ..options import build_capture_options
from ..responses import (
    ROUTE_METHODS,
    endpoint_failure,
    error_response,
    json_response,
    log_payload,
    utc_timestamp,
)


CAPTURE_VERIFIED_MESSAGE = "Capture data verified"

_READ_CHUNK_SIZE = 64 * 1024


class _Part:
    """Running summary of one multipart part while its data streams in."""

    def __init__(self, name: str, is_file: bool) -> None:
        self.name = name
        self.is_file = is_file
        self.size = 0
        self._text = bytearray()

    def feed(self, chunk: bytes) -> None:
        self.size += len(chunk)
        if not self.is_file and self.name != "photo":
            self._text.extend(chunk)

    def summary(self) -> str:
        if self.is_file or self.name == "photo":
            return f"[File: {self.size} bytes]"
        return self._text.decode("utf-8", errors="replace")


def _summarise_submission() -> Dict[str, str]:
    """Walk the multipart body in document order.

    File contents are counted, never kept. Malformed bodies raise
    ``ValueError``.
    """

    boundary = request.mimetype_params.get("boundary")
    if not boundary:
        raise ValueError("Missing multipart boundary")

    decoder = MultipartDecoder(boundary.encode("latin-1"))
    received: Dict[str, str] = {}
    current: Optional[_Part] = None

    def finish() -> None:
        if current is not None:
            received.setdefault(current.name, current.summary())

    while True:
        event = decoder.next_event()
        if isinstance(event, NeedData):
            chunk = request.stream.read(_READ_CHUNK_SIZE)
            decoder.receive_data(chunk or None)
        elif isinstance(event, (Field, File)):
            finish()
            current = _Part(event.name, isinstance(event, File))
        elif isinstance(event, Data):
            if current is not None:
                current.feed(event.data)
                if not event.more_data:
                    finish()
                    current = None
        elif isinstance(event, Epilogue):
            finish()
            return received


@app.route("/api/v1/capture/initiate", methods=ROUTE_METHODS)
def capture_initiate():
    options = build_capture_options()
    app.logger.info(
        "Issued capture challenge (%d chars) for user handle %s",
        len(options["challenge"]),
        options["user"]["id"],
    )
    log_payload("Capture creation options", options)
    return json_response(
        options,
        headers={
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        },
    )


@app.route("/api/v1/capture/submit", methods=ROUTE_METHODS)
@endpoint_failure("Failed to process capture data")
def capture_submit():
    content_type = request.headers.get("Content-Type", "")
    if "multipart/form-data" not in content_type:
        app.logger.warning("Rejected capture submission with Content-Type %r", content_type)
        return error_response("Content-Type must be multipart/form-data", 400)

    received = _summarise_submission()
    app.logger.info("Received capture data: %s", received)

    return json_response(
        {
            "success": True,
            "verified": True,
            "message": CAPTURE_VERIFIED_MESSAGE,
            "timestamp": utc_timestamp(),
            "receivedFields": list(received),
        }
    )
