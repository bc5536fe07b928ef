"""Application entry point for the capture passkey server."""
from __future__ import annotations

import importlib
import logging
from types import ModuleType

_BASE_PACKAGE = __package__ or "capture_server"


def _import_module(name: str) -> ModuleType:

    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as exc:  # pragma: no cover - environment specific.
        missing = exc.name or name
        raise ModuleNotFoundError(
            f"Unable to import '{missing}'. Ensure the capture server package "
            "and its dependencies (flask, fido2) are installed."
        ) from exc


config_module = _import_module(f"{_BASE_PACKAGE}.config")
app = config_module.app

# Request hooks first so they wrap every route registered below.
responses = _import_module(f"{_BASE_PACKAGE}.responses")  # noqa: F401
routes = _import_module(f"{_BASE_PACKAGE}.routes")  # noqa: F401


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def main() -> None:
    _configure_logging()
    app.logger.info(
        "Serving relying party %s on %s:%s",
        app.config["CAPTURE_SERVER_RP_ID"],
        app.config["CAPTURE_SERVER_HOST"],
        app.config["CAPTURE_SERVER_PORT"],
    )
    app.run(
        host=app.config["CAPTURE_SERVER_HOST"],
        port=app.config["CAPTURE_SERVER_PORT"],
        debug=app.config["CAPTURE_SERVER_DEBUG"],
    )


__all__ = ["app", "main"]


if __name__ == "__main__":  # pragma: no cover - convenience script entry point.
    main()
