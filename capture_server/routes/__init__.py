"""Route registrations for the capture passkey server."""

# Import submodules to register routes via decorators.
from . import capture  # noqa: F401
from . import general  # noqa: F401
from . import passkeys  # noqa: F401

__all__ = ["capture", "general", "passkeys"]
