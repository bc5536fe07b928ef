"""
Serverless entry point for the capture passkey server.
Edge hosts load this module and serve the module-level WSGI ``app``.
"""

import os
import sys

# Add the project root to the Python path when the package is not installed
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from capture_server.app import app  # noqa: E402

# For serverless hosts, the app object needs to be available at module level
__all__ = ["app"]
