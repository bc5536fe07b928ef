"""Capture passkey server package.

The Flask application and the ``main`` entry point live in
:mod:`capture_server.app`.
"""
