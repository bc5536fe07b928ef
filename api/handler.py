"""
Event-style serverless handler for the capture passkey server.
Converts ``{method, path, query, headers, body}`` events into Flask requests
and returns ``{statusCode, headers, body}`` results.
"""

import base64
import json
import os
import sys

# Add the project root to the Python path when the package is not installed
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from capture_server.app import app  # noqa: E402


def _event_body(event):
    """Return the raw request body carried by an event as bytes."""
    body = event.get('body') or b''
    if isinstance(body, (dict, list)):
        return json.dumps(body).encode('utf-8')
    if isinstance(body, str):
        if event.get('isBase64Encoded'):
            return base64.b64decode(body)
        return body.encode('utf-8')
    return bytes(body)


def handler(event):
    """Main serverless function handler"""
    try:
        method = event.get('httpMethod') or event.get('method') or 'GET'
        path = event.get('path') or '/'
        query = event.get('queryStringParameters') or event.get('query') or {}
        headers = event.get('headers') or {}
        body = _event_body(event)

        with app.test_request_context(
            path,
            method=method.upper(),
            query_string=query,
            headers=headers,
            data=body,
        ):
            response = app.full_dispatch_request()

        return {
            'statusCode': response.status_code,
            'headers': dict(response.headers),
            'body': response.get_data(as_text=True),
        }
    except Exception as e:  # pylint: disable=broad-except
        app.logger.exception("Serverless handler failed: %s", e)
        return {
            'statusCode': 500,
            'headers': {
                'Content-Type': 'application/json',
                'Access-Control-Allow-Origin': '*',
            },
            'body': json.dumps({'error': f'Handler error: {str(e)}'}),
        }


# For compatibility with different invocation methods
def main(event):
    """Alternative entry point"""
    return handler(event)


__all__ = ['handler', 'main']
