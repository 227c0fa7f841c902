"""
Serverless entry point.

API Gateway (REST, Lambda proxy integration) invokes `handler` once per
HTTP request. The event is replayed against the same Flask application
the WSGI server uses, which is built once per process on first use so
store clients survive across warm invocations.
"""

import base64
import logging
from typing import Any, Dict, Optional

from flask import Flask
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Response

from shopfront.app import create_app

logger = logging.getLogger(__name__)

_application: Optional[Flask] = None


def get_application() -> Flask:
    global _application
    if _application is None:
        _application = create_app()
    return _application


def _request_body(event: Dict[str, Any]) -> bytes:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body.encode("utf-8")


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Translate an API Gateway proxy event into a WSGI call and back."""
    app = get_application()
    builder = EnvironBuilder(
        path=event.get("path") or "/",
        method=event.get("httpMethod") or "GET",
        headers=event.get("headers") or {},
        query_string=event.get("queryStringParameters") or None,
        data=_request_body(event),
    )
    try:
        environ = builder.get_environ()
    finally:
        builder.close()

    response = Response.from_app(app.wsgi_app, environ)
    logger.info(f"{event.get('httpMethod')} {event.get('path')} -> {response.status_code}")
    return {
        "statusCode": response.status_code,
        "headers": dict(response.headers),
        "body": response.get_data(as_text=True),
    }
