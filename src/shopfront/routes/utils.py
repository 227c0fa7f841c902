import logging
from typing import Any, Dict, Optional

from flask import g, jsonify, request

from shopfront.core.dependencies import get_container
from shopfront.core.exceptions import UnauthorizedError
from shopfront.core.security import TokenClaims, TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def json_response(data: Any, status: int = 200, headers: Optional[Dict[str, str]] = None):
    """Plain JSON response with optional extra headers."""
    response = jsonify(data)
    response.status_code = status
    if headers:
        response.headers.update(headers)
    return response


def get_json_body() -> Any:
    """
    Decode the request body as JSON regardless of the declared content type.

    Returns None for an empty or undecodable body; callers validate the shape.
    """
    return request.get_json(force=True, silent=True)


def authenticate_request() -> TokenClaims:
    """Verify the bearer token on the current request and expose its claims on g.current_user."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        logger.warning(f"Missing Authorization header from {request.remote_addr}")
        raise UnauthorizedError("Missing Authorization")

    token = auth_header[len(BEARER_PREFIX):] if auth_header.startswith(BEARER_PREFIX) else auth_header
    claims = get_container().get(TokenService).verify(token.strip())
    g.current_user = claims
    return claims


def current_user() -> TokenClaims:
    return g.current_user
