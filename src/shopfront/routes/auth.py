import logging

from flask import Blueprint

from shopfront.core.dependencies import get_container
from shopfront.routes.utils import get_json_body, json_response
from shopfront.services.auth_service import AuthService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/signup", methods=["POST"])
def sign_up():
    """Register a new user; the stored password hash is never echoed back."""
    user = get_container().get(AuthService).sign_up(get_json_body())
    return json_response(user.to_dict(), 201)


@auth_bp.route("/signin", methods=["POST"])
def sign_in():
    """Exchange credentials for a bearer token returned in the Authorization header."""
    auth_token = get_container().get(AuthService).sign_in(get_json_body())
    return json_response(
        {"message": "Signed-in successfully"},
        200,
        headers={"Authorization": auth_token.authorization_header},
    )
