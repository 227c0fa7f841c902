import logging

from flask import Blueprint, request

from shopfront.core.dependencies import get_container
from shopfront.core.exceptions import UnknownRouteError
from shopfront.routes.utils import authenticate_request, current_user, get_json_body, json_response
from shopfront.services.image_service import ImageUploadService
from shopfront.services.product_service import ProductService

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)


@products_bp.before_request
def require_bearer_token():
    authenticate_request()


@products_bp.route("", methods=["POST"])
def create_product():
    """Create a product from an arbitrary JSON object."""
    product = get_container().get(ProductService).create_product(get_json_body())
    logger.info(f"Product {product.id} created by user {current_user().user_id}")
    return json_response(product.to_dict())


@products_bp.route("/all", methods=["GET"])
def list_products():
    """Return every product in the catalog."""
    products = get_container().get(ProductService).list_products()
    return json_response([p.to_dict() for p in products])


@products_bp.route("/<product_id>/image", methods=["POST"])
def upload_product_image(product_id: str):
    """Attach a single JPEG, PNG or WebP image to a product."""
    image_url = get_container().get(ImageUploadService).upload_product_image(
        product_id,
        request.headers.get("Content-Type"),
        request.stream,
    )
    return json_response({"imageUrl": image_url})


@products_bp.route("", methods=["GET", "PUT", "PATCH", "DELETE"])
@products_bp.route("/<path:unknown>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def unknown_product_path(unknown: str = ""):
    # Authenticated first, like every other product path
    raise UnknownRouteError(request.method, request.path)
