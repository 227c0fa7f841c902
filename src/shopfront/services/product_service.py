from typing import Any, List
import logging
import uuid

from shopfront.core.exceptions import InternalServerError, NotFoundError, ValidationError
from shopfront.models.product import Product
from shopfront.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product catalog operations.

    Products are schemaless: whatever JSON object the seller sends is
    stored, under an id the server assigns.
    """

    def __init__(self, product_repository: ProductRepository):
        self.product_repo = product_repository

    def create_product(self, payload: Any) -> Product:
        """Persist a new product and return it as re-read from the store"""
        if not isinstance(payload, dict) or not payload:
            raise ValidationError("Invalid body")

        product = Product.new(str(uuid.uuid4()), payload)
        self.product_repo.create_if_absent(product)

        created = self.product_repo.get_by_id(product.id)
        if created is None:
            raise InternalServerError(f"Product {product.id} missing after create")

        logger.info(f"Created product {product.id}")
        return created

    def list_products(self) -> List[Product]:
        products = self.product_repo.list_all()
        logger.info(f"Retrieved {len(products)} products")
        return products

    def get_product(self, product_id: str) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def attach_image(self, product_id: str, image_url: str) -> None:
        self.product_repo.set_image_url(product_id, image_url)
        logger.info(f"Attached image to product {product_id}")
