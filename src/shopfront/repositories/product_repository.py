from abc import abstractmethod
from typing import List, Optional

from shopfront.models.product import IMAGE_URL_ATTRIBUTE, Product
from shopfront.repositories.base import BaseRepository, DynamoTable, InMemoryTable


class ProductRepository(BaseRepository[Product]):
    """Repository for seller-defined product records"""

    @property
    def entity_name(self) -> str:
        return "Product"

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Every product in the store, in store order"""
        pass

    @abstractmethod
    def set_image_url(self, product_id: str, image_url: str) -> None:
        """Attach an image location to an existing product"""
        pass


class DynamoProductRepository(ProductRepository):

    def __init__(self, client, table_name: str = "products"):
        self.table = DynamoTable(client, table_name, self.entity_name)

    def create_if_absent(self, entity: Product) -> None:
        self.table.put_if_absent(entity.to_item())

    def get_by_id(self, entity_id: str) -> Optional[Product]:
        item = self.table.get(entity_id)
        return Product.from_item(item) if item else None

    def list_all(self) -> List[Product]:
        return [Product.from_item(item) for item in self.table.scan_all()]

    def set_image_url(self, product_id: str, image_url: str) -> None:
        self.table.set_attribute(product_id, IMAGE_URL_ATTRIBUTE, image_url)


class InMemoryProductRepository(ProductRepository):

    def __init__(self):
        self.table = InMemoryTable(self.entity_name)

    def create_if_absent(self, entity: Product) -> None:
        self.table.put_if_absent(entity.to_item())

    def get_by_id(self, entity_id: str) -> Optional[Product]:
        item = self.table.get(entity_id)
        return Product.from_item(item) if item else None

    def list_all(self) -> List[Product]:
        return [Product.from_item(item) for item in self.table.scan_all()]

    def set_image_url(self, product_id: str, image_url: str) -> None:
        self.table.set_attribute(product_id, IMAGE_URL_ATTRIBUTE, image_url)
