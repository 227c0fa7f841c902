from dataclasses import dataclass, field
from typing import Optional, Dict, Any

IMAGE_URL_ATTRIBUTE = "imageUrl"


@dataclass
class Product:
    """
    A catalog entry.

    Apart from the server-assigned id and the optional image URL, the
    attributes are whatever the seller supplied; they are kept as-is.
    """
    id: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    image_url: Optional[str] = None

    @classmethod
    def new(cls, product_id: str, payload: Dict[str, Any]) -> "Product":
        """Build a product from a seller payload, ignoring any client-supplied id"""
        attributes = {k: v for k, v in payload.items() if k != "id"}
        image_url = attributes.pop(IMAGE_URL_ATTRIBUTE, None)
        return cls(id=product_id, attributes=attributes, image_url=image_url)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Product":
        attributes = {k: v for k, v in item.items() if k not in ("id", IMAGE_URL_ATTRIBUTE)}
        return cls(id=item["id"], attributes=attributes, image_url=item.get(IMAGE_URL_ATTRIBUTE))

    def to_item(self) -> Dict[str, Any]:
        item = dict(self.attributes)
        item["id"] = self.id
        if self.image_url is not None:
            item[IMAGE_URL_ATTRIBUTE] = self.image_url
        return item

    def to_dict(self) -> Dict[str, Any]:
        return self.to_item()
