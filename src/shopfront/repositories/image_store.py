from abc import ABC, abstractmethod
from threading import Lock
from typing import BinaryIO, Dict, Tuple
import logging

from botocore.exceptions import BotoCoreError, ClientError

from shopfront.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class ImageStore(ABC):
    """Blob store for product images, addressed by object key"""

    def __init__(self, bucket: str, public_base_url: str):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @abstractmethod
    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        pass

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"


class S3ImageStore(ImageStore):

    def __init__(self, client, bucket: str, public_base_url: str):
        super().__init__(bucket, public_base_url)
        self.client = client

    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"PutObject {self.bucket}/{key} failed: {str(e)}")
            raise StoreError(f"PutObject {self.bucket}/{key} failed", "PutObject")
        logger.info(f"Stored image {self.bucket}/{key}")


class InMemoryImageStore(ImageStore):
    """Keeps uploaded objects in a dict of key -> (content_type, bytes)"""

    def __init__(self, bucket: str = "product-bucket", public_base_url: str = "http://localhost:4566"):
        super().__init__(bucket, public_base_url)
        self.objects: Dict[str, Tuple[str, bytes]] = {}
        self.put_count = 0
        self._lock = Lock()

    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        data = body.read()
        with self._lock:
            self.put_count += 1
            self.objects[key] = (content_type, data)
