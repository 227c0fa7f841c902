import logging
import uuid
from tempfile import SpooledTemporaryFile
from typing import BinaryIO, Iterator, Optional, Sequence

from werkzeug.http import parse_options_header
from werkzeug.sansio.multipart import (
    Data, Epilogue, Event, Field, File, MultipartDecoder, NeedData
)
from werkzeug.utils import secure_filename

from shopfront.core.exceptions import BaseAPIException, UnsupportedUploadError, ValidationError
from shopfront.repositories.image_store import ImageStore
from shopfront.services.product_service import ProductService

logger = logging.getLogger(__name__)

SPOOL_MAX_MEMORY = 1024 * 1024


def _chunk_iter(read, size: int) -> Iterator[Optional[bytes]]:
    """Yield chunks from `read`, then None to signal the end of the body"""
    while True:
        data = read(size)
        if not data:
            break
        yield data
    yield None


class _UploadState:
    """
    Accumulates the outcome of a multipart parse.

    Rejections are recorded in `error` instead of being raised from the
    event handler, so the caller decides when parsing stops and always
    sees the failure.
    """

    def __init__(self, allowed_types: Sequence[str]):
        self.allowed_types = allowed_types
        self.file_count = 0
        self.error: Optional[BaseAPIException] = None
        self.filename: Optional[str] = None
        self.content_type: Optional[str] = None
        self.body: Optional[SpooledTemporaryFile] = None
        self._writing = False

    def handle(self, event: Event) -> None:
        if isinstance(event, File) and event.filename:
            self._start_file(event)
        elif isinstance(event, (Field, File)):
            # Plain form fields and empty file inputs carry no image
            self._writing = False
        elif isinstance(event, Data) and self._writing:
            self.body.write(event.data)
            if not event.more_data:
                self._writing = False

    def _start_file(self, event: File) -> None:
        self.file_count += 1
        if self.file_count > 1:
            self.error = UnsupportedUploadError("Only one image can be uploaded for product")
            return

        content_type, _ = parse_options_header(event.headers.get("Content-Type", ""))
        content_type = content_type.lower()
        if content_type not in self.allowed_types:
            self.error = UnsupportedUploadError(
                "Invalid image format. Only JPEG, PNG, and WebP are allowed."
            )
            return

        self.filename = secure_filename(event.filename) or "image"
        self.content_type = content_type
        self.body = SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY)
        self._writing = True

    def close(self) -> None:
        if self.body is not None:
            self.body.close()


class ImageUploadService:
    """
    Stores a single product image from a multipart/form-data body.

    The body is parsed incrementally; the file is spooled locally and
    written to the image store once, after the whole body parsed cleanly.
    """

    def __init__(
        self,
        product_service: ProductService,
        image_store: ImageStore,
        allowed_types: Sequence[str] = ("image/jpeg", "image/png", "image/webp"),
        chunk_size: int = 64 * 1024,
    ):
        self.product_service = product_service
        self.image_store = image_store
        self.allowed_types = tuple(allowed_types)
        self.chunk_size = chunk_size

    def upload_product_image(self, product_id: Optional[str], content_type: Optional[str], stream: BinaryIO) -> str:
        """
        Parse, validate and store the image, returning its public URL.

        Raises:
            UnsupportedUploadError: wrong content type, several files, disallowed media type
            ValidationError: missing product id, malformed body, or no file
            NotFoundError: the product does not exist
        """
        mimetype, options = parse_options_header(content_type or "")
        if mimetype.lower() != "multipart/form-data":
            raise UnsupportedUploadError(
                f"Expected content-type was 'multipart/form-data' but found '{content_type}'"
            )
        if not product_id or not product_id.strip():
            raise ValidationError("Product id is required")

        boundary = options.get("boundary", "")
        try:
            boundary_bytes = boundary.encode("ascii")
        except UnicodeEncodeError:
            boundary_bytes = b""
        if not boundary_bytes:
            raise UnsupportedUploadError("Missing multipart boundary")

        self.product_service.get_product(product_id)

        state = self._parse(stream, boundary_bytes)
        try:
            key = f"product-{product_id}/{uuid.uuid4()}-{state.filename}"
            state.body.seek(0)
            self.image_store.put(key, state.body, state.content_type)
        finally:
            state.close()

        image_url = self.image_store.public_url(key)
        self.product_service.attach_image(product_id, image_url)
        logger.info(f"Uploaded image for product {product_id} to {key}")
        return image_url

    def _parse(self, stream: BinaryIO, boundary: bytes) -> _UploadState:
        state = _UploadState(self.allowed_types)
        decoder = MultipartDecoder(boundary)

        try:
            for chunk in _chunk_iter(stream.read, self.chunk_size):
                decoder.receive_data(chunk)
                event = decoder.next_event()
                while not isinstance(event, (Epilogue, NeedData)):
                    state.handle(event)
                    if state.error is not None:
                        break
                    event = decoder.next_event()
                if state.error is not None:
                    break
        except ValueError as e:
            state.close()
            logger.warning(f"Malformed multipart body: {str(e)}")
            raise ValidationError("Malformed multipart body")

        if state.error is not None:
            state.close()
            logger.warning(f"Image upload rejected: {state.error.message}")
            raise state.error

        if state.file_count == 0:
            raise ValidationError("No image file uploaded")

        return state
