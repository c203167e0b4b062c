"""Image uploads for order reference photos and catalog pictures.

Validation happens before any network call. With the hosted backend the bytes
go to object storage and a public URL comes back; in local fallback mode the
image is inlined as a base64 data URL stored alongside the record.
"""
import base64
import random
import string
from typing import Callable, Optional

from ..app.config import BackendConfig, Config
from ..data.remote_client import SupabaseClient
from ..utils.errors import ImageValidationError
from ..utils.logger import get_logger
from .base_service import utc_now

logger = get_logger("storage")

MAX_IMAGE_BYTES = Config.MAX_IMAGE_BYTES


def validate_image(content: bytes, content_type: Optional[str]) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError("Please upload an image file.")
    if content is None or len(content) == 0:
        raise ImageValidationError("The uploaded image is empty.")
    if len(content) > MAX_IMAGE_BYTES:
        raise ImageValidationError("Image must be smaller than 5 MB.")


def data_url(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


def storage_path(folder: str, filename: str, now_ms: int) -> str:
    name = filename or ""
    ext = name.rsplit(".", 1)[-1] if "." in name else ""
    ext = ext or "img"
    token = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{folder}/{now_ms}-{token}.{ext}"


class ImageStorage:
    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        remote_factory: Callable[[BackendConfig], SupabaseClient] = None,
    ):
        self.config = config
        self._remote_factory = remote_factory or SupabaseClient.from_config

    def upload_image(self, filename: str, content: bytes, content_type: str, folder: str = "orders") -> str:
        """
        Store an image and return a URL the UI can render.

        Raises:
            ImageValidationError: wrong type or over 5 MB (nothing is sent)
            RemoteBackendError: the hosted storage rejected the upload
        """
        validate_image(content, content_type)

        config = self.config if self.config is not None else BackendConfig.from_env()
        if not config.is_remote_configured():
            return data_url(content, content_type)

        path = storage_path(folder, filename, int(utc_now().timestamp() * 1000))
        client = self._remote_factory(config)
        client.upload(config.bucket, path, content, content_type, cache_control="3600", upsert=False)
        logger.info("Uploaded %s (%d bytes) to %s/%s", filename, len(content), config.bucket, path)
        return client.public_url(config.bucket, path)
