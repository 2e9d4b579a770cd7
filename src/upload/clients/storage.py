"""Object storage client for article images."""

import mimetypes
import re
import time
import uuid
from pathlib import Path

import requests

from common.errors import UploadError
from common.logger import get_logger

from .base import AssetStorage

logger = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """Replace characters that are unsafe in object keys with '-'.

    Example:
        >>> sanitize_filename("封面 图.png")
        '----.png'
    """
    return _UNSAFE_KEY_CHARS.sub("-", filename)


class ObjectStorageClient(AssetStorage):
    """Uploads images with HTTP PUT to an object storage endpoint.

    Each image is stored under <prefix>/<slug>/<millis>-<nonce>-<filename>
    and served from the public base URL under the same key. The nonce keeps
    same-named images from different folders apart.
    """

    def __init__(
        self,
        endpoint_url: str,
        public_base_url: str,
        key_prefix: str = "posts",
        token: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize storage client.

        Args:
            endpoint_url: Base URL objects are PUT to
            public_base_url: Base URL objects are served from
            key_prefix: Prefix for every object key
            token: Optional bearer token
            timeout: Request timeout in seconds
        """
        self.endpoint_url = endpoint_url.rstrip("/")
        self.public_base_url = public_base_url.rstrip("/")
        self.key_prefix = key_prefix.strip("/")
        self.timeout = timeout
        self.session = requests.Session()
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def object_key(self, local_path: Path, slug: str) -> str:
        millis = int(time.time() * 1000)
        nonce = uuid.uuid4().hex[:8]
        filename = f"{millis}-{nonce}-{sanitize_filename(local_path.name)}"
        parts = [self.key_prefix, sanitize_filename(slug), filename]
        return "/".join(part for part in parts if part)

    def upload_image(self, local_path: Path, slug: str) -> str:
        key = self.object_key(local_path, slug)
        content_type = mimetypes.guess_type(local_path.name)[0] or "application/octet-stream"

        try:
            logger.debug(f"Uploading {local_path.name} as {key}")
            response = self.session.put(
                f"{self.endpoint_url}/{key}",
                data=local_path.read_bytes(),
                headers={"Content-Type": content_type},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise UploadError(f"Image upload timed out for {local_path.name}") from e
        except requests.exceptions.RequestException as e:
            raise UploadError(f"Image upload failed for {local_path.name}: {e}") from e

        if not response.ok:
            raise UploadError(
                f"Image upload rejected for {local_path.name}",
                status_code=response.status_code,
                body=response.text,
            )

        return f"{self.public_base_url}/{key}"
