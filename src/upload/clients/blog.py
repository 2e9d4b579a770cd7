"""Blog API client for publishing articles."""

from typing import Any

import requests

from common.errors import UploadError
from common.logger import get_logger

from ..models import PostPayload, PublishResult
from .base import PostPublisher

logger = get_logger(__name__)


class BlogClient(PostPublisher):
    """Client for the blog's article endpoint.

    Posts a JSON envelope {"title", "content", "data"} to <api_base>/posts,
    where content is the final markdown with its front matter. The response
    may carry "id" and "url"; when it does not, the slug stands in for the id
    and the URL is built from the site URL.
    """

    POSTS_PATH = "/posts"

    def __init__(
        self,
        api_base_url: str,
        site_url: str | None = None,
        token: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize blog client.

        Args:
            api_base_url: Base URL of the blog API
            site_url: Public site URL for fallback links (default: api_base_url)
            token: Optional bearer token
            timeout: Request timeout in seconds
        """
        self.api_base_url = api_base_url.rstrip("/")
        self.site_url = (site_url or api_base_url).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def publish(self, payload: PostPayload) -> PublishResult:
        slug = str(payload.request_data.get("slug", "")).strip()
        envelope = {
            "title": payload.title,
            "content": payload.body,
            "data": payload.request_data,
        }

        try:
            logger.debug(f"Publishing '{payload.title}' to {self.api_base_url}{self.POSTS_PATH}")
            response = self.session.post(
                f"{self.api_base_url}{self.POSTS_PATH}",
                json=envelope,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise UploadError(f"Publishing '{payload.title}' timed out") from e
        except requests.exceptions.RequestException as e:
            raise UploadError(f"Publishing '{payload.title}' failed: {e}") from e

        if not response.ok:
            raise UploadError(
                f"Blog API rejected '{payload.title}'",
                status_code=response.status_code,
                body=response.text,
            )

        data = self._parse_response(response)
        remote_id = data.get("id")
        remote_url = data.get("url")

        return PublishResult(
            id=str(remote_id) if remote_id not in (None, "") else slug,
            url=str(remote_url) if remote_url else self.fallback_url(slug),
        )

    def fallback_url(self, slug: str) -> str:
        return f"{self.site_url}/{slug}"

    def _parse_response(self, response: requests.Response) -> dict[str, Any]:
        """Best-effort JSON parsing; returns {} for empty or non-object bodies."""
        try:
            data = response.json()
        except ValueError:
            logger.debug("Blog API response was not JSON, using fallback id and URL")
            return {}

        # Some deployments wrap the created post in {"data": {...}}
        if isinstance(data, dict) and isinstance(data.get("data"), dict) and "id" not in data:
            data = data["data"]

        return data if isinstance(data, dict) else {}
