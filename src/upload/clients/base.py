"""Abstract base classes for remote services."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import PostPayload, PublishResult


class AssetStorage(ABC):
    """Somewhere images can be uploaded to and served from."""

    @abstractmethod
    def upload_image(self, local_path: Path, slug: str) -> str:
        """Upload one image.

        Args:
            local_path: Image file on disk
            slug: Slug of the article the image belongs to

        Returns:
            Public URL of the uploaded image

        Raises:
            UploadError: If the upload fails
        """
        pass


class PostPublisher(ABC):
    """A blog backend that accepts rendered articles."""

    @abstractmethod
    def publish(self, payload: PostPayload) -> PublishResult:
        """Publish an article.

        Args:
            payload: Title, rendered markdown, and request data

        Returns:
            PublishResult with the remote id and URL

        Raises:
            UploadError: If the remote service rejects the post
        """
        pass
