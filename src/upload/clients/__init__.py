"""HTTP clients for the blog API and image storage."""

from .base import AssetStorage, PostPublisher
from .blog import BlogClient
from .storage import ObjectStorageClient

__all__ = [
    "AssetStorage",
    "PostPublisher",
    "BlogClient",
    "ObjectStorageClient",
]
