"""Data models for remote uploads."""

from dataclasses import dataclass
from typing import Any


@dataclass
class PostPayload:
    """Everything sent to the blog for one article."""

    title: str
    body: str
    request_data: dict[str, Any]


@dataclass
class PublishResult:
    """Identifier and public URL of a published post."""

    id: str
    url: str
