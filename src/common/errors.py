"""Exceptions raised while turning a dropped archive into a published post."""


class PublisherError(Exception):
    """Base exception for publishing errors."""

    pass


class ConfigError(PublisherError):
    """Required configuration is missing or invalid."""

    pass


class ExtractionError(PublisherError):
    """Archive could not be unpacked."""

    pass


class LayoutError(PublisherError):
    """No markdown article was found in the extracted archive."""

    pass


class DataSectionError(PublisherError):
    """The data section is missing or does not hold a valid JSON object."""

    pass


class UploadError(PublisherError):
    """Asset or post upload failed.

    Attributes:
        status_code: HTTP status returned by the remote service, if any
        body: Response body text kept for diagnostics, if any
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is not None:
            message = f"{message} (HTTP {self.status_code})"
        if self.body:
            message = f"{message}: {self.body}"
        return message
