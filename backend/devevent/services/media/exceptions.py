"""Media host service exceptions."""


class MediaError(Exception):
    """Base media host exception."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MediaConfigError(MediaError):
    """Missing or invalid credentials."""

    pass


class MediaUploadError(MediaError):
    """The upload call itself failed."""

    pass


class MediaResponseError(MediaError):
    """The upload succeeded but returned an unusable response."""

    pass
