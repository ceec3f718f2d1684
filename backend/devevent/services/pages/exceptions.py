"""Event page client exceptions."""


class PageClientError(Exception):
    """The events API answered with an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
