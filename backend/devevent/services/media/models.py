"""Media host response models."""

from pydantic import BaseModel, ConfigDict, field_validator


class UploadResult(BaseModel):
    """
    Validated subset of the media host upload response.

    The raw response is untrusted; only a usable https/http URL makes it
    through.
    """

    model_config = ConfigDict(extra="ignore")

    secure_url: str
    public_id: str | None = None
    width: int | None = None
    height: int | None = None
    format: str | None = None

    @field_validator("secure_url")
    @classmethod
    def require_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("https://", "http://")):
            raise ValueError("secure_url must be an absolute http(s) URL")
        return v
