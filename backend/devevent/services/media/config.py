"""Media host service config."""

from pydantic import BaseModel


class MediaConfig(BaseModel):
    """Cloudinary credentials and upload defaults."""

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder: str = "DevEvent"
    resource_type: str = "image"
    secure: bool = True
