from pydantic import BaseModel, Field


class ImageUploadRequest(BaseModel):
    image: str = Field(min_length=1, description="base64 encoded image")
    filename: str = "image"
