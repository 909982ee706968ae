"""Storyboard scene data model."""

import base64
import binascii
from typing import Optional
from pydantic import BaseModel, Field


class ImagePayload(BaseModel):
    """Opaque encoded image returned by an image model."""

    mime_type: str = Field(default="image/png", description="Image MIME type")
    data: str = Field(..., description="Base64 encoded image bytes", min_length=1)

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = "image/png") -> "ImagePayload":
        return cls(mime_type=mime_type, data=base64.b64encode(raw).decode("ascii"))

    @classmethod
    def from_data_uri(cls, uri: str) -> "ImagePayload":
        """Build a payload from a `data:<mime>;base64,<data>` URI."""
        header, sep, data = uri.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError(f"Not a base64 data URI: {uri[:40]}")
        return cls(mime_type=header[5:-7], data=data)

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @property
    def extension(self) -> str:
        """File extension matching the MIME type."""
        subtype = self.mime_type.split("/")[-1]
        return "jpg" if subtype == "jpeg" else subtype

    def to_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e


class Scene(BaseModel):
    """One storyboard position: two frame prompts, a motion prompt and rendered frames."""

    scene_number: int = Field(..., alias="sceneNumber", description="1-based scene number", ge=1)
    start_frame_prompt: str = Field(
        ..., alias="startFramePrompt", description="Environment only, no product", min_length=1
    )
    end_frame_prompt: str = Field(
        ..., alias="endFramePrompt", description="Same environment with the product", min_length=1
    )
    video_motion_prompt: str = Field(
        ..., alias="videoMotionPrompt", description="Motion between start and end frame", min_length=1
    )
    start_image: Optional[ImagePayload] = Field(None, description="Rendered start frame")
    end_image: Optional[ImagePayload] = Field(None, description="Rendered end frame")
    is_generating: bool = Field(default=False, description="Frames are being rendered")

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True

    @property
    def is_rendered(self) -> bool:
        return self.start_image is not None and self.end_image is not None
