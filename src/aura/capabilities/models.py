"""Data passed to and returned from capability clients.

Records are frozen pydantic models. Grounding references form a union
discriminated on `kind`.
"""

import base64
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class WebSource(BaseModel):
    """A web page cited by a grounded answer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["web"] = "web"
    title: str = Field(default="", description="Page title")
    uri: str = Field(description="Page URL")


class PlaceSource(BaseModel):
    """A place cited by a maps-grounded answer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["place"] = "place"
    title: str = Field(default="", description="Place name")
    uri: str = Field(description="Maps URL for the place")


GroundingReference = Annotated[WebSource | PlaceSource, Field(discriminator="kind")]


class ResearchResult(BaseModel):
    """Answer text plus the sources the service grounded it on."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Generated answer")
    references: list[GroundingReference] = Field(default_factory=list)


class GeoLocation(BaseModel):
    """A coordinate used to bias place lookups."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class AspectRatio(str, Enum):
    """Supported video aspect ratios."""

    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class Message(BaseModel):
    """A single turn in a conversation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Literal["user", "assistant"] = Field(description="Who sent the message")
    content: str = Field(default="", description="Message text")
    media_url: str | None = Field(default=None, description="Data URI of an attached image")
    grounding_urls: list[GroundingReference] = Field(default_factory=list)


class Attachment(BaseModel):
    """Raw image bytes with their MIME type."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "image/jpeg"

    @classmethod
    def from_path(cls, path: str | Path) -> "Attachment":
        """Read an image file, guessing its MIME type from the extension."""
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(data=file_path.read_bytes(), mime_type=mime_type or "image/jpeg")

    @classmethod
    def from_data_url(cls, data_url: str) -> "Attachment":
        """Decode a ``data:<mime>;base64,<payload>`` URI.

        Raises:
            ValueError: If the string is not a base64 data URI
        """
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError("Expected a base64 data URI")
        mime_type = header[len("data:"):-len(";base64")] or "image/jpeg"
        return cls(data=base64.b64decode(payload), mime_type=mime_type)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class GeneratedVideo(BaseModel):
    """A generated video downloaded to local disk."""

    model_config = ConfigDict(frozen=True)

    source_uri: str = Field(description="Remote location the video was fetched from")
    path: Path = Field(description="Local file holding the video")

    @property
    def uri(self) -> str:
        """Locally playable file:// URI."""
        return self.path.resolve().as_uri()
