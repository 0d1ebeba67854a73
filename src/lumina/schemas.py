"""
Modelos de datos y validación

Define los esquemas Pydantic utilizados para:
- Describir una petición de generación y su resultado
- Persistir las entradas de la galería sin pérdida de información
- Validar los datos de entrada en los endpoints
- Documentar automáticamente la API con OpenAPI
"""

import base64
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ModelTier(str, Enum):
    FAST = "fast"
    PRO = "pro"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    STORY = "9:16"
    CINEMA = "16:9"


class ImageSize(str, Enum):
    ONE_K = "1K"
    TWO_K = "2K"
    FOUR_K = "4K"


class ReferenceImage(BaseModel):
    data: bytes
    mime_type: str

    @property
    def data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)


class GenerationRequest(BaseModel):
    prompt: str = ""
    tier: ModelTier = ModelTier.FAST
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    resolution: Optional[ImageSize] = None  # only honored for ModelTier.PRO
    reference_image: Optional[ReferenceImage] = None


class GenerationResult(BaseModel):
    image_data: bytes
    mime_type: str = "image/png"
    text: str = ""

    @property
    def data_url(self) -> str:
        return to_data_url(self.image_data, self.mime_type)


class GalleryEntry(BaseModel):
    id: str
    url: str  # data URL of the generated image
    prompt: str
    model: ModelTier
    aspect_ratio: AspectRatio
    timestamp: int  # milliseconds since epoch
    source_image: Optional[str] = None


class GenerateArtRequest(BaseModel):
    prompt: str = ""
    tier: ModelTier = ModelTier.FAST
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    resolution: ImageSize = ImageSize.ONE_K
    reference_image: str = ""  # data URL, bare base64 or http(s) URL
    reference_mime_type: str = ""


class GenerateArtResponse(BaseModel):
    entry: GalleryEntry
    text: str = ""


class CredentialUpdate(BaseModel):
    api_key: str = Field(..., min_length=1)


class CredentialStatus(BaseModel):
    selected: bool
    selection_requested: bool


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
