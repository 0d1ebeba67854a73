"""
Servicios de generación de imágenes

Implementa la llamada a los modelos de imagen de Gemini, actuando como capa
intermedia entre los endpoints de la API y el SDK google-genai.

Responsabilidades:
- Construir las partes del contenido y la configuración de cada petición
- Crear un cliente nuevo por llamada con la credencial activa
- Extraer la imagen y el texto de la respuesta
- Clasificar los fallos y pedir una nueva credencial cuando el acceso falla
- Orquestar comprobación de credencial, generación y alta en la galería
"""

from typing import Any, Callable, Optional

from fastapi.concurrency import run_in_threadpool
from google import genai
from google.genai import types
from loguru import logger

from lumina.config import FAST_MODEL, GEMINI_API_KEY, PRO_MODEL
from lumina.credentials import CredentialProvider, ensure_credential
from lumina.errors import (ACCESS_MESSAGE, NO_IMAGE_MESSAGE,
                           VALIDATION_MESSAGE, ErrorKind, GenerationError,
                           classify_error)
from lumina.schemas import (AspectRatio, GalleryEntry, GenerationRequest,
                            GenerationResult, ImageSize, ModelTier)
from lumina.services.gallery import GalleryStore
from lumina.services.images import prepare_reference_image
from lumina.utils import new_entry_id, now_ms

DEFAULT_STYLIZE_PROMPT = "Paint something beautiful based on this image"
DEFAULT_GALLERY_PROMPT = "AI Stylized Image"
DEFAULT_MIME_TYPE = "image/png"

ClientFactory = Callable[[str], Any]


def create_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def model_for(tier: ModelTier) -> str:
    return PRO_MODEL if tier is ModelTier.PRO else FAST_MODEL


def check_request(request: GenerationRequest) -> None:
    if not request.prompt.strip() and request.reference_image is None:
        raise GenerationError(ErrorKind.VALIDATION, VALIDATION_MESSAGE)


def build_contents(request: GenerationRequest) -> list[types.Part]:
    # The model expects the reference image before the instruction.
    parts = []
    prompt = request.prompt
    if request.reference_image is not None:
        parts.append(
            types.Part.from_bytes(
                data=request.reference_image.data,
                mime_type=request.reference_image.mime_type,
            )
        )
        prompt = prompt.strip() or DEFAULT_STYLIZE_PROMPT
    parts.append(types.Part.from_text(text=prompt))
    return parts


def build_config(request: GenerationRequest) -> types.GenerateContentConfig:
    aspect_ratio = request.aspect_ratio.value
    if request.tier is not ModelTier.PRO:
        return types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio)
        )

    # Resolution and search grounding are pro-only.
    resolution = request.resolution or ImageSize.ONE_K
    return types.GenerateContentConfig(
        image_config=types.ImageConfig(
            aspect_ratio=aspect_ratio, image_size=resolution.value
        ),
        tools=[types.Tool(google_search=types.GoogleSearch())],
    )


def extract_result(response: types.GenerateContentResponse) -> GenerationResult:
    image_data = None
    mime_type = DEFAULT_MIME_TYPE
    text = ""

    candidates = response.candidates or []
    content = candidates[0].content if candidates else None
    for part in (content.parts if content else None) or []:
        if part.inline_data is not None and part.inline_data.data:
            if image_data is None:
                image_data = part.inline_data.data
                mime_type = part.inline_data.mime_type or DEFAULT_MIME_TYPE
        elif part.text:
            text += part.text

    if image_data is None:
        raise GenerationError(ErrorKind.NO_IMAGE, NO_IMAGE_MESSAGE)

    return GenerationResult(image_data=image_data, mime_type=mime_type, text=text)


async def generate_art(
    request: GenerationRequest,
    provider: Optional[CredentialProvider] = None,
    client_factory: ClientFactory = create_client,
) -> GenerationResult:
    """
    Run one generation against the remote model.

    A new client is built on every call so a key selected between two calls
    is used right away. There is no timeout, retry or cancellation. When the
    failure points at the credential the selector is opened once and the
    original exception is raised again unchanged. A missing key counts as
    an access failure.
    """
    check_request(request)

    api_key = provider.api_key() if provider is not None else GEMINI_API_KEY
    model = model_for(request.tier)

    try:
        if not api_key:
            raise GenerationError(ErrorKind.ACCESS, ACCESS_MESSAGE)
        async with client_factory(api_key).aio as aclient:
            response = await aclient.models.generate_content(
                model=model,
                contents=build_contents(request),
                config=build_config(request),
            )
        result = extract_result(response)
    except Exception as e:
        kind = classify_error(e)
        logger.error("Art generation failed ({}): {}", kind.value, e)
        if kind is ErrorKind.ACCESS and provider is not None:
            await provider.request_selection()
        raise

    logger.info(
        "Generated {} image with {} ({} bytes)",
        result.mime_type,
        model,
        len(result.image_data),
    )
    return result


async def create_artwork(
    request: GenerationRequest,
    gallery: GalleryStore,
    provider: Optional[CredentialProvider] = None,
    client_factory: ClientFactory = create_client,
) -> tuple[GalleryEntry, GenerationResult]:
    check_request(request)
    await ensure_credential(request.tier, provider)

    result = await generate_art(request, provider, client_factory)

    entry = GalleryEntry(
        id=new_entry_id(),
        url=result.data_url,
        prompt=request.prompt.strip() or DEFAULT_GALLERY_PROMPT,
        model=request.tier,
        aspect_ratio=request.aspect_ratio,
        timestamp=now_ms(),
        source_image=(
            request.reference_image.data_url if request.reference_image else None
        ),
    )
    await run_in_threadpool(gallery.add, entry)
    return entry, result


def build_generation_request(
    prompt: str,
    tier: ModelTier,
    aspect_ratio: AspectRatio,
    resolution: ImageSize,
    reference_image: str = "",
    reference_mime_type: str = "",
) -> GenerationRequest:
    """Assemble a GenerationRequest from the raw form fields."""
    return GenerationRequest(
        prompt=prompt,
        tier=tier,
        aspect_ratio=aspect_ratio,
        resolution=resolution if tier is ModelTier.PRO else None,
        reference_image=prepare_reference_image(reference_image, reference_mime_type),
    )
