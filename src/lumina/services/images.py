"""
Servicios de procesamiento de imágenes

Prepara la imagen de referencia que el usuario adjunta a una petición y las
imágenes generadas que se descargan desde la galería.

Características:
- Conversión de data URLs, base64 o URLs http(s) a bytes
- Detección del tipo MIME con Pillow cuando no viene declarado
- Nombre de fichero de descarga para una entrada de la galería
"""

import base64
import binascii
from io import BytesIO

from loguru import logger
from PIL import Image, UnidentifiedImageError

from lumina.errors import ErrorKind, GenerationError
from lumina.schemas import GalleryEntry, ReferenceImage
from lumina.utils import (get_image_bytes_from_url, is_data_url, is_http_url,
                          remove_b64_header, split_data_url)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def sniff_mime_type(img_bytes: bytes) -> str:
    """Return the MIME type Pillow detects, or fail with a validation error."""
    try:
        with Image.open(BytesIO(img_bytes)) as img:
            mime_type = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError) as e:
        raise GenerationError(
            ErrorKind.VALIDATION, f"The reference image could not be read: {e}"
        ) from e

    if not mime_type:
        raise GenerationError(
            ErrorKind.VALIDATION, "The reference image format is not supported."
        )
    return mime_type


def decode_b64(img_b64: str) -> bytes:
    try:
        return base64.b64decode(img_b64, validate=True)
    except binascii.Error as e:
        raise GenerationError(
            ErrorKind.VALIDATION, f"Invalid base64 for the reference image: {e}"
        ) from e


def prepare_reference_image(img_data: str, mime_type: str = "") -> ReferenceImage | None:
    """
    Build a ReferenceImage from a data URL, bare base64 or an http(s) URL.
    Empty input means no reference image.
    """
    if not img_data:
        return None

    if is_http_url(img_data):
        try:
            img_bytes = get_image_bytes_from_url(img_data)
        except Exception as e:
            raise GenerationError(ErrorKind.VALIDATION, str(e)) from e
    else:
        if is_data_url(img_data):
            mime_type = mime_type or split_data_url(img_data)[0]
        img_bytes = decode_b64(remove_b64_header(img_data))

    if not img_bytes:
        raise GenerationError(ErrorKind.VALIDATION, "The reference image is empty.")

    if not mime_type:
        mime_type = sniff_mime_type(img_bytes)
        logger.debug("Reference image type detected as {}", mime_type)

    return ReferenceImage(data=img_bytes, mime_type=mime_type)


def extension_for(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type.lower(), "png")


def entry_image_bytes(entry: GalleryEntry) -> tuple[bytes, str]:
    mime_type = split_data_url(entry.url)[0]
    return decode_b64(remove_b64_header(entry.url)), mime_type or "image/png"


def download_filename(entry: GalleryEntry, mime_type: str) -> str:
    return f"lumina-art-{entry.id}.{extension_for(mime_type)}"
