"""
Tipos de error de la generación de imágenes

Define la taxonomía de fallos que ve el usuario y la clasificación de las
excepciones devueltas por el servicio remoto.

Responsabilidades:
- Representar los fallos de generación con un tipo (kind) y un mensaje
- Detectar fallos de acceso (clave no válida, sin permisos, modelo no encontrado)
- Traducir cualquier excepción al mensaje que se muestra al usuario
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

VALIDATION_MESSAGE = "Please provide a text prompt or an image to start painting."
NO_IMAGE_MESSAGE = (
    "The model did not return an image. "
    "It might be blocked due to safety filters or a prompt restriction."
)
ACCESS_MESSAGE = (
    "Permission Denied: This usually means you need to select a valid API key "
    "with billing enabled for this model."
)
UNKNOWN_MESSAGE = "Failed to generate art. Please try again."

_ACCESS_MARKERS = ("not found", "permission", "403", "404")
_ACCESS_CODES = (403, 404)
_ACCESS_STATUSES = ("PERMISSION_DENIED", "NOT_FOUND")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NO_IMAGE = "no_image"
    ACCESS = "access"
    UNKNOWN = "unknown"


class GenerationError(Exception):
    """A generation failure tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "select_credential": self.kind is ErrorKind.ACCESS,
        }


class GalleryStorageError(Exception):
    """The gallery could not be written to durable storage."""


def is_access_error(exc: BaseException) -> bool:
    """
    Decide whether a failure points at the selected credential.

    Structured information (HTTP code or RPC status, as exposed by
    ``google.genai.errors.APIError``) wins; the message is only scanned when
    the exception carries neither.
    """
    code = getattr(exc, "code", None)
    status = getattr(exc, "status", None)
    if isinstance(code, int):
        return code in _ACCESS_CODES
    if isinstance(status, str) and status:
        return status.upper() in _ACCESS_STATUSES

    message = str(exc).lower()
    return any(marker in message for marker in _ACCESS_MARKERS)


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, GenerationError):
        return exc.kind
    if is_access_error(exc):
        return ErrorKind.ACCESS
    return ErrorKind.UNKNOWN


def describe_failure(exc: BaseException) -> GenerationError:
    """Turn any failure into the error shown to the user."""
    kind = classify_error(exc)
    if isinstance(exc, GenerationError) and kind is not ErrorKind.ACCESS:
        return exc
    if kind is ErrorKind.ACCESS:
        return GenerationError(ErrorKind.ACCESS, ACCESS_MESSAGE)
    return GenerationError(ErrorKind.UNKNOWN, str(exc) or UNKNOWN_MESSAGE)
