"""
Proporciona instancias compartidas de servicios y clientes que pueden ser inyectados en cualquier punto de la aplicación

Gestiona:
- Proveedor de la credencial de la API
- Galería persistente
- Control de la generación en curso (solo una a la vez)

Este módulo es fundamental para mantener un solo punto para las dependencias compartidas y evitar la inicialización repetida
"""

from contextlib import asynccontextmanager

from loguru import logger

from lumina.config import GALLERY_PATH, GEMINI_API_KEY
from lumina.credentials import SessionCredentialProvider
from lumina.services.gallery import GalleryStore
from lumina.services.generation import ClientFactory, create_client


class GenerationGuard:
    """
    Tracks whether a generation is in flight.
    A second generation is rejected while one is outstanding, never queued.
    """

    def __init__(self):
        self.is_busy = False

    def acquire(self) -> bool:
        if self.is_busy:
            return False
        self.is_busy = True
        return True

    def release(self):
        self.is_busy = False


credential_provider = SessionCredentialProvider(GEMINI_API_KEY)

gallery_store = GalleryStore(GALLERY_PATH)

generation_guard = GenerationGuard()


def get_credential_provider() -> SessionCredentialProvider:
    return credential_provider


def get_gallery_store() -> GalleryStore:
    return gallery_store


def get_generation_guard() -> GenerationGuard:
    return generation_guard


def get_client_factory() -> ClientFactory:
    return create_client


@asynccontextmanager
async def lifespan(app):

    logger.info("Gallery loaded with {} entries", len(gallery_store.entries()))
    yield

    logger.info("LuminaArt shutting down.")
