"""
Gestión de la credencial de la API

La credencial (API key) pertenece al entorno anfitrión: este módulo solo
pregunta si hay una seleccionada y, cuando hace falta, pide al anfitrión que
abra su flujo de selección. Nunca guarda ni inspecciona el valor de la clave
fuera del proveedor.

Responsabilidades:
- Definir la interfaz CredentialProvider que se inyecta en la puerta y el cliente
- Proporcionar un proveedor de sesión para el servicio HTTP
- Comprobar la credencial antes de una generación con el modelo Pro
"""

from __future__ import annotations

from typing import Optional, Protocol

from loguru import logger

from lumina.schemas import ModelTier


class CredentialProvider(Protocol):
    async def is_selected(self) -> bool: ...

    async def request_selection(self) -> None: ...

    def api_key(self) -> str: ...


class SessionCredentialProvider:
    """
    Credential holder for the HTTP service.

    The key starts from the configured default and can be replaced at runtime
    with select(). request_selection() only raises a flag the client reads
    from GET /credential; it returns immediately, like a picker the user
    closes without waiting on the outcome.
    """

    def __init__(self, api_key: str = ""):
        self._api_key = api_key
        self.selection_requested = False
        self.selection_requests = 0

    async def is_selected(self) -> bool:
        return bool(self._api_key)

    async def request_selection(self) -> None:
        self.selection_requested = True
        self.selection_requests += 1
        logger.warning("API key selection requested")

    def api_key(self) -> str:
        return self._api_key

    def select(self, api_key: str) -> None:
        self._api_key = api_key
        self.selection_requested = False
        logger.info("API key updated")


async def ensure_credential(
    tier: ModelTier, provider: Optional[CredentialProvider]
) -> None:
    """
    Make sure the pro tier has a credential before any request is issued.

    Without a host integration this is a no-op. The fast tier is never
    checked. After the selector returns the outcome is not verified: a user
    who cancels is not blocked here, the failure classification in
    generate_art() is what catches it.
    """
    if provider is None:
        return
    if tier is not ModelTier.PRO:
        return

    if not await provider.is_selected():
        logger.info("No API key selected for the pro tier, opening selector")
        await provider.request_selection()
