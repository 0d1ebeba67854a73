"""Este módulo contiene las variables de configuración de la aplicación.

Los valores se leen del entorno (o de un fichero .env) mediante pydantic-settings
y se exponen también como constantes de módulo para el resto del paquete.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables (.env optional)."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Gemini
    GEMINI_API_KEY: str = Field(
        "",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
        description="Default API key used until another one is selected",
    )
    FAST_MODEL: str = Field("gemini-2.5-flash-image", description="Model id for the fast tier")
    PRO_MODEL: str = Field("gemini-3-pro-image-preview", description="Model id for the pro tier")

    # Gallery
    GALLERY_PATH: str = Field("data/gallery.json", description="JSON file backing the gallery")

    # Server
    HOST: str = Field("0.0.0.0", description="Bind address for uvicorn")
    PORT: int = Field(8000, description="HTTP port")
    CORS_ORIGINS: list[str] = Field(["http://localhost:4321", "*"])
    LOG_LEVEL: str = Field("INFO", description="Loguru level for the stderr sink")
    LOADING_MESSAGE_INTERVAL: float = Field(2.5, gt=0, description="Seconds between loading messages")


settings = Settings()

GEMINI_API_KEY: str = settings.GEMINI_API_KEY
FAST_MODEL: str = settings.FAST_MODEL
PRO_MODEL: str = settings.PRO_MODEL
GALLERY_PATH: str = settings.GALLERY_PATH
GALLERY_KEY: str = "lumina_gallery"
LOADING_MESSAGE_INTERVAL: float = settings.LOADING_MESSAGE_INTERVAL  # seconds
