"""
Galería local de imágenes generadas

Guarda las entradas en un fichero JSON que funciona como almacén clave-valor:
la galería completa vive bajo una única clave, ordenada de la más reciente a
la más antigua.

Responsabilidades:
- Cargar la galería al arrancar (un fichero corrupto se trata como galería vacía)
- Añadir, borrar y vaciar entradas
- Escribir el fichero después de cada cambio
"""

import json
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from lumina.config import GALLERY_KEY
from lumina.errors import GalleryStorageError
from lumina.schemas import GalleryEntry

_entries_adapter = TypeAdapter(list[GalleryEntry])


class GalleryStore:

    def __init__(self, path: str | Path, key: str = GALLERY_KEY):
        self.path = Path(path)
        self.key = key
        self._others: dict = {}
        self._entries: list[GalleryEntry] = self._load()

    def _load(self) -> list[GalleryEntry]:
        if not self.path.exists():
            return []
        try:
            stored = json.loads(self.path.read_text(encoding="utf-8"))
            entries = _entries_adapter.validate_python(stored.get(self.key) or [])
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.error("Failed to parse gallery at {}: {}", self.path, e)
            return []
        # other keys of the file are written back untouched
        self._others = {k: v for k, v in stored.items() if k != self.key}
        return entries

    def _save(self, entries: list[GalleryEntry]) -> None:
        stored = dict(self._others)
        stored[self.key] = _entries_adapter.dump_python(entries, mode="json")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(stored), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write gallery to {}: {}", self.path, e)
            raise GalleryStorageError(f"Could not save the gallery: {e}") from e

    def entries(self) -> list[GalleryEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> GalleryEntry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    # The in-memory list only changes once the file has been written.

    def add(self, entry: GalleryEntry) -> None:
        entries = [entry, *self._entries]
        self._save(entries)
        self._entries = entries

    def delete(self, entry_id: str) -> bool:
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._save(remaining)
        self._entries = remaining
        return True

    def clear(self) -> None:
        self._save([])
        self._entries = []
        logger.info("Gallery cleared")
