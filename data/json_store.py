"""JSON-Datei als Repository für die Fächerzuordnung."""

import logging
from pathlib import Path

from models.school_data import SchoolData
from resolution.repositories import InMemoryRepository

logger = logging.getLogger(__name__)


class JsonFileRepository(InMemoryRepository):
    """Hält den Datensatz im Speicher und schreibt ihn nach jedem
    gespeicherten Zuweisungs-Update zurück in die JSON-Datei."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(SchoolData.load_json(self.path))
        logger.info(f"Datensatz geladen: {self.path}")

    def _persist(self, data: SchoolData) -> None:
        data.save_json(self.path)
        logger.debug(f"Datensatz gespeichert: {self.path}")
