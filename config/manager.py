"""Konfigurationsmanager für die Fächerzuordnung.

Die Konfiguration liegt als kommentierte YAML-Datei unter ``config/`` und
wird beim Laden über das Pydantic-Schema geprüft. Fehlt die Datei, arbeitet
die CLI mit den Standardwerten aus ``config.defaults``.
"""

from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# Abschnitts-Überschriften in der YAML-Datei: Schlüssel → (Titel, Erläuterung)
_SECTIONS: dict[str, tuple[str, Optional[str]]] = {
    "data_file": ("Datensatz", "JSON-Datei mit Fächern, Kombinationen, Klassen und Lehrkräften."),
    "lock_timeout_seconds": (
        "Parallele Bearbeitung",
        "Sekunden, die auf eine gesperrte Klasse gewartet wird.",
    ),
    "demo": ("Demo-Daten", "Nur für 'python main.py generate'."),
}


def _header(school_name: str) -> str:
    rule = "# " + "=" * 44
    return "\n".join([
        rule,
        "# Fächerzuordnung — Konfiguration",
        f"# Schule: {school_name}",
        f"# Stand: {date.today().isoformat()}",
        rule,
        "",
        "",
    ])


class ConfigManager:
    """Lesen und Schreiben von ``config/app_config.yaml``."""

    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "app_config.yaml"

    def first_run_check(self) -> bool:
        """True, solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Liest die YAML-Datei und validiert sie gegen ``AppConfig``.

        Raises:
            FileNotFoundError: Datei existiert nicht.
            ValueError: Inhalt verletzt das Schema.
        """
        source = Path(path) if path else self.DEFAULT_CONFIG
        if not source.is_file():
            raise FileNotFoundError(
                f"Keine Konfiguration unter {source} – "
                f"'python main.py setup' legt eine an."
            )
        with source.open(encoding="utf-8") as fh:
            content = yaml.load(fh) or {}
        try:
            return AppConfig.model_validate(dict(content))
        except ValidationError as e:
            raise ValueError(f"Ungültige Konfiguration in {source}:\n{e}") from e

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Wie ``load``; ohne Datei gelten die Standardwerte."""
        source = Path(path) if path else self.DEFAULT_CONFIG
        if source.is_file():
            return self.load(source)
        from config.defaults import default_config
        return default_config()

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> None:
        """Schreibt die Konfiguration als kommentiertes YAML."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as fh:
            fh.write(_header(config.school_name))
            yaml.dump(self._to_commented_map(config), fh)
        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    @staticmethod
    def _to_commented_map(config: AppConfig) -> CommentedMap:
        # mode="json": Path → str, damit ruamel keine Python-Tags schreibt
        cm = CommentedMap(config.model_dump(mode="json"))
        for key, (title, note) in _SECTIONS.items():
            text = f"\n─── {title} ───"
            if note:
                text += f"\n{note}"
            cm.yaml_set_comment_before_after_key(key, before=text)
        return cm
