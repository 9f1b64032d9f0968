from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


# ─── DEMO-DATEN ───

class DemoConfig(BaseModel):
    """Parameter für den Demo-Datengenerator."""
    # Zufalls-Seed für reproduzierbare Daten
    seed: int = 42
    # Anzahl Parallelklassen (Streams) pro Form
    streams_per_form: int = Field(2, ge=1, le=6,
        description="Parallelklassen pro Form")
    # Qualifizierte Lehrkräfte pro Fach
    teachers_per_subject: int = Field(2, ge=1, le=6,
        description="Qualifizierte Lehrkräfte pro Fach")
    # Anteil der Fach-Zeilen, die bereits besetzt sind (0.0 bis 1.0)
    assignment_ratio: float = Field(0.5, ge=0.0, le=1.0,
        description="Anteil bereits besetzter Fächer")


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Anwendung."""
    # Name der Schule
    school_name: str = Field("Demo Secondary School",
        description="Name der Schule")
    # Pfad zur JSON-Datendatei
    data_file: Path = Field(Path("output/school_data.json"),
        description="JSON-Datensatz mit Fächern, Klassen und Lehrkräften")
    # Log-Level für die Konsolenausgabe
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    # Wartezeit auf die Sperre einer Klasse, danach Abbruch
    lock_timeout_seconds: float = Field(5.0, gt=0, le=120,
        description="Max. Wartezeit auf parallele Bearbeitung einer Klasse (Sekunden)")
    # Demo-Daten
    demo: DemoConfig = Field(default_factory=DemoConfig)
