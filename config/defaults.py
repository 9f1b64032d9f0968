from config.schema import AppConfig, DemoConfig
from models.subject import EducationLevel, SubjectType

O = EducationLevel.O_LEVEL
A = EducationLevel.A_LEVEL
BOTH = EducationLevel.BOTH


# ─── Fächerkatalog (Sekundarstufe, Tansania) ─────────────────────────────────
# id → Metadaten. Pflichtfächer gelten nur für die angegebene Stufe:
# ein Pflichtfach mit Stufe BOTH wäre auf beiden Stufen verpflichtend.

SUBJECT_CATALOGUE: dict[str, dict] = {
    "civ":   {"name": "Civics",                       "code": "CIV",   "type": SubjectType.CORE,     "level": O,    "compulsory": True},
    "bmath": {"name": "Basic Mathematics",            "code": "BMATH", "type": SubjectType.CORE,     "level": O,    "compulsory": True},
    "eng":   {"name": "English Language",             "code": "ENG",   "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "kisw":  {"name": "Kiswahili",                    "code": "KISW",  "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "bio":   {"name": "Biology",                      "code": "BIO",   "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "phy":   {"name": "Physics",                      "code": "PHY",   "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "chem":  {"name": "Chemistry",                    "code": "CHEM",  "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "hist":  {"name": "History",                      "code": "HIST",  "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "geo":   {"name": "Geography",                    "code": "GEO",   "type": SubjectType.CORE,     "level": BOTH, "compulsory": False},
    "comm":  {"name": "Commerce",                     "code": "COMM",  "type": SubjectType.OPTIONAL, "level": O,    "compulsory": False},
    "bk":    {"name": "Book-Keeping",                 "code": "BK",    "type": SubjectType.OPTIONAL, "level": O,    "compulsory": False},
    "gs":    {"name": "General Studies",              "code": "GS",    "type": SubjectType.CORE,     "level": A,    "compulsory": True},
    "bam":   {"name": "Basic Applied Mathematics",    "code": "BAM",   "type": SubjectType.CORE,     "level": A,    "compulsory": False},
    "amath": {"name": "Advanced Mathematics",         "code": "AMATH", "type": SubjectType.CORE,     "level": A,    "compulsory": False},
    "econ":  {"name": "Economics",                    "code": "ECON",  "type": SubjectType.CORE,     "level": A,    "compulsory": False},
}


# ─── Standard-Kombinationen (A-Level) ────────────────────────────────────────
# code → (Name, Hauptfächer, kombinationsspezifische Pflichtfächer)

COMBINATIONS: dict[str, tuple[str, list[str], list[str]]] = {
    "PCM": ("Physics, Chemistry, Advanced Mathematics", ["phy", "chem", "amath"], ["gs"]),
    "PCB": ("Physics, Chemistry, Biology",               ["phy", "chem", "bio"],   ["gs", "bam"]),
    "CBG": ("Chemistry, Biology, Geography",             ["chem", "bio", "geo"],   ["gs", "bam"]),
    "HGL": ("History, Geography, English Language",     ["hist", "geo", "eng"],   ["gs"]),
    "HKL": ("History, Kiswahili, English Language",     ["hist", "kisw", "eng"],  ["gs"]),
    "EGM": ("Economics, Geography, Advanced Mathematics", ["econ", "geo", "amath"], ["gs"]),
}


# O-Level-Stundentafel: Fächer, die jede O-Level-Klasse direkt führt
# (zusätzlich zu den Pflichtfächern aus dem Katalog).
O_LEVEL_CLASS_SUBJECTS: list[str] = [
    "eng", "kisw", "bio", "phy", "chem", "hist", "geo",
]

O_LEVEL_FORMS = [1, 2, 3, 4]
A_LEVEL_FORMS = [5, 6]


def default_config() -> AppConfig:
    """Vollständige Standard-Konfiguration."""
    return AppConfig(
        school_name="Demo Secondary School",
        demo=DemoConfig(),
    )
