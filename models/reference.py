"""Referenzen: "ID oder befülltes Objekt" → immer ID.

Fremdschlüssel kommen je nach Quelle als reine ID, als Dict (z.B. ``{"_id": ...}``
aus einem API-Payload) oder als bereits geladenes Modell-Objekt an. Alles hinter
der Modell-Grenze sieht nur noch IDs.
"""

from typing import Annotated, Any, Optional

from pydantic import BeforeValidator


def normalize_ref(value: Any) -> Optional[str]:
    """Reduziert eine Referenz auf ihre ID. Leerer String → None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, dict):
        for key in ("id", "_id"):
            if key in value:
                return normalize_ref(value[key])
        raise ValueError(f"Referenz ohne ID-Feld: {value!r}")
    ref_id = getattr(value, "id", None)
    if ref_id is not None:
        return normalize_ref(ref_id)
    raise ValueError(f"Ungültige Referenz: {value!r}")


def _required_ref(value: Any) -> str:
    ref_id = normalize_ref(value)
    if ref_id is None:
        raise ValueError("Referenz darf nicht leer sein.")
    return ref_id


def normalize_ref_list(values: Any) -> list[str]:
    """Normalisiert eine Referenzliste; einzelne Werte werden zur Liste,
    leere Einträge und Duplikate entfallen (Reihenfolge bleibt erhalten)."""
    if values is None:
        return []
    if not isinstance(values, (list, tuple, set)):
        values = [values]
    result: list[str] = []
    for v in values:
        ref_id = normalize_ref(v)
        if ref_id is not None and ref_id not in result:
            result.append(ref_id)
    return result


RefId = Annotated[str, BeforeValidator(_required_ref)]
OptionalRefId = Annotated[Optional[str], BeforeValidator(normalize_ref)]
RefIdList = Annotated[list[str], BeforeValidator(normalize_ref_list)]
