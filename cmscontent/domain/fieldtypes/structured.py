"""Types de champs à valeur structurée: date et cases à cocher (stockées sous forme scalaire)."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from sqlalchemy import String, Text

from cmscontent.domain.fieldtypes.base import BaseFieldType
from cmscontent.domain.packaging import DB_DATETIME_FORMAT

_INPUT_FORMATS = (DB_DATETIME_FORMAT, "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d")


def parse_datetime(value: Any) -> datetime | None:
    """Analyse une date soumise ou stockée; None si le format n'est pas reconnu."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    raw = value.strip()
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    return None


class Date(BaseFieldType):
    """Date/heure, stockée au format `YYYY-MM-DD HH:MM:SS`."""

    type_tag = "date"

    def normalize_input(self, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        parsed = parse_datetime(value)
        return parsed if parsed is not None else value

    def define_content_attribute(self):
        return String(19)

    def prep_value(self, value: Any) -> Any:
        if value is None:
            return None
        return parse_datetime(value)

    def validate(self, value: Any) -> list[str]:
        if not isinstance(value, datetime):
            return [f"{self.handle} must be a valid date."]
        return []


class Checkboxes(BaseFieldType):
    """Liste de valeurs choisies parmi `options`, stockée en JSON."""

    type_tag = "checkboxes"

    def normalize_input(self, value: Any) -> Any:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [value]
        return list(value)

    def define_content_attribute(self):
        return Text()

    def prep_value(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return json.loads(value) if value else []
        return list(value)

    def validate(self, value: Any) -> list[str]:
        options = self.settings.get("options")
        if not options:
            return []
        unknown = [v for v in value if v not in options]
        if unknown:
            return [f"{self.handle} contains invalid options: {', '.join(map(str, unknown))}."]
        return []
