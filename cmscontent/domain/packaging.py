"""Conversion des valeurs d'attributs vers une forme scalaire stockable."""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any

DB_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DB_DATE_FORMAT = "%Y-%m-%d"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, Decimal)):
        return package_attribute_value(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def package_attribute_value(value: Any, json_encode: bool = False) -> Any:
    """Prépare une valeur d'attribut pour l'écriture en base.

    - datetime -> "YYYY-MM-DD HH:MM:SS", date -> "YYYY-MM-DD"
    - Decimal -> str
    - list/tuple/dict -> JSON si `json_encode`, sinon conversion récursive de leurs éléments
    - autres scalaires inchangés
    """
    if isinstance(value, datetime):
        return value.strftime(DB_DATETIME_FORMAT)
    if isinstance(value, date):
        return value.strftime(DB_DATE_FORMAT)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple, dict)):
        if json_encode:
            return json.dumps(value, default=_json_default, ensure_ascii=False)
        if isinstance(value, dict):
            return {k: package_attribute_value(v) for k, v in value.items()}
        return [package_attribute_value(v) for v in value]
    return value
