"""Types de champs scalaires: texte, nombre, interrupteur."""

from __future__ import annotations

import math
from typing import Any

from sqlalchemy import Boolean, Float, Text

from cmscontent.domain.fieldtypes.base import BaseFieldType

_TRUE = {"1", "true", "yes", "on"}


class PlainText(BaseFieldType):
    """Texte libre, longueur maximale optionnelle (`max_length`)."""

    type_tag = "plain_text"

    def normalize_input(self, value: Any) -> Any:
        if value is None:
            return None
        return str(value)

    def define_content_attribute(self):
        return Text()

    def validate(self, value: Any) -> list[str]:
        max_length = self.settings.get("max_length")
        if max_length and len(str(value)) > int(max_length):
            return [f"{self.handle} should contain at most {max_length} characters."]
        return []


class Number(BaseFieldType):
    """Nombre avec bornes (`min`, `max`) et nombre de décimales (`decimals`)."""

    type_tag = "number"

    def normalize_input(self, value: Any) -> Any:
        if isinstance(value, str):
            raw = value.strip().replace(",", ".")
            if not raw:
                return None
            try:
                value = float(raw)
            except ValueError:
                # conservé tel quel pour être rejeté par validate()
                return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            decimals = self.settings.get("decimals")
            if decimals is not None:
                value = round(float(value), int(decimals))
        return value

    def define_content_attribute(self):
        return Float()

    def prep_value(self, value: Any) -> Any:
        if value is None:
            return None
        if self.settings.get("decimals") == 0:
            return int(value)
        return value

    def validate(self, value: Any) -> list[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [f"{self.handle} must be a number."]
        if not math.isfinite(value):
            return [f"{self.handle} must be a finite number."]
        errors = []
        minimum = self.settings.get("min")
        maximum = self.settings.get("max")
        if minimum is not None and value < minimum:
            errors.append(f"{self.handle} must be no less than {minimum}.")
        if maximum is not None and value > maximum:
            errors.append(f"{self.handle} must be no greater than {maximum}.")
        return errors


class Lightswitch(BaseFieldType):
    """Interrupteur booléen."""

    type_tag = "lightswitch"

    def normalize_input(self, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE

    def define_content_attribute(self):
        return Boolean()

    def prep_value(self, value: Any) -> Any:
        return None if value is None else bool(value)
